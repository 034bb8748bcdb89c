"""Everything that can go wrong, in two families.

Programming mistakes in the schema (duplicate names, a positional
argument that takes no values, an out-of-range error index reported
by a type) are raised immediately as exceptions deriving from
:class:`LariatException`.

Mistakes in user input never raise during a parse. They are recorded
as diagnostic records (subclasses of :class:`LariatError`), each with
an :class:`ErrorLevel`, an absolute input position, and a readable
message, and are gathered and ordered by the
:class:`~lariat.collector.ErrorsCollector`.
"""

from enum import Enum, IntEnum

from lariat.utils import format_nonexp_repr


NO_POSITION = -1


class LariatException(Exception):
    """The basest base exception lariat has. Rarely directly
    instantiated if ever, but useful for catching.
    """
    pass


class SchemaError(LariatException, ValueError):
    """Raised when a Command/Argument/ArgumentGroup tree is built in a
    way that can never parse correctly. Always raised at build time,
    never mid-parse.
    """
    pass


class ArgumentAlreadyExists(SchemaError):
    """Raised when an Argument is added to a second Command or
    ArgumentGroup, or when a name is registered twice on one Command.
    """
    @classmethod
    def from_parse(cls, argument, container):
        return cls('argument %s is already registered in %r'
                   % (argument.label, container))


class ErrorIndexError(LariatException, IndexError):
    """Raised when an ArgumentType blames a value index it never
    received. Index ``-1`` is always allowed and blames the whole
    invocation.
    """
    @classmethod
    def from_parse(cls, arg_type, index):
        return cls('index %r is out of range for %s, which received %s value(s)'
                   % (index, arg_type.representation, arg_type.received_count))


class ArgumentParseError(LariatException):
    """Raised by :meth:`ParseResult.check()` when a parse produced
    errors at or above the exit level. The ordered errors are
    available as the ``errors`` attribute.
    """
    def __init__(self, msg, errors=()):
        super(ArgumentParseError, self).__init__(msg)
        self.errors = list(errors)

    @classmethod
    def from_parse(cls, errors):
        msg = '; '.join([e.message for e in errors]) or 'argument parsing failed'
        return cls(msg, errors)


class ErrorLevel(IntEnum):
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40


class LariatError(object):
    """Base type of the diagnostic records. Never raised, only
    collected.

    Args:
       type: The kind of error, one of the error type enums below.
       message (str): A human-readable description.
       position (int): Absolute offset into the raw input the error
          applies to, or -1 when it applies to nothing in particular.
       level (ErrorLevel): Severity, compared against a Command's
          display and exit levels.
       token_index (int): Index of the blamed token, or -1.
    """
    category = None

    def __init__(self, type, message, position=NO_POSITION,
                 level=ErrorLevel.ERROR, token_index=NO_POSITION):
        self.type = type
        self.message = message
        self.position = position if position is not None else NO_POSITION
        self.level = ErrorLevel(level)
        self.token_index = token_index

    @property
    def has_position(self):
        return self.position >= 0

    def __repr__(self):
        return format_nonexp_repr(self, ['type', 'message', 'position', 'level'])


class TokenizeErrorType(Enum):
    STRING_NOT_CLOSED = 'string_not_closed'
    INVALID_ESCAPE = 'invalid_escape'


class TokenizeError(LariatError):
    category = 'tokenize'

    @classmethod
    def from_parse(cls, err_type, position, text=''):
        if err_type is TokenizeErrorType.STRING_NOT_CLOSED:
            msg = 'string not closed: %s' % text
        elif len(text) > 1:
            msg = 'unrecognized escape sequence: %s' % text
        else:
            msg = 'trailing escape character with nothing to escape'
        return cls(err_type, msg, position=position)


class ParseErrorType(Enum):
    UNMATCHED_TOKEN = 'unmatched_token'
    UNMATCHED_NAME = 'unmatched_name'
    ARG_INCORRECT_VALUE_NUMBER = 'arg_incorrect_value_number'
    ARG_INCORRECT_USAGES_COUNT = 'arg_incorrect_usages_count'
    OBLIGATORY_ARGUMENT_NOT_USED = 'obligatory_argument_not_used'
    MULTIPLE_ARGS_IN_EXCLUSIVE_GROUP_USED = 'multiple_args_in_exclusive_group_used'
    OBLIGATORY_COMMAND_NOT_USED = 'obligatory_command_not_used'


class ParseError(LariatError):
    """A structural error found by the Parser. Besides the common
    fields, carries the blamed *argument*, *group* or *command* where
    one applies, and *value_count* for arity errors.
    """
    category = 'parse'

    def __init__(self, type, message, position=NO_POSITION,
                 level=ErrorLevel.ERROR, token_index=NO_POSITION,
                 argument=None, group=None, command=None, value_count=0):
        super(ParseError, self).__init__(type, message, position=position,
                                         level=level, token_index=token_index)
        self.argument = argument
        self.group = group
        self.command = command
        self.value_count = value_count

    @classmethod
    def from_unmatched_token(cls, token, token_index):
        msg = 'unexpected value %r' % token.text
        return cls(ParseErrorType.UNMATCHED_TOKEN, msg, token.position,
                   token_index=token_index)

    @classmethod
    def from_unmatched_name(cls, token, token_index, char, offset):
        msg = 'unknown argument %r in %r' % (char, token.text)
        return cls(ParseErrorType.UNMATCHED_NAME, msg, token.position + offset,
                   token_index=token_index)

    @classmethod
    def from_value_number(cls, argument, value_count, position, token_index=NO_POSITION):
        msg = ('argument %s expected %s, got %s'
               % (argument.label, argument.arg_type.arity.describe(), value_count))
        return cls(ParseErrorType.ARG_INCORRECT_VALUE_NUMBER, msg, position,
                   token_index=token_index, argument=argument, value_count=value_count)

    @classmethod
    def from_usages_count(cls, argument, position, token_index=NO_POSITION):
        usage_range = argument.arg_type.usage_count
        msg = ('argument %s was used %s time(s), expected %s'
               % (argument.label, argument.usage_count, usage_range.describe('use')))
        return cls(ParseErrorType.ARG_INCORRECT_USAGES_COUNT, msg, position,
                   token_index=token_index, argument=argument)

    @classmethod
    def from_obligatory_argument(cls, argument):
        msg = 'missing required argument %s' % argument.label
        return cls(ParseErrorType.OBLIGATORY_ARGUMENT_NOT_USED, msg, argument=argument)

    @classmethod
    def from_exclusive_group(cls, argument, group, position):
        msg = ('argument %s cannot be used together with other arguments'
               ' of the exclusive group %r' % (argument.label, group.name))
        return cls(ParseErrorType.MULTIPLE_ARGS_IN_EXCLUSIVE_GROUP_USED, msg, position,
                   argument=argument, group=group)

    @classmethod
    def from_obligatory_command(cls, command, missing):
        msg = ('missing required subcommand, choose from: %s'
               % ', '.join([c.name for c in missing]))
        return cls(ParseErrorType.OBLIGATORY_COMMAND_NOT_USED, msg, command=command)


class CoercionErrorType(Enum):
    INVALID_VALUE = 'invalid_value'


class CoercionError(LariatError):
    """An error reported by an ArgumentType while coercing raw values.
    *index* is relative to the values of the invocation (-1 for the
    invocation as a whole); *position* is already absolute.
    """
    category = 'coercion'

    def __init__(self, message, index=NO_POSITION, position=NO_POSITION,
                 level=ErrorLevel.ERROR):
        super(CoercionError, self).__init__(CoercionErrorType.INVALID_VALUE, message,
                                            position=position, level=level)
        self.index = index
        self.argument = None


class CustomErrorType(Enum):
    DEFAULT = 'default'


class CustomError(LariatError):
    """An error attached by code outside the engine, to a Command or an
    Argument, via their ``add_error()`` methods.
    """
    category = 'custom'

    def __init__(self, message, level=ErrorLevel.ERROR, position=NO_POSITION):
        super(CustomError, self).__init__(CustomErrorType.DEFAULT, message,
                                          position=position, level=level)
