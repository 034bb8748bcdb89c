from boltons.iterutils import unique
from boltons.typeutils import make_sentinel

from lariat.types import StringArgument, get_arg_type
from lariat.utils import process_argument_name, format_nonexp_repr
from lariat.errors import (ParseError,
                           CustomError,
                           SchemaError,
                           ArgumentAlreadyExists,
                           ErrorLevel,
                           NO_POSITION)


_UNSET = make_sentinel('_UNSET')


def _validate_prefix(prefix):
    if not isinstance(prefix, str) or len(prefix) != 1 or prefix.isspace():
        raise ValueError('expected prefix to be a single non-whitespace'
                         ' character, not: %r' % (prefix,))
    if prefix in '"\'\\=':
        raise ValueError('quotes, backslashes, and "=" cannot be used as'
                         ' argument prefixes: %r' % prefix)
    return prefix


class Argument(object):
    """The Argument represents all there is to know about a single
    input the Command accepts, whether named (``--verbose``, ``-v``)
    or positional.

    Args:
       names: A name, or list of names, for the argument. Names are
          case-sensitive and stored without prefix characters, so
          ``'--verbose'`` and ``'verbose'`` are the same name. The
          first name is used as the key in the parse result.
       arg_type: How to interpret the argument's values. An
          ArgumentType instance or subtype, or a plain conversion
          callable such as ``int``. Defaults to StringArgument. Each
          Argument needs its own ArgumentType instance.
       prefix (str): The character which starts the argument's name on
          the command line. Either one or two of them may be used, so
          a prefix of ``-`` accepts both ``-v`` and ``--v``. Defaults
          to ``Argument.default_prefix``.
       obligatory (bool): Whether the argument must be used. An
          obligatory argument may still be omitted if an
          *allow_unique* argument of the same command was used.
       positional (bool): Whether the argument also receives values
          by position, in declaration order, when no name matches.
       allow_unique (bool): Pass True for arguments such as
          ``--help``, whose use waives the obligatory arguments of the
          same command.
       default: The value when the argument is not used. Defaults to
          the ArgumentType's initial value.
       doc (str): A summary of the argument, for help generation.
       on_ok (callable): Called with the final value after the parse,
          if the argument was used and produced no errors.
       on_err (callable): Called with this Argument after the parse, if
          the argument has errors at or above the exit level.
    """
    default_prefix = '-'

    def __init__(self, names, arg_type=StringArgument, prefix=None, obligatory=False,
                 positional=False, allow_unique=False, default=_UNSET, doc=None,
                 on_ok=None, on_err=None):
        self.prefix = _validate_prefix(prefix if prefix is not None else self.default_prefix)
        if isinstance(names, str):
            names = [names]
        names = [process_argument_name(n, self.prefix) for n in names or []]
        if not names:
            raise SchemaError('expected at least one name for argument')
        if len(unique(names)) != len(names):
            raise SchemaError('duplicate names for argument: %r' % names)
        self.names = names

        arg_type = get_arg_type(arg_type)
        if getattr(arg_type, '_lariat_argument', None) is not None:
            raise SchemaError('argument type instance %r is already used by argument %s,'
                              ' expected a fresh instance'
                              % (arg_type, arg_type._lariat_argument.label))
        self.arg_type = arg_type

        if positional and arg_type.arity.max == 0:
            raise SchemaError('argument %r takes no values and cannot be'
                              ' positional' % names[0])
        arg_type._lariat_argument = self

        self.obligatory = bool(obligatory)
        self.positional = bool(positional)
        self.allow_unique = bool(allow_unique)
        self.default = default
        self.doc = doc
        for cb_name, cb in (('on_ok', on_ok), ('on_err', on_err)):
            if cb is not None and not callable(cb):
                raise TypeError('expected callable for %s, not: %r' % (cb_name, cb))
        self.on_ok = on_ok
        self.on_err = on_err

        self.parent_command = None
        self.parent_group = None
        self.reset_state()

    @property
    def name(self):
        return self.names[0]

    @property
    def label(self):
        "The default label for the argument, used in error messages"
        if self.positional:
            return self.name
        if len(self.name) == 1:
            return self.prefix + self.name
        return self.prefix * 2 + self.name

    @property
    def has_default(self):
        return self.default is not _UNSET

    def get_default(self):
        if self.default is not _UNSET:
            return self.default
        return self.arg_type.initial_value

    def reset_state(self):
        self.usage_count = 0
        self.value = None
        self.custom_errors = []
        self.arg_type.reset_state()

    def set_parent_command(self, command):
        if self.parent_command is not None:
            raise ArgumentAlreadyExists.from_parse(self, self.parent_command)
        self.parent_command = command

    def set_parent_group(self, group):
        if self.parent_group is not None:
            raise ArgumentAlreadyExists.from_parse(self, self.parent_group)
        self.parent_group = group

    def matches_name(self, text):
        """Whether *text* is one of this argument's names, preceded by
        one or two prefix characters.
        """
        prefix = self.prefix
        for name in self.names:
            if text == prefix + name or text == prefix + prefix + name:
                return True
        return False

    def matches_char(self, char, prefix=None):
        if prefix is not None and prefix != self.prefix:
            return False
        return char in self.names

    def add_usage(self):
        """Count one use. Returns False if that goes over the maximum
        number of uses, in which case the use must not be coerced.
        """
        self.usage_count += 1
        return self.arg_type.usage_count.allows_more(self.usage_count - 1)

    def parse_values(self, values, positions=(), position=NO_POSITION):
        "Coerce the values of a single, already counted, use."
        return self.arg_type.parse_and_update_value(values, positions, position)

    def finish_parsing(self, parser):
        """Decide the final value of this argument once the parse of its
        command is complete, recording any usage or exclusivity errors
        on *parser*.
        """
        # both checks always run, so that every error gets recorded
        usage_ok = self._check_usage_count(parser)
        exclusive_ok = self._check_exclusivity(parser)

        value = self.arg_type.value
        if self.usage_count == 0 or value is None or not (usage_ok and exclusive_ok):
            value = self.get_default()

        if self.parent_group is not None and self.usage_count:
            self.parent_group.set_arg_used(self)

        self.value = value
        return value

    def _check_usage_count(self, parser):
        if self.usage_count == 0:
            if self.obligatory and not self.parent_command.unique_argument_received_value():
                parser.add_error(ParseError.from_obligatory_argument(self))
                return False
            return True
        if self.usage_count < self.arg_type.usage_count.min:
            parser.add_error(ParseError.from_usages_count(self, self.arg_type.last_position))
            return False
        return True

    def _check_exclusivity(self, parser):
        if self.parent_group is None or self.usage_count == 0:
            return True
        conflict_group = self.parent_group.check_exclusivity(self)
        if conflict_group is None:
            return True
        parser.add_error(ParseError.from_exclusive_group(self, conflict_group,
                                                         self.arg_type.last_position))
        return False

    def add_error(self, message, level=ErrorLevel.ERROR, position=NO_POSITION):
        "Attach a custom error to this argument."
        err = CustomError(message, level=level, position=position)
        self.custom_errors.append(err)
        return err

    @property
    def errors(self):
        """The errors reported by this argument's type during the parse,
        followed by any custom errors.
        """
        ret = []
        for err in self.arg_type.errors:
            err.argument = self
            ret.append(err)
        ret.extend(self.custom_errors)
        return ret

    def has_exit_errors(self):
        cmd = self.parent_command
        exit_level = cmd.exit_level if cmd is not None else ErrorLevel.ERROR
        all_errors = list(self.errors)
        if cmd is not None and cmd.parser is not None:
            all_errors.extend([e for e in cmd.parser.errors
                               if getattr(e, 'argument', None) is self])
        return any([e.level >= exit_level for e in all_errors])

    def invoke_callbacks(self):
        if self.has_exit_errors():
            if self.on_err is not None:
                self.on_err(self)
            return
        if self.on_ok is None or self.usage_count == 0 or self.value is None:
            return
        if not self.allow_unique and self.parent_command.unique_argument_received_value():
            return
        self.on_ok(self.value)

    def __repr__(self):
        return format_nonexp_repr(self, ['names', 'arg_type'],
                                  ['prefix', 'obligatory', 'positional', 'allow_unique'],
                                  opt_key=lambda v: v is False or v == self.default_prefix)


class ArgumentGroup(object):
    """A named subset of one Command's arguments, optionally
    *exclusive*, meaning that only one of its members (arguments or
    nested groups) may be used in a parse. Exclusivity also applies
    through nesting: using arguments from two different subgroups of
    an exclusive group is an error.

    Args:
       name (str): Name of the group, used in error messages and help.
       exclusive (bool): Defaults to False.
       doc (str): A summary of the group, for help generation.
       members (list): Arguments and/or ArgumentGroups to add
          immediately. Also addable via the .add() method.
    """
    def __init__(self, name, exclusive=False, doc=None, members=None):
        if not name or not isinstance(name, str):
            raise ValueError('expected non-zero length string for group name, not: %r' % (name,))
        self.name = name
        self.exclusive = bool(exclusive)
        self.doc = doc
        self.arguments = []
        self.groups = []
        self.parent_group = None
        self.parent_command = None
        self._used_by = None
        for member in members or []:
            self.add(member)

    def add(self, member):
        """Add an Argument or a nested ArgumentGroup. If this group
        already belongs to a Command, new arguments are added to that
        Command as well.
        """
        if isinstance(member, Argument):
            member.set_parent_group(self)
            self.arguments.append(member)
        elif isinstance(member, ArgumentGroup):
            if member is self or member in self.iter_ancestors():
                raise SchemaError('group %r cannot be nested in itself' % member.name)
            if member.parent_group is not None:
                raise SchemaError('group %r already belongs to group %r'
                                  % (member.name, member.parent_group.name))
            member.parent_group = self
            self.groups.append(member)
        else:
            raise TypeError('expected Argument or ArgumentGroup, not: %r' % (member,))
        if self.parent_command is not None:
            self.parent_command.add_group(self)
        return member

    def iter_ancestors(self):
        group = self.parent_group
        while group is not None:
            yield group
            group = group.parent_group

    def set_parent_command(self, command):
        if self.parent_command is not None and self.parent_command is not command:
            raise SchemaError('group %r already belongs to command %r'
                              % (self.name, self.parent_command.name))
        self.parent_command = command

    def check_exclusivity(self, argument):
        """Walk up the group chain from *argument* and return the first
        exclusive group in which a different member was already used,
        or None if there is no conflict.
        """
        member, group = argument, self
        while group is not None:
            if group.exclusive and group._used_by is not None and group._used_by is not member:
                return group
            member, group = group, group.parent_group
        return None

    def set_arg_used(self, argument):
        member, group = argument, self
        while group is not None:
            if group._used_by is None:
                group._used_by = member
            member, group = group, group.parent_group

    def reset_state(self):
        self._used_by = None

    def __repr__(self):
        return format_nonexp_repr(self, ['name', 'exclusive'])
