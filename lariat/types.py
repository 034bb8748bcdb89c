"""Argument types, or value coercion units. Each Argument owns exactly
one ArgumentType instance, which declares how many values one use of
the argument consumes (``arity``), how many times the argument may be
used (``usage_count``), and turns raw strings into the typed value.

Writing a new type means subclassing :class:`ArgumentType` and
implementing :meth:`~ArgumentType.parse_values`, which returns the new
value, reporting any problems with :meth:`~ArgumentType.add_error`
rather than raising.
"""

import os
import sys

from lariat.utils import Range, get_type_desc, parse_sv_line
from lariat.errors import CoercionError, ErrorIndexError, ErrorLevel, NO_POSITION


class ArgumentType(object):
    arity = Range.ONE
    usage_count = Range(0, 1)
    initial_value = None

    def __init__(self):
        self.reset_state()

    @property
    def representation(self):
        "A short name for the type, used in error messages and help."
        cn = self.__class__.__name__
        if cn.endswith('Argument') and cn != 'Argument':
            cn = cn[:-len('Argument')]
        return cn.lower()

    def reset_state(self):
        self.value = self.initial_value
        self.errors = []
        self.received_count = 0
        self.last_position = NO_POSITION
        self._value_positions = ()

    def parse_values(self, values):
        """Coerce the list of raw string *values* into this type's value
        and return it. Called once per use of the argument, with a
        number of values within ``arity``. Report problems with
        add_error() and return None.
        """
        raise NotImplementedError('ArgumentType subtypes must implement parse_values()')

    def parse_and_update_value(self, values, positions=(), position=NO_POSITION):
        """Run a single use of the argument. *positions* are the
        absolute input positions of each of *values*, and *position*
        is that of the use as a whole.
        """
        values = list(values)
        self.received_count = len(values)
        self._value_positions = tuple(positions)
        self.last_position = position
        self.value = self.parse_values(values)
        return self.value

    def parse_sub_values(self, sub_type, values):
        """For composing types: run *sub_type* on its slice of this
        type's *values*. The sub type's errors stay on the sub type
        until rebased with add_errors_from().
        """
        sub_type.errors = []
        sub_type.received_count = len(values)
        sub_type._value_positions = ()
        sub_type.value = sub_type.parse_values(list(values))
        return sub_type.value

    def add_error(self, message, index=NO_POSITION, level=ErrorLevel.ERROR):
        """Record an error with the values of the current use. *index*
        is the 0-based index of the offending value, or -1 to blame
        the use as a whole.

        Raises ErrorIndexError for any other index outside of the
        values actually received.
        """
        if index != NO_POSITION and not (0 <= index < self.received_count):
            raise ErrorIndexError.from_parse(self, index)
        if index == NO_POSITION or index >= len(self._value_positions):
            position = self.last_position
        else:
            position = self._value_positions[index]
        self.errors.append(CoercionError(message, index=index,
                                         position=position, level=level))

    def add_errors_from(self, other, offset=0):
        """Take on the errors of the sub type *other*, whose values
        started at index *offset* of this type's values.
        """
        for err in other.errors:
            index = err.index
            if index != NO_POSITION:
                index += offset
            self.add_error(err.message, index, err.level)
        other.errors = []

    def __repr__(self):
        return '%s()' % self.__class__.__name__


class StringArgument(ArgumentType):
    def parse_values(self, values):
        return values[0]


class IntArgument(ArgumentType):
    @property
    def representation(self):
        return 'int'

    def parse_values(self, values):
        try:
            return int(values[0])
        except ValueError:
            self.add_error('invalid integer value: %r' % values[0], 0)
        return None


class FloatArgument(ArgumentType):
    def parse_values(self, values):
        try:
            return float(values[0])
        except ValueError:
            self.add_error('invalid decimal value: %r' % values[0], 0)
        return None


class BooleanArgument(ArgumentType):
    "Takes no values. Simply being present is enough."
    arity = Range.NONE
    initial_value = False

    @property
    def representation(self):
        return 'bool'

    def parse_values(self, values):
        return True


class CounterArgument(ArgumentType):
    """Takes no values, and counts how many times it was used, as with
    ``-vvv``. Pass *max_count* to limit the number of uses.
    """
    arity = Range.NONE
    initial_value = 0

    def __init__(self, max_count=None):
        self.usage_count = Range(0, max_count)
        super(CounterArgument, self).__init__()

    def parse_values(self, values):
        return (self.value or 0) + 1

    def __repr__(self):
        return 'CounterArgument(max_count=%r)' % self.usage_count.max


class StringsArgument(ArgumentType):
    "Takes one or more values, producing a list of strings."
    arity = Range.AT_LEAST_ONE

    def parse_values(self, values):
        return list(values)


class CallableArgument(ArgumentType):
    """Adapts a plain conversion callable like ``int`` or a custom
    function to the ArgumentType interface. The callable gets the
    single raw value, and any exception it raises becomes a parse
    error on that value.
    """
    def __init__(self, parse_as=str):
        if not callable(parse_as):
            raise TypeError('expected callable for parse_as, not: %r' % (parse_as,))
        self.parse_as = parse_as
        super(CallableArgument, self).__init__()

    @property
    def representation(self):
        return get_type_desc(self.parse_as)[1]

    def parse_values(self, values):
        arg = values[0]
        try:
            return self.parse_as(arg)
        except Exception as exc:
            prep, type_desc = get_type_desc(self.parse_as)
            if prep == 'as':
                msg = 'expected a valid %s value, not %r' % (type_desc, arg)
            else:
                msg = 'converter (%s) failed to parse value: %r' % (type_desc, arg)
            msg += ' (got error: %r)' % exc
            self.add_error(msg, 0)
        return None

    def __repr__(self):
        return 'CallableArgument(%r)' % (self.parse_as,)


class ChoicesArgument(ArgumentType):
    """Parses a single value, limited to a set of *choices*. The actual
    converter used to parse is inferred from *choices* by default, but
    an explicit one can be set *parse_as*.
    """
    def __init__(self, choices, parse_as=None):
        if not choices:
            raise ValueError('expected at least one choice, not: %r' % (choices,))
        try:
            self.choices = sorted(choices)
        except Exception:
            # in case choices aren't sortable
            self.choices = list(choices)
        if parse_as is None:
            parse_as = type(self.choices[0])
        self.parse_as = parse_as
        super(ChoicesArgument, self).__init__()

    def parse_values(self, values):
        text = values[0]
        try:
            choice = self.parse_as(text)
        except Exception:
            choice = text
        if choice not in self.choices:
            self.add_error('expected one of %r, not: %r' % (self.choices, text), 0)
            return None
        return choice

    def __repr__(self):
        cn = self.__class__.__name__
        return "%s(%r, parse_as=%r)" % (cn, self.choices, self.parse_as)


class ListArgument(ArgumentType):
    """Takes a single value as a character-separated list, and produces
    a Python list of parsed values. Basically, the argument equivalent
    of CSV (Comma-Separated Values)::

      --arg a1,b2,c3

    By default, this yields a ``['a1', 'b2', 'c3']``. The format is
    also similar to CSV in that it supports quoting when values
    themselves contain the separator::

      --arg 'a1,"b,2",c3'

    Args:
       parse_one_as (callable): Turns a single item's text into its
          parsed value.
       sep (str): A single-character string representing the list
         value separator. Defaults to ``,``.
       strip (bool): Whether or not each item in the list should have
          whitespace stripped before being passed to
          *parse_one_as*. Defaults to False.
    """
    def __init__(self, parse_one_as=str, sep=',', strip=False):
        self.parse_one_as = parse_one_as
        self.sep = sep
        self.strip = strip
        super(ListArgument, self).__init__()

    def parse_values(self, values):
        split_vals = parse_sv_line(values[0], self.sep)
        if self.strip:
            split_vals = [v.strip() for v in split_vals]
        ret = []
        for item in split_vals:
            try:
                ret.append(self.parse_one_as(item))
            except Exception as exc:
                self.add_error('invalid list item %r (got error: %r)' % (item, exc), 0)
                return None
        return ret

    def __repr__(self):
        cn = self.__class__.__name__
        return ("%s(%r, sep=%r, strip=%r)"
                % (cn, self.parse_one_as, self.sep, self.strip))


class FileArgument(ArgumentType):
    """Takes a path to an existing file. By default produces the
    absolute path. Pass ``read=True`` to produce the text contents
    instead; the file is opened and closed within the parse.
    """
    def __init__(self, read=False, encoding='utf-8'):
        self.read = read
        self.encoding = encoding
        super(FileArgument, self).__init__()

    def parse_values(self, values):
        path = values[0]
        if not os.path.isfile(path):
            self.add_error('file not found: %r' % path, 0)
            return None
        if not self.read:
            return os.path.abspath(path)
        try:
            with open(path, 'r', encoding=self.encoding) as f:
                return f.read()
        except (UnicodeError, EnvironmentError) as ee:
            self.add_error('failed to read file %r, got: %r' % (path, ee), 0)
        return None


class StdinArgument(ArgumentType):
    """Takes no values. When used, drains the input *stream* (defaults
    to ``sys.stdin`` at parse time) and produces its text, lines
    joined by newlines.
    """
    arity = Range.NONE

    def __init__(self, stream=None):
        self.stream = stream
        super(StdinArgument, self).__init__()

    def parse_values(self, values):
        stream = self.stream if self.stream is not None else sys.stdin
        try:
            text = stream.read()
        except (UnicodeError, EnvironmentError) as ee:
            self.add_error('failed to read standard input, got: %r' % (ee,))
            return None
        return '\n'.join(text.splitlines())


class PairArgument(ArgumentType):
    """Composes two fixed-arity types. The values of a use are sliced
    between *first* and *second* in order, each is coerced
    independently, and the result is a ``(first_value, second_value)``
    tuple. Errors of either side point at the right value of the use.
    """
    def __init__(self, first, second):
        for sub_type in (first, second):
            if not isinstance(sub_type, ArgumentType):
                raise TypeError('expected ArgumentType instances, not: %r' % (sub_type,))
            if sub_type.arity.is_unbounded or sub_type.arity.min != sub_type.arity.max:
                raise ValueError('pair members must take a fixed number of'
                                 ' values, not: %r' % sub_type.arity)
        self.first = first
        self.second = second
        self.arity = Range.exactly(first.arity.max + second.arity.max)
        super(PairArgument, self).__init__()

    @property
    def representation(self):
        return '(%s, %s)' % (self.first.representation, self.second.representation)

    def reset_state(self):
        super(PairArgument, self).reset_state()
        self.first.reset_state()
        self.second.reset_state()

    def parse_values(self, values):
        split_at = self.first.arity.max
        first_val = self.parse_sub_values(self.first, values[:split_at])
        second_val = self.parse_sub_values(self.second, values[split_at:])

        self.add_errors_from(self.first, offset=0)
        self.add_errors_from(self.second, offset=split_at)

        return (first_val, second_val)

    def __repr__(self):
        return 'PairArgument(%r, %r)' % (self.first, self.second)


def get_arg_type(arg_type):
    """Turn the *arg_type* argument of an Argument into an ArgumentType
    instance. Accepts instances, ArgumentType subclasses (instantiated
    with no arguments), and plain callables like ``int``, which get
    wrapped in a CallableArgument.
    """
    if isinstance(arg_type, ArgumentType):
        return arg_type
    if isinstance(arg_type, type) and issubclass(arg_type, ArgumentType):
        return arg_type()
    if arg_type is str:
        return StringArgument()
    if arg_type is int:
        return IntArgument()
    if arg_type is float:
        return FloatArgument()
    if arg_type is bool:
        return BooleanArgument()
    if callable(arg_type):
        return CallableArgument(arg_type)
    raise TypeError('expected ArgumentType instance or subtype, or a callable,'
                    ' not: %r' % (arg_type,))
