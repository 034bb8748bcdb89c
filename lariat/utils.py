import re

from boltons.strutils import pluralize
from boltons.iterutils import unique


# keep it just to subset of valid ASCII identifiers (plus dashes) for now
VALID_CMD_NAME_RE = re.compile(r"^[A-Za-z][-_A-Za-z0-9]*\Z")

FRIENDLY_TYPE_NAMES = {int: 'integer',
                       float: 'decimal'}


def process_command_name(name):
    """Validate a Command's name, generally on construction. Only
    letters, numbers, '-', and/or '_'. Must begin with a letter, and
    no trailing underscores or dashes.

    Unlike argument names, command names are matched against bare
    (unprefixed) input words, so they may never start with a prefix
    character.
    """
    if not name or not isinstance(name, str):
        raise ValueError('expected non-zero length string for command name, not: %r' % (name,))

    if name.endswith('-') or name.endswith('_'):
        raise ValueError('expected command name without trailing dashes'
                         ' or underscores, not: %r' % name)

    if not VALID_CMD_NAME_RE.match(name):
        raise ValueError('valid command name must begin with a letter, and'
                         ' consist only of letters, digits, underscores, and'
                         ' dashes, not: %r' % name)
    return name


def process_argument_name(name, prefix_char='-'):
    """Validate and canonicalize an Argument name. Leading prefix
    characters are stripped, so ``'--verbose'``, ``'-verbose'`` and
    ``'verbose'`` all register the name ``verbose``. Names are
    case-sensitive and may not contain whitespace or ``=``.
    """
    orig_name = name
    if not name or not isinstance(name, str):
        raise ValueError('expected non-zero length string for argument name, not: %r' % (name,))

    name = name.lstrip(prefix_char)
    if not name:
        raise ValueError('expected argument name with at least one'
                         ' non-prefix character, not: %r' % orig_name)
    if '=' in name:
        raise ValueError('argument names may not contain "=", not: %r' % orig_name)
    if any(c.isspace() for c in name):
        raise ValueError('argument names may not contain whitespace, not: %r' % orig_name)
    return name


class Range(object):
    """An inclusive range of integer counts, used both for how many
    values an argument takes per use (its arity) and how many times
    the argument may be used. A *max* of ``None`` means unbounded.
    """
    def __init__(self, min=0, max=None):
        min = int(min)
        if min < 0:
            raise ValueError('expected min >= 0, not: %r' % min)
        if max is not None:
            max = int(max)
            if max < min:
                raise ValueError('expected max >= min, not: %r < %r' % (max, min))
        self.min = min
        self.max = max

    @classmethod
    def exactly(cls, count):
        return cls(count, count)

    @classmethod
    def at_least(cls, count):
        return cls(count, None)

    @property
    def is_unbounded(self):
        return self.max is None

    def __contains__(self, count):
        if count < self.min:
            return False
        return self.max is None or count <= self.max

    def allows_more(self, count):
        "Whether *count* is still under the maximum."
        return self.max is None or count < self.max

    def __eq__(self, other):
        return (isinstance(other, Range)
                and (self.min, self.max) == (other.min, other.max))

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash((self.min, self.max))

    def describe(self, noun='value'):
        """
        Examples, for noun=value:

          0, 0: no values
          1, 1: 1 value
          0, None: any number of values
          2, None: at least 2 values
          1, 3: 1 - 3 values
        """
        min_count, max_count = self.min, self.max
        if min_count == max_count:
            if min_count == 0:
                return 'no %s' % pluralize(noun)
            return '%s %s' % (min_count, noun if min_count == 1 else pluralize(noun))
        if max_count is None:
            if min_count == 0:
                return 'any number of %s' % pluralize(noun)
            return 'at least %s %s' % (min_count, noun if min_count == 1 else pluralize(noun))
        if min_count == 0:
            return 'up to %s %s' % (max_count, noun if max_count == 1 else pluralize(noun))
        return '%s - %s %s' % (min_count, max_count, pluralize(noun))

    def __repr__(self):
        return '%s(%r, %r)' % (self.__class__.__name__, self.min, self.max)


Range.NONE = Range.exactly(0)
Range.ONE = Range.exactly(1)
Range.ANY = Range.at_least(0)
Range.AT_LEAST_ONE = Range.at_least(1)


def get_type_desc(parse_as):
    "Kind of a hacky way to improve message readability around argument types"
    if not callable(parse_as):
        raise TypeError('expected parse_as to be callable, not %r' % parse_as)
    try:
        return 'as', FRIENDLY_TYPE_NAMES[parse_as]
    except KeyError:
        pass
    try:
        # return the type or function name if it has one
        return 'as', parse_as.__name__
    except AttributeError:
        pass
    # if all else fails
    return 'with', repr(parse_as)


def parse_sv_line(line, sep=','):
    """Parse a single line of values, separated by the delimiter
    *sep*. Supports quoting.

    """
    from csv import reader, Dialect, QUOTE_MINIMAL

    class _lariat_dialect(Dialect):
        delimiter = sep
        escapechar = '\\'
        quotechar = '"'
        doublequote = True
        skipinitialspace = False
        lineterminator = '\n'
        quoting = QUOTE_MINIMAL

    parsed = list(reader([line], dialect=_lariat_dialect))
    return parsed[0] if parsed else []


def format_nonexp_repr(obj, req_names=None, opt_names=None, opt_key=None):
    """Format a repr in the style of Python's default, for schema
    objects whose contents (types and callbacks) don't
    roundtrip, e.g.:

    <Argument names=['verbose'] arg_type=BooleanArgument()>

    Names in *opt_names* are left out when *opt_key* (default: is
    None) is true of their value.
    """
    cn = obj.__class__.__name__
    req_names = req_names or []
    opt_names = opt_names or []
    all_names = unique(req_names + opt_names)

    if opt_key is None:
        opt_key = lambda v: v is None
    assert callable(opt_key)

    items = [(name, getattr(obj, name, None)) for name in all_names]
    labels = ['%s=%r' % (name, val) for name, val in items
              if not (name in opt_names and opt_key(val))]
    if not labels:
        labels = ['id=%s' % id(obj)]
    return '<%s %s>' % (cn, ' '.join(labels))
