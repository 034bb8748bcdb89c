import pytest

from lariat import (Command,
                    Argument,
                    ArgumentGroup,
                    Range,
                    TokenType,
                    ParseErrorType,
                    CoercionError,
                    StringArgument,
                    IntArgument,
                    BooleanArgument,
                    CounterArgument,
                    StringsArgument,
                    PairArgument)


def get_tool_cmd():
    cmd = Command('tool')
    cmd.add(['name', 'n'], StringArgument)
    cmd.add(['verbose', 'v'], BooleanArgument)
    cmd.add(['count', 'c'], CounterArgument)
    cmd.add(['number', 'N'], IntArgument)
    return cmd


def _error_types(res):
    return [e.type for e in res.errors]


def test_empty_input():
    cmd = get_tool_cmd()
    cmd.add('level', IntArgument, default=3)
    res = cmd.parse('')
    assert res.errors == []
    assert not res.has_exit_errors
    assert dict(res.values) == {'name': None,
                                'verbose': False,
                                'count': 0,
                                'number': None,
                                'level': 3}
    assert res.subcmds == ()
    assert res.tokens == ()
    assert repr(res).startswith('<ParseResult')


@pytest.mark.parametrize('argv', ['--name value',
                                  ['--name', 'value'],
                                  '--name=value',
                                  '-name value',
                                  '-n value',
                                  '--n value',
                                  '-n=value',
                                  '-nvalue',
                                  '--name "value"'])
def test_value_forms(argv):
    res = get_tool_cmd().parse(argv)
    assert res.errors == []
    assert res['name'] == 'value'


def test_argv_default(monkeypatch):
    monkeypatch.setattr('sys.argv', ['tool', '--verbose', '-n', 'x'])
    res = get_tool_cmd().parse()
    assert res['verbose'] is True
    assert res['name'] == 'x'
    assert res.argv == ['--verbose', '-n', 'x']


class _RecordingBool(BooleanArgument):
    def __init__(self, name, calls):
        self.name = name
        self.calls = calls
        super(_RecordingBool, self).__init__()

    def parse_values(self, values):
        self.calls.append(self.name)
        return True


def test_cluster_order():
    calls = []
    cmd = Command('tool')
    # declared in the reverse of the order they're used
    for name in 'cba':
        cmd.add(name, _RecordingBool(name, calls))

    res = cmd.parse('-abc')
    assert res.errors == []
    assert calls == ['a', 'b', 'c']
    assert all([arg.usage_count == 1 for arg in cmd.arguments])


def test_cluster_attached_value():
    res = get_tool_cmd().parse('-vn5')
    assert res.errors == []
    assert res['verbose'] is True
    assert res['name'] == '5'

    res = get_tool_cmd().parse('-vcn five')
    assert res.errors == []
    assert res['count'] == 1
    assert res['name'] == 'five'


def test_cluster_exact_name_wins():
    cmd = Command('tool')
    cmd.add('abc', BooleanArgument)
    for name in 'abc':
        cmd.add(name, BooleanArgument)

    res = cmd.parse('-abc')
    assert res['abc'] is True
    assert (res['a'], res['b'], res['c']) == (False, False, False)

    res = cmd.parse('-ab')
    assert res['abc'] is False
    assert (res['a'], res['b'], res['c']) == (True, True, False)


def test_cluster_unknown_char():
    cmd = Command('tool')
    cmd.add('a', BooleanArgument)
    cmd.add('b', BooleanArgument)

    res = cmd.parse('-x -abz')
    assert res['a'] is True
    assert res['b'] is True
    assert _error_types(res) == [ParseErrorType.UNMATCHED_TOKEN,
                                 ParseErrorType.UNMATCHED_NAME]
    assert [e.position for e in res.errors] == [0, 6]


def test_negative_number_positional():
    cmd = Command('calc')
    cmd.add('num', IntArgument, positional=True)
    cmd.add('v', BooleanArgument)

    for argv, expected in [(['-5'], -5), (['-12'], -12), (['7'], 7)]:
        res = cmd.parse(argv)
        assert res.errors == []
        assert res['num'] == expected


def test_positionals():
    cmd = Command('copy')
    cmd.add('src', positional=True)
    cmd.add('dst', positional=True)
    cmd.add('verbose', BooleanArgument)

    res = cmd.parse('a --verbose b')
    assert res.errors == []
    assert (res['src'], res['dst'], res['verbose']) == ('a', 'b', True)

    # positionals can also be given by name
    res = cmd.parse('--dst b a')
    assert res.errors == []
    assert (res['src'], res['dst']) == ('a', 'b')

    res = cmd.parse('a b c')
    assert (res['src'], res['dst']) == ('a', 'b')
    assert _error_types(res) == [ParseErrorType.UNMATCHED_TOKEN]
    assert res.errors[0].position == 4
    assert res.errors[0].token_index == 2


def test_greedy_values():
    cmd = Command('tool')
    cmd.add('files', StringsArgument, positional=True)
    cmd.add('verbose', BooleanArgument)

    res = cmd.parse('x y --verbose')
    assert res.errors == []
    assert res['files'] == ['x', 'y']
    assert res['verbose'] is True

    # unknown names don't end the values
    res = cmd.parse('x --other y')
    assert res.errors == []
    assert res['files'] == ['x', '--other', 'y']

    cmd = Command('tool')
    cmd.add('items', StringsArgument)
    cmd.add('verbose', BooleanArgument)
    res = cmd.parse('--items=a b --verbose c')
    assert res['items'] == ['a', 'b']
    assert _error_types(res) == [ParseErrorType.UNMATCHED_TOKEN]


def test_literal_values():
    res = get_tool_cmd().parse('--name "--verbose"')
    assert res.errors == []
    assert res['name'] == '--verbose'
    assert res['verbose'] is False

    cmd = Command('tool')
    cmd.add('items', StringsArgument)
    cmd.add('verbose', BooleanArgument)
    res = cmd.parse('--items a -- --verbose')
    assert res.errors == []
    assert res['items'] == ['a', '--verbose']
    assert res['verbose'] is False


def test_missing_value():
    res = get_tool_cmd().parse('--name')
    assert _error_types(res) == [ParseErrorType.ARG_INCORRECT_VALUE_NUMBER]
    err = res.errors[0]
    assert err.position == 0
    assert err.value_count == 0
    assert err.argument.name == 'name'
    assert res['name'] is None

    # the next known name ends the (missing) values
    res = get_tool_cmd().parse('--name --verbose')
    assert _error_types(res) == [ParseErrorType.ARG_INCORRECT_VALUE_NUMBER]
    assert res['verbose'] is True

    res = get_tool_cmd().parse('--verbose=yes')
    assert _error_types(res) == [ParseErrorType.ARG_INCORRECT_VALUE_NUMBER]
    assert res['verbose'] is False


def test_pair_too_few_values():
    cmd = Command('tool')
    cmd.add('pair', PairArgument(IntArgument(), StringArgument()))
    res = cmd.parse('--pair 1')
    assert _error_types(res) == [ParseErrorType.ARG_INCORRECT_VALUE_NUMBER]
    assert res.errors[0].value_count == 1
    assert res['pair'] is None


def test_positional_pair():
    cmd = Command('tool')
    cmd.add('pair', PairArgument(IntArgument(), StringArgument()), positional=True)

    res = cmd.parse(['3', 'x'])
    assert res.errors == []
    assert res['pair'] == (3, 'x')

    res = cmd.parse(['abc', 'x'])
    assert len(res.errors) == 1
    err = res.errors[0]
    assert isinstance(err, CoercionError)
    assert err.index == 0
    assert err.position == 0
    assert err.argument is cmd.arguments[0]
    assert res['pair'] == (None, 'x')

    cmd = Command('tool')
    cmd.add('pair', PairArgument(StringArgument(), IntArgument()), positional=True)
    res = cmd.parse(['x', 'abc'])
    assert [(e.index, e.position) for e in res.errors] == [(1, 2)]


def test_usage_count():
    res = get_tool_cmd().parse('--name a --name b')
    assert _error_types(res) == [ParseErrorType.ARG_INCORRECT_USAGES_COUNT]
    assert res.errors[0].position == 9
    assert res['name'] == 'a'

    res = get_tool_cmd().parse('-n a -n b -n c')
    assert _error_types(res) == [ParseErrorType.ARG_INCORRECT_USAGES_COUNT] * 2


def test_usage_count_before_values():
    # the extra use is reported as such, even without its value
    res = get_tool_cmd().parse('--name a --name')
    assert _error_types(res) == [ParseErrorType.ARG_INCORRECT_USAGES_COUNT]
    assert res.errors[0].position == 9
    assert res['name'] == 'a'

    res = get_tool_cmd().parse(['--name', '--name'])
    assert _error_types(res) == [ParseErrorType.ARG_INCORRECT_VALUE_NUMBER,
                                 ParseErrorType.ARG_INCORRECT_USAGES_COUNT]
    assert [e.position for e in res.errors] == [0, 7]


class _TwiceArgument(StringArgument):
    usage_count = Range(2, 3)


def test_usage_count_min():
    cmd = Command('tool')
    cmd.add('t', _TwiceArgument, default='dflt')

    res = cmd.parse('-t a')
    assert [(e.type, e.position) for e in res.errors] == [
        (ParseErrorType.ARG_INCORRECT_USAGES_COUNT, 0)]
    assert res['t'] == 'dflt'

    res = cmd.parse('-t a -t b')
    assert res.errors == []
    assert res['t'] == 'b'

    res = cmd.parse('-t a -t b -t c -t d')
    assert _error_types(res) == [ParseErrorType.ARG_INCORRECT_USAGES_COUNT]
    assert res.errors[0].position == 15
    assert res['t'] == 'c'


@pytest.mark.parametrize('count', [0, 1, 2, 3, 4])
def test_counter(count):
    res = get_tool_cmd().parse(['-c'] * count)
    assert res.errors == []
    assert res['count'] == count

    if count:
        res = get_tool_cmd().parse('-' + 'c' * count)
        assert res.errors == []
        assert res['count'] == count


def test_counter_max():
    cmd = Command('tool')
    cmd.add('v', CounterArgument(max_count=3))

    assert cmd.parse('-vvv').errors == []
    res = cmd.parse('-vvvv')
    assert _error_types(res) == [ParseErrorType.ARG_INCORRECT_USAGES_COUNT]
    assert res['v'] == 3


def test_obligatory():
    cmd = Command('tool')
    cmd.add('name', obligatory=True)
    cmd.add('help', BooleanArgument, allow_unique=True)

    res = cmd.parse('')
    assert _error_types(res) == [ParseErrorType.OBLIGATORY_ARGUMENT_NOT_USED]
    assert res.errors[0].position == -1
    assert not res.errors[0].has_position
    assert res.has_exit_errors

    assert cmd.parse('--name x').errors == []
    # a unique argument waives obligatory ones
    res = cmd.parse('--help')
    assert res.errors == []
    assert res['help'] is True


def test_exclusive_group():
    a, b = Argument('a', BooleanArgument), Argument('b', BooleanArgument)
    cmd = Command('tool', groups=[ArgumentGroup('mode', exclusive=True, members=[a, b])])

    assert cmd.parse('-a').errors == []
    assert cmd.parse('-b').errors == []

    for argv in ['-a -b', '-b -a', '-ab']:
        res = cmd.parse(argv)
        assert _error_types(res) == [ParseErrorType.MULTIPLE_ARGS_IN_EXCLUSIVE_GROUP_USED]
        # blame goes to the later declared argument
        assert res.errors[0].argument is b
        assert res.errors[0].group.name == 'mode'
        assert res['a'] is True
        assert res['b'] is False


def test_nested_exclusive_group():
    x, y, z = [Argument(name, BooleanArgument) for name in 'xyz']
    left = ArgumentGroup('left', members=[x, y])
    right = ArgumentGroup('right', members=[z])
    cmd = Command('tool', groups=[ArgumentGroup('sides', exclusive=True,
                                                members=[left, right])])
    assert [arg.name for arg in cmd.arguments] == ['x', 'y', 'z']

    assert cmd.parse('-x -y').errors == []
    res = cmd.parse('-x -z')
    assert _error_types(res) == [ParseErrorType.MULTIPLE_ARGS_IN_EXCLUSIVE_GROUP_USED]
    assert res.errors[0].argument is z
    assert res.errors[0].group.name == 'sides'


def get_pkg_cmd():
    cmd = Command('pkg')
    cmd.add(['verbose', 'v'], BooleanArgument)
    install = cmd.add(Command(['install', 'add']))
    install.add('force', BooleanArgument)
    install.add('package', positional=True)
    inspect = cmd.add(Command('inspect'))
    inspect.add('depth', IntArgument, obligatory=True)
    return cmd


def test_subcommands():
    cmd = get_pkg_cmd()
    res = cmd.parse('-v install lariat --force')
    assert res.errors == []
    assert res['verbose'] is True
    assert res.subcmds == ('install',)
    assert res.subcmd.name == 'install'
    assert res.get('install.package') == 'lariat'
    assert res.get(('install', 'force')) is True
    assert res.get('inspect.depth', 'nope') == 'nope'
    assert [c.name for c in res.iter_commands()] == ['pkg', 'install']

    assert [t.type for t in res.tokens] == [TokenType.ARGUMENT_NAME,
                                            TokenType.SUB_COMMAND,
                                            TokenType.VALUE,
                                            TokenType.ARGUMENT_NAME]

    # aliases work too
    res = cmd.parse('add lariat')
    assert res.subcmds == ('install',)
    assert res.get('install.package') == 'lariat'


def test_subcommand_boundary():
    cmd = get_pkg_cmd()
    # arguments of the parent are unknown after the subcommand
    res = cmd.parse('install --verbose')
    assert res['verbose'] is False
    assert res.get('install.package') == '--verbose'

    res = cmd.parse('install x y')
    assert _error_types(res) == [ParseErrorType.UNMATCHED_TOKEN]
    assert res.errors[0].position == 10


def test_subcommand_abbreviation():
    cmd = get_pkg_cmd()
    assert cmd.parse('inst x').subcmds == ('install',)

    # ambiguous prefixes don't match
    res = cmd.parse('ins x')
    assert res.subcmds == ()
    assert _error_types(res) == [ParseErrorType.UNMATCHED_TOKEN] * 2

    cmd.allow_abbrev = False
    res = cmd.parse('inst x')
    assert res.subcmds == ()


def test_unused_subcommand_not_checked():
    cmd = get_pkg_cmd()
    # inspect has an obligatory argument, but wasn't used
    assert cmd.parse('-v').errors == []

    res = cmd.parse('inspect')
    assert _error_types(res) == [ParseErrorType.OBLIGATORY_ARGUMENT_NOT_USED]


def test_obligatory_subcommand():
    cmd = Command('deploy-tool', subcommands=[Command('deploy', obligatory=True),
                                              Command('status')])
    res = cmd.parse('')
    assert _error_types(res) == [ParseErrorType.OBLIGATORY_COMMAND_NOT_USED]
    assert 'deploy' in res.errors[0].message
    assert res.errors[0].command is cmd

    assert cmd.parse('status').errors == []
    assert cmd.parse('deploy').errors == []


def test_nested_subcommands():
    cmd = Command('git')
    remote = cmd.add(Command('remote'))
    add = remote.add(Command('add'))
    add.add('name', positional=True)
    add.add('url', positional=True)

    res = cmd.parse('remote add origin https://example.com/repo.git')
    assert res.errors == []
    assert res.subcmds == ('remote', 'add')
    assert res.get('remote.add.url') == 'https://example.com/repo.git'
    assert res.get('add.url') is None


def test_prefix_chars():
    cmd = Command('tool')
    cmd.add('x', BooleanArgument, prefix='+')
    cmd.add('y', BooleanArgument)

    res = cmd.parse('+x -y')
    assert res.errors == []
    assert (res['x'], res['y']) == (True, True)

    res = cmd.parse('-x')
    assert res['x'] is False
    assert _error_types(res) == [ParseErrorType.UNMATCHED_TOKEN]


def test_result_lookup():
    res = get_tool_cmd().parse('-n x')
    assert res['name'] == 'x'
    assert res['n'] == 'x'
    assert res['--name'] == 'x'
    assert 'name' in res
    assert 'nope' not in res
    assert res.get('nope', 'default') == 'default'
    with pytest.raises(KeyError):
        res['nope']


def test_reparse_resets():
    cmd = get_tool_cmd()
    res = cmd.parse('--name a -ccc --number nope')
    assert res['name'] == 'a'
    assert len(res.errors) == 1

    res = cmd.parse('')
    assert res.errors == []
    assert res['name'] is None
    assert res['count'] == 0
    assert all([arg.usage_count == 0 for arg in cmd.arguments])

    res = cmd.parse('-c')
    assert res['count'] == 1


def test_callbacks():
    seen = []
    cmd = Command('tool')
    cmd.add('name', on_ok=seen.append)
    cmd.add('num', IntArgument, on_err=lambda arg: seen.append(arg.name))
    cmd.add('unused', on_ok=seen.append, on_err=seen.append)

    cmd.parse('--name x --num nope')
    assert seen == ['x', 'num']

    del seen[:]
    cmd.parse('--num 5')
    assert seen == []


def test_callbacks_unique():
    seen = []
    cmd = Command('tool')
    cmd.add('help', BooleanArgument, allow_unique=True,
            on_ok=lambda value: seen.append('help'))
    cmd.add('name', obligatory=True, on_ok=seen.append)

    res = cmd.parse('--help --name x')
    assert res.errors == []
    assert seen == ['help']
