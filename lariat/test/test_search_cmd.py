from pytest import raises

from lariat import (Command,
                    Argument,
                    ArgumentGroup,
                    ArgumentParseError,
                    ParseErrorType,
                    CoercionError,
                    BooleanArgument,
                    CounterArgument,
                    IntArgument,
                    StringsArgument,
                    ChoicesArgument,
                    ListArgument)


def get_search_command(seen=None):
    """A command which provides various subcommands mimicking popular
    command-line text search tools to test power, compatiblity, and
    flexibility.

    """
    seen = seen if seen is not None else []
    cmd = Command('search')
    cmd.add(['verbose', 'V'], BooleanArgument)
    cmd.add(['debug', 'd'], CounterArgument(max_count=3))

    rg_subcmd = Command('rg', doc='search recursively with regexes')
    rg_subcmd.add(['glob', 'g'], StringsArgument,
                  doc='Include or exclude files/directories for searching'
                  ' that match the given glob. Precede with ! to exclude.',
                  on_ok=seen.append)
    rg_subcmd.add(['max-count', 'm'], IntArgument,
                  doc='Limit the number of matching lines per file.')
    rg_subcmd.add('filetype', ChoicesArgument(['py', 'js', 'html']))
    rg_subcmd.add('extensions', ListArgument(strip=True))
    rg_subcmd.add('pattern', positional=True)
    rg_subcmd.add(ArgumentGroup('case', exclusive=True,
                                members=[Argument(['ignore-case', 'i'], BooleanArgument),
                                         Argument(['case-sensitive', 's'], BooleanArgument)]))
    cmd.add(rg_subcmd)

    ls_subcmd = Command('ls')
    ls_subcmd.add('file_paths', StringsArgument, positional=True)
    cmd.add(ls_subcmd)

    return cmd


def _error_types(argv):
    return [e.type for e in get_search_command().parse(argv).errors]


def test_search_basic():
    cmd = get_search_command()
    assert repr(cmd).startswith('<Command')

    res = cmd.parse(['--verbose'])
    assert repr(res).startswith('<ParseResult')
    assert res.name == 'search'
    assert res['verbose'] is True
    assert res['debug'] == 0

    res = cmd.parse(['-Vddd'])
    assert res.errors == []
    assert res['debug'] == 3


def test_search_rg():
    seen = []
    cmd = get_search_command(seen)
    res = cmd.parse(['rg', '--glob', '*.py', '*.md', '--max-count', '5', 'TODO'])
    assert res.errors == []
    assert res.subcmds == ('rg',)
    assert res.get('rg.glob') == ['*.py', '*.md']
    assert res.get('rg.max-count') == 5
    # the glob values stop at the next known name, so the pattern is positional
    assert res.get('rg.pattern') == 'TODO'
    assert seen == [['*.py', '*.md']]

    res = cmd.parse(['rg', '--extensions', 'py, html ,css'])
    assert res.get('rg.extensions') == ['py', 'html', 'css']

    res = cmd.parse('rg -im5 "two words"')
    assert res.errors == []
    assert res.get('rg.ignore-case') is True
    assert res.get('rg.max-count') == 5
    assert res.get('rg.pattern') == 'two words'


def test_search_errors():
    assert _error_types(['rg', 'TODO', '--unknown-flag']) == [ParseErrorType.UNMATCHED_TOKEN]

    errors = get_search_command().parse(['rg', '--max-count', 'not-an-int']).errors
    assert [type(e) for e in errors] == [CoercionError]
    assert errors[0].position == len('rg --max-count ')

    # max-count should have an arg but doesn't
    assert (_error_types(['rg', '--max-count', '--glob', '*'])
            == [ParseErrorType.ARG_INCORRECT_VALUE_NUMBER])
    assert _error_types(['rg', '--max-count']) == [ParseErrorType.ARG_INCORRECT_VALUE_NUMBER]

    assert (_error_types(['rg', '--max-count', '4', '--max-count', '5'])
            == [ParseErrorType.ARG_INCORRECT_USAGES_COUNT])

    assert _error_types(['nonexistent-subcommand']) == [ParseErrorType.UNMATCHED_TOKEN]

    assert _error_types(['-dddd']) == [ParseErrorType.ARG_INCORRECT_USAGES_COUNT]

    assert _error_types(['rg', '-is']) == [ParseErrorType.MULTIPLE_ARGS_IN_EXCLUSIVE_GROUP_USED]

    with raises(ArgumentParseError, match='expected one of'):
        get_search_command().parse(['rg', '--filetype', 'c']).check()


def test_search_parse_errors():
    cmd = get_search_command()
    res = cmd.parse(['splorch', 'splarch'])
    assert [e.position for e in res.errors] == [0, 8]
    with raises(ArgumentParseError):
        res.check()


def test_search_ls():
    res = get_search_command().parse(['ls', 'a', 'b'])
    assert res.get('ls.file_paths') == ['a', 'b']
    assert res.subcmds == ('ls',)

    # rg is only a subcommand of the root
    res = get_search_command().parse(['-V', 'ls', 'rg'])
    assert res.get('ls.file_paths') == ['rg']
