import sys
import logging

from lariat import (Command,
                    StringsArgument,
                    Argument,
                    ArgumentGroup,
                    BooleanArgument,
                    CounterArgument,
                    FloatArgument,
                    ChoicesArgument,
                    PairArgument,
                    IntArgument)


class FloatsArgument(StringsArgument):
    "one or more decimal numbers"
    def parse_values(self, values):
        ret = []
        for i, value in enumerate(values):
            try:
                ret.append(float(value))
            except ValueError:
                self.add_error('invalid decimal value: %r' % value, i)
        return None if self.errors else ret


def print_errors(res, stream=sys.stderr):
    "print each error under a copy of the input, with a caret at its position"
    line = ' '.join(res.argv) if not isinstance(res.argv, str) else res.argv
    for err in res.errors:
        stream.write('%s: %s\n' % (err.level.name.lower(), err.message))
        if err.has_position:
            stream.write('    %s\n    %s^\n' % (line, ' ' * err.position))


def get_calc_command():
    cmd = Command('calc', doc='Does a bit of arithmetic. No sweat.')
    cmd.add(['verbose', 'v'], CounterArgument(max_count=3))
    cmd.add('help', BooleanArgument, allow_unique=True)

    sum_subcmd = Command('sum', doc='Add up numbers.')
    sum_subcmd.add('num', FloatsArgument, positional=True, obligatory=True)
    cmd.add(sum_subcmd)

    subt_subcmd = Command(['subtract', 'sub'], doc='Subtract one number from another.')
    subt_subcmd.add('operands', PairArgument(FloatArgument(), FloatArgument()),
                    positional=True, obligatory=True)
    cmd.add(subt_subcmd)

    round_subcmd = Command('round')
    round_subcmd.add('value', FloatArgument, positional=True, obligatory=True)
    round_subcmd.add(ArgumentGroup('mode', exclusive=True, members=[
        Argument(['digits', 'd'], IntArgument),
        Argument(['to', 't'], ChoicesArgument(['tens', 'hundreds']))]))
    cmd.add(round_subcmd)

    return cmd


def main(argv=None):
    cmd = get_calc_command()
    res = cmd.parse(argv)
    if res['verbose']:
        logging.basicConfig(level=logging.DEBUG)
        res = cmd.parse(argv)

    if res['help']:
        print('usage: calc [-v] (sum | subtract | round) ...')
        return 0
    if res.errors:
        print_errors(res)
    if res.has_exit_errors:
        return 2

    if res.subcmds == ('sum',):
        print(sum(res.get('sum.num')))
    elif res.subcmds == ('subtract',):
        first, second = res.get('subtract.operands')
        print(first - second)
    elif res.subcmds == ('round',):
        value = res.get('round.value')
        if res.get('round.to') == 'tens':
            print(round(value, -1))
        elif res.get('round.to') == 'hundreds':
            print(round(value, -2))
        else:
            print(round(value, res.get('round.digits') or 0))
    return 0


if __name__ == '__main__':
    sys.exit(main())
