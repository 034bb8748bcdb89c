from collections import OrderedDict

from lariat.errors import NO_POSITION


def _error_sort_key(error):
    # positionless errors go last; sorted() is stable, so ties keep
    # their collection order
    if error.position == NO_POSITION:
        return (1, 0)
    return (0, error.position)


class ErrorsCollector(object):
    """Gathers the errors of a whole command tree after a parse.

    For each command, errors are collected from (in order) the
    tokenizer, the parser, each of the command's arguments (their type
    errors, then custom errors), and the command's own custom
    errors. Commands are visited depth-first in declaration order.

    The final list is sorted by absolute input position, with
    positionless errors last.
    """
    def __init__(self):
        self.command_errors = OrderedDict()

    def collect(self, command):
        """Collect the errors of *command* and all of its subcommands, and
        return the ordered list of those at or above each command's
        display level.
        """
        errors = []
        if command.tokenizer is not None:
            errors.extend(command.tokenizer.errors)
        if command.parser is not None:
            errors.extend(command.parser.errors)
        for arg in command.arguments:
            errors.extend(arg.errors)
        errors.extend(command.custom_errors)
        self.command_errors[command] = errors

        for subcmd in command.subcommands:
            self.collect(subcmd)
        return self.errors

    @property
    def errors(self):
        ret = []
        for command, errors in self.command_errors.items():
            display_level = command.display_level
            ret.extend([e for e in errors if e.level >= display_level])
        return sorted(ret, key=_error_sort_key)

    @property
    def exit_errors(self):
        "The errors at or above their command's exit level, in order."
        ret = []
        for command, errors in self.command_errors.items():
            exit_level = command.exit_level
            ret.extend([e for e in errors if e.level >= exit_level])
        return sorted(ret, key=_error_sort_key)

    @property
    def has_exit_errors(self):
        return bool(self.exit_errors)


def collect_errors(command):
    "Convenience function returning the ordered, displayable errors of *command*"
    return ErrorsCollector().collect(command)
