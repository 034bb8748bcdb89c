"""The Parser walks the Token list for one Command, matching names,
feeding values to arguments, and handing over to a subcommand when
one is named. At each token, the order of preference is:

1. a subcommand name
2. a named argument (``--name``, ``--name=value``, ``-abc``)
3. a value for the next unused positional argument

Named and positional arguments take values greedily, up to the
maximum of their type's arity, stopping early at anything that is a
known argument or subcommand name of the current command.

The Parser never raises on bad input, every problem is recorded in
its ``errors`` list and parsing carries on.
"""

import logging
from collections import OrderedDict

from lariat.tokens import TokenType
from lariat.errors import ParseError


log = logging.getLogger(__name__)


class Parser(object):
    """Parses the *tokens* belonging to *command*. Created fresh for
    each command reached during each parse.
    """
    def __init__(self, command, tokens):
        self.command = command
        self.tokens = tokens
        self.errors = []
        self.invoked_subcommand = None
        self.subcommand_index = -1
        self._index = 0

    def add_error(self, error):
        self.errors.append(error)
        return error

    def parse(self, start=0):
        """Consume tokens from index *start*, until the end or until a
        subcommand name. Returns the index of the subcommand token, or
        the number of tokens if none was found.
        """
        tokens = self.tokens
        self._index = start
        while self._index < len(tokens):
            index = self._index
            token = tokens[index]

            if token.type is TokenType.VALUE:
                subcmd = self.command.get_subcommand(token.text)
                if subcmd is not None:
                    self.invoked_subcommand = subcmd
                    self.subcommand_index = index
                    log.debug('%r: handing over to subcommand %r at token %s',
                              self.command.name, subcmd.name, index)
                    return index
            elif token.type is TokenType.ARGUMENT_NAME:
                arg = self.command.get_argument(token.text)
                if arg is not None:
                    self._index += 1
                    self._execute_argument(arg, index)
                    continue
            elif token.type is TokenType.ARGUMENT_NAME_WITH_VALUE:
                name, _, value = token.text.partition('=')
                arg = self.command.get_argument(name)
                if arg is not None:
                    self._index += 1
                    self._execute_argument(arg, index, [value],
                                           [token.position + len(name) + 1])
                    continue
            elif token.type is TokenType.ARGUMENT_NAME_LIST:
                if self._parse_name_list(token, index):
                    continue

            self._parse_value(token, index)

        return len(tokens)

    def _parse_name_list(self, token, index):
        """Handle ``-abc``. An argument named ``abc`` wins, otherwise each
        character is a single-character argument. Returns False if the
        token doesn't start with a known name, so it can be treated as
        a value (e.g., ``-5``).
        """
        arg = self.command.get_argument(token.text)
        if arg is not None:
            self._index += 1
            self._execute_argument(arg, index)
            return True

        prefix, chars = token.text[0], token.text[1:]
        if self.command.get_char_argument(chars[0], prefix) is None:
            return False

        self._index += 1
        for i, char in enumerate(chars):
            arg = self.command.get_char_argument(char, prefix)
            if arg is None:
                self.add_error(ParseError.from_unmatched_name(token, index, char, i + 1))
                break
            if arg.arg_type.arity.max == 0:
                self._invoke(arg, [], [], index)
                continue
            # the rest of the token, if any, is the first value (-n5)
            rest = chars[i + 1:]
            if rest:
                self._execute_argument(arg, index, [rest], [token.position + i + 2])
            else:
                self._execute_argument(arg, index)
            break
        return True

    def _parse_value(self, token, index):
        self._index += 1
        arg = self._get_next_positional()
        if arg is None:
            self.add_error(ParseError.from_unmatched_token(token, index))
            return
        self._execute_argument(arg, index, [token.text], [token.position])

    def _get_next_positional(self):
        for arg in self.command.arguments:
            if arg.positional and arg.usage_count == 0:
                return arg
        return None

    def _execute_argument(self, arg, index, values=None, positions=None):
        """Greedily collect values for *arg* from the current token on, and
        run it. *index* is the token of the use, *values* and
        *positions* are any values already taken from it.
        """
        values = list(values or [])
        positions = list(positions or [])
        arity = arg.arg_type.arity
        tokens = self.tokens

        while arity.allows_more(len(values)) and self._index < len(tokens):
            token = tokens[self._index]
            if self._is_boundary(token):
                break
            values.append(token.text)
            positions.append(token.position)
            self._index += 1

        self._invoke(arg, values, positions, index)

    def _invoke(self, arg, values, positions, index):
        position = self.tokens[index].position
        within_usage = arg.add_usage()
        log.debug('%r: using argument %s with values %r',
                  self.command.name, arg.label, values)
        if not within_usage:
            self.add_error(ParseError.from_usages_count(arg, position, index))
            return
        if len(values) not in arg.arg_type.arity:
            self.add_error(ParseError.from_value_number(arg, len(values), position, index))
            return
        arg.parse_values(values, positions, position)

    def _is_boundary(self, token):
        "Whether *token* ends the values of the argument being parsed."
        cmd, ttype = self.command, token.type
        if ttype is TokenType.LITERAL:
            return False
        if ttype is TokenType.VALUE:
            return cmd.get_subcommand(token.text) is not None
        if ttype is TokenType.ARGUMENT_NAME:
            return cmd.get_argument(token.text) is not None
        if ttype is TokenType.ARGUMENT_NAME_WITH_VALUE:
            return cmd.get_argument(token.text.partition('=')[0]) is not None
        if ttype is TokenType.ARGUMENT_NAME_LIST:
            return (cmd.get_argument(token.text) is not None
                    or cmd.get_char_argument(token.text[1], token.text[0]) is not None)
        return False

    def finish(self):
        """Finalize every argument of the command, in declaration order,
        and check for missing obligatory subcommands. Returns an
        OrderedDict of argument names to final values.
        """
        cmd = self.command
        ret = OrderedDict()
        for arg in cmd.arguments:
            ret[arg.name] = arg.finish_parsing(self)

        if self.invoked_subcommand is None:
            missing = [c for c in cmd.subcommands if c.obligatory]
            if missing:
                self.add_error(ParseError.from_obligatory_command(cmd, missing))
        return ret
