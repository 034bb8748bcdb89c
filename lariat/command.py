import sys
import logging
from collections import OrderedDict

from boltons.iterutils import unique

from lariat.tokens import TokenType
from lariat.parser import Parser
from lariat.argument import Argument, ArgumentGroup
from lariat.tokenizer import Tokenizer
from lariat.collector import ErrorsCollector
from lariat.utils import process_command_name, format_nonexp_repr
from lariat.errors import (CustomError,
                           SchemaError,
                           ArgumentAlreadyExists,
                           ArgumentParseError,
                           ErrorLevel,
                           NO_POSITION)


log = logging.getLogger(__name__)

DEFAULT_DISPLAY_LEVEL = ErrorLevel.INFO
DEFAULT_EXIT_LEVEL = ErrorLevel.ERROR


class Command(object):
    """The central type of lariat. Instantiate a Command, populate it
    with arguments, groups, and subcommands, and then call
    :meth:`Command.parse()` with a string or a list of strings.

    Args:
       names: A name, or list of names, for the command. Names only
          matter when this command is used as a subcommand. The first
          name is the canonical one.
       doc (str): A description of the command, for help generation.
       arguments (list): Argument instances to add. Arguments can
          always be added later with the .add() method.
       subcommands (list): Command instances to add as subcommands.
       groups (list): ArgumentGroup instances to add.
       display_level (ErrorLevel): The minimum level of errors to
          report. Defaults to the parent command's, or INFO.
       exit_level (ErrorLevel): The minimum level of errors which make
          the parse fail. Defaults to the parent command's, or ERROR.
       obligatory (bool): As a subcommand, whether its parent command
          requires one of its obligatory subcommands to be used.
       allow_abbrev (bool): Whether subcommands of this command can
          be given by an unambiguous prefix of their name, e.g.,
          ``inst`` for ``install``. Defaults to True.
       color: An opaque display hint, carried for help formatters.
    """
    def __init__(self, names, doc=None, arguments=None, subcommands=None, groups=None,
                 display_level=None, exit_level=None, obligatory=False,
                 allow_abbrev=True, color=None):
        if isinstance(names, str):
            names = [names]
        names = [process_command_name(n) for n in names or []]
        if not names:
            raise SchemaError('expected at least one name for command')
        if len(unique(names)) != len(names):
            raise SchemaError('duplicate names for command: %r' % names)
        self.names = names
        self.doc = doc
        self._display_level = ErrorLevel(display_level) if display_level is not None else None
        self._exit_level = ErrorLevel(exit_level) if exit_level is not None else None
        self.obligatory = bool(obligatory)
        self.allow_abbrev = bool(allow_abbrev)
        self.color = color

        self.parent = None
        self.arguments = []
        self.subcommands = []
        self.groups = []

        self.tokenizer = None
        self.parser = None
        self.custom_errors = []

        for arg in arguments or []:
            self.add_argument(arg)
        for group in groups or []:
            self.add_group(group)
        for subcmd in subcommands or []:
            self.add_command(subcmd)

    @property
    def name(self):
        return self.names[0]

    @property
    def display_level(self):
        if self._display_level is not None:
            return self._display_level
        if self.parent is not None:
            return self.parent.display_level
        return DEFAULT_DISPLAY_LEVEL

    @display_level.setter
    def display_level(self, level):
        self._display_level = ErrorLevel(level) if level is not None else None

    @property
    def exit_level(self):
        if self._exit_level is not None:
            return self._exit_level
        if self.parent is not None:
            return self.parent.exit_level
        return DEFAULT_EXIT_LEVEL

    @exit_level.setter
    def exit_level(self, level):
        self._exit_level = ErrorLevel(level) if level is not None else None

    @property
    def root(self):
        cmd = self
        while cmd.parent is not None:
            cmd = cmd.parent
        return cmd

    def add(self, *a, **kw):
        """Add an argument, group, or subcommand to this Command.

        If the first argument is an instance of Argument,
        ArgumentGroup, or Command, it is added as-is. Otherwise the
        arguments are the same as the Argument constructor, and will
        be used to create a new Argument. Returns the added object.
        """
        target = a[0]
        if isinstance(target, Command):
            return self.add_command(target)
        if isinstance(target, ArgumentGroup):
            return self.add_group(target)
        if not isinstance(target, Argument):
            try:
                target = Argument(*a, **kw)
            except TypeError as te:
                raise ValueError('expected Command, ArgumentGroup, Argument, or'
                                 ' Argument parameters, not: %r, %r (got %r)' % (a, kw, te))
        return self.add_argument(target)

    def add_argument(self, arg):
        if not isinstance(arg, Argument):
            raise TypeError('expected Argument instance, not: %r' % (arg,))
        for name in arg.names:
            for existing in self.arguments:
                if name in existing.names:
                    raise ArgumentAlreadyExists('duplicate definition for argument name %r'
                                                ' in command %r' % (name, self.name))
        arg.set_parent_command(self)
        self.arguments.append(arg)
        return arg

    def add_group(self, group):
        """Add an ArgumentGroup, and any of its arguments not yet on this
        Command. Arguments of the group must belong to this Command.
        """
        if not isinstance(group, ArgumentGroup):
            raise TypeError('expected ArgumentGroup instance, not: %r' % (group,))
        group.set_parent_command(self)
        if group not in self.groups:
            self.groups.append(group)
        for sub_group in group.groups:
            self.add_group(sub_group)
        for arg in group.arguments:
            if arg.parent_command is None:
                self.add_argument(arg)
            elif arg.parent_command is not self:
                raise SchemaError('argument %s of group %r belongs to command %r, not %r'
                                  % (arg.label, group.name, arg.parent_command.name, self.name))
        return group

    def add_command(self, subcmd):
        """Add a Command, and all of its subcommands, as a subcommand of
        this Command. A Command can only have one parent.
        """
        if not isinstance(subcmd, Command):
            raise TypeError('expected Command instance, not: %r' % (subcmd,))
        if subcmd.parent is not None:
            raise SchemaError('command %r is already a subcommand of %r'
                              % (subcmd.name, subcmd.parent.name))
        if subcmd is self or subcmd is self.root:
            raise SchemaError('command %r cannot be its own subcommand' % subcmd.name)
        for name in subcmd.names:
            for existing in self.subcommands:
                if name in existing.names:
                    raise SchemaError('conflicting subcommand name: %r' % name)
        subcmd.parent = self
        self.subcommands.append(subcmd)
        return subcmd

    def get_argument(self, text):
        "Get the argument whose prefixed name is *text*, or None."
        for arg in self.arguments:
            if arg.matches_name(text):
                return arg
        return None

    def get_char_argument(self, char, prefix=None):
        "Get the argument with the single-character name *char*, or None."
        for arg in self.arguments:
            if arg.matches_char(char, prefix):
                return arg
        return None

    def get_subcommand(self, text):
        """Get the subcommand named *text*. Falls back to the only
        subcommand with a name starting with *text*, if abbreviations
        are allowed. Returns None if there is no such subcommand.
        """
        for subcmd in self.subcommands:
            if text in subcmd.names:
                return subcmd
        if not self.allow_abbrev or not text:
            return None
        candidates = [c for c in self.subcommands
                      if any([n.startswith(text) for n in c.names])]
        if len(candidates) == 1:
            return candidates[0]
        return None

    def iter_commands(self):
        "Yield this command and all its subcommands, depth-first"
        yield self
        for subcmd in self.subcommands:
            for cmd in subcmd.iter_commands():
                yield cmd

    def get_prefix_chars(self):
        "All the argument prefix characters in use in this command tree"
        ret = [arg.prefix for cmd in self.iter_commands() for arg in cmd.arguments]
        return tuple(unique(ret)) or (Argument.default_prefix,)

    def unique_argument_received_value(self):
        return any([arg.allow_unique and arg.usage_count for arg in self.arguments])

    def add_error(self, message, level=ErrorLevel.ERROR, position=NO_POSITION):
        "Attach a custom error to this command."
        err = CustomError(message, level=level, position=position)
        self.custom_errors.append(err)
        return err

    def reset_state(self):
        """Clear everything a previous parse left behind, in this command
        and all of its subcommands.
        """
        self.tokenizer = None
        self.parser = None
        self.custom_errors = []
        for arg in self.arguments:
            arg.reset_state()
        for group in self.groups:
            group.reset_state()
        for subcmd in self.subcommands:
            subcmd.reset_state()

    def parse(self, raw=None):
        """Parse *raw* input and return a :class:`ParseResult`. *raw* can
        be a single string, which is split like a shell would, or a
        list of strings such as ``sys.argv[1:]``, which is the default.

        This method never raises on invalid input. Check the returned
        result's ``errors`` and ``has_exit_errors``, or call its
        ``check()`` method.
        """
        if raw is None:
            raw = sys.argv[1:]
        self.reset_state()

        self.tokenizer = Tokenizer(self.get_prefix_chars())
        tokens, _ = self.tokenizer.tokenize(raw)

        result = self._parse_tokens(tokens, 0)
        for cmd in result.iter_commands():
            for arg in cmd.arguments:
                arg.invoke_callbacks()

        # record the subcommand classification the parsers made
        classified = list(tokens)
        for res in result.iter_results():
            index = res.command.parser.subcommand_index
            if index >= 0:
                classified[index] = classified[index].with_type(TokenType.SUB_COMMAND)
        result.tokens = tuple(classified)
        result.argv = raw

        log.debug('parsed %r: subcommands %r, %s parse errors', self.name, result.subcmds,
                  sum([len(r.command.parser.errors) for r in result.iter_results()]))
        return result

    def _parse_tokens(self, tokens, start):
        parser = self.parser = Parser(self, tokens)
        index = parser.parse(start)
        values = parser.finish()

        subcmd_result = None
        if parser.invoked_subcommand is not None:
            subcmd_result = parser.invoked_subcommand._parse_tokens(tokens, index + 1)
        return ParseResult(self, values, subcmd=subcmd_result)

    def __repr__(self):
        return format_nonexp_repr(self, ['name'], ['doc'])


class ParseResult(object):
    """The result of :meth:`Command.parse`, instances of this type store
    the final value of each argument of the command, and the result
    of the subcommand used, if any.

    Args:
       command (Command): The Command which produced this result.
       values (OrderedDict): Mapping of each argument's first name to
          its final value.
       subcmd (ParseResult): The result of the subcommand used, or None.

    The root result also has ``tokens``, the classified token list,
    and ``argv``, the raw input.
    """
    def __init__(self, command, values, subcmd=None):
        self.command = command
        self.name = command.name
        self.values = OrderedDict(values)
        self.subcmd = subcmd
        self.tokens = ()
        self.argv = ()

    @property
    def subcmds(self):
        "Tuple of the names of the subcommands used, outermost first"
        ret, res = [], self.subcmd
        while res is not None:
            ret.append(res.name)
            res = res.subcmd
        return tuple(ret)

    def iter_results(self):
        res = self
        while res is not None:
            yield res
            res = res.subcmd

    def iter_commands(self):
        for res in self.iter_results():
            yield res.command

    def __getitem__(self, name):
        arg = self._lookup_argument(name)
        if arg is None:
            raise KeyError(name)
        return self.values[arg.name]

    def __contains__(self, name):
        return self._lookup_argument(name) is not None

    def _lookup_argument(self, name):
        name = name.lstrip(''.join(self.command.get_prefix_chars()))
        for arg in self.command.arguments:
            if name in arg.names:
                return arg
        return None

    def get(self, path, default=None):
        """Get a value by *path*, either an argument name, or a dotted
        string (or tuple) of subcommand names ending with an argument
        name, e.g., ``'install.force'``. Returns *default* if a
        subcommand on the path wasn't used or there is no such
        argument.
        """
        if isinstance(path, str):
            path = path.split('.')
        path = list(path)
        res = self
        for subcmd_name in path[:-1]:
            res = res.subcmd
            if res is None or subcmd_name not in res.command.names:
                return default
        try:
            return res[path[-1]]
        except KeyError:
            return default

    @property
    def errors(self):
        """The displayable errors of the whole parse, ordered by input
        position. Gathered on each access, so that custom errors added
        after the parse are included.
        """
        return ErrorsCollector().collect(self.command)

    @property
    def has_exit_errors(self):
        collector = ErrorsCollector()
        collector.collect(self.command)
        return collector.has_exit_errors

    def check(self):
        """Raise an ArgumentParseError if the parse has errors at or above
        the exit level. Returns this result otherwise, for chaining.
        """
        collector = ErrorsCollector()
        collector.collect(self.command)
        if collector.has_exit_errors:
            raise ArgumentParseError.from_parse(collector.exit_errors)
        return self

    def __repr__(self):
        return format_nonexp_repr(self, ['name', 'subcmds', 'values'])
