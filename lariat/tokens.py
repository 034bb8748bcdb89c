from enum import Enum
from collections import namedtuple


class TokenType(Enum):
    ARGUMENT_NAME = 'argument_name'  # -a, --name
    ARGUMENT_NAME_LIST = 'argument_name_list'  # -abc
    ARGUMENT_NAME_WITH_VALUE = 'argument_name_with_value'  # --name=value
    VALUE = 'value'
    SUB_COMMAND = 'sub_command'  # only ever assigned by the Parser
    LITERAL = 'literal'  # quoted, or after a bare --


_TokenBase = namedtuple('_TokenBase', ['type', 'text', 'position'])


class Token(_TokenBase):
    """A single lexical unit of the input. Immutable, like the tuple
    it is.

    Args:
       type (TokenType): What the Tokenizer took the text to be.
       text (str): The unquoted, unescaped text.
       position (int): Absolute offset of the token's first character
          in the raw input.
    """
    __slots__ = ()

    def with_type(self, type):
        "Return a copy of this token, reclassified as *type*."
        return self._replace(type=type)

    def __repr__(self):
        return 'Token(%s, %r, %r)' % (self.type.name, self.text, self.position)
