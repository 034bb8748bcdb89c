"""The Tokenizer turns raw input into a flat list of Tokens. It knows
which characters act as argument prefixes, but nothing else about the
schema: deciding whether ``-abc`` is one name or three, or whether
``build`` is a subcommand, is left to the Parser.
"""

import logging

from lariat.tokens import Token, TokenType
from lariat.errors import TokenizeError, TokenizeErrorType


log = logging.getLogger(__name__)

QUOTE_CHARS = '"\''
ESCAPE_CHAR = '\\'
END_OF_OPTIONS = '--'
# within double quotes, the backslash only escapes these
_DQUOTE_ESCAPABLE = '"\\'


class Tokenizer(object):
    """Splits raw input into Tokens.

    Args:
       prefix_chars: An iterable of single characters which start
          argument names. Defaults to ``('-',)``.

    The tokens and errors of the most recent :meth:`tokenize` call
    remain available as the ``tokens`` and ``errors`` attributes.
    """
    def __init__(self, prefix_chars=('-',)):
        prefix_chars = tuple(prefix_chars)
        if not prefix_chars:
            raise ValueError('expected at least one prefix character')
        for pc in prefix_chars:
            if not isinstance(pc, str) or len(pc) != 1 or pc.isspace():
                raise ValueError('expected prefix characters to be single'
                                 ' non-whitespace characters, not: %r' % (pc,))
            if pc in QUOTE_CHARS or pc == ESCAPE_CHAR:
                raise ValueError('quote and escape characters cannot be'
                                 ' used as prefix characters: %r' % pc)
        self.prefix_chars = prefix_chars
        self.tokens = []
        self.errors = []
        self._literal_mode = False

    def tokenize(self, raw):
        """Tokenize *raw*, either a single string, which is split on
        unquoted whitespace, or a sequence of already-split strings.

        Returns a tuple of (tokens, errors). Never raises on malformed
        input: unclosed quotes and dangling escapes are reported as
        TokenizeErrors and the rest of the word is taken literally.
        """
        self.tokens, self.errors = [], []
        self._literal_mode = False

        if isinstance(raw, str):
            words = self._split_string(raw)
        else:
            words = self._split_sequence(raw)

        for text, position, quoted in words:
            self._add_word(text, position, quoted)

        log.debug('tokenized input into %s tokens (%s errors)',
                  len(self.tokens), len(self.errors))
        return self.tokens, self.errors

    def _split_sequence(self, argv):
        ret = []
        position = 0
        for arg in argv:
            if not isinstance(arg, str):
                raise TypeError('expected sequence of strings, not element: %r' % (arg,))
            ret.append((arg, position, False))
            # offsets are those of the arguments joined by single spaces
            position += len(arg) + 1
        return ret

    def _split_string(self, raw):
        ret = []
        cur, start, quoted = [], None, False
        quote_char, quote_pos = None, -1
        i, len_raw = 0, len(raw)

        while i < len_raw:
            char = raw[i]
            if quote_char:
                if char == quote_char:
                    quote_char = None
                elif char == ESCAPE_CHAR and quote_char == '"':
                    if i + 1 < len_raw and raw[i + 1] in _DQUOTE_ESCAPABLE:
                        i += 1
                        cur.append(raw[i])
                    else:
                        # kept as is, the next character is appended normally
                        self.errors.append(TokenizeError.from_parse(
                            TokenizeErrorType.INVALID_ESCAPE, i, raw[i:i + 2]))
                        cur.append(char)
                else:
                    cur.append(char)
            elif char.isspace():
                if start is not None:
                    ret.append((''.join(cur), start, quoted))
                    cur, start, quoted = [], None, False
            else:
                if start is None:
                    start, quoted = i, char in QUOTE_CHARS
                if char in QUOTE_CHARS:
                    quote_char, quote_pos = char, i
                elif char == ESCAPE_CHAR:
                    if i + 1 < len_raw:
                        i += 1
                        cur.append(raw[i])
                    else:
                        self.errors.append(TokenizeError.from_parse(
                            TokenizeErrorType.INVALID_ESCAPE, i))
                        cur.append(char)
                else:
                    cur.append(char)
            i += 1

        if quote_char:
            self.errors.append(TokenizeError.from_parse(
                TokenizeErrorType.STRING_NOT_CLOSED, quote_pos, raw[quote_pos:]))
        if start is not None:
            ret.append((''.join(cur), start, quoted))
        return ret

    def _add_word(self, text, position, quoted):
        if quoted or self._literal_mode:
            self.tokens.append(Token(TokenType.LITERAL, text, position))
            return
        if text == END_OF_OPTIONS:
            self._literal_mode = True
            return
        self.tokens.append(Token(self.classify(text), text, position))

    def classify(self, text):
        "Get the TokenType of a single unquoted word."
        if len(text) < 2 or text[0] not in self.prefix_chars:
            return TokenType.VALUE
        prefix = text[0]
        if '=' in text:
            name_part = text[:text.index('=')]
            if name_part.lstrip(prefix):
                return TokenType.ARGUMENT_NAME_WITH_VALUE
            return TokenType.VALUE
        if text[1] != prefix and len(text) > 2:
            return TokenType.ARGUMENT_NAME_LIST
        return TokenType.ARGUMENT_NAME


def tokenize(raw, prefix_chars=('-',)):
    "Convenience function returning the (tokens, errors) for *raw*."
    return Tokenizer(prefix_chars).tokenize(raw)
