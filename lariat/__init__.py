from lariat.errors import (LariatException,
                           SchemaError,
                           ArgumentAlreadyExists,
                           ErrorIndexError,
                           ArgumentParseError,
                           ErrorLevel,
                           LariatError,
                           TokenizeError,
                           TokenizeErrorType,
                           ParseError,
                           ParseErrorType,
                           CoercionError,
                           CustomError)

from lariat.utils import Range
from lariat.tokens import Token, TokenType
from lariat.tokenizer import Tokenizer, tokenize
from lariat.types import (ArgumentType,
                          StringArgument,
                          IntArgument,
                          FloatArgument,
                          BooleanArgument,
                          CounterArgument,
                          StringsArgument,
                          CallableArgument,
                          ChoicesArgument,
                          ListArgument,
                          FileArgument,
                          StdinArgument,
                          PairArgument)
from lariat.argument import Argument, ArgumentGroup
from lariat.parser import Parser
from lariat.collector import ErrorsCollector, collect_errors
from lariat.command import Command, ParseResult
