# Core
from .Stream import Position, Stream, CharStream, TokenStream
from .Logger import Severity, MsgBody, Msg, Info, Warn, Error, Logger
from .Parsec import Parsable, Parser, Result, as_parser, execute
from .Errors import LogparsecError, GrammarError

# Functor / Applicative / Monad
from .Prim import pure, map, map_option, map_result, compose, bind, token

# Alternative / Replicative / Sequential
from .Combinators import (
    empty, or_, many, some, optional, and_, left, right, mid,
    choice, count, sep_by, sep_by1, end_by, chainl1, chainr1,
    look_ahead, not_followed_by, eof,
)

# Recursive grammars
from .Lazy import Lazy, Fix, lazy, fix

# Diagnostics & recovery
from .Diagnostics import info, warn, error, label, inspect, recover, trace

# Characters
from .Char import (
    satisfy, char, literal, regex, space, spaces, trim,
    digit, letter, any_char, one_of, none_of,
)

# Expression Parsing
from .Expr import build_expression_parser, Operator, Infix, Prefix, Postfix, Assoc
