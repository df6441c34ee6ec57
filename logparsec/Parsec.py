from typing import (Any, Callable, Generic, List, NamedTuple, Optional, Protocol,
                    Sequence, Tuple, TypeVar, Union, runtime_checkable)

from .Errors import GrammarError
from .Logger import Logger, Msg
from .Stream import CharStream, Stream, TokenStream

S = TypeVar('S', bound=Stream)  # Stream kind a parser consumes
T = TypeVar('T')  # Generic type for parser results
U = TypeVar('U')

Reply = Optional[Tuple[S, T]]
# (advanced_stream, value) on success, None on failure. Why a parse failed
# is never part of the reply; it lives in the Logger.

ParseFn = Callable[[S, Logger], Reply]


@runtime_checkable
class Parsable(Protocol[S, T]):
    """
    Anything with a `parse(stream, logger)` method.

    A parse function must not mutate the stream it is given. On success it
    returns a (possibly advanced) stream together with the value; on failure
    it returns None. It may append diagnostics to `logger` either way.
    """

    def parse(self, stream: S, logger: Logger) -> Reply:
        ...


class Parser(Generic[S, T]):
    """
    An immutable, reusable wrapper around a parse function.

    `parse` is the parse function itself, stored on the instance, so a parser
    nested inside another adds no stack frame of its own. Deeply nested input
    is then limited by the combinators' frames only.
    """

    parse: ParseFn

    def __init__(self, parse_fn: ParseFn):
        self.parse = parse_fn

    def __call__(self, stream: S, logger: Logger) -> Reply:
        return self.parse(stream, logger)

    def exec(self, stream: S, logger: Optional[Logger] = None) -> Tuple[Reply, Logger]:
        """
        Run the parser, returning the reply and every diagnostic logged on the way.

        Raises GrammarError if the reply is neither None nor a (stream, value)
        pair, which means a hand-written parse function is broken.
        """
        if logger is None:
            logger = Logger()
        reply = self.parse(stream, logger)
        if reply is not None and not (isinstance(reply, tuple) and len(reply) == 2):
            raise GrammarError(
                f"parse function {self.parse!r} returned {reply!r}; "
                "expected None or a (stream, value) pair")
        return reply, logger

    # Functor / Applicative / Monad

    def map(self, f: Callable[[T], U]) -> 'Parser[S, U]':
        from .Prim import map
        return map(self, f)

    def map_option(self, f: Callable[[T], Optional[U]]) -> 'Parser[S, U]':
        from .Prim import map_option
        return map_option(self, f)

    def map_result(self, f: Callable[[T], U]) -> 'Parser[S, U]':
        from .Prim import map_result
        return map_result(self, f)

    def compose(self, pv: 'Parsable[S, Any]') -> 'Parser[S, Any]':
        from .Prim import compose
        return compose(self, pv)

    def bind(self, f: Callable[[T], 'Parsable[S, U]']) -> 'Parser[S, U]':
        from .Prim import bind
        return bind(self, f)

    # Alternative / Replicative / Sequential

    def or_(self, other: 'Parsable[S, T]') -> 'Parser[S, T]':
        from .Combinators import or_
        return or_(self, other)

    def and_(self, other: 'Parsable[S, U]') -> 'Parser[S, Tuple[T, U]]':
        from .Combinators import and_
        return and_(self, other)

    def left(self, other: 'Parsable[S, Any]') -> 'Parser[S, T]':
        from .Combinators import left
        return left(self, other)

    def right(self, other: 'Parsable[S, U]') -> 'Parser[S, U]':
        from .Combinators import right
        return right(self, other)

    def many(self) -> 'Parser[S, List[T]]':
        from .Combinators import many
        return many(self)

    def some(self) -> 'Parser[S, List[T]]':
        from .Combinators import some
        return some(self)

    def optional(self) -> 'Parser[S, Optional[T]]':
        from .Combinators import optional
        return optional(self)

    # Diagnostics

    def info(self, msg: str) -> 'Parser[S, T]':
        from .Diagnostics import info
        return info(self, msg)

    def warn(self, msg: str) -> 'Parser[S, T]':
        from .Diagnostics import warn
        return warn(self, msg)

    def error(self, msg: str) -> 'Parser[S, T]':
        from .Diagnostics import error
        return error(self, msg)

    def label(self, name: str) -> 'Parser[S, T]':
        from .Diagnostics import label
        return label(self, name)

    def inspect(self, f: Optional[Callable[[S, Reply], Any]] = None) -> 'Parser[S, T]':
        from .Diagnostics import inspect
        return inspect(self, f)

    def recover(self, default: T) -> 'Parser[S, T]':
        from .Diagnostics import recover
        return recover(self, default)

    def trim(self) -> 'Parser[CharStream, T]':
        from .Char import trim
        return trim(self)

    # Operator sugar: p | q, p & q, p << q, p >> q

    def __or__(self, other: 'Parsable[S, T]') -> 'Parser[S, T]':
        return self.or_(other)

    def __and__(self, other: 'Parsable[S, U]') -> 'Parser[S, Tuple[T, U]]':
        return self.and_(other)

    def __lshift__(self, other: 'Parsable[S, Any]') -> 'Parser[S, T]':
        return self.left(other)

    def __rshift__(self, other: 'Parsable[S, U]') -> 'Parser[S, U]':
        return self.right(other)


def as_parser(p: Union[Parser[S, T], Parsable[S, T]]) -> Parser[S, T]:
    """Wrap any Parsable into a Parser so the method forms are available."""
    if isinstance(p, Parser):
        return p
    if not isinstance(p, Parsable):
        raise GrammarError(f"{p!r} is not parsable (it has no parse method)")
    return Parser(p.parse)


class Result(NamedTuple):
    """
    Outcome of `execute`.

    `value` is None on failure, but a parser may also succeed with None
    (`optional`, `eof`, `spaces`), so `ok` is what tells the two apart.
    """
    value: Any
    messages: List[Msg]
    ok: bool


def execute(parser: Parsable[Any, T],
            input_data: Union[str, Sequence[Any], Stream]) -> Result:
    """
    Run `parser` over `input_data` with a fresh Logger.

    Returns the result value (None on failure), the diagnostics in the order
    they were logged, and whether the parse succeeded. `input_data` may be
    text, any other sequence of tokens, or a prepared Stream.
    """
    if isinstance(input_data, Stream):
        stream = input_data
    elif isinstance(input_data, str):
        stream = CharStream(input_data)
    else:
        stream = TokenStream(input_data)
    reply, logger = as_parser(parser).exec(stream)
    if reply is None:
        return Result(None, list(logger), False)
    return Result(reply[1], list(logger), True)
