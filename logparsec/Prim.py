from typing import Any, Callable, Optional, TypeVar

from .Logger import Error, Logger, MsgBody
from .Parsec import Parsable, Parser, Reply, S, T, U, as_parser
from .Stream import Stream

ElemType = TypeVar('ElemType')


def pure(value: T) -> Parser[Any, T]:
    """Return a parser that succeeds with a value without consuming input."""
    def parse(stream: Stream, logger: Logger) -> Reply:
        return stream, value
    return Parser(parse)


def map(p: Parsable[S, T], f: Callable[[T], U]) -> Parser[S, U]:
    """Apply `f` to the value of a successful parse. Failures pass through untouched."""
    def parse(stream: S, logger: Logger) -> Reply:
        reply = p.parse(stream, logger)
        if reply is None:
            return None
        rest, value = reply
        return rest, f(value)
    return Parser(parse)


def map_option(p: Parsable[S, T], f: Callable[[T], Optional[U]]) -> Parser[S, U]:
    """
    Like `map`, but `f` may reject the value by returning None, which turns
    the parse into a failure that consumes nothing.
    """
    def parse(stream: S, logger: Logger) -> Reply:
        reply = p.parse(stream, logger)
        if reply is None:
            return None
        rest, value = reply
        mapped = f(value)
        if mapped is None:
            return None
        return rest, mapped
    return Parser(parse)


def map_result(p: Parsable[S, T], f: Callable[[T], U]) -> Parser[S, U]:
    """
    Like `map` for a fallible `f`. If `f` raises, the exception message is
    logged as an Error at the position where `p` started and the parse fails.
    """
    def parse(stream: S, logger: Logger) -> Reply:
        reply = p.parse(stream, logger)
        if reply is None:
            return None
        rest, value = reply
        try:
            mapped = f(value)
        except Exception as e:
            logger.add(Error(MsgBody(str(e) or type(e).__name__, stream.position())))
            return None
        return rest, mapped
    return Parser(parse)


def compose(pf: Parsable[S, Callable[[T], U]], pv: Parsable[S, T]) -> Parser[S, U]:
    """Run a function-producing parser, then a value parser, and apply one to the other."""
    def parse(stream: S, logger: Logger) -> Reply:
        reply_f = pf.parse(stream, logger)
        if reply_f is None:
            return None
        stream_f, func = reply_f

        reply_v = pv.parse(stream_f, logger)
        if reply_v is None:
            return None
        stream_v, value = reply_v
        return stream_v, func(value)
    return Parser(parse)


def bind(p: Parsable[S, T], f: Callable[[T], Parsable[S, U]]) -> Parser[S, U]:
    """
    Run `p`, hand its value to `f` and run the parser `f` returns on the rest
    of the input. `f` is never called when `p` fails.
    """
    def parse(stream: S, logger: Logger) -> Reply:
        reply = p.parse(stream, logger)
        if reply is None:
            return None
        rest, value = reply
        next_parser = f(value)
        return as_parser(next_parser).parse(rest, logger)
    return Parser(parse)


def token(test_tok: Callable[[ElemType], Optional[T]],
          show_tok: Callable[[ElemType], str] = repr) -> Parser[Any, T]:
    """
    Parse a single element of any stream kind. `test_tok` returns the value to
    produce, or None to reject the element.
    """
    def parse(stream: Stream, logger: Logger) -> Reply:
        rest = stream.copy()
        tok = rest.next()
        if tok is None:
            logger.add(Error(MsgBody("unexpected end of input.", stream.position())))
            return None
        value = test_tok(tok)
        if value is None:
            logger.add(Error(MsgBody(f"unexpected {show_tok(tok)}.", stream.position())))
            return None
        return rest, value
    return Parser(parse)
