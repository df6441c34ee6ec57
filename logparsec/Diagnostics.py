import logging
from typing import Any, Callable, Optional, Type

from .Logger import Error, Info, Logger, Msg, MsgBody, Warn
from .Parsec import Parsable, Parser, Reply, S, T

log = logging.getLogger('logparsec')


def _preview(stream: Any) -> str:
    rest = stream.as_text()
    return f"{rest[:30]!r}{'...' if len(rest) > 30 else ''}"


def _log_then(kind: Type[Msg], p: Parsable[S, T], msg: str) -> Parser[S, T]:
    def parse(stream: S, logger: Logger) -> Reply:
        logger.add(kind(MsgBody(msg, stream.position())))
        return p.parse(stream, logger)
    return Parser(parse)


# 1. info / warn / error: annotate without changing control flow
def info(p: Parsable[S, T], msg: str) -> Parser[S, T]:
    """Log `msg` as Info at the current position, then run `p` unchanged."""
    return _log_then(Info, p, msg)


def warn(p: Parsable[S, T], msg: str) -> Parser[S, T]:
    """Log `msg` as Warn at the current position, then run `p` unchanged."""
    return _log_then(Warn, p, msg)


def error(p: Parsable[S, T], msg: str) -> Parser[S, T]:
    """Log `msg` as Error at the current position, then run `p` unchanged."""
    return _log_then(Error, p, msg)


# 2. label: name what was expected when p fails
def label(p: Parsable[S, T], name: str) -> Parser[S, T]:
    def parse(stream: S, logger: Logger) -> Reply:
        reply = p.parse(stream, logger)
        if reply is None:
            logger.add(Error(MsgBody(f"expecting {name}.", stream.position())))
        return reply
    return Parser(parse)


# 3. inspect: observe without interfering
def inspect(p: Parsable[S, T], f: Optional[Callable[[S, Reply], Any]] = None) -> Parser[S, T]:
    """
    Call `f(stream, reply)` after `p` runs, where `stream` is where `p`
    started and `reply` is what it returned. The reply is passed on as is.
    Without `f`, a debug record goes to the ``logparsec`` logger.
    """
    def parse(stream: S, logger: Logger) -> Reply:
        reply = p.parse(stream, logger)
        if f is not None:
            f(stream, reply)
        elif reply is None:
            log.debug("failed at %s on %s", stream.position(), _preview(stream))
        else:
            log.debug("%r at %s, rest %s", reply[1], stream.position(), _preview(reply[0]))
        return reply
    return Parser(parse)


# 4. recover: keep going after a failure
def recover(p: Parsable[S, T], default: T) -> Parser[S, T]:
    """
    Turn a failure of `p` into a success with `default`, consuming nothing.
    Diagnostics logged by the failure stay in the logger.
    """
    def parse(stream: S, logger: Logger) -> Reply:
        reply = p.parse(stream, logger)
        if reply is None:
            return stream, default
        return reply
    return Parser(parse)


# 5. trace: follow a parser through the logging module
def trace(name: str, p: Parsable[S, T]) -> Parser[S, T]:
    def parse(stream: S, logger: Logger) -> Reply:
        log.debug("%s: enter at %s on %s", name, stream.position(), _preview(stream))
        reply = p.parse(stream, logger)
        if reply is None:
            log.debug("%s: backtracked at %s", name, stream.position())
        else:
            log.debug("%s: ok %r, now at %s", name, reply[1], reply[0].position())
        return reply
    return Parser(parse)
