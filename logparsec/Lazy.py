"""Deferred construction for recursive grammars.

A grammar such as ``expr := term '+' expr | term`` cannot be built eagerly:
constructing ``expr`` needs ``expr``. `lazy` and `fix` hold on to a callback
and only call it when the parser is first run, so the grammar is a finite
object and the recursion happens over the input instead.
"""

import logging
from typing import Callable, Optional

from .Errors import GrammarError
from .Logger import Logger
from .Parsec import Parsable, Parser, Reply, S, T

log = logging.getLogger('logparsec')


class Lazy(Parser[S, T]):
    """A parser built by `build()` on the first parse call."""

    def __init__(self, build: Callable[[], Parsable[S, T]]):
        super().__init__(self._parse_first)
        self._build = build
        self._parser: Optional[Parsable[S, T]] = None

    def force(self) -> Parsable[S, T]:
        # Built parsers are immutable, so caching the first build is
        # indistinguishable from rebuilding on every call.
        if self._parser is None:
            built = self._build()
            if not isinstance(built, Parsable):
                raise GrammarError(
                    f"deferred parser callback {self._build!r} returned {built!r}, "
                    "which is not parsable")
            log.debug("built deferred parser %r", built)
            self._parser = built
            # From now on this cell is the built parser.
            self.parse = built.parse
        return self._parser

    def _parse_first(self, stream: S, logger: Logger) -> Reply:
        return self.force().parse(stream, logger)


class Fix(Lazy[S, T]):
    """A Lazy cell whose callback receives the cell itself."""

    def __init__(self, f: Callable[[Parser[S, T]], Parsable[S, T]]):
        super().__init__(lambda: f(self))


def lazy(thunk: Callable[[], Parsable[S, T]]) -> Parser[S, T]:
    """
    Defer building a parser until it is run. Typical use is a grammar written
    as functions that refer to each other::

        def expr():
            return or_(and_(term(), right(char('+'), lazy(expr))), term())
    """
    return Lazy(thunk)


def fix(f: Callable[[Parser[S, T]], Parsable[S, T]]) -> Parser[S, T]:
    """
    Fixed point of `f`: the returned parser behaves like ``f(itself)``.

        digits = fix(lambda digits: or_(and_(digit(), digits), digit()))
    """
    return Fix(f)
