import re
from typing import Any, Callable, Sequence, Union

from .Combinators import many, mid
from .Errors import GrammarError
from .Logger import Error, Logger, MsgBody
from .Parsec import Parsable, Parser, Reply, T
from .Prim import map
from .Stream import Stream

WHITESPACE = (' ', '\n', '\r', '\t')


def _single(test: Callable[[Any], bool], describe: Callable[[Any], str]) -> Parser[Stream, Any]:
    # One-element matcher; `describe` words the error for a rejected element.
    def parse(stream: Stream, logger: Logger) -> Reply:
        rest = stream.copy()
        element = rest.next()
        if element is None:
            logger.add(Error(MsgBody("unexpected end of input.", stream.position())))
            return None
        if not test(element):
            logger.add(Error(MsgBody(describe(element), stream.position())))
            return None
        return rest, element
    return Parser(parse)


# Core function: Succeeds if the element satisfies a predicate
def satisfy(pred: Callable[[Any], bool]) -> Parser[Stream, Any]:
    """Consumes one element for which `pred` holds and returns it."""
    return _single(pred, lambda x: f"'{x}' does not satisfy required conditions.")


# Helper function: Parses a single character
def char(c: str) -> Parser[Stream, str]:
    """Parses a single character c and returns it."""
    return _single(lambda x: x == c, lambda x: f"expecting '{c}', but got '{x}'.")


def literal(s: Sequence[Any]) -> Parser[Stream, Any]:
    """
    Parses the exact text `s` and returns it. On a mismatch nothing is
    consumed, however much of `s` did match.
    """
    def parse(stream: Stream, logger: Logger) -> Reply:
        rest = stream.copy()
        for expected in s:
            if rest.next() != expected:
                logger.add(Error(MsgBody(f'expecting "{s}".', stream.position())))
                return None
        return rest, s
    return Parser(parse)


def regex(pattern: Union[str, "re.Pattern"]) -> Parser[Stream, str]:
    """
    Parses the longest prefix of the remaining text the pattern matches, as
    decided by ``re.match``. Returns the matched text; an empty match succeeds
    without consuming.

    Matching runs in place on the whole input from the current offset, so
    ``^`` only matches at the very start of the input and lookbehind sees the
    text already consumed.
    """
    try:
        compiled = re.compile(pattern)
    except re.error as e:
        raise GrammarError(f"invalid regular expression {pattern!r}: {e}") from e

    def parse(stream: Stream, logger: Logger) -> Reply:
        data, offset = stream.buffer()
        m = compiled.match(data, offset)
        if m is None:
            logger.add(Error(MsgBody(f'expecting "{compiled.pattern}".', stream.position())))
            return None
        rest = stream.copy()
        for _ in range(m.end() - offset):
            rest.next()
        return rest, m.group(0)
    return Parser(parse)


def space() -> Parser[Stream, str]:
    """Parses one of ' ', '\\n', '\\r', '\\t' and returns it."""
    return _single(lambda x: x in WHITESPACE, lambda x: f"expecting white space, but got '{x}'.")


def spaces() -> Parser[Stream, None]:
    """Skips zero or more whitespace characters."""
    return map(many(space()), lambda _: None)


def trim(p: Parsable[Stream, T]) -> Parser[Stream, T]:
    """Runs `p`, discarding any whitespace before and after it."""
    return mid(many(space()), p, many(space()))


def digit() -> Parser[Stream, str]:
    """Parses an ASCII digit and returns it."""
    return _single(lambda x: isinstance(x, str) and '0' <= x <= '9', lambda x: f"expecting digit, but got '{x}'.")


def letter() -> Parser[Stream, str]:
    """Parses an alphabetic character and returns it."""
    return _single(lambda x: isinstance(x, str) and x.isalpha(), lambda x: f"expecting letter, but got '{x}'.")


def any_char() -> Parser[Stream, Any]:
    """Parses any element; fails only at end of input."""
    return _single(lambda _: True, str)


def one_of(cs: Sequence[str]) -> Parser[Stream, str]:
    """Succeeds if the current character is in cs. Returns the parsed character."""
    return _single(lambda c: c in cs, lambda c: f"expecting one of {''.join(cs)}, but got '{c}'.")


def none_of(cs: Sequence[str]) -> Parser[Stream, str]:
    """Succeeds if the current character is not in cs. Returns the parsed character."""
    return _single(lambda c: c not in cs, lambda c: f"unexpected '{c}'.")
