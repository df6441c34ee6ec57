from functools import reduce
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .Errors import GrammarError
from .Logger import Error, Logger, MsgBody
from .Parsec import Parsable, Parser, Reply, S, T, U, as_parser
from .Prim import map, pure


# 1. empty: identity element of or_
def empty() -> Parser[Any, Any]:
    """A parser that always fails, consuming nothing and logging nothing."""
    def parse(stream: S, logger: Logger) -> Reply:
        return None
    return Parser(parse)


# 2. or_: ordered choice with full backtracking
def or_(p1: Parsable[S, T], p2: Parsable[S, T]) -> Parser[S, T]:
    """
    Try `p1`; if it fails, run `p2` from the same position `p1` started at.
    Whatever `p1` logged is discarded before `p2` runs.
    """
    def parse(stream: S, logger: Logger) -> Reply:
        mark = logger.mark()
        reply = p1.parse(stream, logger)
        if reply is not None:
            return reply
        logger.rollback(mark)
        return p2.parse(stream, logger)
    return Parser(parse)


def _repeat(p: Parsable[S, T], stream: S, logger: Logger, results: List[T]) -> Tuple[S, List[T]]:
    # Loop rather than recurse so long inputs cannot exhaust the stack.
    current = stream
    while True:
        mark = logger.mark()
        reply = p.parse(current, logger)
        if reply is None:
            # The failed attempt leaves no trace.
            logger.rollback(mark)
            return current, results
        current, value = reply
        results.append(value)


# 3. many: zero or more
def many(p: Parsable[S, T]) -> Parser[S, List[T]]:
    """
    Apply `p` until it fails and collect the values. Never fails.

    `p` must consume input whenever it succeeds; `many(pure(x))` does not
    terminate.
    """
    def parse(stream: S, logger: Logger) -> Reply:
        return _repeat(p, stream, logger, [])
    return Parser(parse)


# 4. some: one or more
def some(p: Parsable[S, T]) -> Parser[S, List[T]]:
    """Like `many`, but the first application of `p` must succeed."""
    def parse(stream: S, logger: Logger) -> Reply:
        reply = p.parse(stream, logger)
        if reply is None:
            return None
        rest, first = reply
        return _repeat(p, rest, logger, [first])
    return Parser(parse)


# 5. optional: zero or one
def optional(p: Parsable[S, T]) -> Parser[S, Optional[T]]:
    """
    Try `p` once. Returns its value, or None without consuming input if it
    failed. Never fails.
    """
    def parse(stream: S, logger: Logger) -> Reply:
        mark = logger.mark()
        reply = p.parse(stream, logger)
        if reply is None:
            logger.rollback(mark)
            return stream, None
        return reply
    return Parser(parse)


# 6. and_: sequence, keep both
def and_(p1: Parsable[S, T], p2: Parsable[S, U]) -> Parser[S, Tuple[T, U]]:
    """Run `p1` then `p2`; the result is the pair of both values."""
    def parse(stream: S, logger: Logger) -> Reply:
        reply1 = p1.parse(stream, logger)
        if reply1 is None:
            return None
        stream1, value1 = reply1

        reply2 = p2.parse(stream1, logger)
        if reply2 is None:
            return None
        stream2, value2 = reply2
        return stream2, (value1, value2)
    return Parser(parse)


# 7. left: sequence, keep the first
def left(p1: Parsable[S, T], p2: Parsable[S, Any]) -> Parser[S, T]:
    """Run `p1` then `p2`, keeping the value of `p1`."""
    def parse(stream: S, logger: Logger) -> Reply:
        reply1 = p1.parse(stream, logger)
        if reply1 is None:
            return None
        reply2 = p2.parse(reply1[0], logger)
        if reply2 is None:
            return None
        return reply2[0], reply1[1]
    return Parser(parse)


# 8. right: sequence, keep the second
def right(p1: Parsable[S, Any], p2: Parsable[S, U]) -> Parser[S, U]:
    """Run `p1` then `p2`, keeping the value of `p2`."""
    def parse(stream: S, logger: Logger) -> Reply:
        reply1 = p1.parse(stream, logger)
        if reply1 is None:
            return None
        return p2.parse(reply1[0], logger)
    return Parser(parse)


# 9. mid: bracketing
def mid(p1: Parsable[S, Any], p2: Parsable[S, T], p3: Parsable[S, Any]) -> Parser[S, T]:
    """Run `p1`, `p2`, `p3` in order, keeping the value of `p2`."""
    def parse(stream: S, logger: Logger) -> Reply:
        reply1 = p1.parse(stream, logger)
        if reply1 is None:
            return None
        reply2 = p2.parse(reply1[0], logger)
        if reply2 is None:
            return None
        reply3 = p3.parse(reply2[0], logger)
        if reply3 is None:
            return None
        return reply3[0], reply2[1]
    return Parser(parse)


# 10. choice: or_ over a list
def choice(parsers: Sequence[Parsable[S, T]]) -> Parser[S, T]:
    """
    Applies a list of parsers in order until one succeeds.
    An empty list gives `empty()`.
    """
    if not parsers:
        return empty()
    return reduce(or_, parsers[1:], as_parser(parsers[0]))


# 11. count: exactly n occurrences
def count(n: int, p: Parsable[S, T]) -> Parser[S, List[T]]:
    if n < 0:
        raise GrammarError(f"count() needs a non-negative repetition count, got {n}")

    def parse(stream: S, logger: Logger) -> Reply:
        results = []
        current = stream
        for _ in range(n):
            reply = p.parse(current, logger)
            if reply is None:
                return None
            current, value = reply
            results.append(value)
        return current, results
    return Parser(parse)


# 12. sepBy1: one or more occurrences separated by a separator
def sep_by1(p: Parsable[S, T], sep: Parsable[S, Any]) -> Parser[S, List[T]]:
    """
    Parses one or more occurrences of p separated by sep, returning a list of p's results.
    A trailing separator is left unconsumed.
    """
    return map(and_(p, many(right(sep, p))), lambda pair: [pair[0]] + pair[1])


# 13. sepBy: zero or more occurrences separated by a separator
def sep_by(p: Parsable[S, T], sep: Parsable[S, Any]) -> Parser[S, List[T]]:
    return or_(sep_by1(p, sep), pure([]))


# 14. endBy: zero or more occurrences, each terminated by a separator
def end_by(p: Parsable[S, T], sep: Parsable[S, Any]) -> Parser[S, List[T]]:
    return many(left(p, sep))


# 15. chainl1: left-associative operator chain
def chainl1(p: Parsable[S, T], op: Parsable[S, Callable[[T, T], T]]) -> Parser[S, T]:
    """
    Parses one or more p separated by op, applying op left-associatively.
    An operator without a right operand is left unconsumed.
    """
    def parse(stream: S, logger: Logger) -> Reply:
        reply = p.parse(stream, logger)
        if reply is None:
            return None
        current, acc = reply

        while True:
            mark = logger.mark()
            reply_op = op.parse(current, logger)
            reply_rhs = None if reply_op is None else p.parse(reply_op[0], logger)
            if reply_rhs is None:
                logger.rollback(mark)
                return current, acc
            func = reply_op[1]
            current, rhs = reply_rhs
            acc = func(acc, rhs)
    return Parser(parse)


# 16. chainr1: right-associative operator chain
def chainr1(p: Parsable[S, T], op: Parsable[S, Callable[[T, T], T]]) -> Parser[S, T]:
    """Parses one or more p separated by op, applying op right-associatively."""
    def parse(stream: S, logger: Logger) -> Reply:
        reply = p.parse(stream, logger)
        if reply is None:
            return None
        current, first = reply
        terms = [first]
        funcs = []

        while True:
            mark = logger.mark()
            reply_op = op.parse(current, logger)
            reply_rhs = None if reply_op is None else p.parse(reply_op[0], logger)
            if reply_rhs is None:
                logger.rollback(mark)
                break
            funcs.append(reply_op[1])
            current, rhs = reply_rhs
            terms.append(rhs)

        acc = terms[-1]
        for func, term in zip(reversed(funcs), reversed(terms[:-1])):
            acc = func(term, acc)
        return current, acc
    return Parser(parse)


# 17. lookAhead: succeed without consuming
def look_ahead(p: Parsable[S, T]) -> Parser[S, T]:
    """Run `p` and return its value, but leave the input where it was."""
    def parse(stream: S, logger: Logger) -> Reply:
        reply = p.parse(stream, logger)
        if reply is None:
            return None
        return stream, reply[1]
    return Parser(parse)


# 18. notFollowedBy: succeed only where p would fail
def not_followed_by(p: Parsable[S, Any]) -> Parser[S, None]:
    def parse(stream: S, logger: Logger) -> Reply:
        mark = logger.mark()
        reply = p.parse(stream, logger)
        logger.rollback(mark)
        if reply is None:
            return stream, None
        logger.add(Error(MsgBody(f"unexpected {reply[1]!r}.", stream.position())))
        return None
    return Parser(parse)


# 19. eof: succeed only at the end of input
def eof() -> Parser[Any, None]:
    def parse(stream: S, logger: Logger) -> Reply:
        if stream.is_empty():
            return stream, None
        logger.add(Error(MsgBody("expecting end of input.", stream.position())))
        return None
    return Parser(parse)
