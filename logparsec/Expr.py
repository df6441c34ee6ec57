from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, List, Sequence

from .Combinators import and_, chainl1, chainr1, choice, optional, or_
from .Parsec import Parsable, Parser, T
from .Prim import bind, map, pure


class Assoc(Enum):
    NONE = auto()
    LEFT = auto()
    RIGHT = auto()


@dataclass
class Operator:
    parser: Parsable[Any, Callable]


@dataclass
class Infix(Operator):
    assoc: Assoc = Assoc.LEFT


@dataclass
class Prefix(Operator):
    pass


@dataclass
class Postfix(Operator):
    pass


def build_expression_parser(table: Sequence[Sequence[Operator]], simple_term: Parsable[Any, T]) -> Parser[Any, T]:
    """
    Build an expression parser from an operator table.

    `table` lists precedence levels from the tightest binding to the loosest.
    Each operator parser produces the function to apply: binary for Infix,
    unary for Prefix and Postfix.
    """
    term = simple_term
    for ops in table:
        term = _make_level_parser(ops, term)
    return term


def _make_level_parser(ops: Sequence[Operator], term: Parsable[Any, T]) -> Parser[Any, T]:
    infix_r: List[Parsable] = []
    infix_l: List[Parsable] = []
    infix_n: List[Parsable] = []
    prefix: List[Parsable] = []
    postfix: List[Parsable] = []

    for op in ops:
        if isinstance(op, Infix):
            if op.assoc == Assoc.RIGHT: infix_r.append(op.parser)
            elif op.assoc == Assoc.LEFT: infix_l.append(op.parser)
            else: infix_n.append(op.parser)
        elif isinstance(op, Prefix):
            prefix.append(op.parser)
        elif isinstance(op, Postfix):
            postfix.append(op.parser)

    # P = pre? term post?
    pre_parser = optional(choice(prefix))
    post_parser = optional(choice(postfix))

    def apply(parts):
        (f, x), g = parts
        if f is not None:
            x = f(x)
        if g is not None:
            x = g(x)
        return x

    result_parser = map(and_(and_(pre_parser, term), post_parser), apply)

    if infix_l:
        result_parser = chainl1(result_parser, choice(infix_l))

    if infix_r:
        result_parser = chainr1(result_parser, choice(infix_r))

    if infix_n:
        op_n = choice(infix_n)
        operand = result_parser

        # x (op y)? with no chaining: "1 < 2 < 3" stops after "1 < 2"
        def non_assoc_logic(x):
            return or_(map(and_(op_n, operand), lambda fy: fy[0](x, fy[1])), pure(x))

        result_parser = bind(operand, non_assoc_logic)

    return result_parser
