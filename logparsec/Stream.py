from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, Sequence, Tuple, TypeVar

E = TypeVar('E')  # Element type yielded by a stream

NEWLINE = '\n'
NEWLINE_BYTE = ord(NEWLINE)


@dataclass(frozen=True, order=True)
class Position:
    """Row/column cursor into the input. Both start at 0."""
    row: int = 0
    col: int = 0

    def advance(self, element: Any, newline: Any = NEWLINE) -> 'Position':
        """Position after consuming `element`; `newline` starts a new row."""
        if element == newline:
            return Position(self.row + 1, 0)
        return Position(self.row, self.col + 1)

    def __str__(self) -> str:
        return f"{self.row}:{self.col}"


class Stream(ABC, Generic[E]):
    """
    A consumable, positioned view over some input.

    `next()` is the only mutator. Parse functions never call it on the stream
    they are handed; they `copy()` first and return the advanced copy.
    """

    @abstractmethod
    def as_text(self) -> Sequence[E]:
        """The remaining, unconsumed input."""

    @abstractmethod
    def position(self) -> Position:
        ...

    @abstractmethod
    def index(self) -> int:
        """Number of elements consumed so far."""

    @abstractmethod
    def len(self) -> int:
        """Number of elements left."""

    @abstractmethod
    def next(self) -> Optional[E]:
        """Consume and return the next element, or None at end of input."""

    @abstractmethod
    def copy(self) -> 'Stream[E]':
        ...

    def buffer(self) -> Tuple[Sequence[E], int]:
        """
        The underlying input and the offset of the current element in it, for
        matchers that work in place, such as `re`.
        """
        return self.as_text(), 0

    def is_empty(self) -> bool:
        return self.len() == 0

    def __len__(self) -> int:
        return self.len()


class _SequenceStream(Stream[E]):
    # Shared offset-over-a-sequence machinery. The input is never sliced;
    # only the offset and position move.

    def __init__(self, data: Sequence[E], idx: int = 0, pos: Position = Position()):
        self._data = data
        self._idx = idx
        self._pos = pos

    def as_text(self) -> Sequence[E]:
        return self._data[self._idx:]

    def buffer(self) -> Tuple[Sequence[E], int]:
        return self._data, self._idx

    def position(self) -> Position:
        return self._pos

    def index(self) -> int:
        return self._idx

    def len(self) -> int:
        return len(self._data) - self._idx

    def next(self) -> Optional[E]:
        if self._idx >= len(self._data):
            return None
        element = self._data[self._idx]
        self._idx += 1
        self._pos = self._next_pos(self._pos, element)
        return element

    def _next_pos(self, pos: Position, element: E) -> Position:
        return pos.advance(element)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _SequenceStream):
            return NotImplemented
        return (self._data is other._data or self._data == other._data) \
            and self._idx == other._idx and self._pos == other._pos

    def __repr__(self) -> str:
        rest = self.as_text()
        shown = rest[:30]
        return f"{type(self).__name__}({shown!r}{'...' if len(rest) > 30 else ''} at {self._pos})"


class CharStream(_SequenceStream[str]):
    """Stream over a `str`; elements are one-character strings."""

    def __init__(self, text: str, idx: int = 0, pos: Position = Position()):
        super().__init__(text, idx, pos)

    def as_text(self) -> str:
        return self._data[self._idx:]

    def copy(self) -> 'CharStream':
        return CharStream(self._data, self._idx, self._pos)


class TokenStream(_SequenceStream[E]):
    """
    Stream over an arbitrary sequence: token objects from a lexer, bytes, tuples.

    `next_pos(position, token)` decides how far a token moves the cursor. By
    default every token moves one column and only a `"\\n"` token starts a new
    row; over `bytes` or `bytearray` the byte 10 does. Other numeric tokens
    never count as newlines.
    """

    def __init__(self,
                 tokens: Sequence[E],
                 next_pos: Optional[Callable[[Position, E], Position]] = None,
                 idx: int = 0,
                 pos: Position = Position()):
        super().__init__(tokens, idx, pos)
        if next_pos is None and isinstance(tokens, (bytes, bytearray)):
            next_pos = _advance_byte
        self._next_pos_fn = next_pos

    def _next_pos(self, pos: Position, element: E) -> Position:
        if self._next_pos_fn is None:
            return pos.advance(element)
        return self._next_pos_fn(pos, element)

    def copy(self) -> 'TokenStream[E]':
        return TokenStream(self._data, self._next_pos_fn, self._idx, self._pos)


def _advance_byte(pos: Position, byte: int) -> Position:
    return pos.advance(byte, NEWLINE_BYTE)
