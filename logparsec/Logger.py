from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Iterator, List

from .Stream import Position


class Severity(Enum):
    INFO = "info"
    WARN = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class MsgBody:
    """Text of a diagnostic and the input position it refers to."""
    text: str
    pos: Position


@dataclass(frozen=True)
class Msg:
    """A diagnostic. Use one of the Info / Warn / Error variants."""
    body: MsgBody
    severity: ClassVar[Severity]

    @property
    def text(self) -> str:
        return self.body.text

    @property
    def pos(self) -> Position:
        return self.body.pos

    def __str__(self) -> str:
        return f"{self.severity.value} at {self.pos}: {self.text}"


@dataclass(frozen=True)
class Info(Msg):
    severity: ClassVar[Severity] = Severity.INFO


@dataclass(frozen=True)
class Warn(Msg):
    severity: ClassVar[Severity] = Severity.WARN


@dataclass(frozen=True)
class Error(Msg):
    severity: ClassVar[Severity] = Severity.ERROR


@dataclass
class Logger:
    """
    Ordered, append-only record of diagnostics for one parser invocation.

    Entries stay until `clear()`. The only other way entries disappear is
    `rollback()`, which backtracking combinators use to discard what an
    abandoned branch logged.
    """
    messages: List[Msg] = field(default_factory=list)

    @classmethod
    def with_message(cls, msg: Msg) -> 'Logger':
        return cls([msg])

    def add(self, msg: Msg) -> None:
        self.messages.append(msg)

    def clear(self) -> None:
        self.messages.clear()

    def is_empty(self) -> bool:
        return not self.messages

    def mark(self) -> int:
        return len(self.messages)

    def rollback(self, mark: int) -> None:
        del self.messages[mark:]

    def errors(self) -> List[Msg]:
        return [m for m in self.messages if m.severity is Severity.ERROR]

    def warnings(self) -> List[Msg]:
        return [m for m in self.messages if m.severity is Severity.WARN]

    def has_errors(self) -> bool:
        return any(m.severity is Severity.ERROR for m in self.messages)

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self) -> Iterator[Msg]:
        return iter(self.messages)

    def __getitem__(self, i: int) -> Msg:
        return self.messages[i]
