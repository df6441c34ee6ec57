import pytest

from logparsec.Logger import Logger
from logparsec.Stream import CharStream


def run(parser, input_str, logger=None):
    """Run `parser` on text. Returns (reply, logger)."""
    return parser.exec(CharStream(input_str), logger)


def outcome(parser, input_str):
    """
    Everything observable about one run: value, remaining input, position,
    and the logged diagnostics. Two parsers are equivalent on an input when
    their outcomes are equal.
    """
    reply, logger = run(parser, input_str)
    if reply is None:
        return None, input_str, None, list(logger)
    rest, value = reply
    return value, rest.as_text(), rest.position(), list(logger)


def assert_same_outcome(p1, p2, input_str):
    assert outcome(p1, input_str) == outcome(p2, input_str)


@pytest.fixture
def logger():
    return Logger()


@pytest.fixture
def stream():
    def _make(input_data):
        return CharStream(input_data)

    return _make
