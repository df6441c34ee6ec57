import logging

import pytest

from logparsec.Char import char, digit, literal, regex
from logparsec.Combinators import and_, empty, many, or_, right
from logparsec.Diagnostics import error, info, inspect, label, recover, trace, warn
from logparsec.Errors import GrammarError
from logparsec.Logger import Error, Info, MsgBody, Severity, Warn
from logparsec.Parsec import Parser, execute
from logparsec.Prim import map, map_option, map_result, pure
from logparsec.Stream import Position

from conftest import run


def test_annotations_are_logged_in_order_at_their_positions():
    p = and_(
        info(char("a"), "starting"),
        and_(warn(char("b"), "halfway"), error(char("c"), "at c")),
    )
    value, logs, _ = execute(p, "abc")
    assert value == ("a", ("b", "c"))
    assert logs == [
        Info(MsgBody("starting", Position(0, 0))),
        Warn(MsgBody("halfway", Position(0, 1))),
        Error(MsgBody("at c", Position(0, 2))),
    ]


@pytest.mark.parametrize("annotate, severity", [
    (info, Severity.INFO),
    (warn, Severity.WARN),
    (error, Severity.ERROR),
])
def test_annotation_does_not_change_the_outcome(annotate, severity):
    value, ok_logs, ok = execute(annotate(digit(), "note"), "5")
    assert ok
    assert value == "5"
    assert [m.severity for m in ok_logs] == [severity]

    # An Error message alone is not a failure, and a failure still logs.
    failed, failed_logs, ok = execute(annotate(digit(), "note"), "x")
    assert not ok
    assert failed is None
    assert failed_logs[0].severity is severity
    assert failed_logs[1].text == "expecting digit, but got 'x'."


def test_method_forms():
    value, logs, _ = execute(char("a").info("i").warn("w"), "a")
    assert value == "a"
    assert [m.text for m in logs] == ["w", "i"]


def test_label_names_what_was_expected():
    p = label(right(char("#"), digit()), "a numbered reference")
    value, logs, _ = execute(p, "#x")
    assert value is None
    assert logs[-1] == Error(MsgBody("expecting a numbered reference.", Position(0, 0)))

    assert execute(p, "#4") == ("4", [], True)


def test_failed_alternative_annotations_are_dropped():
    p = or_(info(char("a"), "tried a"), info(char("b"), "tried b"))
    value, logs, _ = execute(p, "b")
    assert value == "b"
    assert [m.text for m in logs] == ["tried b"]


def test_recover_keeps_diagnostics():
    reply, logs = run(recover(error(empty(), "bad"), "default"), "rest")
    rest, value = reply
    assert value == "default"
    assert rest.as_text() == "rest"
    assert [str(m) for m in logs] == ["error at 0:0: bad"]


def test_recover_resumes_at_the_start():
    statement = recover(literal("ok;"), None)
    skip = regex(r"[^;]*;")
    p = many(or_(literal("ok;"), right(statement, skip)))
    value, _, _ = execute(p, "ok;oops;ok;")
    assert value == ["ok;", "oops;", "ok;"]


def test_inspect_observes_without_interfering():
    seen = []
    p = inspect(digit(), lambda stream, reply: seen.append((stream.index(), reply is None)))

    assert execute(p, "1")[0] == "1"
    assert execute(p, "x")[0] is None
    assert seen == [(0, False), (0, True)]


def test_inspect_without_observer_writes_debug_records(caplog):
    with caplog.at_level(logging.DEBUG, logger="logparsec"):
        execute(inspect(digit()), "4")
        execute(inspect(digit()), "z")
    messages = [r.getMessage() for r in caplog.records]
    assert messages[0].startswith("'4' at 0:0")
    assert messages[1].startswith("failed at 0:0")


def test_trace(caplog):
    with caplog.at_level(logging.DEBUG, logger="logparsec"):
        execute(trace("num", digit()), "1")
        execute(trace("num", digit()), "a")
    messages = [r.getMessage() for r in caplog.records]
    assert messages == [
        "num: enter at 0:0 on '1'",
        "num: ok '1', now at 0:1",
        "num: enter at 0:0 on 'a'",
        "num: backtracked at 0:0",
    ]


def test_map_option_rejects_without_consuming():
    small = map_option(map(regex(r"[0-9]+"), int), lambda n: n if n < 256 else None)
    assert execute(small, "200") == (200, [], True)

    reply, logs = run(small, "300")
    assert reply is None
    assert logs.is_empty()


def test_map_result_logs_the_exception():
    number = map_result(regex(r"[0-9a-z]+"), int)
    assert execute(number, "42")[0] == 42

    value, logs, _ = execute(right(char(" "), number), " 4x")
    assert value is None
    assert len(logs) == 1
    assert logs[0].severity is Severity.ERROR
    assert logs[0].pos == Position(0, 1)
    assert "invalid literal" in logs[0].text


def test_map_result_lets_alternatives_run():
    p = or_(map_result(regex(r"[a-z]+"), lambda s: {"one": 1}[s]), pure(0))
    assert execute(p, "one") == (1, [], True)
    assert execute(p, "two") == (0, [], True)


def test_malformed_reply_raises_grammar_error():
    p = Parser(lambda stream, logger: "not a reply")
    with pytest.raises(GrammarError):
        execute(p, "x")


def test_invalid_regex_raises_grammar_error():
    with pytest.raises(GrammarError):
        regex("(unclosed")
