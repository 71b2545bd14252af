"""
Tests for the solver response reader.
"""
import pytest

from satisfiability import ProtocolError
from satisfiability.smt import is_complete, parse, parse_value
from satisfiability.smt.sexpr import error_message


def test_parse_get_value_response():
    items = parse("((x 1)\n (|a b| true)\n (y (- 4)))\n")

    assert items == [[["x", "1"], ["a b", "true"], ["y", ["-", "4"]]]]


def test_is_complete():
    assert is_complete("sat\n")
    assert is_complete("((x 1))")
    assert not is_complete("((x 1)\n")
    assert not is_complete("")
    assert not is_complete('(error "unterminated')


def test_comments_ignored():
    assert parse("; banner\nunsat\n") == ["unsat"]


def test_error_message():
    (item,) = parse('(error "line 3: unknown ""x""")')

    assert error_message(item) == 'line 3: unknown "x"'
    assert error_message("sat") is None


def test_parse_value():
    assert parse_value("true") is True
    assert parse_value("false") is False
    assert parse_value("42") == 42
    assert parse_value(["-", "7"]) == -7


def test_parse_value_rejects_other_terms():
    with pytest.raises(ProtocolError):
        parse_value("1.5")
    with pytest.raises(ProtocolError):
        parse_value(["bvadd", "1", "2"])


def test_unbalanced_close():
    with pytest.raises(ProtocolError):
        parse("x))")
