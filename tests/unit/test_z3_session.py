"""
Tests for the in-process Z3 session backend.
"""
import pytest

from satisfiability import (
    Bool,
    Int,
    NoModelAvailable,
    SessionStateError,
    TypeMismatch,
    and_,
    not_,
    or_,
)
from satisfiability.solver import SessionState, SolverOptions, SolverResult, Z3Session, open_session


def test_z3_session_unsat():
    """Test that Z3 correctly identifies unsatisfiable constraints."""
    x = Int("x")
    with open_session("z3-api") as s:
        s.assert_(x > 10)
        s.assert_(x < 5)

        assert s.check_sat() == SolverResult.UNSAT


def test_z3_session_sat():
    """Test that Z3 correctly finds satisfying assignments."""
    x = Int("x")
    with open_session("z3-api") as s:
        s.assert_(x > 10)
        s.assert_(x < 20)

        assert s.check_sat() == SolverResult.SAT
        model = s.get_model([x])

    assert 10 < model["x"] < 20


def test_z3_session_negative_values():
    x = Int("x")
    with open_session("z3-api") as s:
        s.assert_(x.eq(-7))
        s.check_sat()

        assert s.get_model() == {"x": -7}


def test_z3_session_boolean_constraints():
    """Test Z3 with boolean variables."""
    a, b = Bool("a"), Bool("b")
    with open_session("z3-api") as s:
        s.assert_(or_(a, b))
        s.assert_(not_(a))

        assert s.check_sat() == SolverResult.SAT
        assert s.get_model() == {"a": False, "b": True}


def test_model_before_check():
    """Requesting a model before any check fails."""
    x = Int("x")
    with open_session("z3-api") as s:
        s.assert_(x > 0)

        with pytest.raises(NoModelAvailable):
            s.get_model()


def test_model_after_unsat():
    x = Int("x")
    with open_session("z3-api") as s:
        s.assert_(and_(x.eq(1), x.eq(2)))

        assert s.check_sat() == SolverResult.UNSAT
        with pytest.raises(NoModelAvailable):
            s.get_model()


def test_model_invalidated_by_assert():
    x = Int("x")
    with open_session("z3-api") as s:
        s.assert_(x > 0)
        s.check_sat()
        s.assert_(x < 10)

        with pytest.raises(NoModelAvailable):
            s.get_model()


def test_unconstrained_variable_gets_default():
    x, y = Int("x"), Bool("y")
    with open_session("z3-api") as s:
        s.assert_(x.eq(3))
        s.check_sat()

        assert s.get_model([x, y]) == {"x": 3, "y": False}


def test_z3_session_push_pop():
    """Test push/pop for backtracking."""
    x = Int("x")
    with open_session("z3-api") as s:
        s.assert_(x > 10)
        assert s.check_sat() == SolverResult.SAT

        s.push()
        s.assert_(x < 5)
        assert s.check_sat() == SolverResult.UNSAT
        s.pop()

        assert s.check_sat() == SolverResult.SAT


def test_pop_forgets_scoped_declarations():
    x, y = Int("x"), Int("y")
    with open_session("z3-api") as s:
        s.assert_(x > 0)
        s.push()
        s.assert_(y > x)
        s.pop()

        assert s.serializer.declared_names() == ["x"]
        s.assert_(y.eq(2))
        assert s.check_sat() == SolverResult.SAT
        assert s.get_model()["y"] == 2


def test_pop_without_push():
    with open_session("z3-api") as s:
        with pytest.raises(SessionStateError):
            s.pop()


def test_lifecycle_states():
    s = Z3Session()
    assert s.state == SessionState.CREATED

    with pytest.raises(SessionStateError):
        s.assert_(Bool("x"))

    s.open()
    assert s.state == SessionState.RUNNING

    s.close()
    assert s.state == SessionState.CLOSED
    s.close()
    assert s.state == SessionState.CLOSED

    with pytest.raises(SessionStateError):
        s.check_sat()


def test_close_on_error_path():
    with pytest.raises(RuntimeError):
        with open_session("z3-api") as s:
            raise RuntimeError("boom")

    assert s.state == SessionState.CLOSED


def test_logic_option():
    x = Int("x")
    with open_session("z3-api", SolverOptions(logic="QF_LIA")) as s:
        s.assert_(x.eq(4))

        assert s.check_sat() == SolverResult.SAT
        assert s.get_model() == {"x": 4}


def test_quoted_names():
    v = Int("my var")
    with open_session("z3-api") as s:
        s.assert_(v.eq(9))
        s.check_sat()

        assert s.get_model() == {"my var": 9}


def test_assertions_share_declarations():
    x, b = Int("x"), Bool("b")
    with open_session("z3-api") as s:
        s.assert_(x > 0)
        s.assert_(x < 5)
        s.assert_(or_(b, x.eq(3)))
        s.assert_(not_(b))

        assert s.check_sat() == SolverResult.SAT
        assert s.get_model() == {"x": 3, "b": False}


def test_redeclare_after_pop():
    x = Int("x")
    with open_session("z3-api") as s:
        s.push()
        s.assert_(x.eq(1))
        s.pop()
        s.assert_(x.eq(2))

        assert s.check_sat() == SolverResult.SAT
        assert s.get_model() == {"x": 2}


def test_rejected_name_keeps_session_usable():
    x = Bool("x")
    with open_session("z3-api") as s:
        with pytest.raises(TypeMismatch):
            s.assert_(and_(x, Bool("a|b")))
        s.assert_(x)

        assert s.state == SessionState.RUNNING
        assert s.check_sat() == SolverResult.SAT
        assert s.get_model() == {"x": True}
