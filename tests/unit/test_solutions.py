"""
Tests for solution enumeration and single-shot solving.
"""
import pytest

from satisfiability import (
    Bool,
    Int,
    ProtocolError,
    SolverIndeterminate,
    and_,
    distinct,
    ne,
    or_,
    sat,
)
from satisfiability.solutions import SolutionEnumerator, all_solutions, block
from satisfiability.solver import SolverResult, is_solver_available, open_session

requires_z3 = pytest.mark.skipif(not is_solver_available("z3"), reason="z3 binary not installed")


def queens(n):
    """n-queens: q[i] is the row of the queen in column i."""
    q = Int(n, "q")
    constraints = [and_(1 <= qi, qi <= n) for qi in q]
    constraints.append(distinct(q))
    for i in range(n):
        for j in range(i + 1, n):
            constraints.append(ne(q[i] - q[j], j - i))
            constraints.append(ne(q[j] - q[i], j - i))
    return q, constraints


def as_rows(solutions, n):
    return sorted([s[f"q_{i}"] for i in range(1, n + 1)] for s in solutions)


def test_four_queens():
    q, constraints = queens(4)

    result = all_solutions(constraints, q, solver="z3-api")

    assert len(result) == 2
    assert result.exhausted is True
    assert result.limit_reached is False
    assert as_rows(result, 4) == [[2, 4, 1, 3], [3, 1, 4, 2]]


def test_eight_queens():
    q, constraints = queens(8)

    result = all_solutions(constraints, q, solver="z3-api")

    rows = as_rows(result, 8)
    assert len(rows) == 92
    assert len({tuple(r) for r in rows}) == 92


def test_unsat_constraints_yield_nothing():
    x = Int("x")

    result = all_solutions(and_(x.eq(1), x.eq(2)), [x], solver="z3-api")

    assert len(result) == 0
    assert result.exhausted is True


def test_limit_reported_distinctly():
    q, constraints = queens(8)

    result = all_solutions(constraints, q, solver="z3-api", limit=5)

    assert len(result) == 5
    assert result.limit_reached is True
    assert result.exhausted is False
    assert "limit reached" in str(result)


def test_boolean_enumeration():
    a, b, c = Bool("a"), Bool("b"), Bool("c")

    result = all_solutions(or_(a, b, c), [a, b, c], solver="z3-api")

    assert len(result) == 7
    assert {"a": False, "b": False, "c": False} not in result.solutions


def test_session_unsat_after_last_solution():
    q, constraints = queens(4)
    with open_session("z3-api") as s:
        for c in constraints:
            s.assert_(c)
        enumerator = SolutionEnumerator(s, q)
        found = list(enumerator)

        assert len(found) == 2
        assert enumerator.exhausted
        assert s.check_sat() == SolverResult.UNSAT


def test_blocking_clause_excludes_only_prior_assignment():
    x, y = Int("x"), Int("y")
    domain = and_(1 <= x, x <= 2, 1 <= y, y <= 2)
    with open_session("z3-api") as s:
        s.assert_(domain)
        assert s.check_sat() == SolverResult.SAT
        model = s.get_model([x, y])

        s.assert_(block(model, [x, y]))

        s.push()
        s.assert_(and_(x.eq(model["x"]), y.eq(model["y"])))
        assert s.check_sat() == SolverResult.UNSAT
        s.pop()

        for vx in (1, 2):
            for vy in (1, 2):
                if (vx, vy) == (model["x"], model["y"]):
                    continue
                s.push()
                s.assert_(and_(x.eq(vx), y.eq(vy)))
                assert s.check_sat() == SolverResult.SAT
                s.pop()


def test_block_builds_disequalities():
    x, b = Int("x"), Bool("b")

    clause = block({"x": 3, "b": True}, [x, b])

    assert clause.op.value == "or"
    assert [c.op.value for c in clause.children] == ["ne", "not"]


def test_unknown_reports_partial_solutions(fake_options):
    x = Int("x")

    with pytest.raises(SolverIndeterminate) as info:
        all_solutions(x > 0, [x], solver="fake", options=fake_options("sat", "unknown"))

    assert info.value.partial_solutions == [{"x": 1}]


def test_protocol_error_reports_partial_solutions(fake_options):
    x = Int("x")

    with pytest.raises(ProtocolError) as info:
        all_solutions(x > 0, [x], solver="fake", options=fake_options("sat", "sat", "garbage"))

    assert info.value.partial_solutions == [{"x": 1}, {"x": 1}]


def test_sat_assigns_values():
    x, y = Bool("x"), Bool("y")
    n = Int("n")
    e = and_(or_(x, y), ~x, n.eq(4))

    assert sat(e, solver="z3-api") == SolverResult.SAT

    assert x.value is False
    assert y.value is True
    assert n.value == 4
    assert e.value is True


def test_sat_unsat_leaves_values_unset():
    x = Int("x")
    e = and_(x > 3, x < 2)

    assert sat(e, solver="z3-api") == SolverResult.UNSAT
    assert x.value is None


@requires_z3
def test_four_queens_subprocess():
    q, constraints = queens(4)

    result = all_solutions(constraints, q, solver="z3")

    assert result.exhausted is True
    assert as_rows(result, 4) == [[2, 4, 1, 3], [3, 1, 4, 2]]


@requires_z3
def test_subprocess_unsat_after_last_solution():
    q, constraints = queens(4)
    with open_session("z3") as s:
        for c in constraints:
            s.assert_(c)
        enumerator = SolutionEnumerator(s, q)

        assert len(list(enumerator)) == 2
        assert enumerator.exhausted
        assert s.check_sat() == SolverResult.UNSAT
