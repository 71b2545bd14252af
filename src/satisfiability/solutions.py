"""
Solution enumeration and single-shot solving.

Enumeration repeatedly checks satisfiability, records the model of the
decision variables and then asserts a blocking clause that rules out exactly
that assignment, until the solver reports unsat or a limit is reached:

    q = Int(4, "q")
    constraints = [...]
    result = all_solutions(constraints, q)
    len(result)           # 2 for 4-queens
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional
import logging

from .errors import SatisfiabilityError, SolverIndeterminate, TypeMismatch
from .expr.evaluate import assign
from .expr.node import Expr, Op, Value, as_list, variables as collect_variables
from .expr.builders import ne, not_, or_
from .solver import SolverOptions, SolverResult, SolverSession, open_session

logger = logging.getLogger(__name__)

Solution = Dict[str, Value]


def block(model: Solution, variables: Any) -> Expr:
    """Clause satisfied by every assignment that differs from `model`.

    Boolean variables contribute `not v` (when true) or `v` (when false),
    integer variables contribute `v != value`.
    """
    literals: List[Expr] = []
    for v in as_list(variables):
        value = model[v.name]
        if isinstance(value, bool):
            literals.append(not_(v) if value else v)
        else:
            literals.append(ne(v, value))
    return or_(literals)


class SolutionEnumerator:
    """Iterates over the distinct assignments of `variables` in a session.

    The constraint set must already be asserted on `session`. Iteration
    stops when the solver reports unsat (`exhausted`) or after `limit`
    solutions (`limit_reached`).

    Attributes:
        solutions: Every solution emitted so far
        exhausted: The solver reported unsat after the last solution
        limit_reached: Iteration stopped because of `limit`
    """

    def __init__(self, session: SolverSession, variables: Any, limit: Optional[int] = None):
        self.session = session
        self.variables = as_list(variables)
        for v in self.variables:
            if v.op != Op.IDENTITY:
                raise TypeMismatch(f"Decision variables must be variables, not '{v.name}'")
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")
        self.limit = limit
        self.solutions: List[Solution] = []
        self.exhausted = False
        self.limit_reached = False

    def __iter__(self) -> Iterator[Solution]:
        while True:
            if self.limit is not None and len(self.solutions) >= self.limit:
                self.limit_reached = True
                logger.info("Stopped after %d solutions (limit)", len(self.solutions))
                return

            result = self.session.check_sat()
            if result == SolverResult.UNSAT:
                self.exhausted = True
                logger.info("Enumerated %d solutions", len(self.solutions))
                return
            if result == SolverResult.UNKNOWN:
                err = SolverIndeterminate(
                    f"Solver returned unknown after {len(self.solutions)} solutions")
                err.partial_solutions = list(self.solutions)
                raise err

            model = self.session.get_model(self.variables)
            self.solutions.append(model)
            logger.debug("Solution %d: %s", len(self.solutions), model)
            yield model
            if not self.variables:
                # The empty assignment is the only one there is.
                self.exhausted = True
                return
            self.session.assert_(block(model, self.variables))


@dataclass
class Enumeration:
    """Result of `all_solutions`."""
    solutions: List[Solution] = field(default_factory=list)
    exhausted: bool = False
    limit_reached: bool = False

    def __len__(self) -> int:
        return len(self.solutions)

    def __iter__(self) -> Iterator[Solution]:
        return iter(self.solutions)

    def __str__(self) -> str:
        status = "complete" if self.exhausted else "limit reached" if self.limit_reached else "partial"
        return f"{len(self.solutions)} solutions ({status})"


def all_solutions(constraints: Any,
                  variables: Any,
                  solver: Optional[str] = None,
                  limit: Optional[int] = None,
                  options: Optional[SolverOptions] = None) -> Enumeration:
    """Find every distinct assignment of `variables` satisfying `constraints`.

    Args:
        constraints: Expression(s) asserted once before enumerating
        variables: Decision variables; solutions differ in at least one
        solver: Backend name (see `open_session`)
        limit: Stop after this many solutions
        options: Session options

    Returns:
        Enumeration with the solutions and how the loop ended

    Raises:
        SatisfiabilityError: Any session or solver error; the solutions
            found before the failure are in `error.partial_solutions`
    """
    with open_session(solver, options) as session:
        for c in as_list(constraints):
            session.assert_(c)

        enumerator = SolutionEnumerator(session, variables, limit)
        try:
            for _ in enumerator:
                pass
        except SatisfiabilityError as e:
            e.partial_solutions = list(enumerator.solutions)
            raise

    return Enumeration(
        solutions=enumerator.solutions,
        exhausted=enumerator.exhausted,
        limit_reached=enumerator.limit_reached,
    )


def sat(*constraints: Any,
        solver: Optional[str] = None,
        options: Optional[SolverOptions] = None) -> SolverResult:
    """Solve once; on SAT assign model values to every node of `constraints`."""
    roots = as_list(constraints)
    with open_session(solver, options) as session:
        for c in roots:
            session.assert_(c)
        result = session.check_sat()
        if result == SolverResult.SAT:
            assign(roots, session.get_model(collect_variables(roots)))
    return result
