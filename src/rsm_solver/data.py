"""Core data structures for the revised simplex engine."""

from __future__ import annotations

import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Union

import numpy as np

from .exceptions import InvalidModelError, SolverConfigurationError
from .sparse import SparseMatrixView

# Practical infinity: a bound at or beyond this magnitude is treated as absent.
# numpy.inf compares the same way, so callers may use either.
INFINITY = sys.float_info.max

DEFAULT_TOLERANCE = 1e-7
DEFAULT_MAX_ITERATIONS = 10000


class VariableStatus(IntEnum):
    """Position of a variable relative to the basis.

    The integer codes are storage only. Pricing arithmetic goes through
    ``sign`` (or ``STATUS_SIGN`` for whole arrays), never through the codes.
    """

    BASIC = 0
    AT_LOWER = 1
    AT_UPPER = 2
    FREE = 3

    @property
    def sign(self) -> int:
        """+1 at the lower bound, -1 at the upper bound, 0 otherwise.

        ``sign * reduced_cost`` is negative exactly when moving the variable
        off its bound improves the objective.
        """
        return int(STATUS_SIGN[self])

    def flipped(self) -> VariableStatus:
        """Status after a bound flip. Free variables have no opposite bound."""
        if self is VariableStatus.AT_LOWER:
            return VariableStatus.AT_UPPER
        if self is VariableStatus.AT_UPPER:
            return VariableStatus.AT_LOWER
        return self


# Indexed by VariableStatus code.
STATUS_SIGN = np.array([0, 1, -1, 0], dtype=np.int8)


def _vector(values, length: int, name: str) -> np.ndarray:
    array = np.asarray(values, dtype=float).reshape(-1)
    if array.shape[0] != length:
        raise InvalidModelError(f"{name} must have length {length}, got {array.shape[0]}.")
    return array


@dataclass(frozen=True)
class Model:
    """Static linear program: minimise ``c @ x`` over bounded variables, one row per constraint.

    Attributes:
        nrows: Number of constraint rows.
        nvars: Number of structural variables.
        matrix: Compressed-row constraint matrix, nrows x nvars.
        c: Objective coefficients of the structural variables.
        xl: Lower bounds of the structural variables (``-INFINITY`` for none).
        xu: Upper bounds of the structural variables (``INFINITY`` for none).
        b: Row right-hand sides. Only the code that builds the starting
           Instance reads this; the engine never does.

    The model must not change while a solve is running. It may be shared
    read-only by any number of concurrent solves.

    Examples:
        >>> model = Model.from_dense(
        ...     A=[[1.0, 1.0, 1.0]],
        ...     b=[6.0],
        ...     c=[-1.0, -1.0, 0.0],
        ...     xl=[0.0, 0.0, 0.0],
        ...     xu=[4.0, 4.0, INFINITY],
        ... )
        >>> model.nrows, model.nvars, model.nonzeroes
        (1, 3, 3)
    """

    nrows: int
    nvars: int
    matrix: SparseMatrixView
    c: np.ndarray
    xl: np.ndarray
    xu: np.ndarray
    b: np.ndarray

    def __post_init__(self) -> None:
        if self.matrix.shape != (self.nrows, self.nvars):
            raise InvalidModelError(
                f"Matrix shape {self.matrix.shape} does not match model dimensions "
                f"({self.nrows}, {self.nvars})."
            )
        object.__setattr__(self, "c", _vector(self.c, self.nvars, "c"))
        object.__setattr__(self, "xl", _vector(self.xl, self.nvars, "xl"))
        object.__setattr__(self, "xu", _vector(self.xu, self.nvars, "xu"))
        object.__setattr__(self, "b", _vector(self.b, self.nrows, "b"))

    @property
    def nonzeroes(self) -> int:
        return self.matrix.nonzeroes

    @classmethod
    def allocate(cls, nrows: int, nvars: int, nonzeroes: int) -> Model:
        """Zero-filled model with buffers sized exactly for the given dimensions."""
        return cls(
            nrows=nrows,
            nvars=nvars,
            matrix=SparseMatrixView.allocate(nrows, nvars, nonzeroes),
            c=np.zeros(nvars),
            xl=np.zeros(nvars),
            xu=np.zeros(nvars),
            b=np.zeros(nrows),
        )

    @classmethod
    def from_dense(cls, A, b, c, xl, xu) -> Model:
        matrix = SparseMatrixView.from_dense(A)
        return cls(
            nrows=matrix.nrows,
            nvars=matrix.ncols,
            matrix=matrix,
            c=c,
            xl=xl,
            xu=xu,
            b=b,
        )


@dataclass
class Instance:
    """Mutable solve state for one solve attempt.

    Variables ``[0, nvars)`` are structural; ``[nvars, nvars + nrows)`` are the
    row (slack or artificial) variables, one per row, whose constraint column
    is the unit vector of that row.

    Attributes:
        status: VariableStatus code of every variable.
        basics: Variable basic in each row.
        x: Current value of every variable.
        xl, xu: Bounds of every variable.
        initial_costs: Phase-1 costs of the structural variables.
        basic_costs: Active cost of each basic variable, kept in sync with ``basics``.
        pi: Simplex multipliers.
        reduced_costs: Reduced cost of each structural variable (0 when basic).
        gradient: ``binverse @ A[:, entering]`` for the current pivot.
        binverse: Dense explicit inverse of the basis matrix.
        basic_cycles: Per-structural-variable count of entries since the last
            nondegenerate step.
        phase: 1 (feasibility) or 2 (optimality).
        iterations: Loop passes of the last solve.
        pivots: Pivots (exchanges and bound flips) applied by the last solve.
        entering_index, leaving_index: Last pivot's entering variable and
            leaving row (-1 when none).
        max_change: Last signed step length.
        objective: Objective value; meaningful only after an optimal solve.
        tolerance: Single tolerance used by every test in the engine.
    """

    status: np.ndarray
    basics: np.ndarray
    x: np.ndarray
    xl: np.ndarray
    xu: np.ndarray
    initial_costs: np.ndarray
    basic_costs: np.ndarray
    pi: np.ndarray
    reduced_costs: np.ndarray
    gradient: np.ndarray
    binverse: np.ndarray
    basic_cycles: np.ndarray
    phase: int = 1
    iterations: int = 0
    pivots: int = 0
    entering_index: int = -1
    leaving_index: int = -1
    max_change: float = 0.0
    objective: float = 0.0
    tolerance: float = DEFAULT_TOLERANCE

    @classmethod
    def allocate(cls, nrows: int, nvars: int, tolerance: float = DEFAULT_TOLERANCE) -> Instance:
        """Zero-initialised instance; the caller establishes the starting basis."""
        total = nrows + nvars
        return cls(
            status=np.zeros(total, dtype=np.int8),
            basics=np.zeros(nrows, dtype=np.int64),
            x=np.zeros(total),
            xl=np.zeros(total),
            xu=np.zeros(total),
            initial_costs=np.zeros(nvars),
            basic_costs=np.zeros(nrows),
            pi=np.zeros(nrows),
            reduced_costs=np.zeros(nvars),
            gradient=np.zeros(nrows),
            binverse=np.zeros((nrows, nrows)),
            basic_cycles=np.zeros(nvars, dtype=np.int64),
            tolerance=float(tolerance),
        )

    @property
    def nrows(self) -> int:
        return int(self.basics.shape[0])

    @property
    def nvars(self) -> int:
        return int(self.reduced_costs.shape[0])

    @property
    def total(self) -> int:
        return int(self.x.shape[0])

    def is_row_variable(self, j: int) -> bool:
        return j >= self.nvars

    def active_costs(self, model: Model) -> np.ndarray:
        """Cost vector of the structural variables for the current phase."""
        if self.phase == 1:
            return self.initial_costs
        if self.phase == 2:
            return model.c
        raise SolverConfigurationError(f"Invalid phase {self.phase}. Phase must be 1 or 2.")


@dataclass
class SolverOptions:
    """Configuration options for the revised simplex engine.

    Attributes:
        max_iterations: Cap on loop passes before giving up with
            ``IterationLimitReached`` (default: 10000).
        pricing_strategy: Entering-variable rule:
            - "cycles" (default): fewest recent degenerate entries first, then
              most negative score. Guarantees termination on degenerate problems.
            - "dantzig": most negative score only. Can cycle; kept for comparison.
        progress_interval: Loop passes between progress callbacks (default: 100).
        degeneracy_window: Number of recent objective values the convergence
            monitor keeps when judging stalls (default: 50).

    The numerical tolerance is not an option: it is carried by each Instance so
    concurrent solves may use different tolerances.

    Examples:
        >>> options = SolverOptions(max_iterations=500)
        >>> options = SolverOptions(pricing_strategy="dantzig", progress_interval=10)
    """

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    pricing_strategy: str = "cycles"
    progress_interval: int = 100
    degeneracy_window: int = 50

    def __post_init__(self) -> None:
        if self.max_iterations <= 0:
            raise SolverConfigurationError(
                f"max_iterations must be positive, got {self.max_iterations}."
            )
        if self.pricing_strategy not in ("cycles", "dantzig"):
            raise SolverConfigurationError(
                f"Invalid pricing strategy '{self.pricing_strategy}'. "
                f"Must be 'cycles' or 'dantzig'."
            )
        if self.progress_interval <= 0:
            raise SolverConfigurationError(
                f"progress_interval must be positive, got {self.progress_interval}."
            )
        if self.degeneracy_window < 2:
            raise SolverConfigurationError(
                f"degeneracy_window must be at least 2, got {self.degeneracy_window}."
            )


@dataclass(frozen=True)
class ProgressInfo:
    """Progress information provided during solver execution.

    Attributes:
        iteration: Current loop pass.
        max_iterations: Iteration cap.
        phase: Current phase (1 for feasibility, 2 for optimality).
        pivots: Pivots applied so far.
        objective_estimate: Active-cost objective of the current point
            (the infeasibility measure during phase 1).
        elapsed_time: Seconds since the solve started.
    """

    iteration: int
    max_iterations: int
    phase: int
    pivots: int
    objective_estimate: float
    elapsed_time: float


@dataclass(frozen=True)
class PivotInfo:
    """Description of one applied pivot.

    ``leaving_row`` and ``leaving_index`` are None for a bound flip.
    """

    iteration: int
    phase: int
    entering_index: int
    leaving_row: int | None
    leaving_index: int | None
    step: float
    degenerate: bool

    @property
    def bound_flip(self) -> bool:
        return self.leaving_row is None


ProgressCallback = Callable[[ProgressInfo], None]
PivotCallback = Callable[[PivotInfo], None]


@dataclass(frozen=True)
class Optimal:
    """Optimal solution found.

    Attributes:
        objective: ``c @ x`` over the structural variables.
        x: Copy of the structural variable values.
        iterations: Loop passes performed.
        pivots: Pivots applied.
    """

    objective: float
    x: np.ndarray = field(repr=False)
    iterations: int = 0
    pivots: int = 0
    status = "optimal"


@dataclass(frozen=True)
class Infeasible:
    """Phase 1 ended with a basic row variable away from zero."""

    iterations: int = 0
    pivots: int = 0
    status = "Infeasible"


@dataclass(frozen=True)
class Unbounded:
    """Phase 2 found an improving direction with no limiting bound."""

    iterations: int = 0
    pivots: int = 0
    entering_index: int = -1
    status = "unbounded"


@dataclass(frozen=True)
class IterationLimitReached:
    """The iteration cap expired before any other outcome."""

    iterations: int = 0
    pivots: int = 0
    status = "Iteration limit"


SolveResult = Union[Optimal, Infeasible, Unbounded, IterationLimitReached]
