"""Revised simplex phase orchestrator."""

from __future__ import annotations

import logging
import time

import numpy as np

from .basis import apply_pivot
from .data import (
    INFINITY,
    Infeasible,
    Instance,
    IterationLimitReached,
    Model,
    Optimal,
    PivotCallback,
    PivotInfo,
    ProgressCallback,
    ProgressInfo,
    SolveResult,
    SolverOptions,
    Unbounded,
)
from .diagnostics import BasisHistory, ConvergenceMonitor
from .exceptions import SolverConfigurationError
from .pricing import compute_pi, compute_reduced_costs, make_pricing_strategy
from .ratio_test import compute_gradient, find_leaving_variable


class RevisedSimplex:
    """Two-phase revised simplex driver for one Model/Instance pair.

    Each loop pass prices the current basis, picks an entering variable and,
    if there is one, runs the ratio test and applies the pivot. When pricing
    finds nothing, phase 1 either proves infeasibility or hands over to phase 2,
    and phase 2 stops at the optimum.

    The instance is updated in place. Its starting state must be a valid basic
    solution: ``binverse`` the inverse of the basic columns, nonbasic values on
    their bounds, and ``initial_costs``/``basic_costs`` holding the phase-1
    costs. None of this is checked here; see ``validation.validate_instance``.

    Attributes:
        model: The static problem, never modified.
        instance: The solve state, modified every iteration.
        options: Iteration cap, pricing rule and reporting intervals.
        pricing_strategy: Entering-variable rule built from ``options``.
        monitor: Degeneracy and stall tracking for log warnings.
        basis_history: Revisited-basis tracking for log warnings.

    Note:
        Use ``rsm_solve()`` rather than instantiating this class directly,
        unless the monitors are needed after the solve.
    """

    def __init__(self, model: Model, instance: Instance, options: SolverOptions | None = None):
        self.options = options if options is not None else SolverOptions()
        self.logger = logging.getLogger(__name__)
        self.model = model
        self.instance = instance
        self.pricing_strategy = make_pricing_strategy(self.options.pricing_strategy)
        self.monitor = ConvergenceMonitor(window_size=self.options.degeneracy_window)
        self.basis_history = BasisHistory()
        self._warned_degenerate = False
        self._warned_cycling = False

    def solve(
        self,
        progress_callback: ProgressCallback | None = None,
        pivot_callback: PivotCallback | None = None,
    ) -> SolveResult:
        """Iterate until optimal, infeasible, unbounded or out of iterations.

        The phase is taken from the instance as-is, so an instance that already
        finished phase 1 resumes in phase 2.

        Args:
            progress_callback: Called every ``options.progress_interval`` loop
                passes with a ``ProgressInfo``.
            pivot_callback: Called after every applied pivot with a ``PivotInfo``.

        Returns:
            One of ``Optimal``, ``Infeasible``, ``Unbounded`` or
            ``IterationLimitReached``.
        """
        model = self.model
        inst = self.instance
        max_iterations = self.options.max_iterations
        if inst.phase not in (1, 2):
            raise SolverConfigurationError(f"Invalid phase {inst.phase}. Phase must be 1 or 2.")

        inst.iterations = 0
        inst.pivots = 0
        start_time = time.time()

        self.logger.info(
            "Starting revised simplex solver",
            extra={
                "rows": model.nrows,
                "variables": model.nvars,
                "nonzeroes": model.nonzeroes,
                "phase": inst.phase,
                "max_iterations": max_iterations,
                "pricing_strategy": self.options.pricing_strategy,
                "tolerance": inst.tolerance,
            },
        )

        while True:
            inst.iterations += 1
            if inst.iterations > max_iterations:
                self.logger.warning(
                    "Iteration limit reached before optimality",
                    extra={
                        "iterations": max_iterations,
                        "pivots": inst.pivots,
                        "phase": inst.phase,
                    },
                )
                return IterationLimitReached(iterations=max_iterations, pivots=inst.pivots)

            compute_pi(inst)
            compute_reduced_costs(model, inst)

            if progress_callback is not None and inst.iterations % self.options.progress_interval == 0:
                progress_callback(
                    ProgressInfo(
                        iteration=inst.iterations,
                        max_iterations=max_iterations,
                        phase=inst.phase,
                        pivots=inst.pivots,
                        objective_estimate=self._objective_estimate(),
                        elapsed_time=time.time() - start_time,
                    )
                )

            entering = self.pricing_strategy.select_entering(inst)

            if entering is None:
                if inst.phase == 1:
                    if self._row_variables_remain():
                        self.logger.error(
                            "Problem is infeasible - basic row variables remain nonzero after phase 1",
                            extra={"iterations": inst.iterations, "pivots": inst.pivots},
                        )
                        return Infeasible(iterations=inst.iterations, pivots=inst.pivots)
                    self._enter_phase_two(start_time)
                    continue
                return self._finish_optimal(start_time)

            inst.entering_index = entering
            inst.basic_cycles[entering] += 1

            compute_gradient(model, inst)
            result = find_leaving_variable(model, inst)
            inst.max_change = result.max_change
            inst.leaving_index = -1 if result.leaving_row is None else result.leaving_row

            if inst.phase == 2 and abs(inst.max_change) >= INFINITY / 2.0:
                self.logger.error(
                    "Unbounded problem detected: entering variable can move indefinitely",
                    extra={
                        "entering_index": entering,
                        "reduced_cost": float(inst.reduced_costs[entering]),
                        "iterations": inst.iterations,
                    },
                )
                return Unbounded(
                    iterations=inst.iterations,
                    pivots=inst.pivots,
                    entering_index=entering,
                )

            degenerate = abs(inst.max_change) <= inst.tolerance
            if not degenerate:
                # Progress was made: open a fresh anti-cycling window.
                inst.basic_cycles.fill(0)

            leaving = apply_pivot(model, inst, result)
            inst.pivots += 1
            self._after_pivot(result.leaving_row, leaving, degenerate, pivot_callback)

    def _row_variables_remain(self) -> bool:
        inst = self.instance
        nvars = self.model.nvars
        for j in inst.basics:
            if j >= nvars and abs(inst.x[j]) > inst.tolerance:
                return True
        return False

    def _enter_phase_two(self, start_time: float) -> None:
        """Switch to the real costs and fix the remaining basic row variables at zero."""
        model = self.model
        inst = self.instance
        nvars = model.nvars
        inst.phase = 2
        pinned = 0
        for row, j in enumerate(inst.basics):
            j = int(j)
            if j < nvars:
                inst.basic_costs[row] = model.c[j]
            else:
                inst.basic_costs[row] = 0.0
                inst.xl[j] = 0.0
                inst.xu[j] = 0.0
                pinned += 1
        self.monitor.reset()
        self.logger.info(
            "Phase 1 complete, optimizing from feasible basis",
            extra={
                "iterations": inst.iterations,
                "pivots": inst.pivots,
                "basic_row_variables": pinned,
                "elapsed_ms": (time.time() - start_time) * 1000,
            },
        )

    def _finish_optimal(self, start_time: float) -> Optimal:
        model = self.model
        inst = self.instance
        x = np.array(inst.x[: model.nvars], copy=True)
        inst.objective = float(np.dot(x, model.c))
        self.logger.info(
            "Solver complete",
            extra={
                "status": "optimal",
                "objective": inst.objective,
                "iterations": inst.iterations,
                "pivots": inst.pivots,
                "elapsed_ms": (time.time() - start_time) * 1000,
                **self.monitor.get_diagnostic_summary(),
            },
        )
        return Optimal(
            objective=inst.objective,
            x=x,
            iterations=inst.iterations,
            pivots=inst.pivots,
        )

    def _after_pivot(
        self,
        leaving_row: int | None,
        leaving: int | None,
        degenerate: bool,
        pivot_callback: PivotCallback | None,
    ) -> None:
        inst = self.instance
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(
                "Pivot applied",
                extra={
                    "iteration": inst.iterations,
                    "phase": inst.phase,
                    "entering_index": inst.entering_index,
                    "leaving_row": leaving_row,
                    "leaving_index": leaving,
                    "step": inst.max_change,
                    "degenerate": degenerate,
                },
            )

        self.monitor.record_pivot(self._objective_estimate(), is_degenerate=degenerate)
        if not self._warned_degenerate and self.monitor.is_highly_degenerate():
            self._warned_degenerate = True
            self.logger.warning(
                "High degeneracy detected",
                extra=self.monitor.get_diagnostic_summary(),
            )
        if leaving_row is not None:
            self.basis_history.record_basis(inst.basics)
            if not self._warned_cycling and self.basis_history.is_cycling():
                self._warned_cycling = True
                self.logger.warning(
                    "Basis revisited repeatedly; relying on cycle counters to break the cycle",
                    extra={
                        "iteration": inst.iterations,
                        "visits": self.basis_history.get_most_frequent_basis_count(),
                    },
                )

        if pivot_callback is not None:
            pivot_callback(
                PivotInfo(
                    iteration=inst.iterations,
                    phase=inst.phase,
                    entering_index=inst.entering_index,
                    leaving_row=leaving_row,
                    leaving_index=leaving,
                    step=inst.max_change,
                    degenerate=degenerate,
                )
            )

    def _objective_estimate(self) -> float:
        """Active-cost objective: the infeasibility measure in phase 1."""
        model = self.model
        inst = self.instance
        nvars = model.nvars
        objective = float(np.dot(inst.x[:nvars], inst.active_costs(model)))
        if inst.phase == 1:
            # Phase-1 costs of row variables exist only while they are basic.
            for row, j in enumerate(inst.basics):
                if j >= nvars:
                    objective += float(inst.basic_costs[row] * inst.x[j])
        return objective
