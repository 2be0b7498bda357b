"""Public solver entrypoint."""

from __future__ import annotations

from .data import Instance, Model, PivotCallback, ProgressCallback, SolveResult, SolverOptions
from .simplex import RevisedSimplex


def rsm_solve(
    model: Model,
    instance: Instance,
    options: SolverOptions | None = None,
    progress_callback: ProgressCallback | None = None,
    pivot_callback: PivotCallback | None = None,
) -> SolveResult:
    """Solve a bounded-variable linear program from a caller-supplied basis.

    Runs the two-phase revised simplex method on ``instance`` in place until it
    proves optimality, infeasibility or unboundedness, or exhausts the
    iteration cap.

    Args:
        model: Static problem definition. Read only.
        instance: Starting basic solution, updated in place. Must be
            consistent with ``model`` (valid basis, true basis inverse,
            nonbasic values on their bounds, phase-1 costs loaded).
        options: Solver configuration. If None, uses defaults
            (10000 iterations, cycle-weighted pricing).
        progress_callback: Optional callback receiving ``ProgressInfo``
            every ``options.progress_interval`` loop passes.
        pivot_callback: Optional callback receiving ``PivotInfo`` after every
            applied pivot.

    Returns:
        Exactly one of:
        - ``Optimal``: ``status == "optimal"``; ``objective`` and ``x`` hold
          the solution, also left in ``instance.objective``/``instance.x``.
        - ``Infeasible``: ``status == "Infeasible"``.
        - ``Unbounded``: ``status == "unbounded"``.
        - ``IterationLimitReached``: ``status == "Iteration limit"``.
        On any outcome but optimal, the instance holds whatever the last
        iteration left.

    Note:
        When phase 1 ends, every row variable still in the basis has its
        ``instance.xl``/``instance.xu`` entries set to 0 and its basic cost
        set to 0, so it stays at zero during phase 2. Structural bounds are
        never changed.

    Raises:
        SolverConfigurationError: If ``instance.phase`` is neither 1 nor 2.

    Time Complexity:
        O(nrows^2 + nonzeroes) per iteration (dense inverse update plus one
        pass over the matrix for pricing).

    Space Complexity:
        O(nrows^2 + nvars) held by the instance; nothing is retained here.

    Examples:
        >>> result = rsm_solve(model, instance)
        >>> if result.status == "optimal":
        ...     print(result.objective, result.x)

    See Also:
        - RevisedSimplex: the driver, for access to diagnostics after a solve
        - validation.validate_instance: opt-in precondition check
    """
    # Fresh driver per call so no state is shared between solves.
    solver = RevisedSimplex(model, instance, options=options)
    return solver.solve(progress_callback=progress_callback, pivot_callback=pivot_callback)
