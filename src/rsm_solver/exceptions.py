"""Custom exceptions for the revised simplex solver library.

Solve outcomes (optimal, infeasible, unbounded, iteration limit) are never
signalled through exceptions; they are returned as result objects by
``rsm_solve``. The exceptions below only cover construction, configuration
and opt-in validation, all of which happen outside the pivot loop.
"""

from __future__ import annotations


class RSMSolverError(Exception):
    """Base exception for all revised simplex solver errors.

    All custom exceptions in the rsm_solver package inherit from this class,
    allowing users to catch all solver-related errors with a single except clause.

    Example:
        try:
            model = Model.from_dense(A, b, c, xl, xu)
        except RSMSolverError as e:
            print(f"Solver error: {e}")
    """


class InvalidModelError(RSMSolverError):
    """Raised when a model definition is invalid or malformed.

    This includes:
    - Array lengths that do not match the declared dimensions
    - Non-monotone row offsets in the compressed-row matrix
    - Column indexes outside [0, nvars) or not strictly ascending within a row
    - Lower bounds above upper bounds

    Example:
        InvalidModelError("Row 3 columns are not strictly ascending: [4, 2]")
    """

    def __init__(self, message: str, row: int | None = None):
        """Initialize with message and the offending row, when known."""
        super().__init__(message)
        self.row = row


class InvalidInstanceError(RSMSolverError):
    """Raised when a starting instance breaks the solve precondition contract.

    The solver itself never checks the precondition; this error is raised only
    by ``validation.validate_instance`` for callers that opt in. Typical causes:
    - ``basics`` is not injective, or disagrees with ``status``
    - A nonbasic variable does not sit on the bound its status names
    - ``binverse`` is not the inverse of the basic columns

    Example:
        InvalidInstanceError(
            "Basis inverse residual 3.2e-02 exceeds tolerance 1e-07",
            residual=3.2e-02,
        )
    """

    def __init__(self, message: str, residual: float | None = None):
        """Initialize with message and optional inverse residual."""
        super().__init__(message)
        self.residual = residual


class SolverConfigurationError(RSMSolverError):
    """Raised when solver configuration or options are invalid.

    This includes:
    - Non-positive iteration caps or progress intervals
    - Unknown pricing strategy names
    - Phase numbers other than 1 and 2

    Example:
        SolverConfigurationError("max_iterations must be positive, got -1")
    """
