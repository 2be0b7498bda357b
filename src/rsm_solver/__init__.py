"""High-level entrypoints for the revised simplex solver library."""

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
    VariableStatus,
)
from .diagnostics import BasisHistory, ConvergenceMonitor
from .exceptions import (
    InvalidInstanceError,
    InvalidModelError,
    RSMSolverError,
    SolverConfigurationError,
)
from .simplex import RevisedSimplex
from .solver import rsm_solve
from .sparse import SparseMatrixView
from .validation import (
    inverse_residual,
    nonbasic_bound_violations,
    validate_instance,
    validate_model,
)

__version__ = "0.1.0"

__all__ = [
    # Main API
    "rsm_solve",
    "RevisedSimplex",
    # Problem and state
    "Model",
    "Instance",
    "SparseMatrixView",
    "VariableStatus",
    "INFINITY",
    # Configuration
    "SolverOptions",
    # Results
    "SolveResult",
    "Optimal",
    "Infeasible",
    "Unbounded",
    "IterationLimitReached",
    # Progress tracking
    "ProgressCallback",
    "ProgressInfo",
    "PivotCallback",
    "PivotInfo",
    # Validation
    "validate_model",
    "validate_instance",
    "inverse_residual",
    "nonbasic_bound_violations",
    # Diagnostics
    "ConvergenceMonitor",
    "BasisHistory",
    # Exceptions
    "RSMSolverError",
    "InvalidModelError",
    "InvalidInstanceError",
    "SolverConfigurationError",
    # Version
    "__version__",
]
