"""Opt-in checks of the solve preconditions and basis invariants.

``rsm_solve`` trusts its inputs. These helpers let a caller (or a test) confirm
that a model is well formed and that an instance is a valid basic solution
before solving, or that the invariants still hold after any pivot.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from .basis import basis_matrix
from .data import VariableStatus
from .exceptions import InvalidInstanceError, InvalidModelError

if TYPE_CHECKING:
    from .data import Instance, Model


def validate_model(model: Model) -> None:
    """Check dimensions, CSR structure and bounds of a model.

    Raises:
        InvalidModelError: On the first violation found.
    """
    matrix = model.matrix
    row_starts = matrix.row_starts
    if row_starts[0] != 0 or row_starts[-1] != matrix.nonzeroes:
        raise InvalidModelError(
            f"row_starts must run from 0 to nonzeroes ({matrix.nonzeroes}), "
            f"got {row_starts[0]} to {row_starts[-1]}."
        )
    if np.any(np.diff(row_starts) < 0):
        raise InvalidModelError("row_starts must be monotone non-decreasing.")
    if matrix.nonzeroes and (matrix.indexes.min() < 0 or matrix.indexes.max() >= model.nvars):
        raise InvalidModelError(
            f"Column indexes must lie in [0, {model.nvars}), "
            f"got range [{matrix.indexes.min()}, {matrix.indexes.max()}]."
        )
    for i in range(model.nrows):
        cols, _ = matrix.row(i)
        if cols.shape[0] > 1 and np.any(np.diff(cols) <= 0):
            raise InvalidModelError(
                f"Row {i} columns are not strictly ascending: {cols.tolist()}",
                row=i,
            )
    bad = np.flatnonzero(model.xl > model.xu)
    if bad.shape[0]:
        j = int(bad[0])
        raise InvalidModelError(
            f"Variable {j} has lower bound ({model.xl[j]}) above upper bound ({model.xu[j]})."
        )


def inverse_residual(model: Model, instance: Instance) -> float:
    """Largest absolute entry of ``binverse @ B - I`` for the current basis."""
    nrows = model.nrows
    if nrows == 0:
        return 0.0
    product = instance.binverse @ basis_matrix(model, instance.basics)
    return float(np.max(np.abs(product - np.eye(nrows))))


def nonbasic_bound_violations(instance: Instance) -> list[int]:
    """Nonbasic variables whose value is not exactly the bound their status names."""
    violations: list[int] = []
    for j, code in enumerate(instance.status):
        status = VariableStatus(int(code))
        if status is VariableStatus.AT_LOWER and instance.x[j] != instance.xl[j]:
            violations.append(j)
        elif status is VariableStatus.AT_UPPER and instance.x[j] != instance.xu[j]:
            violations.append(j)
    return violations


def validate_instance(model: Model, instance: Instance, residual_tolerance: float | None = None) -> None:
    """Check that ``instance`` is a valid basic solution for ``model``.

    Args:
        model: The problem the instance belongs to.
        instance: The starting (or current) solve state.
        residual_tolerance: Allowed ``inverse_residual``; defaults to the
            instance tolerance.

    Raises:
        InvalidInstanceError: On the first violation found.
    """
    nrows, nvars = model.nrows, model.nvars
    if instance.nrows != nrows or instance.nvars != nvars:
        raise InvalidInstanceError(
            f"Instance dimensions ({instance.nrows}, {instance.nvars}) do not match "
            f"model dimensions ({nrows}, {nvars})."
        )
    basics = instance.basics
    if basics.shape[0] and (basics.min() < 0 or basics.max() >= nrows + nvars):
        raise InvalidInstanceError("basics refers to a variable outside [0, nrows + nvars).")
    if np.unique(basics).shape[0] != nrows:
        raise InvalidInstanceError("basics must list each basic variable exactly once.")

    is_basic = instance.status == VariableStatus.BASIC
    in_basics = np.zeros(nrows + nvars, dtype=bool)
    in_basics[basics] = True
    mismatch = np.flatnonzero(is_basic != in_basics)
    if mismatch.shape[0]:
        raise InvalidInstanceError(
            f"Variable {int(mismatch[0])} status disagrees with basics "
            f"(status BASIC iff listed in basics)."
        )

    off_bound = nonbasic_bound_violations(instance)
    if off_bound:
        raise InvalidInstanceError(
            f"Nonbasic variables {off_bound[:5]} do not sit on their declared bound."
        )

    if not np.array_equal(instance.xl[:nvars], model.xl) or not np.array_equal(
        instance.xu[:nvars], model.xu
    ):
        raise InvalidInstanceError("Structural bounds on the instance differ from the model.")

    limit = instance.tolerance if residual_tolerance is None else residual_tolerance
    residual = inverse_residual(model, instance)
    if residual > limit:
        raise InvalidInstanceError(
            f"Basis inverse residual {residual:.1e} exceeds tolerance {limit:.0e}",
            residual=residual,
        )
