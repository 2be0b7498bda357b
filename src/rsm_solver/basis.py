"""Basis bookkeeping: value updates, explicit inverse updates and basis exchange."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from .data import VariableStatus

if TYPE_CHECKING:
    from .data import Instance, Model
    from .ratio_test import RatioTestResult


def update_variables(instance: Instance) -> None:
    """Move along the pivot direction by ``instance.max_change``."""
    step = instance.max_change
    basics = instance.basics
    instance.x[basics] -= step * instance.gradient
    instance.x[instance.entering_index] += step


def update_binverse(instance: Instance) -> None:
    """Gauss-Jordan update of the explicit inverse, pivoting on the leaving row.

    Every other row ``i`` loses ``gradient[i] / gradient[l]`` times the leaving
    row, then the leaving row is scaled by ``1 / gradient[l]``.
    """
    li = instance.leaving_index
    binverse = instance.binverse
    ilg = 1.0 / instance.gradient[li]
    ratios = instance.gradient * ilg
    ratios[li] = 0.0
    binverse -= np.outer(ratios, binverse[li])
    binverse[li] *= ilg


def apply_pivot(model: Model, instance: Instance, result: RatioTestResult) -> int | None:
    """Apply a ratio-test outcome to the instance.

    Returns the index of the variable that left the basis, or None for a bound
    flip. ``instance.max_change`` and ``instance.leaving_index`` must already
    hold the result's values.
    """
    entering = instance.entering_index
    update_variables(instance)

    if result.leaving_row is None:
        status = VariableStatus(int(instance.status[entering])).flipped()
        instance.status[entering] = status
        # xl + (xu - xl) need not round to xu.
        if status is VariableStatus.AT_UPPER:
            instance.x[entering] = instance.xu[entering]
        elif status is VariableStatus.AT_LOWER:
            instance.x[entering] = instance.xl[entering]
        return None

    row = result.leaving_row
    update_binverse(instance)

    leaving = int(instance.basics[row])
    # Snap exactly onto the bound so nonbasic values carry no rounding error.
    if result.to_lower:
        instance.x[leaving] = instance.xl[leaving]
        instance.status[leaving] = VariableStatus.AT_LOWER
    else:
        instance.x[leaving] = instance.xu[leaving]
        instance.status[leaving] = VariableStatus.AT_UPPER

    instance.basics[row] = entering
    instance.basic_costs[row] = instance.active_costs(model)[entering]
    instance.status[entering] = VariableStatus.BASIC
    return leaving


def basis_matrix(model: Model, basics: np.ndarray) -> np.ndarray:
    """Dense basis matrix whose columns are the columns of the basic variables.

    Row variable ``nvars + i`` contributes the unit vector of row ``i``.
    """
    nrows = model.nrows
    matrix = np.zeros((nrows, nrows))
    for pos, j in enumerate(basics):
        j = int(j)
        if j < model.nvars:
            matrix[:, pos] = model.matrix.column(j)
        else:
            matrix[j - model.nvars, pos] = 1.0
    return matrix
