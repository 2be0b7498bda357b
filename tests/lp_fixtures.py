"""Starting-basis builder and small LP fixtures shared by the test suite.

The engine expects the caller to provide a valid starting basis. This helper
plays that caller: structural variables start on a finite bound (or at zero
when free), and one artificial row variable per row absorbs the residual
``b - A x``, with a phase-1 cost that makes it pay for its absolute value.
"""

from __future__ import annotations

import numpy as np

from rsm_solver.data import INFINITY, Instance, Model, VariableStatus


def build_start(model: Model, tolerance: float = 1e-7) -> Instance:
    nrows, nvars = model.nrows, model.nvars
    inst = Instance.allocate(nrows, nvars, tolerance=tolerance)
    inst.xl[:nvars] = model.xl
    inst.xu[:nvars] = model.xu

    for j in range(nvars):
        if model.xl[j] > -INFINITY:
            inst.x[j] = model.xl[j]
            inst.status[j] = VariableStatus.AT_LOWER
        elif model.xu[j] < INFINITY:
            inst.x[j] = model.xu[j]
            inst.status[j] = VariableStatus.AT_UPPER
        else:
            inst.x[j] = 0.0
            inst.status[j] = VariableStatus.FREE

    residual = model.b - model.matrix.to_scipy() @ inst.x[:nvars]
    for i in range(nrows):
        j = nvars + i
        inst.basics[i] = j
        inst.status[j] = VariableStatus.BASIC
        inst.x[j] = residual[i]
        if residual[i] >= 0.0:
            inst.xl[j], inst.xu[j] = 0.0, INFINITY
            inst.basic_costs[i] = 1.0
        else:
            inst.xl[j], inst.xu[j] = -INFINITY, 0.0
            inst.basic_costs[i] = -1.0

    inst.binverse[:, :] = np.eye(nrows)
    return inst


def with_slacks(A, b, c, xl, xu) -> Model:
    """Turn ``A x <= b`` rows into equalities with one nonnegative slack per row."""
    A = np.asarray(A, dtype=float)
    nrows = A.shape[0]
    return Model.from_dense(
        A=np.hstack([A, np.eye(nrows)]),
        b=b,
        c=list(c) + [0.0] * nrows,
        xl=list(xl) + [0.0] * nrows,
        xu=list(xu) + [INFINITY] * nrows,
    )


def textbook_model() -> Model:
    """maximize x + y s.t. x <= 4, y <= 4, x + y <= 6, as a bounded minimisation."""
    return with_slacks(
        A=[[1.0, 1.0]],
        b=[6.0],
        c=[-1.0, -1.0],
        xl=[0.0, 0.0],
        xu=[4.0, 4.0],
    )


def unique_optimum_model() -> Model:
    """maximize 3x + 2y s.t. x + y <= 4, x + 3y <= 6, x <= 3. Optimum (3, 1), value 11."""
    return with_slacks(
        A=[[1.0, 1.0], [1.0, 3.0]],
        b=[4.0, 6.0],
        c=[-3.0, -2.0],
        xl=[0.0, 0.0],
        xu=[3.0, INFINITY],
    )


def beale_model() -> Model:
    """Beale's cycling example. Optimum -5/4 at x4 = 1, x6 = 1."""
    return with_slacks(
        A=[
            [0.25, -8.0, -1.0, 9.0],
            [0.5, -12.0, -0.5, 3.0],
            [0.0, 0.0, 1.0, 0.0],
        ],
        b=[0.0, 0.0, 1.0],
        c=[-0.75, 20.0, -0.5, 6.0],
        xl=[0.0] * 4,
        xu=[INFINITY] * 4,
    )


def unbounded_model() -> Model:
    """minimize -x1 s.t. x1 - x2 = 0, both unbounded above."""
    return Model.from_dense(
        A=[[1.0, -1.0]],
        b=[0.0],
        c=[-1.0, 0.0],
        xl=[0.0, 0.0],
        xu=[INFINITY, INFINITY],
    )


def infeasible_model() -> Model:
    """x1 + x2 = 1 and x1 + x2 = 3 cannot both hold."""
    return Model.from_dense(
        A=[[1.0, 1.0], [1.0, 1.0]],
        b=[1.0, 3.0],
        c=[1.0, 1.0],
        xl=[0.0, 0.0],
        xu=[INFINITY, INFINITY],
    )


def free_variable_model() -> Model:
    """minimize x1 s.t. x1 - x2 = -3, x1 free, 0 <= x2 <= 5. Optimum x1 = -3."""
    return Model.from_dense(
        A=[[1.0, -1.0]],
        b=[-3.0],
        c=[1.0, 0.0],
        xl=[-INFINITY, 0.0],
        xu=[INFINITY, 5.0],
    )
