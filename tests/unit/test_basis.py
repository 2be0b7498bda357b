"""Tests for value updates, inverse updates and basis exchange."""

import sys
from pathlib import Path

import numpy as np
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from rsm_solver.basis import (  # noqa: E402
    apply_pivot,
    basis_matrix,
    update_binverse,
    update_variables,
)
from rsm_solver.data import INFINITY, Instance, Model, VariableStatus  # noqa: E402
from rsm_solver.ratio_test import RatioTestResult, compute_gradient  # noqa: E402

B, L, U = VariableStatus.BASIC, VariableStatus.AT_LOWER, VariableStatus.AT_UPPER


def _model():
    return Model.from_dense(
        A=[[2.0, 1.0, 0.0], [1.0, 3.0, 1.0]],
        b=[4.0, 5.0],
        c=[1.0, 2.0, 3.0],
        xl=[0.0, 0.0, 0.0],
        xu=[10.0, INFINITY, 2.0],
    )


def _slack_instance(model):
    nrows, nvars = model.nrows, model.nvars
    inst = Instance.allocate(nrows, nvars)
    inst.xl[:nvars] = model.xl
    inst.xu[:nvars] = model.xu
    inst.xl[nvars:] = 0.0
    inst.xu[nvars:] = INFINITY
    inst.status[:nvars] = L
    inst.status[nvars:] = B
    inst.basics[:] = np.arange(nvars, nvars + nrows)
    inst.x[nvars:] = model.b
    inst.binverse[:, :] = np.eye(nrows)
    inst.phase = 2
    return inst


def test_basis_matrix_uses_unit_columns_for_row_variables():
    model = _model()

    matrix = basis_matrix(model, np.array([1, 3]))

    # Variable 3 is the row variable of row 0.
    np.testing.assert_array_equal(matrix, [[1.0, 1.0], [3.0, 0.0]])


def test_update_binverse_matches_fresh_inverse():
    model = _model()
    inst = _slack_instance(model)
    inst.entering_index = 0
    compute_gradient(model, inst)
    inst.leaving_index = 0

    update_binverse(inst)

    new_basis = basis_matrix(model, np.array([0, 4]))
    np.testing.assert_allclose(inst.binverse, np.linalg.inv(new_basis))


def test_update_binverse_leaves_no_residual_over_two_pivots():
    model = _model()
    inst = _slack_instance(model)
    inst.entering_index = 0
    compute_gradient(model, inst)
    inst.leaving_index = 0
    update_binverse(inst)
    inst.basics[0] = 0

    inst.entering_index = 1
    compute_gradient(model, inst)
    inst.leaving_index = 1
    update_binverse(inst)
    inst.basics[1] = 1

    product = inst.binverse @ basis_matrix(model, inst.basics)
    np.testing.assert_allclose(product, np.eye(2), atol=1e-12)


def test_update_variables_moves_basics_against_gradient():
    model = _model()
    inst = _slack_instance(model)
    inst.entering_index = 1
    compute_gradient(model, inst)
    inst.max_change = 1.5

    update_variables(inst)

    np.testing.assert_allclose(inst.x, [0.0, 1.5, 0.0, 4.0 - 1.5, 5.0 - 4.5])


def test_apply_pivot_exchanges_basis_and_snaps_leaving_variable():
    model = _model()
    inst = _slack_instance(model)
    inst.entering_index = 0
    compute_gradient(model, inst)
    # Row 0 limits x0 to 2 (4 / 2); row 1 would allow 5.
    result = RatioTestResult(leaving_row=0, max_change=2.0, to_lower=True)
    inst.max_change = result.max_change
    inst.leaving_index = result.leaving_row

    leaving = apply_pivot(model, inst, result)

    assert leaving == 3
    assert inst.basics.tolist() == [0, 4]
    assert inst.status[0] == B
    assert inst.status[3] == L
    assert inst.x[3] == 0.0
    assert inst.x[0] == pytest.approx(2.0)
    assert inst.x[4] == pytest.approx(3.0)
    assert inst.basic_costs[0] == 1.0


def test_apply_pivot_bound_flip_changes_only_status_and_value():
    model = Model.from_dense(
        A=[[1.0]], b=[1.0], c=[-1.0], xl=[0.1], xu=[0.3]
    )
    inst = _slack_instance(model)
    inst.x[0] = 0.1
    inst.x[1] = 0.9
    binverse_before = inst.binverse.copy()
    inst.entering_index = 0
    compute_gradient(model, inst)
    result = RatioTestResult(leaving_row=None, max_change=0.3 - 0.1, to_lower=False)
    inst.max_change = result.max_change
    inst.leaving_index = -1

    leaving = apply_pivot(model, inst, result)

    assert leaving is None
    assert inst.status[0] == U
    assert inst.x[0] == inst.xu[0]
    assert inst.x[1] == pytest.approx(0.7)
    assert inst.basics.tolist() == [1]
    np.testing.assert_array_equal(inst.binverse, binverse_before)
