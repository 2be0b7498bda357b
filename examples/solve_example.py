"""Example script demonstrating usage of the revised simplex solver.

Solves a small production-planning LP:

    maximize   3 x + 2 y
    subject to x +  y <= 4
               x + 3y <= 6
               0 <= x <= 3, y >= 0

Each ``<=`` row gets a slack variable, and one artificial row variable per row
forms the starting basis, so phase 1 starts from the identity inverse.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import numpy as np

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from rsm_solver import (  # noqa: E402
    INFINITY,
    Instance,
    Model,
    PivotInfo,
    SolverOptions,
    VariableStatus,
    rsm_solve,
    validate_instance,
)


def build_model() -> Model:
    return Model.from_dense(
        A=[[1.0, 1.0, 1.0, 0.0], [1.0, 3.0, 0.0, 1.0]],
        b=[4.0, 6.0],
        c=[-3.0, -2.0, 0.0, 0.0],
        xl=[0.0, 0.0, 0.0, 0.0],
        xu=[3.0, INFINITY, INFINITY, INFINITY],
    )


def all_artificial_start(model: Model) -> Instance:
    """Every structural variable at its lower bound, row variables basic."""
    inst = Instance.allocate(model.nrows, model.nvars, tolerance=1e-7)
    inst.xl[: model.nvars] = model.xl
    inst.xu[: model.nvars] = model.xu
    inst.x[: model.nvars] = model.xl
    inst.status[: model.nvars] = VariableStatus.AT_LOWER

    # The right-hand side is nonnegative here, so every row variable starts
    # feasible in [0, inf) and is charged +1 per unit in phase 1.
    for i in range(model.nrows):
        j = model.nvars + i
        inst.basics[i] = j
        inst.status[j] = VariableStatus.BASIC
        inst.x[j] = model.b[i]
        inst.xl[j], inst.xu[j] = 0.0, INFINITY
        inst.basic_costs[i] = 1.0
    inst.binverse[:, :] = np.eye(model.nrows)
    return inst


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    model = build_model()
    instance = all_artificial_start(model)
    validate_instance(model, instance)

    def on_pivot(info: PivotInfo) -> None:
        kind = "bound flip" if info.bound_flip else f"row {info.leaving_row} leaves"
        print(
            f"  iter {info.iteration:3d} phase {info.phase}: "
            f"x{info.entering_index} enters, {kind}, step={info.step:g}"
        )

    result = rsm_solve(model, instance, options=SolverOptions(max_iterations=100), pivot_callback=on_pivot)

    print(f"Solved: status={result.status}, iterations={result.iterations}, pivots={result.pivots}")
    if result.status == "optimal":
        print(f"  objective={result.objective:g}")
        print(f"  x={result.x[:2]}")


if __name__ == "__main__":
    main()
