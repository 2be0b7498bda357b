"""Pricing: simplex multipliers, reduced costs and entering-variable selection.

This module contains the pricing half of each iteration. ``compute_pi`` and
``compute_reduced_costs`` price out the current basis; a ``PricingStrategy``
then picks which nonbasic structural variable should enter.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import numpy as np

from .data import STATUS_SIGN, VariableStatus
from .exceptions import SolverConfigurationError

if TYPE_CHECKING:
    from .data import Instance, Model


def compute_pi(instance: Instance) -> np.ndarray:
    """pi = basic_costs' * Binverse, skipping negligible basic costs."""
    pi = instance.pi
    pi.fill(0.0)
    tol = instance.tolerance
    for i, cost in enumerate(instance.basic_costs):
        if abs(cost) > tol:
            pi += cost * instance.binverse[i]
    return pi


def compute_reduced_costs(model: Model, instance: Instance) -> np.ndarray:
    """reduced cost = cost - pi' * A, for the nonbasic structural variables.

    Works through A one row at a time so every nonzero is used once, instead of
    forming pi' * A column by column. Basic entries are exactly zero.
    """
    nvars = model.nvars
    reduced_costs = instance.reduced_costs
    basic = instance.status[:nvars] == VariableStatus.BASIC
    np.copyto(reduced_costs, instance.active_costs(model))
    tol = instance.tolerance
    for i, p in enumerate(instance.pi):
        if abs(p) > tol:
            cols, vals = model.matrix.row(i)
            reduced_costs[cols] -= p * vals
    reduced_costs[basic] = 0.0
    return reduced_costs


def violation_scores(status: np.ndarray, reduced_costs: np.ndarray) -> np.ndarray:
    """Signed pricing score of every structural variable.

    Negative means moving the variable off its current position improves the
    objective: ``sign * rc`` for bounded nonbasic variables, ``-|rc|`` for free
    ones, and zero for basic ones.
    """
    status = status[: reduced_costs.shape[0]]
    scores = STATUS_SIGN[status] * reduced_costs
    free = status == VariableStatus.FREE
    scores[free] = -np.abs(reduced_costs[free])
    return scores


class PricingStrategy(ABC):
    """Abstract base class for entering-variable selection."""

    @abstractmethod
    def select_entering(self, instance: Instance) -> int | None:
        """Select the entering structural variable.

        Args:
            instance: Solve state with up-to-date ``reduced_costs``.

        Returns:
            Index of the entering variable, or None if no candidate has a score
            below ``-instance.tolerance`` (the current phase is optimal).
        """


class CycleWeightedPricing(PricingStrategy):
    """Bland-style anti-cycling pricing driven by per-variable cycle counters.

    Among the candidates, the variable that entered least often since the last
    nondegenerate step wins; ties go to the most negative score, then to the
    lowest index. A variable that keeps entering through degenerate pivots
    therefore loses priority to the others until progress is made.
    """

    def select_entering(self, instance: Instance) -> int | None:
        scores = violation_scores(instance.status, instance.reduced_costs)
        candidates = np.flatnonzero(scores < -instance.tolerance)
        if candidates.shape[0] == 0:
            return None
        # lexsort is stable and sorts by the last key first.
        order = np.lexsort((scores[candidates], instance.basic_cycles[candidates]))
        return int(candidates[order[0]])


class DantzigPricing(PricingStrategy):
    """Dantzig pricing: select the most negative score, ignoring cycle counters.

    Cheaper to reason about but offers no protection against cycling on
    degenerate problems; the iteration cap is the only backstop.
    """

    def select_entering(self, instance: Instance) -> int | None:
        scores = violation_scores(instance.status, instance.reduced_costs)
        best = int(np.argmin(scores)) if scores.shape[0] else -1
        if best < 0 or scores[best] >= -instance.tolerance:
            return None
        return best


def make_pricing_strategy(name: str) -> PricingStrategy:
    if name == "cycles":
        return CycleWeightedPricing()
    if name == "dantzig":
        return DantzigPricing()
    raise SolverConfigurationError(
        f"Invalid pricing strategy '{name}'. Must be 'cycles' or 'dantzig'."
    )
