"""Convergence diagnostics and stalling detection for the revised simplex engine.

This module provides utilities to monitor solver progress and detect
convergence issues such as stalling, degeneracy and revisited bases. The
monitors only observe; pivot selection never depends on them.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

import numpy as np


@dataclass
class ConvergenceMonitor:
    """Monitors convergence progress and detects stalling.

    Tracks objective value history and the share of degenerate pivots.

    Attributes:
        window_size: Number of recent pivots to track
        stall_threshold: Relative improvement threshold for stalling detection
        degeneracy_threshold: Ratio threshold for degeneracy warning

    Examples:
        >>> monitor = ConvergenceMonitor(window_size=50)
        >>> monitor.record_pivot(objective=10.0, is_degenerate=False)
        >>> monitor.record_pivot(objective=10.0, is_degenerate=True)
        >>> monitor.get_degeneracy_ratio()
        0.5
    """

    window_size: int = 50
    stall_threshold: float = 1e-8
    degeneracy_threshold: float = 0.5

    objective_history: deque[float] = field(default_factory=lambda: deque(maxlen=50))
    degenerate_pivots: int = 0
    total_pivots: int = 0
    consecutive_no_improvement: int = 0

    def __post_init__(self) -> None:
        """Initialize history with correct maxlen."""
        self.objective_history = deque(maxlen=self.window_size)

    def record_pivot(self, objective: float, is_degenerate: bool = False) -> None:
        """Record one pivot's objective value and degeneracy."""
        self.objective_history.append(objective)
        self.total_pivots += 1
        if is_degenerate:
            self.degenerate_pivots += 1

        if len(self.objective_history) >= 2:
            prev_obj = self.objective_history[-2]
            change = abs(self.objective_history[-1] - prev_obj)
            # Relative change, falling back to absolute near zero.
            if abs(prev_obj) > 1e-12:
                change /= abs(prev_obj)
            if change < self.stall_threshold:
                self.consecutive_no_improvement += 1
            else:
                self.consecutive_no_improvement = 0

    def reset(self) -> None:
        """Forget history, e.g. when the objective changes at a phase switch."""
        self.objective_history.clear()
        self.consecutive_no_improvement = 0

    def is_stalled(self, min_consecutive: int = 10) -> bool:
        return self.consecutive_no_improvement >= min_consecutive

    def is_highly_degenerate(self) -> bool:
        """Check if degeneracy ratio is high.

        Returns:
            True if degenerate pivot ratio exceeds threshold (after 10 pivots)
        """
        if self.total_pivots < 10:
            return False
        return self.get_degeneracy_ratio() > self.degeneracy_threshold

    def get_degeneracy_ratio(self) -> float:
        if self.total_pivots == 0:
            return 0.0
        return self.degenerate_pivots / self.total_pivots

    def get_diagnostic_summary(self) -> dict[str, float | bool | int]:
        return {
            "total_pivots": self.total_pivots,
            "degenerate_pivots": self.degenerate_pivots,
            "degeneracy_ratio": self.get_degeneracy_ratio(),
            "is_stalled": self.is_stalled(),
            "is_highly_degenerate": self.is_highly_degenerate(),
            "consecutive_no_improvement": self.consecutive_no_improvement,
        }


@dataclass
class BasisHistory:
    """Tracks recent bases to detect revisits.

    A basis is identified by the set of basic variables, independent of which
    row each one occupies.

    Attributes:
        max_history: Maximum number of basis states to track

    Examples:
        >>> history = BasisHistory(max_history=100)
        >>> history.record_basis(np.array([3, 4]))
        >>> history.record_basis(np.array([4, 3]))
        >>> history.is_cycling(min_revisits=2)
        True
    """

    max_history: int = 100
    history: deque[int] = field(default_factory=lambda: deque(maxlen=100))
    visit_counts: dict[int, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Initialize history with correct maxlen."""
        self.history = deque(maxlen=self.max_history)

    def _hash_basis(self, basics: np.ndarray) -> int:
        return hash(tuple(sorted(int(j) for j in basics)))

    def record_basis(self, basics: np.ndarray) -> None:
        basis_hash = self._hash_basis(basics)
        self.history.append(basis_hash)
        self.visit_counts[basis_hash] = self.visit_counts.get(basis_hash, 0) + 1

        # Keep counts bounded: drop hashes that fell out of the window.
        if len(self.visit_counts) > self.max_history * 2:
            current_hashes = set(self.history)
            for key in [k for k in self.visit_counts if k not in current_hashes]:
                del self.visit_counts[key]

    def is_cycling(self, min_revisits: int = 3) -> bool:
        """Check if any recent basis has been visited at least ``min_revisits`` times."""
        if not self.history:
            return False
        recent_hashes = list(self.history)[-20:]
        return any(self.visit_counts.get(h, 0) >= min_revisits for h in recent_hashes)

    def get_most_frequent_basis_count(self) -> int:
        if not self.visit_counts:
            return 0
        return max(self.visit_counts.values())
