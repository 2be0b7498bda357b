"""Tests for convergence diagnostics."""

import sys
from pathlib import Path

import numpy as np

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from rsm_solver.diagnostics import BasisHistory, ConvergenceMonitor  # noqa: E402


def test_monitor_counts_degenerate_pivots():
    monitor = ConvergenceMonitor()
    for idx in range(10):
        monitor.record_pivot(objective=-float(idx), is_degenerate=idx % 2 == 0)

    assert monitor.total_pivots == 10
    assert monitor.degenerate_pivots == 5
    assert monitor.get_degeneracy_ratio() == 0.5
    assert not monitor.is_highly_degenerate()


def test_monitor_flags_high_degeneracy_after_ten_pivots():
    monitor = ConvergenceMonitor(degeneracy_threshold=0.5)
    for _ in range(9):
        monitor.record_pivot(objective=1.0, is_degenerate=True)
    assert not monitor.is_highly_degenerate()

    monitor.record_pivot(objective=1.0, is_degenerate=True)
    assert monitor.is_highly_degenerate()


def test_monitor_detects_stall_and_reset_clears_it():
    monitor = ConvergenceMonitor(window_size=20)
    for _ in range(12):
        monitor.record_pivot(objective=3.0)

    assert monitor.is_stalled()

    monitor.reset()
    assert not monitor.is_stalled()
    assert len(monitor.objective_history) == 0
    # Pivot counts survive a reset.
    assert monitor.total_pivots == 12


def test_monitor_improvement_resets_stall_counter():
    monitor = ConvergenceMonitor()
    for value in [5.0, 5.0, 5.0, 4.0]:
        monitor.record_pivot(objective=value)

    assert monitor.consecutive_no_improvement == 0


def test_monitor_summary_keys():
    summary = ConvergenceMonitor().get_diagnostic_summary()

    assert set(summary) == {
        "total_pivots",
        "degenerate_pivots",
        "degeneracy_ratio",
        "is_stalled",
        "is_highly_degenerate",
        "consecutive_no_improvement",
    }


def test_basis_history_ignores_row_order():
    history = BasisHistory()
    history.record_basis(np.array([3, 4]))
    history.record_basis(np.array([4, 3]))

    assert history.get_most_frequent_basis_count() == 2
    assert history.is_cycling(min_revisits=2)
    assert not history.is_cycling(min_revisits=3)


def test_basis_history_bounds_visit_counts():
    history = BasisHistory(max_history=5)
    for idx in range(20):
        history.record_basis(np.array([idx, idx + 1]))

    assert len(history.history) == 5
    assert len(history.visit_counts) <= 10
