"""Compressed-row view of the constraint matrix.

The view exposes per-row slices for the pricing and gradient loops and
nothing resembling a general sparse matrix API.
Conversion to and from SciPy is provided for building models and for checks.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy.sparse import csr_matrix, issparse

from .exceptions import InvalidModelError


@dataclass(frozen=True)
class SparseMatrixView:
    """Read-only compressed-row (CSR) constraint matrix.

    Attributes:
        nrows: Number of constraint rows.
        ncols: Number of structural columns.
        row_starts: Offsets into ``indexes``/``elements``, length nrows + 1.
        indexes: Column index of every nonzero.
        elements: Value of every nonzero.

    Columns within each row must be strictly ascending. The gradient
    computation relies on this to stop scanning a row early.

    Examples:
        >>> view = SparseMatrixView.from_dense([[1.0, 0.0, 2.0], [0.0, 3.0, 0.0]])
        >>> view.nonzeroes
        3
        >>> cols, vals = view.row(0)
        >>> cols.tolist(), vals.tolist()
        ([0, 2], [1.0, 2.0])
    """

    nrows: int
    ncols: int
    row_starts: np.ndarray
    indexes: np.ndarray
    elements: np.ndarray

    def __post_init__(self) -> None:
        if self.nrows < 0 or self.ncols < 0:
            raise InvalidModelError(
                f"Matrix dimensions must be non-negative, got {self.nrows}x{self.ncols}."
            )
        row_starts = np.asarray(self.row_starts, dtype=np.int64)
        indexes = np.asarray(self.indexes, dtype=np.int64)
        elements = np.asarray(self.elements, dtype=float)
        if row_starts.shape != (self.nrows + 1,):
            raise InvalidModelError(
                f"row_starts must have length nrows + 1 = {self.nrows + 1}, "
                f"got {row_starts.shape[0]}."
            )
        if indexes.shape != elements.shape:
            raise InvalidModelError(
                f"indexes ({indexes.shape[0]}) and elements ({elements.shape[0]}) "
                f"must have the same length."
            )
        # Frozen dataclass: normalise dtypes through object.__setattr__.
        object.__setattr__(self, "row_starts", row_starts)
        object.__setattr__(self, "indexes", indexes)
        object.__setattr__(self, "elements", elements)

    @property
    def nonzeroes(self) -> int:
        return int(self.indexes.shape[0])

    @property
    def shape(self) -> tuple[int, int]:
        return (self.nrows, self.ncols)

    @classmethod
    def allocate(cls, nrows: int, ncols: int, nonzeroes: int) -> SparseMatrixView:
        """Zero-filled view sized exactly for ``nonzeroes`` entries.

        Every row starts empty; the caller fills ``row_starts``, ``indexes``
        and ``elements`` in place before solving.
        """
        return cls(
            nrows=nrows,
            ncols=ncols,
            row_starts=np.zeros(nrows + 1, dtype=np.int64),
            indexes=np.zeros(nonzeroes, dtype=np.int64),
            elements=np.zeros(nonzeroes, dtype=float),
        )

    @classmethod
    def from_scipy(cls, matrix) -> SparseMatrixView:
        """Build a view from any SciPy sparse matrix, sorting column indexes."""
        if not issparse(matrix):
            raise InvalidModelError(
                f"Expected a scipy.sparse matrix, got {type(matrix).__name__}."
            )
        csr = csr_matrix(matrix, dtype=float, copy=True)
        # Duplicates would break the strictly-ascending precondition.
        csr.sum_duplicates()
        csr.eliminate_zeros()
        csr.sort_indices()
        nrows, ncols = csr.shape
        return cls(
            nrows=int(nrows),
            ncols=int(ncols),
            row_starts=csr.indptr.copy(),
            indexes=csr.indices.copy(),
            elements=csr.data.copy(),
        )

    @classmethod
    def from_dense(cls, array) -> SparseMatrixView:
        dense = np.atleast_2d(np.asarray(array, dtype=float))
        if dense.ndim != 2:
            raise InvalidModelError(f"Expected a 2-D array, got {dense.ndim} dimensions.")
        return cls.from_scipy(csr_matrix(dense))

    def to_scipy(self) -> csr_matrix:
        return csr_matrix(
            (self.elements, self.indexes, self.row_starts),
            shape=(self.nrows, self.ncols),
        )

    def row(self, i: int) -> tuple[np.ndarray, np.ndarray]:
        start = self.row_starts[i]
        end = self.row_starts[i + 1]
        return self.indexes[start:end], self.elements[start:end]

    def column(self, j: int) -> np.ndarray:
        """Dense copy of column ``j`` (used to rebuild basis matrices)."""
        out = np.zeros(self.nrows, dtype=float)
        for i in range(self.nrows):
            cols, vals = self.row(i)
            pos = int(np.searchsorted(cols, j))
            if pos < cols.shape[0] and cols[pos] == j:
                out[i] = vals[pos]
        return out

    def has_sorted_rows(self) -> bool:
        for i in range(self.nrows):
            cols, _ = self.row(i)
            if cols.shape[0] > 1 and np.any(np.diff(cols) <= 0):
                return False
        return True
