from __future__ import annotations

from typing import Literal

import numpy as np
import scipy.linalg

from angmom.numeric import EQ_TOL
from angmom.states.vector import StateVector, as_state

OperatorKind = Literal["general", "hermitian"]


class MatrixOperator:
    """Dense square operator on a fixed-dimension Hilbert space.

    ``j`` tags operators built for a specific angular momentum; it is carried
    through ``scale``/``adjoint`` and through ``compose``/``add`` when both
    operands agree.
    """

    def __init__(self, matrix, kind: OperatorKind = "general", *, j: float | None = None) -> None:
        mat = np.array(matrix, dtype=np.complex128, copy=True)
        if mat.ndim != 2 or mat.shape[0] != mat.shape[1]:
            raise ValueError(f"operator matrix must be square, got shape {mat.shape}")
        if kind not in ("general", "hermitian"):
            raise ValueError("kind must be 'general' or 'hermitian'")
        mat.setflags(write=False)
        self._matrix = mat
        self.kind: OperatorKind = kind
        self.j = None if j is None else float(j)

    @property
    def dimension(self) -> int:
        return int(self._matrix.shape[0])

    def to_matrix(self) -> np.ndarray:
        return np.array(self._matrix)

    def _shared_j(self, other: "MatrixOperator") -> float | None:
        return self.j if self.j == other.j else None

    def _check_dim(self, other: "MatrixOperator") -> None:
        if other.dimension != self.dimension:
            raise ValueError(f"operator dimension mismatch: {self.dimension} vs {other.dimension}")

    def apply(self, state) -> StateVector:
        """Act on a StateVector or a plain amplitude sequence."""

        state = as_state(state)
        if state.dimension != self.dimension:
            raise ValueError(
                f"state dimension {state.dimension} does not match operator dimension {self.dimension}"
            )
        return StateVector(self._matrix @ state.amplitudes)

    def compose(self, other: "MatrixOperator") -> "MatrixOperator":
        """Return ``self @ other`` (``other`` acts first)."""

        self._check_dim(other)
        return MatrixOperator(self._matrix @ other._matrix, j=self._shared_j(other))

    def add(self, other: "MatrixOperator") -> "MatrixOperator":
        self._check_dim(other)
        kind: OperatorKind = "hermitian" if (self.kind == other.kind == "hermitian") else "general"
        return MatrixOperator(self._matrix + other._matrix, kind, j=self._shared_j(other))

    def scale(self, c: complex) -> "MatrixOperator":
        c = complex(c)
        kind: OperatorKind = "hermitian" if (self.kind == "hermitian" and c.imag == 0.0) else "general"
        return MatrixOperator(self._matrix * c, kind, j=self.j)

    def adjoint(self) -> "MatrixOperator":
        return MatrixOperator(self._matrix.conj().T, self.kind, j=self.j)

    def expm(self) -> "MatrixOperator":
        """Matrix exponential exp(self)."""

        return MatrixOperator(scipy.linalg.expm(self._matrix), j=self.j)

    def is_hermitian(self, tol: float = EQ_TOL) -> bool:
        return bool(np.allclose(self._matrix, self._matrix.conj().T, atol=float(tol), rtol=0.0))

    def expectation_value(self, state: StateVector) -> complex:
        """<state|self|state>."""

        return state.inner(self.apply(state))

    def __repr__(self) -> str:
        return f"MatrixOperator(dim={self.dimension}, kind={self.kind!r}, j={self.j})"
