from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence

import numpy as np

from angmom.numeric import EQ_TOL, ZERO_NORM_TOL
from angmom.states.metadata import AngularMomentumMetadata


@dataclass(frozen=True, eq=False)
class StateVector:
    """Immutable fixed-dimension complex state vector.

    The amplitude array is copied on construction and marked read-only;
    every transformation returns a new ``StateVector``.
    """

    amplitudes: np.ndarray
    label: str = ""
    metadata: AngularMomentumMetadata | None = None

    def __post_init__(self) -> None:
        amps = np.array(self.amplitudes, dtype=np.complex128, copy=True)
        if amps.ndim != 1:
            raise ValueError("amplitudes must be a 1D array")
        if amps.size == 0:
            raise ValueError("state dimension must be >= 1")
        amps.setflags(write=False)
        object.__setattr__(self, "amplitudes", amps)
        if self.metadata is not None and not isinstance(self.metadata, AngularMomentumMetadata):
            raise TypeError("metadata must be an AngularMomentumMetadata instance or None")

    @classmethod
    def zeros(cls, dim: int, label: str = "") -> "StateVector":
        return cls(np.zeros(int(dim), dtype=np.complex128), label=label)

    @classmethod
    def basis(cls, dim: int, index: int, label: str = "") -> "StateVector":
        dim = int(dim)
        index = int(index)
        if not 0 <= index < dim:
            raise ValueError(f"basis index {index} out of range for dimension {dim}")
        amps = np.zeros(dim, dtype=np.complex128)
        amps[index] = 1.0
        return cls(amps, label=label or f"|{index}⟩")

    @property
    def dimension(self) -> int:
        return int(self.amplitudes.shape[0])

    def __len__(self) -> int:
        return self.dimension

    def get(self, index: int) -> complex:
        index = int(index)
        if not 0 <= index < self.dimension:
            raise IndexError(f"index {index} out of range for dimension {self.dimension}")
        return complex(self.amplitudes[index])

    def set(self, index: int, value: complex) -> "StateVector":
        """Return a copy with one amplitude replaced (metadata is dropped)."""

        index = int(index)
        if not 0 <= index < self.dimension:
            raise IndexError(f"index {index} out of range for dimension {self.dimension}")
        amps = np.array(self.amplitudes)
        amps[index] = complex(value)
        return StateVector(amps, label=self.label)

    def norm(self) -> float:
        return float(np.linalg.norm(self.amplitudes))

    def is_zero(self, tol: float = ZERO_NORM_TOL) -> bool:
        return self.norm() < float(tol)

    def normalize(self) -> "StateVector":
        nrm = self.norm()
        if nrm < ZERO_NORM_TOL:
            raise ValueError("cannot normalize a zero vector")
        return replace(self, amplitudes=self.amplitudes / nrm)

    def scale(self, c: complex) -> "StateVector":
        return StateVector(self.amplitudes * complex(c), label=self.label)

    def add(self, other: "StateVector") -> "StateVector":
        self._check_same_dim(other)
        return StateVector(self.amplitudes + other.amplitudes)

    def inner(self, other: "StateVector") -> complex:
        """<self|other>."""

        self._check_same_dim(other)
        return complex(np.vdot(self.amplitudes, other.amplitudes))

    def tensor(self, other: "StateVector") -> "StateVector":
        """Kronecker product; component (i1, i2) lands at ``i1*dim2 + i2``."""

        label = f"{self.label}⊗{other.label}" if self.label and other.label else ""
        return StateVector(np.kron(self.amplitudes, other.amplitudes), label=label)

    def equals(self, other: "StateVector", tol: float = EQ_TOL) -> bool:
        if self.dimension != other.dimension:
            return False
        return bool(np.all(np.abs(self.amplitudes - other.amplitudes) < float(tol)))

    def with_metadata(self, metadata: AngularMomentumMetadata | None) -> "StateVector":
        return replace(self, metadata=metadata)

    def with_label(self, label: str) -> "StateVector":
        return replace(self, label=str(label))

    def to_array(self) -> np.ndarray:
        return np.array(self.amplitudes)

    def _check_same_dim(self, other: "StateVector") -> None:
        if self.dimension != other.dimension:
            raise ValueError(f"dimension mismatch: {self.dimension} vs {other.dimension}")

    def __str__(self) -> str:
        if self.label:
            return self.label
        return "StateVector(" + ", ".join(f"{a:.4g}" for a in self.amplitudes) + ")"


def as_state(values: StateVector | Sequence[complex] | np.ndarray) -> StateVector:
    if isinstance(values, StateVector):
        return values
    return StateVector(np.asarray(values, dtype=np.complex128))
