from __future__ import annotations

import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal, Mapping

from angmom.numeric import from_twos, twos_or_none


@dataclass(frozen=True)
class CouplingRecord:
    """One entry of a state's coupling history."""

    kind: Literal["single", "coupling"]
    result_j: tuple[float, ...]
    j1: float | None = None
    j2: float | None = None
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        if self.kind not in ("single", "coupling"):
            raise ValueError("kind must be 'single' or 'coupling'")
        if self.kind == "coupling" and (self.j1 is None or self.j2 is None):
            raise ValueError("coupling record requires j1 and j2")
        object.__setattr__(self, "result_j", tuple(float(j) for j in self.result_j))


@dataclass(frozen=True)
class JComponent:
    """Location of one J block inside a composite amplitude array."""

    j: float
    start_index: int
    dimension: int

    def __post_init__(self) -> None:
        tj = twos_or_none(self.j)
        if tj is None or tj < 0:
            raise ValueError(f"invalid block angular momentum j={self.j!r}")
        if int(self.dimension) != tj + 1:
            raise ValueError(f"block dimension {self.dimension} does not match 2j+1 for j={self.j}")
        if int(self.start_index) < 0:
            raise ValueError("start_index must be >= 0")

    @property
    def stop_index(self) -> int:
        return int(self.start_index) + int(self.dimension)


@dataclass(frozen=True)
class AngularMomentumMetadata:
    """Angular-momentum bookkeeping attached to a :class:`StateVector`.

    ``j_components`` lists only the J blocks that actually carry amplitude,
    ordered from the largest J down. Start indices refer to the full
    descending-J layout written by :func:`angmom.angular.composition.couple`,
    so skipped (numerically empty) blocks leave gaps between entries.
    """

    total_j: float
    m_range: tuple[float, float]
    coupling_history: tuple[CouplingRecord, ...]
    j_components: Mapping[float, JComponent]
    is_composite: bool

    def __post_init__(self) -> None:
        comps = sorted(self.j_components.values(), key=lambda c: -float(c.j))
        for c_hi, c_lo in zip(comps, comps[1:]):
            if c_lo.start_index < c_hi.stop_index:
                raise ValueError(
                    f"J blocks overlap: J={c_hi.j} ends at {c_hi.stop_index}, "
                    f"J={c_lo.j} starts at {c_lo.start_index}"
                )
        ordered = {float(c.j): c for c in comps}
        object.__setattr__(self, "j_components", MappingProxyType(ordered))
        object.__setattr__(self, "coupling_history", tuple(self.coupling_history))
        object.__setattr__(self, "m_range", (float(self.m_range[0]), float(self.m_range[1])))

    @classmethod
    def single(cls, j: float) -> "AngularMomentumMetadata":
        """Metadata of a pure (2j+1)-dimensional eigenspace."""

        j = float(j)
        tj = twos_or_none(j)
        if tj is None or tj < 0:
            raise ValueError(f"invalid angular momentum j={j!r}")
        return cls(
            total_j=j,
            m_range=(-j, j),
            coupling_history=(CouplingRecord(kind="single", result_j=(j,)),),
            j_components={j: JComponent(j=j, start_index=0, dimension=tj + 1)},
            is_composite=False,
        )

    def component(self, j: float) -> JComponent | None:
        """Look up a present J block by value."""

        tj = twos_or_none(j)
        if tj is None:
            return None
        return self.j_components.get(from_twos(tj))

    @property
    def present_j(self) -> list[float]:
        return list(self.j_components.keys())

    def latest_coupling(self) -> CouplingRecord | None:
        for rec in reversed(self.coupling_history):
            if rec.kind == "coupling":
                return rec
        return None
