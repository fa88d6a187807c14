"""Sequential coupling of more than two angular momenta.

Each new spin is coupled to a *pure* J component of the running state: when
the running state is a superposition of several J values, only its dominant
J block (largest norm) is extracted and carried forward. This is a single
channel of the full recoupling tree, not a complete N-spin decomposition;
the discarded channels are not tracked.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from angmom.angular.analysis import analyze, extract_component_details
from angmom.angular.composition import couple
from angmom.angular.core import create_eigenstate, validate_j
from angmom.config import vlog
from angmom.numeric import EQ_TOL, from_twos
from angmom.states.vector import StateVector


def _triangle_range(ja: float, jb: float) -> tuple[float, ...]:
    ta = validate_j(ja)
    tb = validate_j(jb)
    return tuple(from_twos(t) for t in range(abs(ta - tb), ta + tb + 1, 2))


@dataclass(frozen=True)
class CouplingStep:
    added_spin: float
    added_m: float
    previous_j: tuple[float, ...]
    resulting_j: tuple[float, ...]
    timestamp: float = field(default_factory=time.time)


class MultiSpinState:
    """Immutable record of a multi-spin coupling sequence."""

    def __init__(
        self,
        spins,
        m_values,
        state: StateVector,
        coupling_history=(),
        available_j=(),
    ) -> None:
        self._spins = tuple(float(j) for j in spins)
        self._m_values = tuple(float(m) for m in m_values)
        if len(self._spins) != len(self._m_values):
            raise ValueError("spins and m_values must have the same length")
        self._state = state
        self._history = tuple(coupling_history)
        self._available_j = frozenset(float(j) for j in available_j)

    @classmethod
    def from_single_spin(cls, j: float, m: float) -> "MultiSpinState":
        state = create_eigenstate(j, m)
        jf = from_twos(validate_j(j))
        return cls([jf], [m], state, (), (jf,))

    @classmethod
    def from_coupled_state(cls, state: StateVector, spins, m_values) -> "MultiSpinState":
        """Wrap an existing state; available J comes from its metadata if any."""

        available = state.metadata.present_j if state.metadata is not None else ()
        return cls(spins, m_values, state, (), available)

    def add_spin(self, j: float, m: float) -> "MultiSpinState":
        """Return a new state with |j, m> coupled on."""

        new_spin = create_eigenstate(j, m)
        jf = from_twos(validate_j(j))

        if len(self._spins) == 1:
            effective_j = self._spins[0]
            base = self._state
        else:
            analysis = analyze(self._state)
            if not analysis.is_angular_momentum:
                raise ValueError("cannot add spin to a state without angular-momentum structure")
            if analysis.dominant_j is None:
                raise ValueError("cannot determine dominant J component of the running state")
            effective_j = analysis.dominant_j
            extracted = extract_component_details(self._state, effective_j)
            if extracted is None:
                raise ValueError(f"cannot extract J={effective_j} component from the running state")
            if not analysis.is_pure:
                vlog(
                    1,
                    f"add_spin: reducing J={analysis.present_j} to dominant J={effective_j} "
                    f"(weight {extracted.original_magnitude:.4f})",
                )
            base = extracted.state

        coupled = couple(base, effective_j, new_spin, jf)
        allowed = _triangle_range(effective_j, jf)
        present = set(coupled.metadata.present_j) if coupled.metadata is not None else set(allowed)
        available = tuple(jv for jv in allowed if jv in present)

        step = CouplingStep(
            added_spin=jf,
            added_m=float(m),
            previous_j=tuple(sorted(self._available_j)),
            resulting_j=allowed,
        )
        return MultiSpinState(
            (*self._spins, jf),
            (*self._m_values, float(m)),
            coupled,
            (*self._history, step),
            available,
        )

    def extract_component(self, target_j: float) -> StateVector | None:
        if float(target_j) not in self._available_j:
            return None
        out = extract_component_details(self._state, target_j)
        return None if out is None else out.state

    def j_components(self) -> dict[float, dict[str, bool]]:
        return {j: {"available": True, "estimated": True} for j in sorted(self._available_j)}

    def valid_intertwiners(self) -> list[float]:
        """Total J values admissible at a vertex with these incident spins."""

        return sorted(self._available_j)

    @property
    def spins(self) -> list[float]:
        return list(self._spins)

    @property
    def m_values(self) -> list[float]:
        return list(self._m_values)

    @property
    def coupling_history(self) -> list[CouplingStep]:
        return list(self._history)

    @property
    def state(self) -> StateVector:
        return self._state

    @property
    def dimension(self) -> int:
        return self._state.dimension

    @property
    def spin_count(self) -> int:
        return len(self._spins)

    def norm(self) -> float:
        return self._state.norm()

    def is_normalized(self, tol: float = EQ_TOL) -> bool:
        return abs(self.norm() - 1.0) < float(tol)

    def __str__(self) -> str:
        spin_info = ", ".join(f"j{i + 1}={j}" for i, j in enumerate(self._spins))
        m_info = ", ".join(f"m{i + 1}={m}" for i, m in enumerate(self._m_values))
        j_info = ", ".join(str(j) for j in sorted(self._available_j))
        return (
            f"MultiSpinState({len(self._spins)} spins: {spin_info}; {m_info}; "
            f"available J=[{j_info}]; dim={self.dimension})"
        )

    def to_detailed_string(self) -> str:
        lines = [str(self), f"State: {self._state}"]
        if self._history:
            lines.append("Coupling History:")
            for i, step in enumerate(self._history):
                prev = ",".join(str(j) for j in step.previous_j)
                res = ",".join(str(j) for j in step.resulting_j)
                lines.append(f"  {i + 1}. Added j={step.added_spin}, m={step.added_m}: [{prev}] -> [{res}]")
        return "\n".join(lines) + "\n"
