"""Global defaults for angmom and verbose diagnostics."""

from __future__ import annotations

import contextlib
import os
from dataclasses import dataclass, replace
from typing import Any


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if raw == "":
        return int(default)
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got: {raw!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if raw == "":
        return bool(default)
    return raw not in ("0", "false", "no", "off")


@dataclass(frozen=True)
class AngmomConfig:
    """Process-wide defaults.

    Numerical tolerances are fixed constants in :mod:`angmom.numeric` and are
    deliberately not part of this config.
    """

    # 0 = silent; 1 = coupling/extraction summaries; 2 = CG table generation.
    verbose: int = 0
    # When False every CG lookup rebuilds its (j1, j2) table (slow, same results).
    use_cg_cache: bool = True


_CONFIG = AngmomConfig(
    verbose=max(0, _env_int("ANGMOM_VERBOSE", 0)),
    use_cg_cache=_env_bool("ANGMOM_CG_CACHE", True),
)


def get_config() -> AngmomConfig:
    return _CONFIG


def set_config(**kwargs: Any) -> AngmomConfig:
    """Update the global config."""

    global _CONFIG
    _CONFIG = replace(_CONFIG, **kwargs)
    return _CONFIG


@contextlib.contextmanager
def config(**kwargs: Any):
    """Temporarily override the global config."""

    global _CONFIG
    prev = _CONFIG
    _CONFIG = replace(_CONFIG, **kwargs)
    try:
        yield _CONFIG
    finally:
        _CONFIG = prev


def vlog(level: int, msg: str) -> None:
    """Print a diagnostic line when ``verbose >= level``."""

    if int(_CONFIG.verbose) >= int(level):
        print(f"[angmom] {msg}")
