from __future__ import annotations

import os

from setuptools import find_packages, setup


def _read_version() -> str:
    raw = os.environ.get("ANGMOM_BUILD_VERSION", "").strip()
    return raw or "0.1.0"


setup(
    name="angmom",
    version=_read_version(),
    description="Angular-momentum coupling: Clebsch-Gordan coefficients, Wigner 3j/6j symbols and J-block decomposition",
    packages=find_packages(include=["angmom", "angmom.*"]),
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.22",
        "scipy>=1.8",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
)
