from pathlib import Path

import numpy as np
import pytest

from xsecfit.analysis.uncertainty import expand_series
from xsecfit.analysis.windows import WindowPartition
from xsecfit.io.registry import STANDARD_BOUNDARIES
from xsecfit.types.fitting import Sample

# sigma(m) = exp(A + B*m + C*ln m), roughly 1.3 pb at 100 GeV
LAW = (12.0, -0.002, -1.0)

STANDARD_MASSES = np.arange(100.0, 2001.0, 25.0)  # 77 points


def law(mass, params=LAW):
    a, b, c = params
    return np.exp(a + b * np.asarray(mass, dtype=float) + c * np.log(mass))


def make_samples(masses, rel_unc: float = 0.05, wiggle: float = 0.0) -> list[Sample]:
    """Samples following LAW, optionally with a deterministic relative wiggle."""
    masses = np.asarray(masses, dtype=float)
    xsec = law(masses) * (1.0 + wiggle * np.sin(masses / 37.0))
    return [
        Sample(mass=float(m), xsec=float(y), xsec_unc=float(rel_unc * y))
        for m, y in zip(masses, xsec)
    ]


def write_table(directory: Path, grid: str, composition: str, rows) -> Path:
    path = directory / f"xsec_{grid}_{composition}.txt"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(f"{m:g} {y:.10g} {e:.10g}\n" for m, y, e in rows))
    return path


@pytest.fixture
def standard_samples() -> list[Sample]:
    return make_samples(STANDARD_MASSES, rel_unc=0.05, wiggle=0.01)


@pytest.fixture
def standard_partition() -> WindowPartition:
    return WindowPartition(STANDARD_BOUNDARIES)


@pytest.fixture
def standard_series(standard_samples):
    return expand_series(standard_samples)


@pytest.fixture
def input_dir(tmp_path: Path, standard_samples) -> Path:
    """Inputs directory holding a 77-point C1N2 wino table."""
    directory = tmp_path / "Inputs"
    write_table(
        directory,
        "C1N2",
        "wino",
        [(s.mass, s.xsec, s.xsec_unc) for s in standard_samples],
    )
    return directory
