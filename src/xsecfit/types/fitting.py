"""
Fitting types: samples, series variants, windows and fitted curves.
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np

from xsecfit.constants import PLACEHOLDER_MASS


@dataclass(slots=True, frozen=True)
class Sample:
    """One tabulated point. Mass carries no uncertainty."""
    mass: float
    xsec: float
    xsec_unc: float

    @property
    def is_placeholder(self) -> bool:
        return self.mass < PLACEHOLDER_MASS


class SeriesVariant(Enum):
    NOMINAL = "nom"
    UP = "up"
    DOWN = "dn"

    @property
    def tag(self) -> str:
        return self.value

    @classmethod
    def from_tag(cls, tag: str) -> "SeriesVariant":
        for variant in cls:
            if variant.value == tag:
                return variant
        raise ValueError(f"Unknown series variant tag: {tag}")


@dataclass(slots=True)
class Series:
    """Cross-section values of one variant with their (pseudo-)uncertainties."""
    variant: SeriesVariant
    mass: np.ndarray
    value: np.ndarray
    value_unc: np.ndarray

    def __len__(self) -> int:
        return len(self.mass)


@dataclass(slots=True, frozen=True)
class FitWindow:
    """Half-open mass interval [lo, hi) fitted independently."""
    index: int
    lo: float
    hi: float

    def contains(self, mass: float) -> bool:
        return self.lo <= mass < self.hi

    def __str__(self) -> str:
        return f"window {self.index} [{self.lo:g}, {self.hi:g})"


@dataclass(slots=True, frozen=True)
class FittedCurve:
    """Coefficients of sigma(m) = exp(a + b*m + c*ln m) for one variant/window."""
    variant: SeriesVariant
    window: FitWindow
    a: float
    b: float
    c: float
    n_points: int = 0

    @property
    def params(self) -> tuple[float, float, float]:
        return (self.a, self.b, self.c)

    @property
    def name(self) -> str:
        return f"fit_{self.variant.tag}_{self.window.index}"

    @property
    def title(self) -> str:
        return f"fit_{self.variant.tag}_{self.window.lo:g}_{self.window.hi:g}"

    @property
    def style(self) -> str:
        return "solid" if self.variant is SeriesVariant.NOMINAL else "dashed"

    def eval(self, mass):
        """Evaluate the curve at a scalar mass or an array of masses."""
        m = np.asarray(mass, dtype=np.float64)
        result = np.exp(self.a + self.b * m + self.c * np.log(m))
        if np.ndim(result) == 0:
            return float(result)
        return result


@dataclass(slots=True, frozen=True)
class EnvelopeSample:
    """Fit uncertainty at one mass of the regular envelope grid."""
    mass: float
    half_width: float
    absolute: float
    fraction: float
