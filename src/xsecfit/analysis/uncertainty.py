"""
Build the +1 sigma and -1 sigma series from the nominal cross-sections.

The shifted series keep the nominal fractional uncertainty as their own
pseudo-uncertainty. This is an approximation, chosen so that the up/down
fits stay continuous across window borders.
"""

import logging

import numpy as np

from xsecfit.errors import ArithmeticDegeneracy
from xsecfit.types.fitting import Sample, Series, SeriesVariant

logger = logging.getLogger(__name__)


def to_absolute_uncertainties(samples: list[Sample]) -> list[Sample]:
    """Convert fractional uncertainties into absolute ones (xsec * frac)."""
    return [
        Sample(mass=s.mass, xsec=s.xsec, xsec_unc=s.xsec_unc * s.xsec) for s in samples
    ]


def expand_series(samples: list[Sample]) -> dict[SeriesVariant, Series]:
    """Return nominal, up and down series for the given samples.

    Raises:
        ArithmeticDegeneracy: If a non-placeholder sample has zero cross-section
    """
    mass = np.array([s.mass for s in samples], dtype=np.float64)
    nominal = np.array([s.xsec for s in samples], dtype=np.float64)
    unc = np.array([s.xsec_unc for s in samples], dtype=np.float64)

    placeholder = np.array([s.is_placeholder for s in samples], dtype=bool)
    degenerate = (nominal == 0) & ~placeholder
    if np.any(degenerate):
        bad = ", ".join(f"{m:g}" for m in mass[degenerate])
        raise ArithmeticDegeneracy(
            f"Zero nominal cross-section at mass {bad}; fractional uncertainty undefined"
        )

    # Placeholder rows deliberately become NaN; they are never fitted
    with np.errstate(divide="ignore", invalid="ignore"):
        fraction = np.where(placeholder, np.nan, unc / nominal)
    if np.any(placeholder):
        logger.debug("Skipping %d placeholder rows", int(placeholder.sum()))

    up = nominal + unc
    down = nominal - unc
    return {
        SeriesVariant.NOMINAL: Series(SeriesVariant.NOMINAL, mass, nominal, unc),
        SeriesVariant.UP: Series(SeriesVariant.UP, mass.copy(), up, up * fraction),
        SeriesVariant.DOWN: Series(
            SeriesVariant.DOWN, mass.copy(), down, down * fraction
        ),
    }
