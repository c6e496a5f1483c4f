"""
Fit-uncertainty envelope from the nominal, up and down fits.

The envelope at a mass is the larger one-sided deviation of the up/down
curves from the nominal curve, max(up - nom, nom - down). It is neither an
average nor a quadrature sum.
"""

import logging

import numpy as np
import pandas as pd

from xsecfit.analysis.fitting import FitCollection
from xsecfit.constants import DEFAULT_ENVELOPE_STEP
from xsecfit.errors import ArithmeticDegeneracy, ConfigurationError, FitError
from xsecfit.types.fitting import EnvelopeSample, Sample, SeriesVariant

logger = logging.getLogger(__name__)


def envelope_at(fits: FitCollection, mass: float) -> tuple[float, float]:
    """Return (absolute, fractional) fit uncertainty at ``mass``.

    Raises:
        FitError: If no window owns ``mass``
        ArithmeticDegeneracy: If the nominal curve evaluates to zero
    """
    window = fits.partition.locate(mass)
    if window is None:
        raise FitError(f"Mass {mass:g} lies outside all fit windows")

    nominal = fits.curve(SeriesVariant.NOMINAL, window.index).eval(mass)
    up = fits.curve(SeriesVariant.UP, window.index).eval(mass)
    down = fits.curve(SeriesVariant.DOWN, window.index).eval(mass)

    # Crossing curves leave both deviations negative; the envelope stays >= 0
    absolute = max(up - nominal, nominal - down, 0.0)
    if nominal == 0:
        raise ArithmeticDegeneracy(
            f"Nominal fit vanishes at mass {mass:g}; envelope fraction undefined"
        )
    return absolute, absolute / nominal


def build_envelope(
    fits: FitCollection, step: float = DEFAULT_ENVELOPE_STEP
) -> list[EnvelopeSample]:
    """Evaluate the envelope on a regular grid over [first edge, last edge)."""
    if step <= 0:
        raise ConfigurationError(f"Envelope step must be positive, got {step}")

    n_steps = int(round((fits.partition.hi - fits.partition.lo) / step))
    masses = fits.partition.lo + step * np.arange(n_steps)
    envelope = []
    for mass in masses:
        absolute, fraction = envelope_at(fits, float(mass))
        envelope.append(
            EnvelopeSample(
                mass=float(mass), half_width=step, absolute=absolute, fraction=fraction
            )
        )
    logger.debug("Built envelope with %d samples (step=%g)", len(envelope), step)
    return envelope


def envelope_frame(envelope: list[EnvelopeSample]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "mass": [e.mass for e in envelope],
            "half_width": [e.half_width for e in envelope],
            "absolute": [e.absolute for e in envelope],
            "fraction": [e.fraction for e in envelope],
        }
    )


def ratio_points(fits: FitCollection, samples: list[Sample]) -> pd.DataFrame:
    """Actual/fitted nominal cross-section per sample.

    Only the tabulated uncertainty enters the ratio error; the fit
    uncertainty is drawn separately as the envelope band. Samples outside
    the partition get NaN.
    """
    rows = []
    for sample in samples:
        fitted = fits.evaluate(SeriesVariant.NOMINAL, sample.mass)
        if fitted is None or fitted == 0:
            ratio = ratio_err = float("nan")
        else:
            ratio = sample.xsec / fitted
            ratio_err = sample.xsec_unc / fitted
        rows.append(
            {
                "mass": sample.mass,
                "xsec_fit": np.nan if fitted is None else fitted,
                "ratio": ratio,
                "ratio_err": ratio_err,
            }
        )
    return pd.DataFrame(rows, columns=["mass", "xsec_fit", "ratio", "ratio_err"])
