"""Dataclasses shared across the loader, fitter and adapters."""

from xsecfit.types.config import FitConfig
from xsecfit.types.fitting import (
    EnvelopeSample,
    FittedCurve,
    FitWindow,
    Sample,
    Series,
    SeriesVariant,
)

__all__ = [
    "FitConfig",
    "EnvelopeSample",
    "FittedCurve",
    "FitWindow",
    "Sample",
    "Series",
    "SeriesVariant",
]
