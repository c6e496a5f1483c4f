"""
Comparison of tabulated and fitted cross-sections and uncertainties.
"""

import logging

import numpy as np
import pandas as pd

from xsecfit.analysis.envelope import envelope_at
from xsecfit.analysis.fitting import FitCollection
from xsecfit.types.fitting import Sample, SeriesVariant

logger = logging.getLogger(__name__)

REPORT_COLUMNS = [
    "mass",
    "xsec",
    "xsec_fit",
    "xsec_diff_pct",
    "unc",
    "unc_fit",
    "unc_diff_pct",
]

SEPARATOR = "=" * 82


def percent_difference(fitted: float, actual: float) -> float:
    """(fitted - actual) / actual * 100; 0 when both vanish, NaN if only actual does."""
    if actual == 0:
        return 0.0 if fitted == 0 else float("nan")
    return (fitted - actual) / actual * 100.0


def build_report_table(fits: FitCollection, samples: list[Sample]) -> pd.DataFrame:
    """One row per tabulated sample owned by a fit window."""
    rows = []
    for sample in samples:
        if sample.is_placeholder:
            continue
        window = fits.partition.locate(sample.mass)
        if window is None:
            logger.debug("Mass %g is outside all fit windows; not reported", sample.mass)
            continue
        fitted = fits.curve(SeriesVariant.NOMINAL, window.index).eval(sample.mass)
        unc_fit, _ = envelope_at(fits, sample.mass)
        rows.append(
            {
                "mass": sample.mass,
                "xsec": sample.xsec,
                "xsec_fit": fitted,
                "xsec_diff_pct": percent_difference(fitted, sample.xsec),
                "unc": sample.xsec_unc,
                "unc_fit": unc_fit,
                "unc_diff_pct": percent_difference(unc_fit, sample.xsec_unc),
            }
        )
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def _pct(value: float) -> str:
    if np.isnan(value):
        return f"{'nan':>8}"
    # + 0.0 turns a rounded -0.0 into 0.0
    return f"{round(value, 2) + 0.0:8.2f}"


def format_report(table: pd.DataFrame, grid: str, composition: str) -> str:
    """Render the fixed-width comparison table."""
    lines = [
        SEPARATOR,
        f"{'':27}{grid} {composition} cross-sections [fb] ",
        SEPARATOR,
        f"{'':13} ::    Actual -   Fitted - {'':8} ::   Actual -   Fitted - ",
        "  Mass [GeV]  ::     xsec  -    xsec  - Diff [%] ::     unc  -     unc  - Diff [%]",
        SEPARATOR,
    ]
    for row in table.itertuples(index=False):
        lines.append(
            f" {row.mass:8.5g}{'':8}"
            f" :: {row.xsec:9.5g}"
            f" - {row.xsec_fit:8.5g}"
            f" - {_pct(row.xsec_diff_pct)}"
            f" :: {row.unc:8.5g}"
            f" - {row.unc_fit:8.5g}"
            f" - {_pct(row.unc_diff_pct)}"
        )
    lines.append(SEPARATOR)
    return "\n".join(lines)
