"""
Fit service: load, expand, fit, build the envelope and the report for one
grid/composition.

Keeps the CLI limited to argument handling, output files and printing.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import pandas as pd

from xsecfit.analysis.envelope import build_envelope, ratio_points
from xsecfit.analysis.fitting import FitCollection, fit_all
from xsecfit.analysis.report import build_report_table
from xsecfit.analysis.uncertainty import expand_series, to_absolute_uncertainties
from xsecfit.analysis.windows import WindowPartition
from xsecfit.constants import DEFAULT_ENVELOPE_STEP, DEFAULT_INPUT_DIR
from xsecfit.io.registry import GridEntry, get_grid_entry
from xsecfit.io.xsec_table import load_cross_sections
from xsecfit.types.fitting import EnvelopeSample, Sample, Series, SeriesVariant

logger = logging.getLogger(__name__)

STAGES = ("load", "expand", "fit", "envelope", "report")


@dataclass
class FitRun:
    """Everything produced by one run, in pipeline order."""
    entry: GridEntry
    samples: list[Sample]
    series: dict[SeriesVariant, Series]
    fits: FitCollection
    envelope: list[EnvelopeSample]
    ratios: pd.DataFrame
    report: pd.DataFrame

    @property
    def grid(self) -> str:
        return self.entry.grid

    @property
    def composition(self) -> str:
        return self.entry.composition


class XsecFitService:
    """Service running the full fit for a registered grid/composition."""

    def __init__(
        self,
        input_dir: Path = Path(DEFAULT_INPUT_DIR),
        method: str = "least_squares",
        n_workers: int = 1,
        envelope_step: float = DEFAULT_ENVELOPE_STEP,
        progress_reporter: Callable[[dict], None] | None = None,
    ) -> None:
        """
        Args:
            input_dir: Directory with the xsec_<grid>_<composition>.txt tables.
            method: Fit method passed to fit_all.
            n_workers: Threads used for the independent window fits.
            envelope_step: Mass step of the envelope grid in GeV.
            progress_reporter: Optional callable receiving a progress event dict.
        """
        self._input_dir = Path(input_dir)
        self._method = method
        self._n_workers = n_workers
        self._envelope_step = envelope_step
        self._progress_reporter = progress_reporter

    def run(self, grid: str, composition: str) -> FitRun:
        """Run all stages. Errors from any stage propagate to the caller."""
        entry = get_grid_entry(grid, composition)
        logger.info(
            "Fitting %s (method=%s, workers=%d)",
            entry.label,
            self._method,
            self._n_workers,
        )

        samples = load_cross_sections(grid, composition, self._input_dir)
        if entry.fractional_uncertainty:
            logger.info("Converting fractional uncertainties of %s", entry.label)
            samples = to_absolute_uncertainties(samples)
        self._report("load", entry)

        series = expand_series(samples)
        self._report("expand", entry)

        partition = WindowPartition(entry.boundaries)
        fits = fit_all(
            series, partition, method=self._method, n_workers=self._n_workers
        )
        self._report("fit", entry)

        envelope = build_envelope(fits, step=self._envelope_step)
        ratios = ratio_points(fits, samples)
        self._report("envelope", entry)

        report = build_report_table(fits, samples)
        self._report("report", entry)
        logger.info("Compared %d tabulated points with the fits", len(report))

        return FitRun(
            entry=entry,
            samples=samples,
            series=series,
            fits=fits,
            envelope=envelope,
            ratios=ratios,
            report=report,
        )

    def _report(self, stage: str, entry: GridEntry) -> None:
        current = STAGES.index(stage) + 1
        logger.debug("Stage %s done (%d/%d)", stage, current, len(STAGES))
        if self._progress_reporter:
            self._progress_reporter(
                {
                    "step": stage,
                    "grid": entry.grid,
                    "composition": entry.composition,
                    "current": current,
                    "total": len(STAGES),
                    "progress": int(current / len(STAGES) * 100),
                }
            )
