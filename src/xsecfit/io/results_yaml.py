"""
Fit results YAML - writing and loading of fitted curves and raw samples.

Layout (field names are a stable contract for downstream consumers)::

    nFits: 10
    grid: C1N2
    composition: wino
    model: exp([0]+[1]*x+[2]*log(x))
    fits:
      - {name: fit_nom_0, title: fit_nom_100_150, variant: nom,
         window: 0, lo: 100.0, hi: 150.0, params: [a, b, c]}
      ...
    parameters:
      mass: [...]
      massUnc: [...]
      xsec: [...]
      xsecUnc: [...]
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from xsecfit.analysis.fitting import FitCollection
from xsecfit.analysis.models import expo
from xsecfit.analysis.windows import WindowPartition
from xsecfit.constants import OUTPUT_TAG
from xsecfit.errors import ConfigurationError, InputFormatError
from xsecfit.types.fitting import FittedCurve, Sample, SeriesVariant

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FitResultsFile:
    n_fits: int
    grid: str | None
    composition: str | None
    samples: list[Sample]
    fits: FitCollection


def default_results_path(output_dir: Path, grid: str, composition: str) -> Path:
    return Path(output_dir) / f"{grid}_{composition}_{OUTPUT_TAG}.yaml"


# =============================================================================
# PUBLIC API - WRITING FUNCTIONS
# =============================================================================


def serialize_fit_results(
    fits: FitCollection,
    samples: list[Sample],
    grid: str | None = None,
    composition: str | None = None,
) -> dict[str, Any]:
    """Build the YAML-ready mapping for a set of fits and samples."""
    return {
        "nFits": int(fits.n_fits),
        "grid": grid,
        "composition": composition,
        "model": expo.FORMULA,
        "fits": [
            {
                "name": curve.name,
                "title": curve.title,
                "variant": curve.variant.tag,
                "window": int(curve.window.index),
                "lo": float(curve.window.lo),
                "hi": float(curve.window.hi),
                "params": [float(p) for p in curve.params],
                "nPoints": int(curve.n_points),
            }
            for curve in fits
        ],
        "parameters": {
            "mass": [float(s.mass) for s in samples],
            # Tabulated masses carry no uncertainty
            "massUnc": [0.0 for _ in samples],
            "xsec": [float(s.xsec) for s in samples],
            "xsecUnc": [float(s.xsec_unc) for s in samples],
        },
    }


def save_fit_results_yaml(
    file_path: Path,
    fits: FitCollection,
    samples: list[Sample],
    grid: str | None = None,
    composition: str | None = None,
) -> Path:
    """Write fits and samples to ``file_path`` and return the path."""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    payload = serialize_fit_results(fits, samples, grid, composition)
    with file_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(payload, handle, sort_keys=False)
    logger.info("Saved %d fits and %d samples to %s", len(fits), len(samples), file_path)
    return file_path


# =============================================================================
# PUBLIC API - LOADING FUNCTIONS
# =============================================================================


def load_fit_results_yaml(file_path: Path) -> FitResultsFile:
    """Load fits and samples written by save_fit_results_yaml."""
    file_path = Path(file_path)
    if not file_path.exists():
        raise InputFormatError(f"Fit results file not found: {file_path}")

    try:
        with file_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise InputFormatError(f"Failed to load YAML file {file_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise InputFormatError(f"{file_path} does not contain a mapping")
    for key in ("nFits", "fits", "parameters"):
        if key not in data:
            raise InputFormatError(f"{file_path} is missing the '{key}' section")

    try:
        return deserialize_fit_results(data)
    except InputFormatError:
        raise
    except (KeyError, TypeError, ValueError) as exc:
        raise InputFormatError(f"Malformed fit results in {file_path}: {exc}") from exc


def deserialize_fit_results(data: dict[str, Any]) -> FitResultsFile:
    samples = _samples_from_parameters(data["parameters"])
    fits = _fits_from_entries(data["fits"])

    n_fits = int(data["nFits"])
    if n_fits != fits.n_fits:
        raise InputFormatError(
            f"nFits={n_fits} does not match the {fits.n_fits} stored windows"
        )
    return FitResultsFile(
        n_fits=n_fits,
        grid=data.get("grid"),
        composition=data.get("composition"),
        samples=samples,
        fits=fits,
    )


# =============================================================================
# PRIVATE HELPER FUNCTIONS
# =============================================================================


def _samples_from_parameters(parameters: dict[str, Any]) -> list[Sample]:
    try:
        mass = parameters["mass"]
        xsec = parameters["xsec"]
        xsec_unc = parameters["xsecUnc"]
    except (KeyError, TypeError) as exc:
        raise InputFormatError(f"Invalid 'parameters' section: {exc}") from exc

    if not len(mass) == len(xsec) == len(xsec_unc):
        raise InputFormatError("'parameters' columns have different lengths")
    return [
        Sample(mass=float(m), xsec=float(y), xsec_unc=float(e))
        for m, y, e in zip(mass, xsec, xsec_unc)
    ]


def _fits_from_entries(entries: list[dict[str, Any]]) -> FitCollection:
    edges: dict[int, tuple[float, float]] = {}
    for entry in entries:
        edges[int(entry["window"])] = (float(entry["lo"]), float(entry["hi"]))
    if not edges or sorted(edges) != list(range(len(edges))):
        raise InputFormatError("Stored fits do not cover consecutive windows")

    boundaries = [edges[i][0] for i in range(len(edges))] + [edges[len(edges) - 1][1]]
    try:
        partition = WindowPartition(boundaries)
    except ConfigurationError as exc:
        raise InputFormatError(f"Stored fit windows are invalid: {exc}") from exc

    collection = FitCollection(partition=partition)
    for entry in entries:
        try:
            variant = SeriesVariant.from_tag(entry["variant"])
        except ValueError as exc:
            raise InputFormatError(str(exc)) from exc
        window = partition[int(entry["window"])]
        a, b, c = (float(p) for p in entry["params"])
        collection.curves[(variant, window.index)] = FittedCurve(
            variant=variant,
            window=window,
            a=a,
            b=b,
            c=c,
            n_points=int(entry.get("nPoints", 0)),
        )

    if len(collection) != len(partition) * len(SeriesVariant):
        raise InputFormatError(
            f"Expected {len(partition) * len(SeriesVariant)} fits, found {len(collection)}"
        )
    return collection
