"""
Segmented fitting of the exponential model over the window partition.
"""

import logging
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field

import numpy as np
from scipy import optimize

from xsecfit.analysis.models import expo
from xsecfit.analysis.windows import WindowPartition
from xsecfit.constants import MIN_FIT_POINTS, PLACEHOLDER_MASS
from xsecfit.errors import FitError
from xsecfit.types.fitting import FittedCurve, FitWindow, Series, SeriesVariant

logger = logging.getLogger(__name__)

FIT_METHODS = ("least_squares", "loglinear")


@dataclass
class FitCollection:
    """All fitted curves of a run, addressed by (variant, window index)."""
    partition: WindowPartition
    curves: dict[tuple[SeriesVariant, int], FittedCurve] = field(default_factory=dict)

    @property
    def n_fits(self) -> int:
        return len(self.partition)

    def curve(self, variant: SeriesVariant, index: int) -> FittedCurve:
        try:
            return self.curves[(variant, index)]
        except KeyError:
            raise FitError(f"No {variant.tag} fit for window {index}") from None

    def curves_for(self, variant: SeriesVariant) -> list[FittedCurve]:
        return [self.curve(variant, window.index) for window in self.partition]

    def __iter__(self) -> Iterator[FittedCurve]:
        # Window-major order: nom, up, dn for window 0, then window 1, ...
        for window in self.partition:
            for variant in SeriesVariant:
                yield self.curve(variant, window.index)

    def __len__(self) -> int:
        return len(self.curves)

    def evaluate(self, variant: SeriesVariant, mass: float) -> float | None:
        """Evaluate the curve owning ``mass``; None outside the partition."""
        window = self.partition.locate(mass)
        if window is None:
            return None
        return self.curve(variant, window.index).eval(mass)


def _select_window_points(series: Series, window: FitWindow) -> np.ndarray:
    # Fit range is closed: samples on a border constrain both neighbouring fits
    mask = (series.mass >= window.lo) & (series.mass <= window.hi)
    mask &= series.mass >= PLACEHOLDER_MASS
    return mask & np.isfinite(series.value)


def _loglinear_solution(mass: np.ndarray, value: np.ndarray) -> np.ndarray:
    design = expo.design_matrix(mass)
    coeffs, _, rank, _ = np.linalg.lstsq(design, np.log(value), rcond=None)
    if rank < len(expo.PARAM_NAMES):
        raise np.linalg.LinAlgError(f"rank-deficient design matrix (rank {rank})")
    return coeffs


def fit_window(
    series: Series,
    window: FitWindow,
    method: str = "least_squares",
) -> FittedCurve:
    """Fit sigma(m) = exp(a + b*m + c*ln m) to the samples in [lo, hi] of ``window``.

    Args:
        series: Series to fit
        window: Window restricting the samples
        method: "least_squares" refines the log-linear solution with
            scipy.optimize.least_squares on the cross-section residuals
            (error-weighted when every uncertainty is positive);
            "loglinear" returns the ordinary least-squares solution of
            ln(sigma) on {1, m, ln m}

    Returns:
        FittedCurve for (series.variant, window)

    Raises:
        FitError: Too few samples, non-positive values, or no convergence
    """
    if method not in FIT_METHODS:
        raise FitError(
            f"Unknown fit method: {method}. Available: {', '.join(FIT_METHODS)}"
        )

    mask = _select_window_points(series, window)
    m_fit = series.mass[mask]
    y_fit = series.value[mask]
    e_fit = series.value_unc[mask]
    n_points = int(mask.sum())

    if n_points < MIN_FIT_POINTS:
        raise FitError(
            f"{series.variant.tag} fit in {window} has {n_points} sample(s); "
            f"{MIN_FIT_POINTS} are needed"
        )
    if np.any(y_fit <= 0):
        raise FitError(
            f"{series.variant.tag} fit in {window} has non-positive cross-sections"
        )

    try:
        p0 = _loglinear_solution(m_fit, y_fit)
    except np.linalg.LinAlgError as exc:
        raise FitError(f"{series.variant.tag} fit in {window} failed: {exc}") from exc

    if method == "loglinear":
        params = p0
    else:
        weighted = bool(np.all(np.isfinite(e_fit)) and np.all(e_fit > 0))
        sigma = e_fit if weighted else np.ones_like(y_fit)

        def residual_func(params):
            return (y_fit - expo.eval(m_fit, params)) / sigma

        def jacobian_func(params):
            return -expo.jacobian(m_fit, params) / sigma[:, None]

        try:
            result = optimize.least_squares(
                residual_func, p0, jac=jacobian_func, x_scale="jac"
            )
        except (ValueError, FloatingPointError) as exc:
            raise FitError(
                f"{series.variant.tag} fit in {window} failed: {exc}"
            ) from exc
        if not result.success or not np.all(np.isfinite(result.x)):
            raise FitError(
                f"{series.variant.tag} fit in {window} did not converge: "
                f"{result.message}"
            )
        params = result.x

    a, b, c = (float(p) for p in params)
    logger.debug(
        "Fitted %s %s: a=%.6g b=%.6g c=%.6g (%d points)",
        series.variant.tag,
        window,
        a,
        b,
        c,
        n_points,
    )
    return FittedCurve(
        variant=series.variant, window=window, a=a, b=b, c=c, n_points=n_points
    )


def fit_all(
    series_by_variant: dict[SeriesVariant, Series],
    partition: WindowPartition,
    method: str = "least_squares",
    n_workers: int = 1,
) -> FitCollection:
    """Fit every (variant, window) pair. Any failing fit aborts the whole set."""
    jobs = [
        (series_by_variant[variant], window)
        for window in partition
        for variant in SeriesVariant
    ]
    collection = FitCollection(partition=partition)

    if n_workers > 1:
        with ThreadPoolExecutor(max_workers=n_workers) as executor:
            futures = {
                executor.submit(fit_window, series, window, method): (
                    series.variant,
                    window.index,
                )
                for series, window in jobs
            }
            for future in as_completed(futures):
                collection.curves[futures[future]] = future.result()
    else:
        for series, window in jobs:
            curve = fit_window(series, window, method)
            collection.curves[(series.variant, window.index)] = curve

    logger.info(
        "Fitted %d curves over %d windows (method=%s)",
        len(collection),
        len(partition),
        method,
    )
    return collection
