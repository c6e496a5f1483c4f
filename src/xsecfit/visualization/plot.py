"""
Diagnostic figure: tabulated cross-sections with the window fits on top and
the actual/fitted ratio with the fit-uncertainty band below.
"""

import logging
from pathlib import Path

import numpy as np
from matplotlib.figure import Figure
from matplotlib.ticker import MaxNLocator

from xsecfit.analysis.fitting_service import FitRun
from xsecfit.constants import OUTPUT_TAG

logger = logging.getLogger(__name__)

# One colour per window, cycled when a partition has more windows
FIT_COLORS = [
    "tab:blue",
    "tab:green",
    "tab:orange",
    "tab:red",
    "lightsteelblue",
    "gold",
    "tab:purple",
    "teal",
    "hotpink",
    "magenta",
]
LINE_STYLES = {"solid": "-", "dashed": "--"}

XSEC_RANGE = (1.0e-3, 1.0e5)
RATIO_RANGE = (0.8, 1.2)


def default_plot_path(output_dir: Path, grid: str, composition: str) -> Path:
    return Path(output_dir) / f"{grid}_{composition}_{OUTPUT_TAG}.png"


def plot_fit_overview(run: FitRun, output_path: Path | None = None, dpi: int = 100) -> Figure:
    """Draw the overview figure and save it when ``output_path`` is given."""
    fig = Figure(figsize=(8, 8), dpi=dpi)
    grid_spec = fig.add_gridspec(2, 1, height_ratios=[4, 1.3], hspace=0.05)
    ax_top = fig.add_subplot(grid_spec[0])
    ax_bot = fig.add_subplot(grid_spec[1], sharex=ax_top)

    x_range = (run.fits.partition.lo, run.fits.partition.hi)
    _draw_cross_sections(ax_top, run)
    ax_top.set_xlim(*x_range)
    ax_top.set_ylim(*XSEC_RANGE)
    ax_top.set_yscale("log")
    ax_top.set_ylabel(r"$\sigma$ [fb]")
    ax_top.tick_params(labelbottom=False)

    _draw_ratio(ax_bot, run, x_range)
    ax_bot.set_ylim(*RATIO_RANGE)
    ax_bot.set_xlabel(r"$m_{\tilde{\chi}_{1}^{\pm},\tilde{\chi}_{2}^{0}}$ [GeV]")
    ax_bot.set_ylabel("Actual/Fitted")
    ax_bot.yaxis.set_major_locator(MaxNLocator(4))
    ax_bot.grid(True, axis="y", alpha=0.5)

    if output_path is not None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, bbox_inches="tight")
        logger.info("Saved fit overview to %s", output_path)
    return fig


def _draw_cross_sections(ax, run: FitRun) -> None:
    masses = np.array([s.mass for s in run.samples])
    xsec = np.array([s.xsec for s in run.samples])
    xsec_unc = np.array([s.xsec_unc for s in run.samples])
    keep = np.array([not s.is_placeholder for s in run.samples], dtype=bool)

    ax.errorbar(
        masses[keep],
        xsec[keep],
        yerr=xsec_unc[keep],
        fmt="o",
        color="black",
        markersize=4,
        label=f"13 TeV {run.grid} {run.composition} cross-sections",
        zorder=3,
    )
    for curve in run.fits:
        color = FIT_COLORS[curve.window.index % len(FIT_COLORS)]
        m = np.linspace(curve.window.lo, curve.window.hi, 50)
        ax.plot(
            m,
            curve.eval(m),
            color=color,
            linestyle=LINE_STYLES[curve.style],
            linewidth=1.5,
        )
    ax.legend(loc="upper right", frameon=False, fontsize=9)


def _draw_ratio(ax, run: FitRun, x_range: tuple[float, float]) -> None:
    band_mass = np.array([e.mass for e in run.envelope])
    band = np.array([e.fraction for e in run.envelope])
    if len(band_mass):
        ax.fill_between(
            band_mass,
            1.0 - band,
            1.0 + band,
            step="mid",
            color="yellow",
            linewidth=0,
        )
    ax.axhline(1.0, color="red", linestyle="--", linewidth=2)
    ax.set_xlim(*x_range)

    ratios = run.ratios.dropna(subset=["ratio"])
    ax.errorbar(
        ratios["mass"],
        ratios["ratio"],
        yerr=ratios["ratio_err"],
        fmt="o",
        color="black",
        markersize=3,
    )
