"""
Registry of supported (grid, composition) pairs and their input tables.
"""

from dataclasses import dataclass

from xsecfit.errors import ConfigurationError

STANDARD_BOUNDARIES: tuple[float, ...] = (
    100.0, 150.0, 200.0, 300.0, 400.0, 600.0, 800.0, 1000.0, 1200.0, 1500.0, 2000.0,
)
# 50 GeV steps, outer edge kept at 2000
SLEPSLEP_BOUNDARIES: tuple[float, ...] = tuple(50.0 * (i + 1) for i in range(10)) + (
    2000.0,
)


@dataclass(slots=True, frozen=True)
class GridEntry:
    grid: str
    composition: str
    n_points: int
    boundaries: tuple[float, ...]
    fractional_uncertainty: bool = False

    @property
    def file_name(self) -> str:
        return f"xsec_{self.grid}_{self.composition}.txt"

    @property
    def label(self) -> str:
        return f"{self.grid} {self.composition}"


def _standard(grid: str, composition: str) -> GridEntry:
    return GridEntry(grid, composition, 77, STANDARD_BOUNDARIES)


def _slepton(composition: str) -> GridEntry:
    return GridEntry(
        "SlepSlep", composition, 10, SLEPSLEP_BOUNDARIES, fractional_uncertainty=True
    )


GRIDS: dict[tuple[str, str], GridEntry] = {
    **{
        (grid, comp): _standard(grid, comp)
        for grid in ("C1N2", "C1pN2", "C1mN2", "C1C1")
        for comp in ("wino", "hino")
    },
    ("N1N2", "hino"): _standard("N1N2", "hino"),
    ("CN", "hino"): _standard("CN", "hino"),
    ("SlepSlep", "left"): _slepton("left"),
    ("SlepSlep", "right"): _slepton("right"),
}


def list_grids() -> list[tuple[str, str]]:
    """Return all supported (grid, composition) pairs."""
    return list(GRIDS.keys())


def describe_grids() -> str:
    """Human-readable summary of valid compositions per grid."""
    by_grid: dict[str, list[str]] = {}
    for grid, comp in GRIDS:
        by_grid.setdefault(grid, []).append(comp)
    return "; ".join(f"{grid}: {', '.join(comps)}" for grid, comps in by_grid.items())


def get_grid_entry(grid: str, composition: str) -> GridEntry:
    key = (grid, composition)
    if key not in GRIDS:
        raise ConfigurationError(
            f"Couldn't find cross-sections for grid {grid} and composition "
            f"{composition}. Valid options are {describe_grids()}"
        )
    return GRIDS[key]


__all__ = [
    "GRIDS",
    "GridEntry",
    "SLEPSLEP_BOUNDARIES",
    "STANDARD_BOUNDARIES",
    "describe_grids",
    "get_grid_entry",
    "list_grids",
]
