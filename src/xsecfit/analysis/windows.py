"""
Partition of the mass axis into contiguous fit windows.
"""

from collections.abc import Iterator, Sequence

from xsecfit.constants import PLACEHOLDER_MASS
from xsecfit.errors import ConfigurationError
from xsecfit.types.fitting import FitWindow


class WindowPartition:
    """Ordered, gap-free windows [b0, b1), [b1, b2), ... built from boundaries.

    Membership is half-open everywhere except the outermost edge, which
    belongs to the last window so that a tabulated point sitting exactly on
    it is still owned.
    """

    def __init__(self, boundaries: Sequence[float]) -> None:
        edges = tuple(float(b) for b in boundaries)
        if len(edges) < 2:
            raise ConfigurationError("At least two window boundaries are required")
        for lo, hi in zip(edges[:-1], edges[1:]):
            if not hi > lo:
                raise ConfigurationError(
                    f"Window boundaries must be strictly increasing: {edges}"
                )
        self.boundaries = edges
        self.windows = [
            FitWindow(index=i, lo=lo, hi=hi)
            for i, (lo, hi) in enumerate(zip(edges[:-1], edges[1:]))
        ]

    def __len__(self) -> int:
        return len(self.windows)

    def __iter__(self) -> Iterator[FitWindow]:
        return iter(self.windows)

    def __getitem__(self, index: int) -> FitWindow:
        return self.windows[index]

    @property
    def lo(self) -> float:
        return self.boundaries[0]

    @property
    def hi(self) -> float:
        return self.boundaries[-1]

    def locate(self, mass: float) -> FitWindow | None:
        """Return the window owning ``mass`` or None for uncovered masses."""
        if mass < PLACEHOLDER_MASS:
            return None
        for window in self.windows:
            if window.contains(mass):
                return window
        if mass == self.hi:
            return self.windows[-1]
        return None

    def __repr__(self) -> str:
        return f"WindowPartition({list(self.boundaries)})"
