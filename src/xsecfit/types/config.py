"""Run configuration for a single grid/composition fit."""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from xsecfit.constants import (
    DEFAULT_COMPOSITION,
    DEFAULT_ENVELOPE_STEP,
    DEFAULT_GRID,
    DEFAULT_INPUT_DIR,
)


@dataclass(slots=True)
class FitConfig:
    grid: str = DEFAULT_GRID
    composition: str = DEFAULT_COMPOSITION
    input_dir: Path = field(default_factory=lambda: Path(DEFAULT_INPUT_DIR))
    output_dir: Path = field(default_factory=lambda: Path("."))
    do_print: bool = True
    save_output: bool = True
    save_plot: bool = True
    method: str = "least_squares"
    n_workers: int = 1
    envelope_step: float = DEFAULT_ENVELOPE_STEP

    def __post_init__(self) -> None:
        self.input_dir = Path(self.input_dir)
        self.output_dir = Path(self.output_dir)
        self.n_workers = int(self.n_workers)
        self.envelope_step = float(self.envelope_step)

    @classmethod
    def field_names(cls) -> set[str]:
        return {f.name for f in fields(cls)}

    def to_dict(self) -> dict[str, Any]:
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            result[f.name] = str(value) if isinstance(value, Path) else value
        return result
