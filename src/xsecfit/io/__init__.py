"""
IO utilities: grid registry, cross-section tables, results and config YAML.
"""

from xsecfit.io.registry import (
    GridEntry,
    describe_grids,
    get_grid_entry,
    list_grids,
)
from xsecfit.io.xsec_table import load_cross_sections, read_xsec_table
from xsecfit.io.results_yaml import (
    FitResultsFile,
    load_fit_results_yaml,
    save_fit_results_yaml,
)
from xsecfit.io.config_yaml import load_fit_config

__all__ = [
    "GridEntry",
    "describe_grids",
    "get_grid_entry",
    "list_grids",
    "load_cross_sections",
    "read_xsec_table",
    "FitResultsFile",
    "load_fit_results_yaml",
    "save_fit_results_yaml",
    "load_fit_config",
]
