'''
Uncertainty expansion, segmented fitting, envelope and report (no I/O).
'''

from .windows import WindowPartition
from .uncertainty import expand_series, to_absolute_uncertainties
from .fitting import FitCollection, fit_all, fit_window
from .envelope import build_envelope, envelope_at, ratio_points
from .report import build_report_table, format_report, percent_difference

__all__ = [
    "WindowPartition",
    "expand_series",
    "to_absolute_uncertainties",
    "FitCollection",
    "fit_all",
    "fit_window",
    "build_envelope",
    "envelope_at",
    "ratio_points",
    "build_report_table",
    "format_report",
    "percent_difference",
]
