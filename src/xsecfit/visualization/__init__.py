"""
Plotting of fitted cross-sections (matplotlib, no GUI state).
"""

from xsecfit.visualization.plot import default_plot_path, plot_fit_overview

__all__ = ["default_plot_path", "plot_fit_overview"]
