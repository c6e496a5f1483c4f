"""
Functional model for cross-section fits.
"""

from xsecfit.analysis.models import expo

__all__ = ["expo"]
