"""
Piecewise exponential fits of tabulated cross-sections with an up/down
uncertainty envelope.
"""

__version__ = "0.1.0"
