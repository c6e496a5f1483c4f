"""Shared constants for fitting, reporting and output naming."""

# Masses below this are placeholder rows and never belong to a fit window
PLACEHOLDER_MASS = 1.0e-3

# Fewest samples that determine the three model coefficients
MIN_FIT_POINTS = 3

DEFAULT_GRID = "C1N2"
DEFAULT_COMPOSITION = "wino"
DEFAULT_INPUT_DIR = "Inputs"
DEFAULT_ENVELOPE_STEP = 10.0

# Suffix of every output artifact: <grid>_<comp>_13TeV.<ext>
OUTPUT_TAG = "13TeV"
