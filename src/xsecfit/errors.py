"""Exception types raised by the fitting pipeline."""


class XsecFitError(Exception):
    """Base class for all xsecfit errors."""


class ConfigurationError(XsecFitError, ValueError):
    """Unknown (grid, composition) pair or invalid run configuration."""


class InputFormatError(XsecFitError, ValueError):
    """Input table or results file is missing, empty, or malformed."""


class FitError(XsecFitError, RuntimeError):
    """A window/variant fit is underdetermined or did not converge."""


class ArithmeticDegeneracy(XsecFitError, ArithmeticError):
    """Division by a zero nominal cross-section."""
