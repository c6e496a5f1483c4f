"""
Exponential model: sigma(m) = exp(a + b*m + c*ln m).
"""

import numpy as np

PARAM_NAMES = ("a", "b", "c")

# ROOT-style formula string kept in persisted results
FORMULA = "exp([0]+[1]*x+[2]*log(x))"


def eval(mass: np.ndarray, params) -> np.ndarray:
    """Evaluate the model for coefficients (a, b, c)."""
    a, b, c = params
    return np.exp(a + b * mass + c * np.log(mass))


def design_matrix(mass: np.ndarray) -> np.ndarray:
    """Basis {1, m, ln m} of the log-linearised model."""
    return np.column_stack([np.ones_like(mass), mass, np.log(mass)])


def jacobian(mass: np.ndarray, params) -> np.ndarray:
    """d(sigma)/d(a, b, c); each column is sigma times the basis function."""
    return eval(mass, params)[:, None] * design_matrix(mass)
