"""Standard normal distribution helpers."""

from typing import Union
import numpy as np

# Abramowitz & Stegun 7.1.26
_P = 0.3275911
_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429

_SQRT_2 = np.sqrt(2.0)
_SQRT_2PI = np.sqrt(2.0 * np.pi)


def _as_output(res: np.ndarray) -> Union[float, np.ndarray]:
    return float(res) if res.ndim == 0 else res


def normal_cdf(x: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Standard normal CDF via a rational approximation of erf (max error ~1e-7).

    Symmetric by construction: N(-x) = 1 - N(x). Saturates to 0/1 at -inf/+inf.
    """
    x = np.asarray(x, dtype=float)
    sign = np.where(x < 0, -1.0, 1.0)
    z = np.abs(x) / _SQRT_2

    with np.errstate(over='ignore', invalid='ignore'):
        t = 1.0 / (1.0 + _P * z)
        poly = ((((_A5 * t + _A4) * t + _A3) * t + _A2) * t + _A1) * t
        y = 1.0 - poly * np.exp(-z * z)

    return _as_output(0.5 * (1.0 + sign * y))


def normal_pdf(x: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """Standard normal density."""
    x = np.asarray(x, dtype=float)
    with np.errstate(over='ignore'):
        res = np.exp(-0.5 * x * x) / _SQRT_2PI
    return _as_output(res)
