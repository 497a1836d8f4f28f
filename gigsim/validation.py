"""
Input validation for parameter vectors.

The formula pipeline itself never checks its inputs; this layer rejects
non-finite values and values outside the documented ranges before an
evaluation starts.
"""

import logging
import math
from typing import Callable, Dict, Tuple

from .config import PARAMETER_NAMES, ParameterVector
from .exceptions import InvalidParameterError

_LOG = logging.getLogger(__name__)

# Upper bound on intensity and tolerance; the power-law cost terms
# overflow a float above it.
MAX_MAGNITUDE = 1e6

# name -> (predicate, human-readable range)
_RANGES: Dict[str, Tuple[Callable[[float], bool], str]] = {
    "r": (lambda v: 0.0 <= v < 1.0, "must lie in [0, 1)"),
    "e": (lambda v: 0.0 < v <= MAX_MAGNITUDE, "must lie in (0, 1e6]"),
    "eta": (lambda v: 0.0 < v <= 1.0, "must lie in (0, 1]"),
    "tau": (lambda v: 0.0 < v <= MAX_MAGNITUDE, "must lie in (0, 1e6]"),
    "lambda": (lambda v: 0.0 <= v <= 1.0, "must lie in [0, 1]"),
    "monitoring": (lambda v: 0.0 <= v <= 1.0, "must lie in [0, 1]"),
    "competition": (lambda v: 0.0 <= v <= 1.0, "must lie in [0, 1]"),
    "regulation": (lambda v: 0.0 <= v <= 1.0, "must lie in [0, 1]"),
    "innovation": (lambda v: 0.0 <= v <= 1.0, "must lie in [0, 1]"),
}


def validate_parameters(params: ParameterVector) -> ParameterVector:
    """Return ``params`` unchanged, or raise InvalidParameterError.

    Parameters are checked in export order, so the first offending field
    is the one reported.
    """
    values = params.as_dict()
    for name in PARAMETER_NAMES:
        value = values[name]
        try:
            finite = math.isfinite(value)
        except TypeError:
            raise InvalidParameterError(name, value, "must be a real number") from None
        if not finite:
            _LOG.warning("rejected non-finite %s=%r", name, value)
            raise InvalidParameterError(name, value, "must be finite")
        check, expected = _RANGES[name]
        if not check(value):
            _LOG.warning("rejected out-of-range %s=%r", name, value)
            raise InvalidParameterError(name, value, expected)
    return params
