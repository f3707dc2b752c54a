"""
Exception and warning types raised by ArgonSIM.

Only construction-time problems are errors. Once a run has started, physical
edge cases (zero cross section, no energy left to ionize, hitting a wall) are
ordinary outcomes of the stochastic process and are never raised.
"""


class ArgonSimError(Exception):
    """Base class for all ArgonSIM errors."""

    pass


class DataFormatError(ArgonSimError, ValueError):
    """Raised when cross-section data is missing, malformed or unphysical."""

    pass


class ParameterValidationError(ArgonSimError, ValueError):
    """Raised when simulation parameters are missing or out of range."""

    pass


class ParameterWarning(UserWarning):
    """Warning for parameters that are valid but outside typical ranges."""

    pass
