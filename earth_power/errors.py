"""
Exceptions raised by the EARTH base station power model.
"""


class EarthModelError(ValueError):
    """Base class for all model errors."""


class InvalidConfiguration(EarthModelError):
    """Station parameters are malformed. Raised once, when the config is built or loaded."""


class InvalidInput(EarthModelError):
    """The requested output power (or load) is out of range for the station."""
