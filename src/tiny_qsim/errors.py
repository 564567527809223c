"""Exceptions raised by tiny-qsim."""


class TinyQsimError(Exception):
    """Base class for all tiny-qsim errors."""


class InvalidQubitIndex(TinyQsimError, ValueError):
    """A qubit index is out of range, repeated, or the wrong number were given."""


class UnknownGate(TinyQsimError, ValueError):
    """Gate name not in the catalog, or called with the wrong number of parameters."""


class InstanceNotFound(TinyQsimError, LookupError):
    """A registry handle does not refer to a live register."""
