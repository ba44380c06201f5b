"""Kicker exceptions"""


class KickerError(Exception):
    """Base exception for Kicker"""
    pass


class ConfigurationError(KickerError, ValueError):
    """Invalid configuration or criteria. Fatal at startup."""
    pass


class StrategyRegistryError(KickerError, KeyError):
    """Registry misconfiguration. Fatal at startup."""

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""


class DuplicateStrategyError(StrategyRegistryError):
    """A strategy name was registered twice"""
    pass


class UnknownStrategyError(StrategyRegistryError):
    """A strategy name was looked up but never registered"""
    pass


class FetchError(KickerError):
    """The candidate source could not list candidates. Fatal to the control loop."""
    pass


class RemovalError(KickerError):
    """A single candidate could not be removed. Logged and skipped."""

    def __init__(self, message: str, name: str = "", namespace: str = ""):
        super().__init__(message)
        self.name = name
        self.namespace = namespace
