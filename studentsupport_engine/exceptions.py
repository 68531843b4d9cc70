"""
Exception types raised by the Student Support Engine.

Domain ineligibility is never an exception; these cover bad configuration,
bad reference data and malformed caller input.
"""


class ThresholdConfigError(ValueError):
    """Raised when a threshold table is missing or has invalid rate constants."""
    pass


class ReferenceDataError(ValueError):
    """Raised when a scaling or conversion table cannot be built from its rows."""
    pass


class ProfileValidationError(ValueError):
    """Raised when caller input fails domain-level validation."""

    def __init__(self, field_name: str, message: str):
        self.field_name = field_name
        self.message = message
        super().__init__(f"{field_name}: {message}")
