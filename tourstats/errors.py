"""Exceptions raised by the tour statistics package."""


class TourStatsError(Exception):
    """Base class for tour statistics errors."""


class CalculatorRegistrationError(TourStatsError, ValueError):
    """A calculator was registered with missing metadata or a duplicate type."""


class CalculatorNotAvailableError(TourStatsError):
    """Requested calculator type is not registered or is disabled."""

    def __init__(self, calculator_type: str):
        super().__init__(f"Calculator '{calculator_type}' is not registered or is disabled")
        self.calculator_type = calculator_type


class ShowDataError(TourStatsError):
    """A stored show file could not be turned into an EnhancedShow."""
