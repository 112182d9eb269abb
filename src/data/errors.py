"""Error types raised by the tracker engine."""


class TrackerError(Exception):
    """Base class for engine errors shown to the user as a transient message."""

    user_message = "Something went wrong"

    def __init__(self, message: str = None):
        super().__init__(message or self.user_message)
        self.user_message = message or self.user_message


class InvalidTicker(TrackerError):
    user_message = "Please enter a stock ticker symbol"


class InvalidPercentage(TrackerError):
    user_message = "Please enter a valid percentage"


class NoActiveQuote(TrackerError):
    user_message = "Please fetch a stock price first"


class NoActiveTicker(TrackerError):
    user_message = "Please fetch a stock price first"


class AcquisitionFailure(TrackerError):
    """Live quote fetch failed. Always absorbed by the acquisition layer."""

    user_message = "Unable to fetch live quote"
