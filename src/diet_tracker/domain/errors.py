"""Domain error taxonomy."""

from collections.abc import Sequence


class DietTrackerError(Exception):
    """Base class for errors raised by the diet tracker services."""

    message = "Diet tracker error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class ProfileIncomplete(DietTrackerError):
    """Required profile attributes are missing."""

    message = "Please complete your profile first"

    def __init__(self, missing_fields: Sequence[str], message: str | None = None):
        super().__init__(message)
        self.missing_fields = list(missing_fields)


class ExternalServiceFailure(DietTrackerError):
    """The generative text service could not be reached or returned an error."""

    message = "Generative text service unavailable"


class ResponseParseFailure(DietTrackerError):
    """The generative text service returned text that does not fit the schema."""

    message = "Generative text response could not be parsed"

    def __init__(self, message: str | None = None, raw_text: str = "") -> None:
        super().__init__(message)
        self.raw_text = raw_text


ServiceUnavailable = ExternalServiceFailure
MalformedResponse = ResponseParseFailure


class NotFound(DietTrackerError):
    """Entity lookup failed."""

    message = "Not found"


class NotAuthorized(DietTrackerError):
    """Caller is not allowed to access the entity."""

    message = "Not authorized"


class EmailAlreadyRegistered(DietTrackerError):
    """An account with the email already exists."""

    message = "User already exists"


class InvalidCredentials(DietTrackerError):
    """Email or password did not match."""

    message = "Invalid email or password"
