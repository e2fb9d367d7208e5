"""Error kinds raised by services and turned into JSON error bodies at the API edge."""


class SmartAgriError(Exception):
    """Base class for all expected failures. Carries the HTTP status to answer with."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequest(SmartAgriError):
    status_code = 400
    default_message = "Invalid request body"


class Unauthorized(SmartAgriError):
    status_code = 401
    default_message = "Unauthorized"


class InvalidCredentials(Unauthorized):
    default_message = "Invalid email or password"


class Forbidden(SmartAgriError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(SmartAgriError):
    status_code = 404
    default_message = "Not found"


class Conflict(SmartAgriError):
    status_code = 409
    default_message = "Conflict"


class DuplicateUser(Conflict):
    default_message = "A user with this email already exists"


class DuplicateDevice(Conflict):
    default_message = "A device with this id is already registered"


class UpstreamUnavailable(SmartAgriError):
    """Data store or AI service call failed or timed out."""

    status_code = 500
    default_message = "Upstream service unavailable"


class InvalidAIResponse(SmartAgriError):
    """AI output could not be parsed into the recommendation schema."""

    status_code = 500
    default_message = "Invalid AI response format"
