"""
core/errors.py -- Domain error taxonomy for Stockroom.

Every error a request can legitimately end in is a StockroomError subclass
carrying its HTTP status and a client-safe message. Stores and auth helpers
raise these; api/main.py converts them into the uniform
{"success": false, "message": ...} envelope at the boundary.

Not-found and not-owned share NotFound on purpose. Callers must not be able
to tell whether a product id exists under another account.
"""


class StockroomError(Exception):
    """Base class. Unclassified failures surface as 500."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(StockroomError):
    status_code = 400
    default_message = "Invalid input"


class DuplicateEmail(StockroomError):
    status_code = 400
    default_message = "User already exists"


class Unauthenticated(StockroomError):
    status_code = 401
    default_message = "Not authorized"


class InvalidCredentials(StockroomError):
    """Unknown email and wrong password both end here."""

    status_code = 401
    default_message = "Invalid email or password"


class InvalidToken(StockroomError):
    """Bad signature, malformed token, or missing subject claim."""

    status_code = 401
    default_message = "Invalid token"


class ExpiredToken(StockroomError):
    status_code = 401
    default_message = "Token expired"


class NotFound(StockroomError):
    status_code = 404
    default_message = "Not found"
