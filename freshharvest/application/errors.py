"""Error taxonomy shared by the services and the HTTP layer.

Each error carries the HTTP status it is rendered with, so route handlers never
translate them by hand.
"""


class StorefrontError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(StorefrontError):
    status_code = 400
    default_message = "Invalid request"


class AuthenticationRequired(StorefrontError):
    status_code = 401
    default_message = "Not authorized"


class AuthorizationDenied(StorefrontError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(StorefrontError):
    status_code = 404
    default_message = "Not found"


class MethodNotSupported(StorefrontError):
    status_code = 405
    default_message = "Method not allowed"


class PersistenceFailure(StorefrontError):
    status_code = 500
    default_message = "Database error"
