# app/exceptions.py
"""
Registry error taxonomy.
Each error carries the HTTP status it maps to and a message that is safe to
show the client. Handlers in app/main.py render them as
{"status": "error", "message": ...}.
"""


class RegistryError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(RegistryError):
    status_code = 400
    default_message = "Invalid request"


class Unauthorized(RegistryError):
    status_code = 401
    default_message = "Authentication required"


class NotFound(RegistryError):
    status_code = 404
    default_message = "Not found"


class MethodNotAllowed(RegistryError):
    status_code = 405
    default_message = "Method not allowed"


class InvalidStatusTransition(RegistryError):
    status_code = 409
    default_message = "Invalid status transition"


class StoreUnavailable(RegistryError):
    status_code = 500
    default_message = "Database connection failed"


class TransactionError(RegistryError):
    status_code = 500
    default_message = "Failed to create registry entry"
