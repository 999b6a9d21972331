"""Errori sollevati dai servizi.

Ogni errore corrisponde a uno status HTTP; l'handler registrato in
``app.main`` li trasforma in risposte ``{"error": message}``.
"""


class ServiceError(Exception):
    status_code = 400
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailedError(ServiceError):
    default_message = "All fields are required"


class NotFoundError(ServiceError):
    status_code = 404
    default_message = "Not found"


class ForbiddenError(ServiceError, PermissionError):
    status_code = 403
    default_message = "Access denied"


class InvalidStateError(ServiceError):
    default_message = "Operation not allowed in the current state"


class InvalidTransitionError(ServiceError):
    default_message = "Invalid status transition"


class NotPublishedError(ServiceError):
    default_message = "Assignment is not published"


class DeadlinePassedError(ServiceError):
    default_message = "Assignment submission deadline has passed"


class DuplicateSubmissionError(ServiceError):
    default_message = "You have already submitted this assignment"


class DuplicateEmailError(ServiceError):
    default_message = "User already exists"


class InvalidCredentialsError(ServiceError):
    status_code = 401
    default_message = "Invalid credentials"


class InvalidTokenError(ServiceError):
    status_code = 401
    default_message = "Invalid or expired token"


class MissingTokenError(ServiceError):
    status_code = 403
    default_message = "No token provided"
