"""
Application errors.

Each error carries the message and HTTP status it is reported with, so route
handlers can turn any of them into a ``{"message": ...}`` JSON response.
"""
from flask import jsonify


class QuizHubError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_response(self):
        return error_response(self.message, self.status_code)


class ValidationError(QuizHubError):
    status_code = 400
    message = "Invalid request"


class Unauthorized(QuizHubError):
    status_code = 401
    message = "Unauthorized"


class QuizNotFound(QuizHubError):
    status_code = 404
    message = "Quiz not found"


class StoreFailure(QuizHubError):
    """
    Raised by the quiz store when the database rejects a read or write.

    The detail stays in the exception for the log; clients only get the
    generic message.
    """
    status_code = 500

    def to_response(self):
        return error_response(QuizHubError.message, self.status_code)


def error_response(message: str, status_code: int):
    return jsonify({"message": message}), status_code
