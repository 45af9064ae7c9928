"""
Error taxonomy shared by the API, the stores and the dashboard client.

None of these carry internal detail across the HTTP boundary: the API maps each
class to a status code and a fixed, generic message.
"""

class MailTriageError(Exception):
    """Base class for all mailtriage errors."""


class AuthenticationFailure(MailTriageError):
    """Bad credentials, or a missing, malformed, tampered or expired token."""


class EmailNotFoundError(MailTriageError):
    """No email with the given id exists in the store."""

    def __init__(self, email_id: str):
        super().__init__(f"Email {email_id} not found")
        self.email_id = email_id


class StoreFailure(MailTriageError):
    """The document store could not be read or written."""


class NetworkFailure(MailTriageError):
    """The dashboard could not reach the API, or the API answered with an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
