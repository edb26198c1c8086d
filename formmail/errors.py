"""Exceptions raised while handling a contact form submission."""

from urllib.parse import urlencode


class FormMailError(Exception):
    """Base class for every error the handler turns into an error page redirect."""
    pass


class ConfigError(FormMailError):
    """Raised when the environment is missing or has invalid values."""
    pass


class InvalidFormError(FormMailError):
    """Raised when required form fields are missing."""

    def __init__(self, errors):
        self.errors = errors
        fields = ', '.join(sorted(errors))
        super().__init__(f"missing or invalid fields: {fields}")


class HoneypotError(FormMailError):
    pass


class VerificationError(FormMailError):
    """Raised when the verification service rejects a challenge."""
    pass


class VerificationRequestError(VerificationError):
    """Raised when the verification service could not be reached. Retryable."""
    pass


class TemplateRenderError(FormMailError):
    pass


class EmailSendError(FormMailError):
    """Raised when the email API refuses or fails to accept a message."""
    pass


class InvalidMessageError(FormMailError):
    """Raised when a message cannot be turned into an email API request. Not retried."""
    pass


class SubmissionError(FormMailError):
    """Wraps a failed stage of the submission with the form that caused it."""

    def __init__(self, message, form=None, cause=None):
        self.message = message
        self.form = form
        self.cause = cause
        super().__init__(message)

    def __str__(self):
        if self.form:
            return f"{self.message}, form '{urlencode(self.form)}': {self.cause}"
        return f"{self.message}: {self.cause}"
