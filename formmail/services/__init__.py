"""External services and the contact form orchestration built on them."""

from .contact_service import ContactService, get_service, init, reset
from .email_service import EmailMessage, SesEmailClient
from .recaptcha import ReCaptchaVerifier

__all__ = [
    'ContactService',
    'EmailMessage',
    'ReCaptchaVerifier',
    'SesEmailClient',
    'get_service',
    'init',
    'reset',
]
