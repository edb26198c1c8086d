"""Contact forms."""

from .contact import ContactForm, ReCaptchaContactForm

__all__ = [
    'ContactForm',
    'ReCaptchaContactForm',
]
