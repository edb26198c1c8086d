"""Contact form submission."""

from dataclasses import dataclass


@dataclass
class ContactSubmission:
    """One contact form submission, alive for the duration of a request."""
    name: str
    email: str
    subject: str
    message: str
    recaptcha_response: str = ''
    honeypot_value: str = ''

    def to_dict(self):
        return {
            'name': self.name,
            'email': self.email,
            'subject': self.subject,
            'message': self.message,
        }

    def __repr__(self):
        return f'<ContactSubmission {self.subject}>'
