"""Contact forms."""

from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired


class ContactForm(FlaskForm):
    """Contact form posted by the static site."""

    class Meta:
        csrf = False

    name = StringField('Name', validators=[
        DataRequired(message='Name is required')
    ])
    email = StringField('Email', validators=[
        DataRequired(message='Email is required')
    ])
    subject = StringField('Subject', validators=[
        DataRequired(message='Subject is required')
    ])
    message = TextAreaField('Message', validators=[
        DataRequired(message='Message is required')
    ])


class ReCaptchaContactForm(ContactForm):
    """Contact form that also carries a reCAPTCHA challenge solution."""
    recaptcha_response = StringField('reCAPTCHA', name='g-recaptcha-response', validators=[
        DataRequired(message='reCAPTCHA challenge is required')
    ])
