"""
Contact form handling: validate, verify, notify the site owner, confirm to the submitter.

The service is built once per process from the environment, see :func:`init`.
"""

from typing import Callable, Optional

import structlog
from flask import redirect
from jinja2 import (ChoiceLoader, Environment, FileSystemLoader, PackageLoader,
                    StrictUndefined, TemplateError, select_autoescape)

from ..environ import Environ, from_os_env, parse_env
from ..errors import (ConfigError, EmailSendError, FormMailError, HoneypotError,
                      InvalidFormError, InvalidMessageError, SubmissionError,
                      TemplateRenderError, VerificationError, VerificationRequestError)
from ..forms import ContactForm, ReCaptchaContactForm
from ..models import ContactSubmission
from ..utils.content_type import detect_content_type
from ..utils.once import TryOnce
from ..utils.retry import retry
from .email_service import EmailMessage, SesEmailClient
from .recaptcha import ReCaptchaVerifier

logger = structlog.get_logger(__name__)

TRIES = 3
RETRY_BACKOFF = 0.01  # seconds
RECAPTCHA_TIMEOUT = 2.0  # seconds


def create_template_environment(templates_dir: Optional[str] = None) -> Environment:
    """Templates from ``templates_dir`` shadow the bundled ones."""
    loaders = []
    if templates_dir:
        loaders.append(FileSystemLoader(templates_dir))
    loaders.append(PackageLoader('formmail', 'templates'))
    return Environment(
        loader=ChoiceLoader(loaders),
        undefined=StrictUndefined,
        autoescape=select_autoescape(['html', 'htm'], default_for_string=False),
        keep_trailing_newline=True,
    )


class ContactService:
    """Handles contact form submissions."""

    def __init__(self, env: Environ, email_client, verifier=None, templates: Optional[Environment] = None):
        self.env = env
        self.email_client = email_client
        self.verifier = verifier
        self.templates = templates or create_template_environment(env.templates_dir)

        if env.recaptcha_enabled() and verifier is None:
            raise ConfigError('recaptcha is enabled but no verifier was given')

        for name in (env.email_template, env.confirmation_template):
            try:
                self.templates.get_template(name)
            except TemplateError as e:
                raise ConfigError(f"loading template '{name}' failed: {e}") from e

    @classmethod
    def from_environ(cls, env: Environ) -> 'ContactService':
        email_client = SesEmailClient(env.aws_region, env.ses_configuration_set)

        verifier = None
        if env.recaptcha_enabled():
            verifier = ReCaptchaVerifier(
                env.recaptcha_secret_key,
                env.recaptcha_version,
                timeout=RECAPTCHA_TIMEOUT,
            )

        return cls(env, email_client, verifier)

    def handle(self, request):
        """Process the submission and redirect to the thank you or error page."""
        form = request.form.to_dict()
        try:
            self.send_email_and_confirmation(request)
        except FormMailError as e:
            logger.warning('Sending email failed', error=str(e), form=form)
            return redirect(self.env.error_page, code=303)

        logger.info('Email sent successfully', form=form)
        return redirect(self.env.thank_you_page, code=303)

    def send_email_and_confirmation(self, request) -> None:
        try:
            submission = self.parse_form(request)
        except InvalidFormError as e:
            raise SubmissionError('invalid form', request.form.to_dict(), e) from e

        form = submission.to_dict()

        try:
            self.check_honeypot(submission)
        except HoneypotError as e:
            raise SubmissionError('honeypot check failed', form, e) from e

        try:
            self.verify_recaptcha(submission.recaptcha_response, request.remote_addr)
        except VerificationError as e:
            raise SubmissionError('recaptcha failed', form, e) from e

        try:
            message = self.new_email(submission)
        except TemplateRenderError as e:
            raise SubmissionError('creating email failed', form, e) from e

        try:
            self.send_email(message)
        except (EmailSendError, InvalidMessageError) as e:
            raise SubmissionError('sending email failed', form, e) from e

        try:
            confirmation = self.new_confirmation(submission)
        except TemplateRenderError as e:
            raise SubmissionError('creating confirmation failed', form, e) from e

        try:
            self.send_email(confirmation)
        except (EmailSendError, InvalidMessageError) as e:
            raise SubmissionError('sending confirmation failed', form, e) from e

    def parse_form(self, request) -> ContactSubmission:
        form_class = ReCaptchaContactForm if self.env.recaptcha_enabled() else ContactForm
        form = form_class(formdata=request.form)
        if not form.validate():
            raise InvalidFormError(form.errors)

        honeypot_value = ''
        if self.env.honeypot_check_enabled():
            honeypot_value = request.form.get(self.env.honeypot_field, '')

        return ContactSubmission(
            name=form.name.data,
            email=form.email.data,
            subject=form.subject.data,
            message=form.message.data,
            recaptcha_response=form.recaptcha_response.data if 'recaptcha_response' in form else '',
            honeypot_value=honeypot_value,
        )

    def check_honeypot(self, submission: ContactSubmission) -> None:
        if not self.env.honeypot_check_enabled():
            return
        if submission.honeypot_value != '':
            raise HoneypotError(
                f"invalid '{self.env.honeypot_field}' value '{submission.honeypot_value}'"
            )

    def verify_recaptcha(self, challenge: str, remote_addr: Optional[str]) -> None:
        if not self.env.recaptcha_enabled():
            return
        if not challenge:
            raise VerificationError('recaptcha challenge is empty')

        # Only transport failures are retried, a rejected solution is final
        retry(
            lambda: self.verifier.verify(challenge, remote_addr, self.env.threshold),
            tries=TRIES,
            backoff=RETRY_BACKOFF,
            retry_on=(VerificationRequestError,),
        )

    def send_email(self, message: EmailMessage):
        return retry(
            lambda: self.email_client.send(message),
            tries=TRIES,
            backoff=RETRY_BACKOFF,
            retry_on=(EmailSendError,),
        )

    def new_email(self, submission: ContactSubmission) -> EmailMessage:
        """Notification for the site owner. Replies go to the submitter."""
        body = self.render_body(self.env.email_template, submission)
        return EmailMessage(
            sender=(self.env.noreply_name, self.env.noreply_email),
            to=(self.env.recipient_name, self.env.recipient_email),
            reply_to=(submission.name, submission.email),
            subject=submission.subject,
            body=body,
            content_type=detect_content_type(body),
        )

    def new_confirmation(self, submission: ContactSubmission) -> EmailMessage:
        """Confirmation for the submitter. Replies go to the site owner."""
        body = self.render_body(self.env.confirmation_template, submission)
        return EmailMessage(
            sender=(self.env.noreply_name, self.env.noreply_email),
            to=(submission.name, submission.email),
            reply_to=(self.env.recipient_name, self.env.recipient_email),
            subject=submission.subject,
            body=body,
            content_type=detect_content_type(body),
        )

    def render_body(self, template_name: str, submission: ContactSubmission) -> str:
        try:
            template = self.templates.get_template(template_name)
            return template.render(
                FORM_NAME=submission.name,
                FORM_EMAIL=submission.email,
                FORM_SUBJECT=submission.subject,
                FORM_MESSAGE=submission.message,
                NOREPLY_NAME=self.env.noreply_name,
                NOREPLY_EMAIL=self.env.noreply_email,
                RECIPIENT_NAME=self.env.recipient_name,
                RECIPIENT_EMAIL=self.env.recipient_email,
            )
        except TemplateError as e:
            raise TemplateRenderError(f"rendering '{template_name}' failed: {e}") from e


_once = TryOnce()
_service: Optional[ContactService] = None


def init(loader: Callable[[], dict] = from_os_env,
         factory: Optional[Callable[[Environ], ContactService]] = None) -> None:
    """Build the process-wide service unless that already succeeded.

    A failure propagates and the next call tries again.
    """
    def _init():
        global _service
        env = parse_env(loader)
        _service = (factory or ContactService.from_environ)(env)
        logger.info(
            'Contact service initialized',
            recaptcha=env.recaptcha_version or 'off',
            honeypot=env.honeypot_check_enabled(),
        )

    _once.try_do(_init)


def get_service() -> ContactService:
    init()
    return _service


def reset() -> None:
    global _service
    _service = None
    _once.reset()
