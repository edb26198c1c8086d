"""
Google reCAPTCHA verification service.

Verifies challenge solutions submitted with the contact form against the
``siteverify`` API. Both v2 (checkbox/invisible) and v3 (score based) keys
are supported.

Documentation: https://developers.google.com/recaptcha/docs/verify
"""

from typing import Optional

import requests
import structlog

from ..environ import DEFAULT_V3_THRESHOLD, RECAPTCHA_V3
from ..errors import VerificationError, VerificationRequestError

logger = structlog.get_logger(__name__)


class ReCaptchaVerifier:
    """
    Verifies reCAPTCHA challenge solutions.

    Usage:
        verifier = ReCaptchaVerifier(secret_key, 'v3')
        verifier.verify(token, remote_ip='192.168.1.1', threshold=0.7)
    """

    VERIFY_URL = 'https://www.google.com/recaptcha/api/siteverify'

    def __init__(self, secret_key: str, version: str, timeout: float = 2.0, session=None):
        if not secret_key:
            raise ValueError('recaptcha secret key is empty')
        self.secret_key = secret_key
        self.version = version
        self.timeout = timeout
        self.session = session or requests.Session()

    def verify(self, challenge: str, remote_ip: Optional[str] = None,
               threshold: float = DEFAULT_V3_THRESHOLD) -> None:
        """
        Verify a challenge solution.

        Args:
            challenge: The ``g-recaptcha-response`` value from the form
            remote_ip: Optional submitter IP address
            threshold: Minimal v3 score

        Raises:
            VerificationRequestError: If the API could not be reached or
                answered with an unexpected response (retryable)
            VerificationError: If the challenge was rejected
        """
        payload = {
            'secret': self.secret_key,
            'response': challenge,
        }
        if remote_ip:
            payload['remoteip'] = remote_ip

        try:
            response = self.session.post(self.VERIFY_URL, data=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise VerificationRequestError(f"recaptcha request failed: {e}") from e

        if response.status_code != 200:
            raise VerificationRequestError(
                f"recaptcha API returned status {response.status_code}: {response.text}"
            )

        try:
            result = response.json()
        except ValueError as e:
            raise VerificationRequestError(f"recaptcha API returned invalid JSON: {e}") from e
        if not isinstance(result, dict):
            raise VerificationRequestError(f"recaptcha API returned unexpected body: {response.text}")

        if not result.get('success'):
            error_codes = result.get('error-codes', [])
            raise VerificationError(f"invalid challenge solution, error codes {error_codes}")

        if self.version == RECAPTCHA_V3:
            try:
                score = float(result.get('score', 0.0))
            except (TypeError, ValueError) as e:
                raise VerificationRequestError(
                    f"recaptcha API returned invalid score '{result.get('score')}'"
                ) from e
            if score < threshold:
                raise VerificationError(
                    f"received score '{score}', while expecting minimum '{threshold}'"
                )
            logger.debug('reCAPTCHA verified', score=score, action=result.get('action'))
        else:
            logger.debug('reCAPTCHA verified', hostname=result.get('hostname'))
