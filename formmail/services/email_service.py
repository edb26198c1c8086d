"""
Amazon SES delivery for outgoing emails.

Usage:
    client = SesEmailClient(region='eu-west-1')
    message_id = client.send(EmailMessage(...))
"""

from dataclasses import dataclass
from email.utils import formataddr
from typing import Optional, Tuple

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import EmailSendError, InvalidMessageError

logger = structlog.get_logger(__name__)

Address = Tuple[str, str]  # (display name, email)

CHARSET = 'UTF-8'


@dataclass
class EmailMessage:
    """A single-recipient email."""
    sender: Address
    to: Address
    reply_to: Address
    subject: str
    body: str
    content_type: str = 'text/plain'


def format_address(address: Address) -> str:
    """Format a (name, email) pair, encoding non-ASCII names per RFC 2047."""
    name, email = address
    return formataddr((name, email), charset=CHARSET)


class SesEmailClient:
    """Send emails through the SES ``SendEmail`` API."""

    def __init__(self, region: str = 'us-east-1', configuration_set: Optional[str] = None, client=None):
        self.region = region
        self.configuration_set = configuration_set
        self.client = client or boto3.client('ses', region_name=region)

    def build_request(self, message: EmailMessage) -> dict:
        body_key = 'Html' if message.content_type == 'text/html' else 'Text'
        params = {
            'Source': format_address(message.sender),
            'Destination': {
                'ToAddresses': [format_address(message.to)],
            },
            'Message': {
                'Subject': {
                    'Charset': CHARSET,
                    'Data': message.subject,
                },
                'Body': {
                    body_key: {
                        'Charset': CHARSET,
                        'Data': message.body,
                    },
                },
            },
            'ReplyToAddresses': [format_address(message.reply_to)],
        }
        if self.configuration_set:
            params['ConfigurationSetName'] = self.configuration_set
        return params

    def send(self, message: EmailMessage) -> str:
        """Send ``message`` and return the SES message id.

        Raises:
            EmailSendError: if SES rejects the message or cannot be reached
            InvalidMessageError: if an address cannot be encoded
        """
        try:
            params = self.build_request(message)
        except ValueError as e:
            raise InvalidMessageError(f"building SES request failed: {e}") from e

        try:
            response = self.client.send_email(**params)
        except ClientError as e:
            error = e.response.get('Error', {})
            raise EmailSendError(
                f"SES error '{error.get('Code')}': {error.get('Message')}"
            ) from e
        except BotoCoreError as e:
            raise EmailSendError(f"SES request failed: {e}") from e

        status = response.get('ResponseMetadata', {}).get('HTTPStatusCode', 200)
        if status >= 400:
            raise EmailSendError(f"response code '{status}' not ok, body '{response}'")

        message_id = response.get('MessageId')
        logger.debug('Email accepted', message_id=message_id, to=message.to[1])
        return message_id
