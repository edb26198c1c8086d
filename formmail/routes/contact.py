"""Contact form endpoint."""

from flask import Blueprint, request

from ..services import contact_service
from ..utils.middleware import register_middlewares

contact_bp = Blueprint('contact', __name__)
register_middlewares(contact_bp)


@contact_bp.route('/send-email', methods=['POST'])
def send_email():
    """Send the submission to the site owner and a confirmation to the submitter."""
    service = contact_service.get_service()
    return service.handle(request)
