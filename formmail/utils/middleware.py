"""Request hooks: CORS, per-request log context and crash recovery."""

import time

import structlog
from flask import g, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

logger = structlog.get_logger(__name__)

CORS_METHODS = ['GET', 'POST', 'OPTIONS']


def http_request_log():
    """Describe the current request the way Google Cloud Logging expects it."""
    entry = {
        'protocol': request.environ.get('SERVER_PROTOCOL'),
        'referer': request.referrer,
        'remoteIp': request.headers.get('X-Forwarded-For'),
        'requestMethod': request.method,
        'requestUrl': request.full_path if request.query_string else request.path,
        'userAgent': request.user_agent.string,
        'serverIp': request.remote_addr,
    }
    return {key: value for key, value in entry.items() if value}


def bind_request_context():
    g.request_started = time.monotonic()
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(httpRequest=http_request_log())


def request_latency():
    started = g.get('request_started')
    if started is None:
        return None
    return f'{time.monotonic() - started:.6f}s'


def log_request_completed(response):
    """Log the finished request with its status and latency."""
    http_request = http_request_log()
    http_request['status'] = response.status_code
    latency = request_latency()
    if latency is not None:
        http_request['latency'] = latency
    logger.info('Request completed', httpRequest=http_request)
    return response


def clear_request_context(exc=None):
    structlog.contextvars.clear_contextvars()


def handle_unexpected_error(error):
    """Log a crashed request with its form and stack, answer with a 500."""
    if isinstance(error, HTTPException):
        return error

    http_request = http_request_log()
    latency = request_latency()
    if latency is not None:
        http_request['latency'] = latency

    logger.error(
        'Handler crashed',
        httpRequest=http_request,
        httpForm=request.form.to_dict(flat=False),
        exc_info=error,
    )
    return 'internal server error', 500, {'Content-Type': 'text/plain; charset=utf-8'}


def register_middlewares(target):
    """Attach the hooks to a Flask app or blueprint."""
    CORS(target, methods=CORS_METHODS)
    target.before_request(bind_request_context)
    target.after_request(log_request_completed)
    target.teardown_request(clear_request_context)
    target.register_error_handler(Exception, handle_unexpected_error)
