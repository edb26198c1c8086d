"""structlog setup.

Production logs are one JSON object per line on stderr. The level is
written to a ``severity`` key, which is what Google Cloud Logging reads.
"""

import logging
import sys

import structlog


def add_severity(logger, method_name, event_dict):
    """Store the log level under the ``severity`` key, upper-cased."""
    level = event_dict.pop('level', method_name)
    if level == 'warn':
        level = 'warning'
    event_dict['severity'] = level.upper()
    return event_dict


def configure_logging(level='INFO', fmt='json'):
    """Configure structlog for the whole process."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt='iso', utc=True, key='timestamp'),
        structlog.processors.StackInfoRenderer(),
    ]
    if fmt == 'console':
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors += [
            add_severity,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(default=str),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
