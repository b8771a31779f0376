"""
Logging helpers for the pitch validation service.
Location: pitchlytics/utils/logging_utils.py
"""

import os
import json
import logging
from datetime import datetime
from typing import Dict, Any, Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(log_level: str = 'INFO', log_file: Optional[str] = None, json_format: bool = False):
    """
    Configure the root logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file. If None, logs to console only.
        json_format: Emit one JSON object per record instead of plain text.
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handler = logging.FileHandler(log_file, mode='a')
    else:
        handler = logging.StreamHandler()

    if json_format:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.setLevel(numeric_level)
    # replace handlers from a previous call instead of stacking them
    for existing in list(root.handlers):
        if getattr(existing, '_pitchlytics', False):
            root.removeHandler(existing)
    handler._pitchlytics = True
    root.addHandler(handler)

    return logging.getLogger(__name__)


def log_api_response(message: str, data: Dict[str, Any] = None):
    """
    Log an API outcome at a level chosen from its status code.

    Args:
        message: Descriptive message for the log entry
        data: Dictionary with status_code and any other details
    """
    logger = logging.getLogger(__name__)
    data = data or {}
    status_code = data.get("status_code")
    log_data = {
        'message': message,
        'timestamp': datetime.now().isoformat(),
        **data,
    }

    if status_code is not None and 400 <= status_code < 500:
        logger.warning(json.dumps(log_data, default=str))
    elif status_code is not None and 500 <= status_code < 600:
        logger.error(json.dumps(log_data, default=str))
    else:
        logger.info(json.dumps(log_data, default=str))


class JsonFormatter(logging.Formatter):
    """
    Format log records as JSON for structured logging
    """
    CONTEXT_FIELDS = ('pitchId', 'operation', 'elapsed_ms')

    def format(self, record):
        log_record = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'line': record.lineno
        }

        for field in self.CONTEXT_FIELDS:
            if hasattr(record, field):
                log_record[field] = getattr(record, field)

        if record.exc_info:
            log_record['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_record, default=str)


class ContextAdapter(logging.LoggerAdapter):
    """
    Adapter that appends request context (pitchId, operation, elapsed_ms)
    to every message and exposes it to formatters as record attributes.
    """
    def __init__(self, logger, extra=None):
        super().__init__(logger, extra or {})

    def bind(self, **context) -> "ContextAdapter":
        return ContextAdapter(self.logger, {**self.extra, **context})

    def process(self, msg, kwargs):
        extra = {**self.extra, **kwargs.get('extra', {})}
        kwargs['extra'] = extra
        if not extra:
            return msg, kwargs
        context_str = ' '.join(f'{k}={v}' for k, v in extra.items())
        return f"{msg} [{context_str}]", kwargs
