import json
import logging
import datetime
import re
import traceback

from app.config.settings import settings

_POINTER = re.compile(r'0x[0-9a-fA-F]+')


def sanitize(value) -> str:
    """strip memory addresses like <HTTPSConnection(...) at 0x...> from messages"""
    return _POINTER.sub('<ptr>', str(value))


class StructuredLogger:

    def __init__(self, logger_name='StructuredLogger', level=None):
        self.logger = logging.getLogger(logger_name)
        self.logger.setLevel((level or settings.LOG_LEVEL).upper())
        self.logger.propagate = False

        # module reloads must not stack handlers
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter('%(message)s'))
            self.logger.addHandler(handler)

    def _log(self, level, message, exc_info=None, **kwargs):
        log_entry = {
            'timestamp': datetime.datetime.now().isoformat(),
            'level': level.upper(),
            'message': sanitize(message),
            **kwargs
        }
        if isinstance(exc_info, BaseException):
            log_entry['exception'] = sanitize(''.join(
                traceback.format_exception(type(exc_info), exc_info, exc_info.__traceback__)
            ))
        json_log = json.dumps(log_entry, default=str)
        getattr(self.logger, level)(json_log)

    def info(self, message, **kwargs):
        self._log('info', message, **kwargs)

    def warning(self, message, **kwargs):
        self._log('warning', message, **kwargs)

    def error(self, message, **kwargs):
        self._log('error', message, **kwargs)

    def debug(self, message, **kwargs):
        self._log('debug', message, **kwargs)


app_logger = StructuredLogger('NewsHubLogger')
