from collections.abc import Callable
from functools import partial
import logging
from pathlib import Path
import sys
import time
from typing import Any

import orjson

LOG_CONFIG_PATH = Path(__file__).parent / 'log_config.json'


def load_log_config(config_path: Path = LOG_CONFIG_PATH) -> dict[str, Any]:
    try:
        data = orjson.loads(config_path.read_bytes())
    except FileNotFoundError as e:
        raise RuntimeError(f'Log config file not found: {config_path}') from e
    except orjson.JSONDecodeError as e:
        raise RuntimeError(f'Invalid JSON in log config file {config_path}: {e}') from e

    if not isinstance(data, dict):
        raise RuntimeError(
            f'Expected JSON object in {config_path}, got {type(data).__name__}'
        )
    data.setdefault('timestamp_format', '%d.%m.%Y %H:%M:%S')
    data['standard_fields'] = set(data.get('standard_fields') or ())
    data['quiet_loggers'] = list(data.get('quiet_loggers') or ())
    return data


DEFAULT_LOG_CONFIG: dict[str, Any] = load_log_config()


class BaseFormatter(logging.Formatter):
    def __init__(self, service_name: str, version: str) -> None:
        super().__init__()
        self.service_name = service_name
        self.version = version
        self.timestamp_format: str = DEFAULT_LOG_CONFIG['timestamp_format']
        self.standard_fields: set[str] = DEFAULT_LOG_CONFIG['standard_fields']

    def _timestamp(self, record: logging.LogRecord) -> str:
        stamp = time.strftime(self.timestamp_format, self.converter(record.created))
        return f'{stamp}.{int(record.msecs):03d}'

    def _get_extra(self, record: logging.LogRecord) -> dict[str, Any]:
        return {
            key: value
            for key, value in record.__dict__.items()
            if key not in self.standard_fields and not key.startswith('_')
        }


class JsonFormatter(BaseFormatter):
    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            'timestamp': self._timestamp(record),
            'level': record.levelname,
            'service': self.service_name,
            'version': self.version,
            'logger': record.name,
            'message': record.getMessage(),
            **self._get_extra(record),
        }
        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)
        return orjson.dumps(log_entry, default=str).decode('utf-8')


class TextFormatter(BaseFormatter):
    def format(self, record: logging.LogRecord) -> str:
        extra_str = ' '.join(f'[{k}={v}]' for k, v in self._get_extra(record).items())
        message = f'{record.getMessage()} {extra_str}'.strip()
        line = (
            f'{self._timestamp(record)} [{record.levelname:<8}] '
            f'{record.name}: {message}'
        )
        if record.exc_info:
            line += f'\n{self.formatException(record.exc_info)}'
        return line


def create_formatter(log_format: str, service_name: str, version: str) -> BaseFormatter:
    formatters: dict[str, Callable[[], BaseFormatter]] = {
        'json': partial(JsonFormatter, service_name=service_name, version=version),
        'text': partial(TextFormatter, service_name=service_name, version=version),
    }
    return formatters.get(log_format.lower(), formatters['text'])()


def setup_logging(
    service_name: str,
    level: str,
    log_format: str,
    version: str,
) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(create_formatter(log_format, service_name, version))
    handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for logger_name in DEFAULT_LOG_CONFIG['quiet_loggers']:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
