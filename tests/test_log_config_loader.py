import logging
from pathlib import Path
import re

import orjson
import pytest

from admin.log_config_loader import (
    JsonFormatter,
    TextFormatter,
    create_formatter,
    load_log_config,
)


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name='admin.test',
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg='Rendering %s',
        args=('expressions',),
        exc_info=None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_extra_fields() -> None:
    formatter = JsonFormatter(service_name='metrics-admin', version='1.2.3')
    entry = orjson.loads(formatter.format(_record(count=3)))
    assert entry['message'] == 'Rendering expressions'
    assert entry['service'] == 'metrics-admin'
    assert entry['version'] == '1.2.3'
    assert entry['level'] == 'INFO'
    assert entry['count'] == 3
    assert 'args' not in entry


def test_text_formatter() -> None:
    formatter = TextFormatter(service_name='metrics-admin', version='1.2.3')
    line = formatter.format(_record(count=3))
    assert line.endswith('admin.test: Rendering expressions [count=3]')


def test_unknown_format_falls_back_to_text() -> None:
    assert isinstance(create_formatter('xml', 'svc', '1'), TextFormatter)
    assert isinstance(create_formatter('JSON', 'svc', '1'), JsonFormatter)


def test_load_log_config_errors(tmp_path: Path) -> None:
    with pytest.raises(RuntimeError, match='not found'):
        load_log_config(tmp_path / 'missing.json')

    broken = tmp_path / 'broken.json'
    broken.write_text('{')
    with pytest.raises(RuntimeError, match='Invalid JSON'):
        load_log_config(broken)

    listing = tmp_path / 'list.json'
    listing.write_text('[]')
    with pytest.raises(RuntimeError, match='Expected JSON object'):
        load_log_config(listing)


def test_timestamp_uses_configured_format() -> None:
    formatter = JsonFormatter(service_name='metrics-admin', version='1.2.3')
    record = _record()
    record.created = 0.0
    record.msecs = 7.0
    entry = orjson.loads(formatter.format(record))
    assert re.fullmatch(r'\d{2}\.\d{2}\.19(69|70) \d{2}:\d{2}:\d{2}\.007', entry['timestamp'])
