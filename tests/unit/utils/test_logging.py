"""Unit tests for JSON logging in logging.py

Test coverage includes:

1. JsonFormatter
   - Standard fields, extra fields, exception text
2. initialize_logging()
   - Root level follows LOG_LEVEL
"""

import sys
import json
import logging

from freezegun import freeze_time

from timedshortener.utils.logging import JsonFormatter, initialize_logging


def _record(msg='Created short code.', exc_info=None, **extra):
    record = logging.LogRecord(
        name='timedshortener.lambdas.create_code.app',
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    record.__dict__.update(extra)
    return record


@freeze_time('2026-10-17 12:00:00')
def test_json_formatter_fields():
    log = json.loads(JsonFormatter().format(_record(event='CODE_CREATED', code='K48213')))

    assert log['timestamp'] == '2026-10-17T12:00:00.000Z'
    assert log['level'] == 'INFO'
    assert log['logger'] == 'timedshortener.lambdas.create_code.app'
    assert log['message'] == 'Created short code.'
    assert log['event'] == 'CODE_CREATED'
    assert log['code'] == 'K48213'
    assert 'msg' not in log
    assert 'exception' not in log


def test_json_formatter_exception():
    try:
        raise RuntimeError('boom')
    except RuntimeError:
        record = _record('Unhandled exception.', exc_info=sys.exc_info())

    log = json.loads(JsonFormatter().format(record))
    assert 'RuntimeError: boom' in log['exception']


def test_json_formatter_non_serializable_extra():
    log = json.loads(JsonFormatter().format(_record(obj=object())))
    assert log['obj'].startswith('<object object')


def test_initialize_logging_level(monkeypatch):
    root = logging.getLogger()
    previous_level, previous_handlers = root.level, root.handlers[:]
    monkeypatch.setenv('LOG_LEVEL', 'debug')
    try:
        initialize_logging()
        assert root.level == logging.DEBUG
        assert any(isinstance(h.formatter, JsonFormatter) for h in root.handlers)
    finally:
        root.handlers = previous_handlers
        root.setLevel(previous_level)
