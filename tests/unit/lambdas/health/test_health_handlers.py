"""Unit tests for the liveness lambdas (welcome, ping, warmup)"""

import json

from freezegun import freeze_time

from timedshortener.dao.exceptions import DataStoreError
from timedshortener.exceptions import BadConfigurationError
from timedshortener.lambdas import common
from timedshortener.lambdas.health import app


EVENT = {'httpMethod': 'GET', 'headers': {'cf-connecting-ip': '1.2.3.4'}}


# ---- welcome


def test_welcome(context) -> None:
    response = app.welcome_handler(EVENT, context)

    assert response['statusCode'] == 200
    assert json.loads(response['body']) == {'message': 'Welcome to the timed.cc API', 'version': '1.0.0'}


def test_welcome_is_rate_limited(context) -> None:
    statuses = [app.welcome_handler(EVENT, context)['statusCode'] for _ in range(4)]
    assert statuses == [200, 200, 200, 429]


# ---- ping


@freeze_time('2026-10-17 12:00:00')
def test_ping(monkeypatch, context) -> None:
    def no_config(*a, **kw):
        raise AssertionError('ping must not load configuration')

    monkeypatch.setattr(common, 'load_config', no_config)
    response = app.ping_handler(EVENT, context)

    assert response['statusCode'] == 200
    assert response['headers']['Cache-Control'] == 'no-cache'
    assert json.loads(response['body']) == {'status': 'ok', 'time': 1_792_238_400_000}


def test_ping_is_not_rate_limited(context, store) -> None:
    statuses = [app.ping_handler(EVENT, context)['statusCode'] for _ in range(20)]

    assert set(statuses) == {200}
    assert store.list() == []


def test_ping_cors_headers(context) -> None:
    event = {'httpMethod': 'GET', 'headers': {'Origin': 'https://timed.cc'}}
    response = app.ping_handler(event, context)

    assert response['headers']['Access-Control-Allow-Origin'] == 'https://timed.cc'


def test_ping_preflight(context) -> None:
    event = {'httpMethod': 'OPTIONS', 'headers': {'Origin': 'https://timed.cc'}}
    response = app.ping_handler(event, context)

    assert response['statusCode'] == 204
    assert response['body'] == ''
    assert response['headers']['Access-Control-Allow-Origin'] == 'https://timed.cc'


# ---- warmup


def test_warmup(context, store) -> None:
    response = app.warmup_handler(EVENT, context)

    assert response['statusCode'] == 200
    assert response['headers']['Cache-Control'] == 'public, max-age=30'
    assert json.loads(response['body']) == {'status': 'ok'}
    assert store.list() == []


def test_warmup_ignores_store_errors(monkeypatch, context, store, caplog) -> None:
    def failing_get(key, as_json=False, **kwargs):
        raise DataStoreError('down')

    monkeypatch.setattr(store, 'get', failing_get)
    response = app.warmup_handler(EVENT, context)

    assert response['statusCode'] == 200
    assert any(getattr(record, 'event', None) == 'WARMUP_READ_FAILED' for record in caplog.records)


def test_warmup_configuration_error(monkeypatch, context) -> None:
    def broken_config(*a, **kw):
        raise BadConfigurationError('broken')

    monkeypatch.setattr(common, 'load_config', broken_config)
    response = app.warmup_handler(EVENT, context)

    assert response['statusCode'] == 500


def test_warmup_cors_headers(context) -> None:
    event = {'httpMethod': 'GET', 'headers': {'Origin': 'https://timed.cc'}}
    response = app.warmup_handler(event, context)

    assert response['headers']['Access-Control-Allow-Origin'] == 'https://timed.cc'


def test_warmup_configuration_error_keeps_cors_headers(monkeypatch, context) -> None:
    def broken_config(*a, **kw):
        raise BadConfigurationError('broken')

    monkeypatch.setattr(common, 'load_config', broken_config)
    event = {'httpMethod': 'GET', 'headers': {'Origin': 'http://localhost:5173'}}
    response = app.warmup_handler(event, context)

    assert response['statusCode'] == 500
    assert response['headers']['Access-Control-Allow-Origin'] == 'http://localhost:5173'


def test_warmup_preflight_skips_store_read(monkeypatch, context, store) -> None:
    def unexpected_get(key, as_json=False, **kwargs):
        raise AssertionError('preflight must not read the store')

    monkeypatch.setattr(store, 'get', unexpected_get)
    event = {'httpMethod': 'OPTIONS', 'headers': {'Origin': 'https://timed.cc'}}
    response = app.warmup_handler(event, context)

    assert response['statusCode'] == 204
    assert response['headers']['Access-Control-Allow-Origin'] == 'https://timed.cc'


# ---- welcome preflight


def test_welcome_preflight_is_not_rate_limited(context, store) -> None:
    event = {'httpMethod': 'OPTIONS', 'headers': {'cf-connecting-ip': '1.2.3.4', 'Origin': 'https://timed.cc'}}
    statuses = [app.welcome_handler(event, context)['statusCode'] for _ in range(5)]

    assert set(statuses) == {204}
    assert store.get('ratelimit:1.2.3.4') is None
