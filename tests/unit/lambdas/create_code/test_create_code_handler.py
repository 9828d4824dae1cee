"""Unit tests for the create code lambda

Test coverage includes:

1. Successful creation
   - Generated code format and expiresAt
   - encryptedUrl accepted as payload alias
   - customCode stored verbatim, overwriting a live entry
   - CORS headers for allowed origins, 204 for preflights without counting against the limit

2. Client errors
   - Invalid JSON, missing payload, non-string fields, reserved customCode

3. Rate limiting
   - Requests over the window's limit get 429 with retryAfter

4. Server errors
   - Configuration failures, store failures, exhausted code space
"""

import re
import json
from typing import cast
from unittest.mock import MagicMock

import pytest
from freezegun import freeze_time

from timedshortener.types import LambdaEvent
from timedshortener.dao.exceptions import DataStoreError
from timedshortener.exceptions import BadConfigurationError, CodeSpaceExhaustedError
from timedshortener.lambdas import common
from timedshortener.lambdas.create_code import app


FROZEN_NOW = '2026-10-17 12:00:00'
FROZEN_NOW_MS = 1_792_238_400_000


def create_event(body, headers=None) -> LambdaEvent:
    return cast(LambdaEvent, {
        'resource': '/create',
        'httpMethod': 'POST',
        'path': '/create',
        'headers': {'cf-connecting-ip': '1.2.3.4', **(headers or {})},
        'body': body if isinstance(body, str) else json.dumps(body),
        'isBase64Encoded': False,
    })


class TestCreateCodeHandler:

    # ---- 1. Successful creation

    @freeze_time(FROZEN_NOW)
    def test_lambda_handler(self, context, store) -> None:
        response = app.lambda_handler(create_event({'payload': 'secret-payload'}), context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 200
        assert re.fullmatch(r'[A-Z]\d{5}', body['code'])
        assert body['expiresAt'] == FROZEN_NOW_MS + 300_000
        assert store.get(body['code'], as_json=True) == {'payload': 'secret-payload'}
        assert store.expires_in(body['code']) == 300

    def test_encrypted_url_alias(self, context, store) -> None:
        response = app.lambda_handler(create_event({'encryptedUrl': 'b64:abcdef'}), context)
        code = json.loads(response['body'])['code']

        assert response['statusCode'] == 200
        assert store.get(code, as_json=True) == {'payload': 'b64:abcdef'}

    def test_custom_code_overwrites(self, context, store) -> None:
        first = app.lambda_handler(create_event({'payload': 'first', 'customCode': 'hello'}), context)
        second = app.lambda_handler(create_event({'payload': 'second', 'customCode': 'hello'}), context)

        assert json.loads(first['body'])['code'] == 'hello'
        assert json.loads(second['body'])['code'] == 'hello'
        assert store.get('hello', as_json=True) == {'payload': 'second'}

    def test_cors_headers(self, context) -> None:
        event = create_event({'payload': 'secret-payload'}, headers={'Origin': 'http://localhost:5173'})
        response = app.lambda_handler(event, context)

        assert response['headers']['Access-Control-Allow-Origin'] == 'http://localhost:5173'

    def test_no_cors_headers_for_unknown_origin(self, context) -> None:
        event = create_event({'payload': 'secret-payload'}, headers={'Origin': 'https://evil.example.com'})
        response = app.lambda_handler(event, context)

        assert 'Access-Control-Allow-Origin' not in response['headers']

    def test_preflight_is_not_rate_limited(self, context, store) -> None:
        event = create_event('', headers={'Origin': 'https://timed.cc'})
        event['httpMethod'] = 'OPTIONS'
        responses = [app.lambda_handler(event, context) for _ in range(5)]

        assert {r['statusCode'] for r in responses} == {204}
        assert responses[0]['headers']['Access-Control-Allow-Origin'] == 'https://timed.cc'
        assert store.get('ratelimit:1.2.3.4') is None
        assert store.list() == []

    # ---- 2. Client errors

    def test_invalid_json(self, context) -> None:
        response = app.lambda_handler(create_event('{not json'), context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 400
        assert body == {'error': 'Invalid JSON body', 'errorCode': 'INVALID_JSON_BODY'}

    @pytest.mark.parametrize('payload', [{}, {'payload': ''}, {'payload': None}, {'customCode': 'hello'}])
    def test_missing_payload(self, context, store, payload) -> None:
        response = app.lambda_handler(create_event(payload), context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 400
        assert body == {'error': 'Missing payload', 'errorCode': 'INVALID_PAYLOAD'}
        assert store.get('hello') is None

    @pytest.mark.parametrize('payload', [{'payload': 42}, {'payload': ['a']}, {'payload': 'ok', 'customCode': 7}])
    def test_non_string_fields(self, context, payload) -> None:
        response = app.lambda_handler(create_event(payload), context)

        assert response['statusCode'] == 400
        assert json.loads(response['body'])['errorCode'] == 'INVALID_PAYLOAD'

    def test_reserved_custom_code(self, context, store) -> None:
        for _ in range(3):
            app.lambda_handler(create_event({'payload': 'secret-payload'}), context)

        other = create_event({'payload': 'x', 'customCode': 'ratelimit:1.2.3.4'}, headers={'cf-connecting-ip': '5.6.7.8'})
        response = app.lambda_handler(other, context)

        assert response['statusCode'] == 400
        assert json.loads(response['body'])['errorCode'] == 'RESERVED_CODE'
        assert store.get('ratelimit:1.2.3.4', as_json=True)['count'] == 3
        assert app.lambda_handler(create_event({'payload': 'secret-payload'}), context)['statusCode'] == 429

    # ---- 3. Rate limiting

    def test_rate_limited(self, context) -> None:
        with freeze_time(FROZEN_NOW) as frozen:
            statuses = []
            for _ in range(4):
                statuses.append(app.lambda_handler(create_event({'payload': 'secret-payload'}), context)['statusCode'])
                frozen.tick(1)

            response = app.lambda_handler(create_event({'payload': 'secret-payload'}), context)

        body = json.loads(response['body'])
        assert statuses == [200, 200, 200, 429]
        assert response['statusCode'] == 429
        assert body['errorCode'] == 'RATE_LIMITED'
        assert 0 < body['retryAfter'] <= 60
        assert response['headers']['Retry-After'] == str(body['retryAfter'])

    def test_rate_limit_is_per_identity(self, context) -> None:
        for _ in range(3):
            app.lambda_handler(create_event({'payload': 'secret-payload'}), context)

        other = create_event({'payload': 'secret-payload'}, headers={'cf-connecting-ip': '5.6.7.8'})
        assert app.lambda_handler(other, context)['statusCode'] == 200

    # ---- 4. Server errors

    def test_configuration_error(self, monkeypatch, context) -> None:
        def broken_config(*a, **kw):
            raise BadConfigurationError('broken')

        monkeypatch.setattr(common, 'load_config', broken_config)
        response = app.lambda_handler(create_event({'payload': 'secret-payload'}), context)

        assert response['statusCode'] == 500
        assert json.loads(response['body']) == {'error': 'Internal server error'}

    def test_store_write_error(self, monkeypatch, context, store) -> None:
        put = store.put

        def failing_put(key, value, ttl, **kwargs):
            if key.startswith('ratelimit:'):
                return put(key, value, ttl, **kwargs)
            raise DataStoreError('down')

        monkeypatch.setattr(store, 'put', failing_put)
        response = app.lambda_handler(create_event({'payload': 'secret-payload'}), context)

        assert response['statusCode'] == 500
        assert json.loads(response['body'])['errorCode'] == 'STORAGE_ERROR'

    def test_code_space_exhausted(self, monkeypatch, context) -> None:
        monkeypatch.setattr(app.CodeAllocator, 'allocate', MagicMock(side_effect=CodeSpaceExhaustedError('full')))
        response = app.lambda_handler(create_event({'payload': 'secret-payload'}), context)

        assert response['statusCode'] == 500
        assert json.loads(response['body'])['errorCode'] == 'CODE_SPACE_EXHAUSTED'

    def test_unexpected_error(self, monkeypatch, context) -> None:
        monkeypatch.setattr(app.CodeAllocator, 'allocate', MagicMock(side_effect=RuntimeError('boom')))
        response = app.lambda_handler(create_event({'payload': 'secret-payload'}), context)

        assert response['statusCode'] == 500
        assert json.loads(response['body']) == {'error': 'Internal server error', 'errorCode': 'UNKNOWN_INTERNAL_SERVER_ERROR'}
