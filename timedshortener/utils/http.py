"""API Gateway (Lambda proxy) request and response helpers.

Functions:
    get_header(event, name) -> str | None
        Case-insensitive request header lookup.
    parse_json_body(event) -> dict
        Decode the (optionally base64 encoded) JSON request body.
    request_method(event) -> str
        HTTP method of the request (REST and HTTP API payloads).
    is_preflight(event) -> bool
        True for a CORS preflight (OPTIONS) request.
    cors_headers(event, allowed_origins) -> dict
        CORS headers for the request's Origin, if it is allowed.
    response_json(status_code, body, ...) -> dict
        Build a Lambda proxy response with a JSON body.
    response_error(status_code, message, ...) -> dict
        Build a JSON error response: {"error": ..., "errorCode": ...}.

Example:
    >>> response_json(200, {'code': 'A12345'})
    {'statusCode': 200, 'headers': {'Content-Type': 'application/json'}, 'body': '{"code": "A12345"}'}
"""

import base64
import binascii
import json
from fnmatch import fnmatchcase
from typing import Any, Optional
from collections.abc import Iterable

from timedshortener.types import LambdaEvent, LambdaResponse


def get_header(event: LambdaEvent, name: str) -> str | None:
    """Case-insensitive request header lookup (API Gateway keeps the client's casing)."""
    headers = event.get('headers') or {}
    name = name.lower()
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def parse_json_body(event: LambdaEvent) -> dict[str, Any]:
    """Decode the request body as a JSON object

    Raises:
        ValueError: If the body is not valid JSON or not a JSON object.
    """
    body = event.get('body') or '{}'
    if event.get('isBase64Encoded'):
        try:
            body = base64.b64decode(body).decode('utf-8')
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ValueError('Request body is not valid base64') from e

    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise ValueError('Request body is not valid JSON') from e

    if not isinstance(data, dict):
        raise ValueError('Request body must be a JSON object')
    return data


def request_method(event: LambdaEvent) -> str:
    """HTTP method of the request: `httpMethod` (REST API) or `requestContext.http.method` (HTTP API)."""
    method = event.get('httpMethod') or ((event.get('requestContext') or {}).get('http') or {}).get('method')
    return (method or '').upper()


def is_preflight(event: LambdaEvent) -> bool:
    return request_method(event) == 'OPTIONS'


def cors_headers(event: LambdaEvent, allowed_origins: Iterable[str]) -> dict[str, str]:
    """Return CORS headers echoing the request Origin when it matches an allowed pattern

    Patterns are shell-style globs, e.g. 'http://localhost:*' matches any local port.
    """
    origin = get_header(event, 'Origin')
    if not origin or not any(fnmatchcase(origin, pattern) for pattern in allowed_origins):
        return {}
    return {
        'Access-Control-Allow-Origin': origin,
        'Access-Control-Allow-Methods': 'GET,POST,OPTIONS',
        'Access-Control-Allow-Headers': 'Content-Type, X-Admin-Key',
        'Vary': 'Origin',
    }


def response_json(
    status_code: int,
    body: dict[str, Any],
    headers: Optional[dict[str, str]] = None,
    cache_control: Optional[str] = None,
) -> LambdaResponse:
    response_headers = {'Content-Type': 'application/json'}
    if cache_control:
        response_headers['Cache-Control'] = cache_control
    response_headers.update(headers or {})
    return {
        'statusCode': status_code,
        'headers': response_headers,
        'body': json.dumps(body),
    }


def response_error(
    status_code: int,
    message: str,
    error_code: Optional[str] = None,
    headers: Optional[dict[str, str]] = None,
    **extra: Any,
) -> LambdaResponse:
    body = {'error': message}
    if error_code:
        body['errorCode'] = error_code
    body.update(extra)
    return response_json(status_code, body, headers=headers)


def response_400(message: str, error_code: Optional[str] = None, headers: Optional[dict[str, str]] = None) -> LambdaResponse:
    return response_error(400, message, error_code, headers)


def response_401(message: str = 'Unauthorized', error_code: Optional[str] = None, headers: Optional[dict[str, str]] = None) -> LambdaResponse:
    return response_error(401, message, error_code, headers)


def response_404(message: str = 'Not found or expired', error_code: Optional[str] = None, headers: Optional[dict[str, str]] = None) -> LambdaResponse:
    return response_error(404, message, error_code, headers)


def response_429(*, retry_after: int, error_code: Optional[str] = None, headers: Optional[dict[str, str]] = None) -> LambdaResponse:
    return response_error(
        429,
        'Rate limit exceeded. Try again later.',
        error_code,
        {'Retry-After': str(retry_after), **(headers or {})},
        retryAfter=retry_after,
    )


def response_500(error_code: Optional[str] = None, headers: Optional[dict[str, str]] = None) -> LambdaResponse:
    return response_error(500, 'Internal server error', error_code, headers)


def response_204(headers: Optional[dict[str, str]] = None) -> LambdaResponse:
    """Empty response, e.g. for CORS preflights."""
    return {
        'statusCode': 204,
        'headers': dict(headers or {}),
        'body': '',
    }
