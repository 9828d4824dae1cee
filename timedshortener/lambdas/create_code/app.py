import logging

from timedshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from timedshortener.dao.exceptions import DataStoreError
from timedshortener.exceptions import ConfigurationError, InvalidPayloadError, CodeSpaceExhaustedError, ReservedCodeError
from timedshortener.services import CodeAllocator
from timedshortener.utils.helpers import guarantee_500_response
from timedshortener.utils.http import parse_json_body, response_json, response_400, response_500
from timedshortener.lambdas.common import load_runtime, admission_response
from timedshortener.lambdas.constants import (
    CODE_CREATED,
    CODE_SPACE_EXHAUSTED,
    CONFIGURATION_ERROR,
    INVALID_JSON_BODY,
    INVALID_PAYLOAD,
    RESERVED_CODE,
    STORAGE_ERROR,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to create short codes

    This Lambda handler follows this procedure to create codes:
    - Step 1: Answer CORS preflights; count the request against the caller's rate limit window
    - Step 2: Extract payload (and optional custom code) from request body
    - Step 3: Allocate a free code and store the payload under it
    - Step 4: Respond with the code and its expiry

    Request body:
        payload | encryptedUrl: opaque value to store (required)
        customCode: code to use verbatim (optional, overwrites a live entry)

    HTTP responses:
        200: Code created
            code: the short code
            expiresAt: expiry as epoch milliseconds
        400: Bad client request (invalid JSON, missing payload or reserved customCode)
        429: Too many requests in the current window
            retryAfter: seconds until the window resets
        500: Internal server error (configuration or store failure)

    Example:
        >>> event = {'body': '{"payload": "secret-payload"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])
        {'code': 'K48213', 'expiresAt': 1792238700000}
    """
    # 0- Get application's config and key-value store
    try:
        runtime = load_runtime('create_code', event)
    except (ConfigurationError, DataStoreError):
        logger.exception('Failed to initialize create code function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500()

    # 1- Answer CORS preflights, count the request against the caller's window
    early = admission_response(event, runtime)
    if early:
        return early

    # 2- Extract payload and custom code from request body
    try:
        body = parse_json_body(event)
    except ValueError as e:
        logger.info('Invalid request body. Responding with 400.', extra={'reason': str(e), 'event': INVALID_JSON_BODY})
        return response_400('Invalid JSON body', error_code=INVALID_JSON_BODY, headers=runtime.cors)

    payload = body.get('payload') or body.get('encryptedUrl')
    custom_code = body.get('customCode')
    if not isinstance(payload, (str, type(None))) or not isinstance(custom_code, (str, type(None))):
        logger.info('Non-string payload or customCode. Responding with 400.', extra={'event': INVALID_PAYLOAD})
        return response_400('payload and customCode must be strings', error_code=INVALID_PAYLOAD, headers=runtime.cors)

    # 3- Allocate a code and store the payload under it
    allocator = CodeAllocator(runtime.store, runtime.settings)
    try:
        link = allocator.allocate(payload, preferred_code=custom_code)
    except ReservedCodeError as e:
        logger.info('Reserved customCode. Responding with 400.', extra={'code': custom_code, 'event': RESERVED_CODE})
        return response_400(str(e), error_code=RESERVED_CODE, headers=runtime.cors)
    except InvalidPayloadError:
        logger.info('Missing payload. Responding with 400.', extra={'event': INVALID_PAYLOAD})
        return response_400('Missing payload', error_code=INVALID_PAYLOAD, headers=runtime.cors)
    except CodeSpaceExhaustedError:
        logger.error('No free short code found. Responding with 500.', extra={'event': CODE_SPACE_EXHAUSTED})
        return response_500(error_code=CODE_SPACE_EXHAUSTED, headers=runtime.cors)
    except DataStoreError:
        logger.exception('Error saving link entry. Responding with 500.', extra={'event': STORAGE_ERROR})
        return response_500(error_code=STORAGE_ERROR, headers=runtime.cors)

    # 4- Respond with the code and its expiry
    logger.info(
        'Created short code. Responding with 200.',
        extra={'code': link.code, 'custom': bool(custom_code), 'event': CODE_CREATED},
    )
    return response_json(200, {'code': link.code, 'expiresAt': link.expires_at}, headers=runtime.cors)
