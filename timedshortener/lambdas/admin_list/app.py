import logging

from botocore.exceptions import BotoCoreError, ClientError

from timedshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from timedshortener.dao.exceptions import DataStoreError
from timedshortener.exceptions import ConfigurationError, UnauthorizedError
from timedshortener.utils.constants import ADMIN_KEY_HEADER
from timedshortener.utils.helpers import guarantee_500_response
from timedshortener.utils.http import get_header, response_json, response_401, response_500
from timedshortener.utils.secrets import resolve_admin_key, verify_admin_key
from timedshortener.lambdas.common import load_runtime, admission_response
from timedshortener.lambdas.constants import CONFIGURATION_ERROR, KEYS_LISTED, STORAGE_ERROR, UNAUTHORIZED


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to list all live keys

    This Lambda handler follows this procedure:
    - Step 1: Answer CORS preflights; count the request against the caller's rate limit window
    - Step 2: Verify the admin shared secret (x-admin-key header)
    - Step 3: List the live keys of the key-value store

    HTTP responses:
        200: keys: sorted live keys (codes and rate records), count: number of keys
        401: Missing or wrong admin key
        429: Too many requests in the current window
        500: Internal server error
    """
    # 0- Get application's config and key-value store
    try:
        runtime = load_runtime('admin_list', event)
    except (ConfigurationError, DataStoreError):
        logger.exception('Failed to initialize admin list function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500()

    # 1- Answer CORS preflights, count the request against the caller's window
    early = admission_response(event, runtime)
    if early:
        return early

    # 2- Verify the admin shared secret
    try:
        expected_key = resolve_admin_key()
    except (ConfigurationError, BotoCoreError, ClientError, ValueError):
        logger.exception('Failed to resolve admin secret. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500(headers=runtime.cors)

    try:
        verify_admin_key(get_header(event, ADMIN_KEY_HEADER), expected_key)
    except UnauthorizedError:
        logger.info('Invalid admin key. Responding with 401.', extra={'event': UNAUTHORIZED})
        return response_401(error_code=UNAUTHORIZED, headers=runtime.cors)

    # 3- List the live keys
    try:
        keys = runtime.store.list()
    except DataStoreError:
        logger.exception('Error listing keys. Responding with 500.', extra={'event': STORAGE_ERROR})
        return response_500(error_code=STORAGE_ERROR, headers=runtime.cors)

    logger.info('Listed live keys. Responding with 200.', extra={'count': len(keys), 'event': KEYS_LISTED})
    return response_json(200, {'keys': keys, 'count': len(keys)}, headers=runtime.cors)
