import logging

from timedshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from timedshortener.dao.exceptions import DataStoreError, LinkNotFoundError
from timedshortener.exceptions import ConfigurationError
from timedshortener.services import Resolver
from timedshortener.utils.helpers import guarantee_500_response
from timedshortener.utils.http import response_json, response_404, response_500
from timedshortener.lambdas.common import load_runtime, admission_response
from timedshortener.lambdas.constants import CODE_NOT_FOUND, CODE_RESOLVED, CONFIGURATION_ERROR, STORAGE_ERROR


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to resolve short codes

    This Lambda handler follows this procedure to resolve codes:
    - Step 1: Answer CORS preflights; count the request against the caller's rate limit window
    - Step 2: Extract code from request path
    - Step 3: Look up the live link entry (exact, then upper-cased if enabled)
    - Step 4: Respond with the stored payload

    HTTP responses:
        200: Code resolved
            payload: the stored payload, verbatim
            headers:
                Cache-Control: public, max-age=<min(configured, seconds left)>
        404: Unknown or expired code
        429: Too many requests in the current window
        500: Internal server error

    Example:
        >>> event = {'pathParameters': {'code': 'K48213'}}
        >>> response = lambda_handler(event, None)
        >>> json.loads(response['body'])
        {'payload': 'secret-payload'}
    """
    # 0- Get application's config and key-value store
    try:
        runtime = load_runtime('resolve_code', event)
    except (ConfigurationError, DataStoreError):
        logger.exception('Failed to initialize resolve code function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500()

    # 1- Answer CORS preflights, count the request against the caller's window
    early = admission_response(event, runtime)
    if early:
        return early

    # 2- Extract code from request's path
    code = (event.get('pathParameters') or {}).get('code') or ''

    # 3- Look up the live link entry
    resolver = Resolver(runtime.store, runtime.settings)
    try:
        link = resolver.resolve(code)
    except LinkNotFoundError:
        logger.info('Code not found or expired. Responding with 404.', extra={'code': code, 'event': CODE_NOT_FOUND})
        return response_404(error_code=CODE_NOT_FOUND, headers=runtime.cors)
    except DataStoreError:
        logger.exception('Error reading link entry. Responding with 500.', extra={'code': code, 'event': STORAGE_ERROR})
        return response_500(error_code=STORAGE_ERROR, headers=runtime.cors)

    # 4- Respond with the stored payload
    logger.info('Resolved short code. Responding with 200.', extra={'code': link.code, 'event': CODE_RESOLVED})
    return response_json(
        200,
        {'payload': link.payload},
        headers=runtime.cors,
        cache_control=resolver.cache_control(link),
    )
