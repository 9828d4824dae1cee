"""Liveness endpoints: welcome (GET /), ping (GET /ping) and warmup (GET /warmup)."""

import logging

from timedshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from timedshortener.dao.exceptions import DataStoreError
from timedshortener.exceptions import ConfigurationError
from timedshortener.utils.constants import API_NAME, API_VERSION
from timedshortener.utils.helpers import guarantee_500_response, now_ms
from timedshortener.utils.config import ShortenerConfig
from timedshortener.utils.http import cors_headers, is_preflight, response_204, response_json, response_500
from timedshortener.lambdas.common import load_runtime, admission_response
from timedshortener.lambdas.constants import CONFIGURATION_ERROR, WARMUP_READ_FAILED


logger = logging.getLogger(__name__)


@guarantee_500_response
def welcome_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Greet the client with the API name and version (rate limited)."""
    try:
        runtime = load_runtime('health', event)
    except (ConfigurationError, DataStoreError):
        logger.exception('Failed to initialize health function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500()

    early = admission_response(event, runtime)
    if early:
        return early

    return response_json(200, {'message': f'Welcome to the {API_NAME} API', 'version': API_VERSION}, headers=runtime.cors)


def ping_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Answer without touching configuration or the store; CORS uses the default origins."""
    cors = cors_headers(event, ShortenerConfig().allowed_origins)
    if is_preflight(event):
        return response_204(headers=cors)
    return response_json(200, {'status': 'ok', 'time': now_ms()}, headers=cors, cache_control='no-cache')


@guarantee_500_response
def warmup_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Open the store connection with one read; a failing read is only logged."""
    cors = cors_headers(event, ShortenerConfig().allowed_origins)
    try:
        runtime = load_runtime('health', event)
        cors = runtime.cors
        if is_preflight(event):
            return response_204(headers=cors)
        runtime.store.get(runtime.settings.warmup_key)
    except DataStoreError:
        logger.warning('Warmup read failed.', exc_info=True, extra={'event': WARMUP_READ_FAILED})
    except ConfigurationError:
        logger.exception('Failed to initialize health function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500(headers=cors)

    return response_json(200, {'status': 'ok'}, headers=cors, cache_control='public, max-age=30')
