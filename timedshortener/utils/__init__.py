from timedshortener.utils.config import ShortenerConfig, app_env, app_name, app_prefix, load_config
from timedshortener.utils.helpers import now_ms, client_identity, require_environment, guarantee_500_response
from timedshortener.utils.shortener import generate_code
from timedshortener.utils.logging import initialize_logging


__all__ = [
    'ShortenerConfig',
    'generate_code',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'now_ms',
    'client_identity',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
