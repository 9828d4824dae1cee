"""Utility functions for application configuration management.

This module provides a standardized interface for Lambda functions to
access configuration data stored in **AWS AppConfig**. Each environment
(`APP_ENV`) has a dedicated AppConfig *Environment* within the shared
AppConfig *Application* identified by `APP_NAME`. Configuration data is
stored as a JSON document under a configuration profile (typically
`backend-config`) and deployed to the corresponding environment.

The configuration JSON follows this structure:

    {
        "build": 7,
        "active_backend": "redis",
        "shortener": {
            "rate_window_seconds": 60,
            "rate_max_requests": 10,
            "code_ttl_seconds": 300,
            ...
        },
        "configs": {
            "create_code": {
                "redis": { ... }
            },
            "resolve_code": {
                "redis": { ... }
            }
        }
    }

Each Lambda loads its own backend section (e.g., `"create_code"`) plus the
shared `"shortener"` settings from this AppConfig document.

Classes:
    ShortenerConfig
        Typed allocator, resolver and rate limiter settings with the
        reference defaults. Passed explicitly into each service.

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for DAOs, or None if `APP_NAME` is not set.

    load_config(function_name: str) -> dict
        Load configuration for a given Lambda from AWS AppConfig and
        return it as a Python dictionary. In SAM, load configuration
        from a local AppConfig agent.

Example:
    Typical usage inside a Lambda handler:

        >>> from timedshortener.utils.config import load_config, ShortenerConfig
        >>> app_config = load_config('create_code')
        >>> app_config['redis']['host']
        'redis-15501.host.docker.internal'
        >>> ShortenerConfig.from_dict(app_config['shortener']).code_ttl_seconds
        300
"""

import os
import json
import functools
import urllib.parse
import urllib.request
import logging
from dataclasses import dataclass, fields
from typing import Any
from collections.abc import Callable

import boto3

from timedshortener.exceptions import BadConfigurationError
from timedshortener.utils.helpers import require_environment
from timedshortener.utils.runtime import running_locally
from timedshortener.utils.constants import (
    APP_ENV_ENV,
    APP_NAME_ENV,
    APPCONFIG_APP_ID_ENV,
    APPCONFIG_ENV_ID_ENV,
    APPCONFIG_PROFILE_ID_ENV,
    APPCONFIG_AGENT_URL_ENV,
    APPCONFIG_PROFILE_NAME_ENV,
    DEFAULT_CODE_TTL_SECONDS,
    DEFAULT_RATE_WINDOW_SECONDS,
    DEFAULT_RATE_MAX_REQUESTS,
    DEFAULT_RATE_TTL_FLOOR_SECONDS,
    DEFAULT_MAX_ALLOCATION_ATTEMPTS,
    DEFAULT_RESOLVE_CACHE_SECONDS,
    DEFAULT_ALLOWED_ORIGINS,
    DEFAULT_IDENTITY_HEADER,
    DEFAULT_IDENTITY_FALLBACK,
    DEFAULT_WARMUP_KEY,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShortenerConfig:
    """Settings shared by the code allocator, resolver and rate limiter.

    Attributes:
        rate_window_seconds (int):
            Length of one fixed rate limiting window.
        rate_max_requests (int):
            Requests admitted per identity per window.
        rate_ttl_floor_seconds (int):
            Smallest TTL ever written for a rate record.
        code_ttl_seconds (int):
            Lifetime of a link entry.
        code_separator (str):
            Joins the letter and digits of generated codes ('' -> 'A12345', ':' -> 'A:12345').
        max_allocation_attempts (int):
            Generated candidates tried before giving up with CodeSpaceExhaustedError.
        case_insensitive_fallback (bool):
            Retry a missed resolution with the upper-cased code.
        resolve_cache_seconds (int):
            Upper bound of the max-age sent with successful resolutions.
        allowed_origins (tuple[str, ...]):
            Glob patterns of CORS origins.
        identity_header (str):
            Request header carrying the client address.
        identity_fallback (str):
            Identity used when the header is absent.
        warmup_key (str):
            Key read by the warmup endpoint.
    """

    rate_window_seconds: int = DEFAULT_RATE_WINDOW_SECONDS
    rate_max_requests: int = DEFAULT_RATE_MAX_REQUESTS
    rate_ttl_floor_seconds: int = DEFAULT_RATE_TTL_FLOOR_SECONDS
    code_ttl_seconds: int = DEFAULT_CODE_TTL_SECONDS
    code_separator: str = ''
    max_allocation_attempts: int = DEFAULT_MAX_ALLOCATION_ATTEMPTS
    case_insensitive_fallback: bool = True
    resolve_cache_seconds: int = DEFAULT_RESOLVE_CACHE_SECONDS
    allowed_origins: tuple[str, ...] = DEFAULT_ALLOWED_ORIGINS
    identity_header: str = DEFAULT_IDENTITY_HEADER
    identity_fallback: str = DEFAULT_IDENTITY_FALLBACK
    warmup_key: str = DEFAULT_WARMUP_KEY

    def __post_init__(self):
        for name in ('rate_window_seconds', 'rate_max_requests', 'rate_ttl_floor_seconds', 'code_ttl_seconds', 'max_allocation_attempts'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise BadConfigurationError(f'{name} must be a positive integer (given value: {value!r}).')
        if isinstance(self.resolve_cache_seconds, bool) or not isinstance(self.resolve_cache_seconds, int) or self.resolve_cache_seconds < 0:
            raise BadConfigurationError(f'resolve_cache_seconds must be a non-negative integer (given value: {self.resolve_cache_seconds!r}).')
        if not isinstance(self.code_separator, str) or len(self.code_separator) > 1:
            raise BadConfigurationError(f'code_separator must be empty or a single character (given value: {self.code_separator!r}).')
        if not isinstance(self.case_insensitive_fallback, bool):
            raise BadConfigurationError(f'case_insensitive_fallback must be a boolean (given value: {self.case_insensitive_fallback!r}).')
        if not self.identity_header or not self.identity_fallback or not self.warmup_key:
            raise BadConfigurationError('identity_header, identity_fallback and warmup_key must be non-empty strings.')

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> 'ShortenerConfig':
        """Build settings from the AppConfig 'shortener' section

        Missing keys keep their defaults; unknown keys are rejected so typos
        don't silently fall back to a default.

        Raises:
            BadConfigurationError: On unknown keys or invalid values.
        """
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise BadConfigurationError(f'Unknown shortener settings: {", ".join(unknown)}')

        if 'allowed_origins' in data:
            origins = data['allowed_origins']
            if isinstance(origins, str) or not all(isinstance(o, str) for o in origins):
                raise BadConfigurationError(f'allowed_origins must be a list of strings (given value: {origins!r}).')
            data['allowed_origins'] = tuple(origins)
        return cls(**data)


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Returns:
        str:
            Value of `APP_ENV` environment variable, `'local'` by default.
    """
    return os.environ.get(APP_ENV_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'"""
    return os.environ.get(APP_NAME_ENV)


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'timedshortener'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'timedshortener:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def _select_sections(document: dict, function_name: str) -> dict:
    """Pick the active backend section for one function plus the shared settings."""
    backend = document['active_backend']
    return {
        backend: document['configs'][function_name][backend],
        'shortener': document.get('shortener', {}),
    }


def _validate_agent_url(url: str | None) -> str:
    if not url:
        return ''
    components = urllib.parse.urlparse(url)
    if components.scheme not in {'http', 'https'}:
        raise ValueError(f'Bad scheme {url}')
    if components.hostname not in {'localhost', '127.0.0.1', 'host.docker.internal'}:
        raise ValueError(f'Bad host {url}')
    if components.port not in {2772, None}:
        raise ValueError(f'Bad port {url}')
    return url


def _sam_load_local_appconfig(func: Callable[[str], dict]) -> Callable[[str], dict]:
    """Decorator: load AppConfig from a local AppConfig Agent when running under SAM

    Behavior:
        - If the application is running locally and `APPCONFIG_AGENT_URL` is set
          to a safe local URL, fetch the app configuration JSON from the local AppConfig agent.
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).
    """

    @functools.wraps(func)
    def wrapper(function_name: str, *args, **kwargs) -> dict:
        agent_url = _validate_agent_url(os.getenv(APPCONFIG_AGENT_URL_ENV))
        if not running_locally() or not agent_url:
            return func(function_name, *args, **kwargs)

        profile_name = os.getenv(APPCONFIG_PROFILE_NAME_ENV, 'backend-config')
        url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

        logger.debug('Trying to load AppConfig from local agent.', extra={'agentUrl': url, 'functionName': function_name})
        with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
            document = json.load(r)

        logger.debug('Loaded AppConfig from local agent.', extra={'functionName': function_name, 'build': document.get('build')})
        return _select_sections(document, function_name)

    return wrapper


@_sam_load_local_appconfig
@require_environment(APPCONFIG_APP_ID_ENV, APPCONFIG_ENV_ID_ENV, APPCONFIG_PROFILE_ID_ENV)
def load_config(function_name: str) -> dict:
    """Load configuration for a given Lambda from AWS AppConfig

    Fetches the AppConfig JSON once and returns the backend section relevant
    to the requested Lambda function (e.g., 'create_code', 'resolve_code')
    together with the shared 'shortener' settings.

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Returns:
        dict: {'<backend>': {...}, 'shortener': {...}}

    Example:
        >>> app_config = load_config('create_code')
        >>> app_config['redis']['host']
        'redis-15501.host.docker.internal'
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'functionName': function_name})

    appconfig = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[APPCONFIG_APP_ID_ENV],
        EnvironmentIdentifier=os.environ[APPCONFIG_ENV_ID_ENV],
        ConfigurationProfileIdentifier=os.environ[APPCONFIG_PROFILE_ID_ENV],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    document = json.loads(content.decode('utf-8'))

    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'functionName': function_name, 'build': document.get('build')})
    return _select_sections(document, function_name)
