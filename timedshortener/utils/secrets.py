"""Admin shared secret resolution and verification

The admin listing endpoint is gated by one static shared secret. In AWS it is
read from Secrets Manager; under SAM it may be given directly through
`ADMIN_API_KEY` (or read from LocalStack).

Environment:
    - ADMIN_SECRET        : Secrets Manager name for {"api_key": "..."}
    - ADMIN_API_KEY       : plain admin key, honored only when running locally
    - LOCALSTACK_ENDPOINT : LocalStack endpoint URL for local development
"""

import os
import hmac
import json
from typing import Optional

import boto3
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError

from timedshortener.exceptions import UnauthorizedError
from timedshortener.utils.helpers import require_environment
from timedshortener.utils.runtime import running_locally
from timedshortener.utils.constants import ADMIN_SECRET_ENV, ADMIN_API_KEY_ENV, LOCALSTACK_ENDPOINT_ENV


def resolve_admin_key(secrets_client: Optional[BaseClient] = None) -> str:
    """Return the admin shared secret

    Args:
        secrets_client (Optional[BaseClient]):
            Optional boto3 Secrets Manager client to reuse (useful in tests).

    Returns:
        str: the admin API key.

    Raises:
        MissingEnvironmentVariableError:
            If ADMIN_SECRET is not set (and no local override applies).
        botocore.exceptions.BotoCoreError / ClientError:
            On AWS Secrets Manager API failures.
        ValueError:
            If the secret payload is not valid JSON or lacks a non-empty 'api_key'.
    """
    local_key = os.environ.get(ADMIN_API_KEY_ENV)
    if local_key and running_locally():
        return local_key
    return _resolve_secret(secrets_client)


@require_environment(ADMIN_SECRET_ENV)
def _resolve_secret(secrets_client: Optional[BaseClient]) -> str:
    secret_name = os.environ[ADMIN_SECRET_ENV]
    # fmt: off
    secrets_client_kwargs = {
        'endpoint_url': os.environ.get(LOCALSTACK_ENDPOINT_ENV, 'http://localhost:4566'),
    } if running_locally() else {}
    # fmt: on
    sm = secrets_client or boto3.client('secretsmanager', **secrets_client_kwargs)

    try:
        raw = sm.get_secret_value(SecretId=secret_name).get('SecretString')
        payload = json.loads(raw or '{}')
    except (BotoCoreError, ClientError):
        raise
    except json.JSONDecodeError as e:
        raise ValueError('Invalid JSON in admin secret payload') from e

    api_key = payload.get('api_key')
    if not api_key:
        raise ValueError('Admin secret must contain a non-empty "api_key" field')
    return api_key


def verify_admin_key(provided: Optional[str], expected: str) -> None:
    """Compare the provided admin key with the expected one in constant time

    Raises:
        UnauthorizedError: If the key is missing or doesn't match.
    """
    if not provided or not hmac.compare_digest(provided.encode('utf-8'), expected.encode('utf-8')):
        raise UnauthorizedError('Invalid or missing admin key.')
