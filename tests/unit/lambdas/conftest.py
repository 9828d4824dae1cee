from typing import cast

import pytest
from pytest import MonkeyPatch

from timedshortener.types import LambdaContext, LambdaConfiguration
from timedshortener.dao import factory
from timedshortener.dao.base import KeyValueBaseDAO
from timedshortener.lambdas import common


@pytest.fixture
def lambda_config() -> LambdaConfiguration:
    """In-process store with a small rate limit so tests can exhaust it quickly."""
    return cast(LambdaConfiguration, {'memory': {}, 'shortener': {'rate_max_requests': 3}})


@pytest.fixture
def context() -> LambdaContext:
    return cast(LambdaContext, {'function_name': 'test'})


@pytest.fixture(autouse=True)
def patched_runtime(monkeypatch: MonkeyPatch, lambda_config: LambdaConfiguration) -> None:
    # Patch Lambda dependencies: AppConfig document and a fresh in-process store
    monkeypatch.setenv('APP_ENV', 'test')
    monkeypatch.delenv('AWS_SAM_LOCAL', raising=False)
    monkeypatch.setattr(common, 'load_config', lambda *a, **kw: lambda_config)
    monkeypatch.setattr(common, 'app_prefix', lambda: None)
    monkeypatch.setattr(factory, '_memory_stores', {})


@pytest.fixture
def store(patched_runtime, lambda_config: LambdaConfiguration) -> KeyValueBaseDAO:
    """The very store the handlers will get from load_runtime()."""
    return factory.kv_store_from_config(lambda_config)
