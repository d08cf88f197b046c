"""
Pytest configuration and fixtures.
"""
import fakeredis
import pytest

from shared.infrastructure.locks import DistributedLockManager, RedisLockBackend


@pytest.fixture
def redis_client():
    """In-process Redis client shared by every connection of one test."""
    server = fakeredis.FakeServer()
    return fakeredis.FakeRedis(server=server)


@pytest.fixture
def lock_backend(redis_client):
    return RedisLockBackend(client=redis_client)


@pytest.fixture
def lock_manager(lock_backend):
    return DistributedLockManager(lock_backend, retry_interval=0.01)


@pytest.fixture
def api_client():
    """Create an API client for testing."""
    from rest_framework.test import APIClient
    return APIClient()
