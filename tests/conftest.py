"""Pytest configuration and shared fixtures."""

import pytest
import redis


class ScriptedCache:
    """Stand-in for redis.Redis that replays a script of results for incr().

    Exceptions in the script are raised, anything else is applied as the new
    value. Once the script runs out the counter keeps counting from its last value.
    """

    def __init__(self, script=(), ping_error=None):
        self.script = list(script)
        self.ping_error = ping_error
        self.calls = []
        self.values = {}

    def incr(self, key):
        self.calls.append(key)
        if self.script:
            step = self.script.pop(0)
            if isinstance(step, BaseException):
                raise step
            self.values[key] = step
        else:
            self.values[key] = self.values.get(key, 0) + 1
        return self.values[key]

    def ping(self):
        if self.ping_error is not None:
            raise self.ping_error
        return True


class RecordingSleep:

    def __init__(self):
        self.pauses = []

    def __call__(self, seconds):
        self.pauses.append(seconds)


def _conn_error():
    return redis.exceptions.ConnectionError('Error 111 connecting to redis:6379. Connection refused.')


SETTINGS_ENV = (
    'REDIS_HOST', 'REDIS_PORT', 'REDIS_DB', 'REDIS_PASSWORD',
    'COUNTER_KEY', 'MAX_RETRIES', 'BACKOFF_SECONDS',
    'APP_HOST', 'APP_PORT', 'APP_DEBUG', 'APP_LOG_LEVEL',
)


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch):
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def scripted_cache():
    return ScriptedCache


@pytest.fixture
def conn_error():
    return _conn_error
