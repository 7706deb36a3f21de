import redis


class CounterError(Exception):
    pass


# redis-py reports dropped and refused connections with this class
TransientConnectionError = redis.exceptions.ConnectionError

# auth and ACL failures subclass ConnectionError but a retry never clears them
PERMANENT_CONNECTION_ERRORS = tuple(
    getattr(redis.exceptions, name)
    for name in ('AuthenticationError', 'AuthorizationError', 'ExternalAuthProviderError')
    if hasattr(redis.exceptions, name)
)


class RetriesExhausted(CounterError):

    def __init__(self, key, retries, last_error):
        super().__init__(
            'gave up incrementing {!r} after {} retries: {}'.format(key, retries, last_error))
        self.key = key
        self.retries = retries
        self.last_error = last_error


class FatalError(CounterError):

    def __init__(self, key, message):
        super().__init__('cannot increment {!r}: {}'.format(key, message))
        self.key = key
