"""Bounded, fixed-backoff retry around the cache's atomic INCR.

A call walks a small state machine::

    ATTEMPTING --ok--------------------> SUCCEEDED
    ATTEMPTING --conn error, retries---> BACKING_OFF --pause--> ATTEMPTING
    ATTEMPTING --conn error, none left-> FAILED_EXHAUSTED
    ATTEMPTING --any other error-------> FAILED_FATAL

Only connection errors are retried. INCR is atomic on the server and an attempt
that raised is treated as not applied.
"""

import enum
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

from hitcounter.errors import (
    PERMANENT_CONNECTION_ERRORS,
    FatalError,
    RetriesExhausted,
    TransientConnectionError,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 5
DEFAULT_BACKOFF_SECONDS = 0.5


class IncrementState(str, enum.Enum):
    ATTEMPTING = 'attempting'
    BACKING_OFF = 'backing_off'
    SUCCEEDED = 'succeeded'
    FAILED_EXHAUSTED = 'failed_exhausted'
    FAILED_FATAL = 'failed_fatal'


@dataclass
class IncrementOutcome:
    key: str
    state: IncrementState = IncrementState.ATTEMPTING
    value: Optional[int] = None
    error: Optional[Exception] = None
    attempts: int = 0
    retries_used: int = 0
    pauses: List[float] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state is IncrementState.SUCCEEDED


class ResilientCounter:
    """Increments a counter held by a remote cache, retrying dropped connections.

    ``client`` is anything with an ``incr(key)`` method, normally a
    ``redis.Redis``. ``sleep`` and ``clock`` are swappable so callers can
    drive the backoff without waiting on the wall clock.
    """

    def __init__(self, client, max_retries=DEFAULT_MAX_RETRIES,
                 backoff=DEFAULT_BACKOFF_SECONDS, sleep=time.sleep, clock=time.monotonic):
        if max_retries < 0:
            raise ValueError('max_retries must be >= 0, got {}'.format(max_retries))
        if backoff < 0:
            raise ValueError('backoff must be >= 0, got {}'.format(backoff))
        self.client = client
        self.max_retries = max_retries
        self.backoff = backoff
        self._sleep = sleep
        self._clock = clock

    def increment(self, key: str, max_retries: Optional[int] = None,
                  deadline: Optional[float] = None) -> int:
        """Atomically increment ``key`` and return the new value.

        Raises RetriesExhausted once the connection keeps failing past the
        retry budget (or past ``deadline``, a ``clock()`` reading), and
        FatalError for anything that is not a connection problem.
        """
        outcome = self.attempt(key, max_retries=max_retries, deadline=deadline)
        if not outcome.ok:
            raise outcome.error
        return outcome.value

    def attempt(self, key: str, max_retries: Optional[int] = None,
                deadline: Optional[float] = None) -> IncrementOutcome:
        """Same as increment() but reports the result instead of raising."""
        if max_retries is None:
            max_retries = self.max_retries
        if max_retries < 0:
            raise ValueError('max_retries must be >= 0, got {}'.format(max_retries))

        outcome = IncrementOutcome(key=key)
        if not isinstance(key, str) or not key:
            return self._fail_fatal(outcome, FatalError(key, 'key must be a non-empty string'))

        retries = max_retries
        while True:
            outcome.state = IncrementState.ATTEMPTING
            outcome.attempts += 1
            try:
                value = int(self.client.incr(key))
            except PERMANENT_CONNECTION_ERRORS as exc:
                return self._fail_fatal(outcome, _fatal(key, exc))
            except TransientConnectionError as exc:
                if retries == 0 or self._past_deadline(deadline):
                    outcome.state = IncrementState.FAILED_EXHAUSTED
                    outcome.error = RetriesExhausted(key, outcome.retries_used, exc)
                    outcome.error.__cause__ = exc
                    logger.error('Incrementing %r failed after %d retries: %s',
                                 key, outcome.retries_used, exc)
                    return outcome
                retries -= 1
                outcome.retries_used += 1
                outcome.state = IncrementState.BACKING_OFF
                logger.warning('Cache unreachable while incrementing %r (%s), retry %d/%d in %.2fs',
                               key, exc, outcome.retries_used, max_retries, self.backoff)
                self._sleep(self.backoff)
                outcome.pauses.append(self.backoff)
            except Exception as exc:
                return self._fail_fatal(outcome, _fatal(key, exc))
            else:
                outcome.state = IncrementState.SUCCEEDED
                outcome.value = value
                return outcome

    def _past_deadline(self, deadline):
        return deadline is not None and self._clock() + self.backoff > deadline

    @staticmethod
    def _fail_fatal(outcome, error):
        outcome.state = IncrementState.FAILED_FATAL
        outcome.error = error
        logger.error('%s', error)
        return outcome


def _fatal(key, exc):
    error = FatalError(key, exc)
    error.__cause__ = exc
    return error
