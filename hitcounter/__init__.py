from hitcounter.counter import IncrementOutcome, IncrementState, ResilientCounter
from hitcounter.errors import CounterError, FatalError, RetriesExhausted, TransientConnectionError

__all__ = [
    'CounterError',
    'FatalError',
    'IncrementOutcome',
    'IncrementState',
    'ResilientCounter',
    'RetriesExhausted',
    'TransientConnectionError',
]
