"""Shared fakes: an in-memory timelock client and event builders."""
import threading
import time

from exceptions import QueryError
from schemas.timelock import TimelockEvent

TARGET = '0x000000000000000000000000000000000000dEaD'
NOW = 1_700_000_000


def pid(byte: int) -> bytes:
    return bytes([byte]) * 32


def scheduled(proposal: int, block: int, log_index: int = 0, delay: int = 100, index: int = 0):
    return TimelockEvent(
        name='CallScheduled',
        args={
            'id': pid(proposal),
            'index': index,
            'target': TARGET,
            'value': 0,
            'data': b'\x12\x34',
            'predecessor': b'\x00' * 32,
            'delay': delay,
        },
        block_number=block,
        log_index=log_index,
    )


def executed(proposal: int, block: int, log_index: int = 0):
    return TimelockEvent(
        name='CallExecuted',
        args={'id': pid(proposal), 'index': 0, 'target': TARGET, 'value': 0, 'data': b'\x12\x34'},
        block_number=block,
        log_index=log_index,
    )


def cancelled(proposal: int, block: int, log_index: int = 0):
    return TimelockEvent(name='Cancelled', args={'id': pid(proposal)}, block_number=block, log_index=log_index)


def role_granted(block: int, log_index: int = 0):
    return TimelockEvent(
        name='RoleGranted',
        args={'role': b'\x01' * 32, 'account': TARGET, 'sender': TARGET},
        block_number=block,
        log_index=log_index,
    )


def min_delay_change(block: int, log_index: int = 0):
    return TimelockEvent(
        name='MinDelayChange',
        args={'oldDuration': 60, 'newDuration': 120},
        block_number=block,
        log_index=log_index,
    )


class FakeTimelockClient:
    """Serves events from memory; `fails(lo, hi)` decides which log queries get rejected."""

    def __init__(self, events=(), timestamps=None, head=1_000, fails=None, min_delay=60, roles=None):
        self.roles = dict(roles or {})
        self.events = list(events)
        self.timestamps = dict(timestamps or {})
        self.head = head
        self.fails = fails or (lambda lo, hi: False)
        self.min_delay = min_delay
        self.queries = []
        self.timestamp_calls = []
        self.head_calls = 0
        self._lock = threading.Lock()

    def query_events(self, from_block, to_block):
        with self._lock:
            self.queries.append((from_block, to_block))
        if self.fails(from_block, to_block):
            raise QueryError(from_block, to_block, 'query returned more than 10000 results')
        return [e for e in self.events if from_block <= e.block_number <= to_block]

    def get_timestamp(self, proposal_id):
        with self._lock:
            self.timestamp_calls.append(proposal_id)
        return self.timestamps.get(proposal_id, 0)

    def get_current_block_number(self):
        self.head_calls += 1
        return self.head

    def get_min_delay(self):
        return self.min_delay

    def has_role(self, role_name, account):
        return account in self.roles.get(role_name, ())


class InFlightCountingClient(FakeTimelockClient):
    """Holds every request briefly and records the most requests seen running at once."""

    def __init__(self, *args, hold=0.005, **kwargs):
        super().__init__(*args, **kwargs)
        self.hold = hold
        self.in_flight = 0
        self.peak = 0
        self._count_lock = threading.Lock()

    def _enter(self):
        with self._count_lock:
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)
        time.sleep(self.hold)

    def _leave(self):
        with self._count_lock:
            self.in_flight -= 1

    def query_events(self, from_block, to_block):
        self._enter()
        try:
            return super().query_events(from_block, to_block)
        finally:
            self._leave()

    def get_timestamp(self, proposal_id):
        self._enter()
        try:
            return super().get_timestamp(proposal_id)
        finally:
            self._leave()
