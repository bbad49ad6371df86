"""Fold timelock events into the current status of every proposal."""
import logging
from concurrent.futures import ThreadPoolExecutor

import utils
from data_fetchers.range_fetcher import fetch_events
from exceptions import ConsistencyViolation
from schemas.timelock import ProposalRecord, ProposalStatus, StatusFilter

logger = logging.getLogger(__name__)

TERMINAL_EVENTS = {
    'CallExecuted': ProposalStatus.EXECUTED,
    'Cancelled': ProposalStatus.CANCELLED,
}

def sort_events(events) -> list:
    """Chain order: block number, then position of the log within the block"""
    return sorted(events, key=lambda event: event.sort_key)

def readiness(timestamp: int, now: int) -> ProposalStatus:
    # Block time vs local clock, so only as exact as the two clocks agree
    if timestamp > now:
        return ProposalStatus.PENDING
    return ProposalStatus.READY

def fold_events(events):
    """Replay events in chain order.

    Returns the proposals keyed by id (status still the creation default) and
    the terminal status each executed or cancelled proposal ended up in.
    """
    proposals = {}
    terminal = {}
    for event in sort_events(events):
        if event.name == 'CallScheduled':
            proposal_id = bytes(event.proposal_id)
            if proposal_id in proposals:
                logger.debug(f"Ignoring repeated CallScheduled for 0x{proposal_id.hex()} at block {event.block_number}")
                continue
            proposals[proposal_id] = ProposalRecord.from_event(event)
        elif event.name in TERMINAL_EVENTS:
            proposal_id = bytes(event.proposal_id)
            if proposal_id not in proposals:
                raise ConsistencyViolation(proposal_id, event.name, event.block_number, event.txn_hash)
            terminal[proposal_id] = TERMINAL_EVENTS[event.name]
        # MinDelayChange and role events carry no proposal state
    return proposals, terminal

def lookup_timestamps(client, proposal_ids, max_workers: int = 1) -> dict:
    """One getTimestamp call per proposal, at most `max_workers` in flight"""
    proposal_ids = list(proposal_ids)
    if not proposal_ids:
        return {}
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='getTimestamp') as executor:
        results = list(executor.map(client.get_timestamp, proposal_ids))
    return dict(zip(proposal_ids, (int(ts) for ts in results)))

def reconcile_proposals(client, events, now: int = None, max_workers: int = 1) -> dict:
    """Map proposal id -> ProposalRecord with the status as of `now`.

    Readiness is decided once per proposal from its on-chain eligible time;
    CallExecuted and Cancelled override it unconditionally.
    """
    proposals, terminal = fold_events(events)
    timestamps = lookup_timestamps(client, proposals.keys(), max_workers)
    if now is None:
        now = utils.current_timestamp()

    reconciled = {}
    for proposal_id, record in proposals.items():
        status = terminal.get(proposal_id) or readiness(timestamps[proposal_id], now)
        reconciled[proposal_id] = record.with_status(status)

    counts = {}
    for record in reconciled.values():
        counts[record.status.value] = counts.get(record.status.value, 0) + 1
    logger.info(f"Reconciled {len(reconciled)} proposals: {counts}")
    return reconciled

def load_proposals(client, from_block: int, to_block: int = None, filters: StatusFilter = None,
                   max_workers: int = 1, now: int = None) -> dict:
    """Fetch, reconcile and filter in one pass. Any error aborts the whole pass."""
    events = fetch_events(client, from_block, to_block, max_workers=max_workers)
    proposals = reconcile_proposals(client, events, now=now, max_workers=max_workers)
    return (filters or StatusFilter()).apply(proposals)
