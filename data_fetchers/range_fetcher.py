"""Adaptive eth_getLogs range fetching.

Providers cap the block span or result size of a log query and reject the call
when it is exceeded, without saying which cap was hit. Rather than guessing a
fixed chunk size, ask for the whole range and split any range that fails in
half until every piece succeeds. Pending ranges sit on a stack, lowest blocks
on top, and up to `max_workers` of them are queried at once. Results are kept
per range and joined in block order once everything has come back.
"""
import logging
from concurrent.futures import ThreadPoolExecutor

from exceptions import QueryError, UnboundedRangeFailure

logger = logging.getLogger(__name__)

def split_range(from_block: int, to_block: int):
    """Halve [from_block, to_block] into [from_block, mid] and [mid + 1, to_block]

    Only a single block is unsplittable. A two-block range still halves into
    two single blocks, unlike the older CLI which gave up once mid == from_block.
    """
    if from_block > to_block:
        raise ValueError(f"from_block {from_block} is after to_block {to_block}")
    if from_block == to_block:
        raise UnboundedRangeFailure(from_block)
    mid = (from_block + to_block) // 2
    return (from_block, mid), (mid + 1, to_block)

def fetch_events(client, from_block: int, to_block: int = None, max_workers: int = 1) -> list:
    """Return every timelock event in [from_block, to_block].

    `to_block=None` means the chain head, read once up front. Any `QueryError`
    splits the failing range; a single block that still fails raises
    `UnboundedRangeFailure`. `TransportError` is not retried.
    """
    if to_block is None:
        to_block = client.get_current_block_number()
        logger.info(f"No end block given, using chain head {to_block}")
    if from_block > to_block:
        raise ValueError(f"from_block {from_block} is after to_block {to_block}")
    if max_workers < 1:
        raise ValueError(f"max_workers must be at least 1, got {max_workers}")

    # Written only from this thread, one entry per range that succeeded
    chunks = {}
    stack = [(from_block, to_block)]
    queries = 0

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='getLogs') as executor:
        while stack:
            batch = [stack.pop() for _ in range(min(max_workers, len(stack)))]
            futures = [((lo, hi), executor.submit(client.query_events, lo, hi)) for lo, hi in batch]
            queries += len(futures)
            halves = []
            try:
                for (lo, hi), future in futures:
                    try:
                        chunks[(lo, hi)] = future.result()
                    except QueryError as e:
                        if lo == hi:
                            raise UnboundedRangeFailure(lo, e.reason) from e
                        left, right = split_range(lo, hi)
                        logger.warning(f"Query for blocks {lo}-{hi} failed, splitting into {left} and {right}: {e.reason}")
                        halves.extend([left, right])
            except BaseException:
                for _, future in futures:
                    future.cancel()
                raise
            stack.extend(reversed(halves))

    events = [event for key in sorted(chunks) for event in chunks[key]]
    logger.info(f"Fetched {len(events)} events from blocks {from_block}-{to_block} in {queries} queries")
    return events
