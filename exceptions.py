"""Errors raised while loading timelock proposals."""


class TimelockError(Exception):
    """Base class for everything the timelock tooling raises on purpose."""


class QueryError(TimelockError):
    """An eth_getLogs query was rejected by the provider.

    Providers answer an oversized block span or result set with an error that
    looks like any other rejection, so this only says the query failed. The
    range fetcher reacts by splitting the range.
    """

    def __init__(self, from_block, to_block, reason):
        self.from_block = from_block
        self.to_block = to_block
        self.reason = reason
        super().__init__(f"Query for blocks {from_block}-{to_block} failed: {reason}")


class TransportError(TimelockError):
    """The RPC endpoint could not be reached, refused auth, or is on the wrong chain."""


class UnboundedRangeFailure(TimelockError):
    """A single block still fails to query, so no further split is possible."""

    def __init__(self, block, reason=None):
        self.block = block
        self.reason = reason
        msg = f"Log query for single block {block} keeps failing, range cannot be narrowed further"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class ConsistencyViolation(TimelockError):
    """An Executed/Cancelled event refers to a proposal never scheduled in range."""

    def __init__(self, proposal_id, event_name, block_number, txn_hash=''):
        self.proposal_id = proposal_id
        self.event_name = event_name
        self.block_number = block_number
        self.txn_hash = txn_hash
        where = f"block {block_number}" + (f" (tx {txn_hash})" if txn_hash else "")
        super().__init__(
            f"{event_name} at {where} references unknown proposal 0x{proposal_id.hex()}; "
            f"its CallScheduled event lies before the queried range, retry with a lower --from-block"
        )


class UnknownRoleError(TimelockError):
    """Role selector outside 1 (admin), 2 (proposer), 3 (executor)."""

    def __init__(self, role):
        self.role = role
        super().__init__(f"Unknown role {role}, expected 1 (admin), 2 (proposer) or 3 (executor)")
