from dataclasses import dataclass, replace
import enum


class ProposalStatus(enum.Enum):
    PENDING = 'pending'
    READY = 'ready'
    EXECUTED = 'executed'
    CANCELLED = 'cancelled'


@dataclass(frozen=True)
class TimelockEvent:
    """One decoded timelock log, positioned in chain order by (block_number, log_index)."""
    name: str
    args: dict
    block_number: int
    log_index: int
    txn_hash: str = ''

    @property
    def proposal_id(self):
        return self.args.get('id')

    @property
    def sort_key(self):
        return (self.block_number, self.log_index)


@dataclass
class ProposalRecord:
    id: bytes
    index: int
    target: str
    value: int
    data: bytes
    predecessor: bytes
    delay: int
    status: ProposalStatus = ProposalStatus.PENDING

    @classmethod
    def from_event(cls, event: TimelockEvent) -> 'ProposalRecord':
        args = event.args
        return cls(
            id=bytes(args['id']),
            index=int(args['index']),
            target=args['target'],
            value=int(args['value']),
            data=bytes(args['data']),
            predecessor=bytes(args['predecessor']),
            delay=int(args['delay']),
        )

    def with_status(self, status: ProposalStatus) -> 'ProposalRecord':
        return replace(self, status=status)


@dataclass(frozen=True)
class StatusFilter:
    """Which statuses to drop from the reconciled mapping. Nothing is dropped by default."""
    exclude_executed: bool = False
    exclude_ready: bool = False
    exclude_pending: bool = False
    exclude_cancelled: bool = False

    @property
    def statuses(self) -> frozenset:
        excluded = {
            ProposalStatus.EXECUTED: self.exclude_executed,
            ProposalStatus.READY: self.exclude_ready,
            ProposalStatus.PENDING: self.exclude_pending,
            ProposalStatus.CANCELLED: self.exclude_cancelled,
        }
        return frozenset(status for status, skip in excluded.items() if not skip)

    def apply(self, proposals: dict) -> dict:
        keep = self.statuses
        return {pid: record for pid, record in proposals.items() if record.status in keep}
