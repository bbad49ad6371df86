"""Read-only access to a TimelockController over JSON-RPC.

Everything network-facing lives here so the range fetcher and the reconciler
only ever see `query_events`, `get_timestamp` and `get_current_block_number`.
Provider rejections of a log query become `QueryError` (the fetcher splits the
range); unreachable endpoints and auth failures become `TransportError`.
"""
import logging
import requests
from web3 import Web3
from web3.exceptions import Web3Exception

import utils
from constants import PROPOSAL_EVENTS, ADMIN_EVENTS, ROLE_SELECTORS
from exceptions import QueryError, TransportError, UnknownRoleError
from schemas.timelock import TimelockEvent

logger = logging.getLogger(__name__)

AUTH_STATUS_CODES = (401, 403)
HTTP_TIMEOUT = 60  # seconds

def event_signature(event_abi: dict) -> str:
    types = ','.join(i['type'] for i in event_abi['inputs'])
    return f"{event_abi['name']}({types})"

def event_topics(abi: list) -> dict:
    """Map topic0 bytes -> event name for every event we know how to decode"""
    wanted = set(PROPOSAL_EVENTS) | set(ADMIN_EVENTS)
    return {
        bytes(Web3.keccak(text=event_signature(item))): item['name']
        for item in abi
        if item.get('type') == 'event' and item['name'] in wanted
    }


class TimelockClient:
    def __init__(self, w3: Web3, address: str, abi: list = None):
        self.w3 = w3
        abi = abi or utils.load_abi(utils.TIMELOCK_ABI_PATH)
        self.contract = w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)
        self.topics = event_topics(abi)

    @classmethod
    def connect(cls, config) -> 'TimelockClient':
        """Connect to the configured endpoint and make sure it serves the expected chain"""
        w3 = Web3(Web3.HTTPProvider(config.rpc, request_kwargs={'timeout': HTTP_TIMEOUT}))
        if not w3.is_connected():
            raise TransportError(f"Failed to connect to node at {config.rpc}")
        chain_id = _call(lambda: w3.eth.chain_id, 'eth_chainId')
        if config.chain_id is not None and chain_id != config.chain_id:
            raise TransportError(
                f"Endpoint {config.rpc} serves chain {chain_id}, expected {config.chain_id} for {config.network}"
            )
        logger.debug(f"Connected to {config.rpc} (chain {chain_id}), timelock {config.address}")
        return cls(w3, config.address)

    def query_events(self, from_block: int, to_block: int) -> list:
        """Return every decodable timelock event in [from_block, to_block]"""
        params = {
            'address': self.contract.address,
            'fromBlock': from_block,
            'toBlock': to_block,
        }
        try:
            logs = self.w3.eth.get_logs(params)
        except requests.exceptions.ConnectionError as e:
            raise TransportError(f"Connection error querying logs {from_block}-{to_block}: {e}") from e
        except requests.exceptions.HTTPError as e:
            if e.response is not None and e.response.status_code in AUTH_STATUS_CODES:
                raise TransportError(f"Endpoint refused log query: {e}") from e
            raise QueryError(from_block, to_block, str(e)) from e
        except requests.exceptions.Timeout as e:
            # Read timeout: usually the provider choking on a wide range
            raise QueryError(from_block, to_block, f"timeout: {e}") from e
        except (Web3Exception, ValueError) as e:
            raise QueryError(from_block, to_block, str(e)) from e

        events = []
        for log in logs:
            event = self.decode_log(log)
            if event is not None:
                events.append(event)
        return events

    def decode_log(self, log):
        topics = log.get('topics') or []
        if not topics:
            return None
        name = self.topics.get(bytes(topics[0]))
        if name is None:
            logger.debug(f"Skipping unknown log at block {log.get('blockNumber')} (topic {bytes(topics[0]).hex()})")
            return None
        decoded = getattr(self.contract.events, name)().process_log(log)
        txn_hash = decoded['transactionHash']
        return TimelockEvent(
            name=name,
            args=dict(decoded['args']),
            block_number=int(decoded['blockNumber']),
            log_index=int(decoded['logIndex']),
            txn_hash=txn_hash.hex() if hasattr(txn_hash, 'hex') else str(txn_hash),
        )

    def get_timestamp(self, proposal_id: bytes) -> int:
        """Eligible-execution time of a proposal (0 when unset, 1 once done)"""
        return _call(lambda: self.contract.functions.getTimestamp(proposal_id).call(), 'getTimestamp')

    def get_current_block_number(self) -> int:
        return _call(lambda: self.w3.eth.block_number, 'eth_blockNumber')

    def get_min_delay(self) -> int:
        return _call(lambda: self.contract.functions.getMinDelay().call(), 'getMinDelay')

    def role_id(self, role_name: str) -> bytes:
        """Resolve a role constant such as PROPOSER_ROLE from the contract"""
        fn = getattr(self.contract.functions, role_name)
        return _call(lambda: fn().call(), role_name)

    def role_for_selector(self, selector: int) -> bytes:
        if selector not in ROLE_SELECTORS:
            raise UnknownRoleError(selector)
        return self.role_id(ROLE_SELECTORS[selector])

    def has_role(self, role_name: str, account: str) -> bool:
        role = self.role_id(role_name)
        account = Web3.to_checksum_address(account)
        return _call(lambda: self.contract.functions.hasRole(role, account).call(), 'hasRole')

    # Calldata builders; nothing here signs or sends

    def encode(self, fn_name: str, args: list) -> str:
        """ABI-encode a call to one of the timelock's functions"""
        return self.contract.encode_abi(fn_name, args=args)

    def schedule_calldata(self, target, value, data, predecessor, salt, delay) -> str:
        return self.encode('schedule', [Web3.to_checksum_address(target), value, data, predecessor, salt, delay])

    def cancel_calldata(self, proposal_id) -> str:
        return self.encode('cancel', [proposal_id])

    def execute_calldata(self, target, value, data, predecessor, salt) -> str:
        return self.encode('execute', [Web3.to_checksum_address(target), value, data, predecessor, salt])

    def grant_role_calldata(self, selector: int, account: str) -> str:
        role = self.role_for_selector(selector)
        return self.encode('grantRole', [role, Web3.to_checksum_address(account)])

    def revoke_role_calldata(self, selector: int, account: str) -> str:
        role = self.role_for_selector(selector)
        return self.encode('revokeRole', [role, Web3.to_checksum_address(account)])


def _call(fn, what: str):
    """Run a point query, turning any RPC failure into TransportError"""
    try:
        return fn()
    except (requests.exceptions.RequestException, Web3Exception, ValueError) as e:
        raise TransportError(f"RPC call {what} failed: {e}") from e
