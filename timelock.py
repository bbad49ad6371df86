import argparse
import logging
import sys

from config import load_config
from data_fetchers.timelock_client import TimelockClient
from data_fetchers.timelock_proposals import load_proposals
from exceptions import TimelockError
from schemas.timelock import StatusFilter
import utils

logger = logging.getLogger(__name__)

SEPARATOR = '=' * 77

def block_number(value: str) -> int:
    """Accept decimal or 0x-prefixed block numbers"""
    try:
        number = int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid block number: {value}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"block number must not be negative: {value}")
    return number

def bytes32(value: str) -> bytes:
    try:
        return utils.to_bytes32(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))

def hex_bytes(value: str) -> bytes:
    try:
        return utils.to_hex_bytes(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))

def format_proposal(record) -> str:
    return '\n'.join([
        f"id: {record.id.hex()}",
        f"index: {record.index}",
        f"target: {record.target}",
        f"value: {record.value}",
        f"data: 0x{record.data.hex()}",
        f"predecessor: {record.predecessor.hex()}",
        f"delay: {record.delay}",
        f"status: {record.status.value}",
    ])

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='timelock', description='Inspect a TimelockController and its proposals.')
    parser.add_argument('--network', help='Known deployment to use (default: $TIMELOCK_NETWORK or pangolin)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    sub = parser.add_subparsers(dest='command', required=True)

    proposals = sub.add_parser('proposals', help='List proposals replayed from the event log')
    proposals.add_argument('-f', '--from-block', type=block_number, help='Defaults to the deployment block')
    proposals.add_argument('-t', '--to-block', type=block_number, help='Defaults to the chain head')
    proposals.add_argument('--no-done', action='store_true', help='Hide executed proposals')
    proposals.add_argument('--no-ready', action='store_true', help='Hide ready proposals')
    proposals.add_argument('--no-pending', action='store_true', help='Hide pending proposals')
    proposals.add_argument('--no-cancel', action='store_true', help='Hide cancelled proposals')
    proposals.add_argument('--workers', type=int, help='Concurrent RPC requests (default: $TIMELOCK_MAX_WORKERS)')

    sub.add_parser('min-delay', help='Print the minimum delay in seconds')

    for name, role in (('is-admin', 'TIMELOCK_ADMIN_ROLE'), ('is-proposer', 'PROPOSER_ROLE'),
                       ('is-executor', 'EXECUTOR_ROLE')):
        role_parser = sub.add_parser(name, help=f'Check whether an account holds {role}')
        role_parser.add_argument('account')
        role_parser.set_defaults(role_name=role)

    schedule = sub.add_parser('schedule', help='Print calldata scheduling a single call')
    schedule.add_argument('target', help='Contract the timelock should call')
    schedule.add_argument('value', type=int, help='Wei sent with the call, usually 0')
    schedule.add_argument('data', type=hex_bytes, help='Encoded function selector and arguments')
    schedule.add_argument('predecessor', type=bytes32, help='Proposal id that must be done first, or zero')
    schedule.add_argument('salt', type=bytes32, help='Disambiguates otherwise identical proposals')
    schedule.add_argument('delay', type=int, help='Seconds before execution, at least the min delay')

    cancel = sub.add_parser('cancel', help='Print calldata cancelling a proposal')
    cancel.add_argument('id', type=bytes32)

    execute = sub.add_parser('execute', help='Print calldata executing a ready single-call proposal')
    execute.add_argument('target')
    execute.add_argument('value', type=int)
    execute.add_argument('data', type=hex_bytes)
    execute.add_argument('predecessor', type=bytes32)
    execute.add_argument('salt', type=bytes32)

    for name in ('grant-role', 'revoke-role'):
        role_parser = sub.add_parser(name, help=f'Print {name} calldata')
        role_parser.add_argument('role', type=int, help='1: admin, 2: proposer, 3: executor')
        role_parser.add_argument('account')

    return parser

def run(args, config, client):
    if args.command == 'proposals':
        filters = StatusFilter(
            exclude_executed=args.no_done,
            exclude_ready=args.no_ready,
            exclude_pending=args.no_pending,
            exclude_cancelled=args.no_cancel,
        )
        from_block = args.from_block if args.from_block is not None else config.deploy_block
        workers = args.workers or config.max_workers
        proposals = load_proposals(client, from_block, args.to_block, filters=filters, max_workers=workers)
        for record in proposals.values():
            print(SEPARATOR)
            print(format_proposal(record))
    elif args.command == 'min-delay':
        print(client.get_min_delay())
    elif args.command in ('is-admin', 'is-proposer', 'is-executor'):
        print(client.has_role(args.role_name, args.account))
    elif args.command == 'schedule':
        print(client.schedule_calldata(args.target, args.value, args.data, args.predecessor, args.salt, args.delay))
    elif args.command == 'cancel':
        print(client.cancel_calldata(args.id))
    elif args.command == 'execute':
        print(client.execute_calldata(args.target, args.value, args.data, args.predecessor, args.salt))
    elif args.command == 'grant-role':
        print(client.grant_role_calldata(args.role, args.account))
    elif args.command == 'revoke-role':
        print(client.revoke_role_calldata(args.role, args.account))

def main(argv=None, client=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    try:
        config = load_config(args.network)
        if client is None:
            client = TimelockClient.connect(config)
        run(args, config, client)
    except TimelockError as e:
        logger.error(str(e))
        return 1
    except ValueError as e:
        logger.error(f"Invalid input: {str(e)}")
        return 2
    return 0

if __name__ == '__main__':
    sys.exit(main())
