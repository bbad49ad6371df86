# timelock deployments

TIMELOCK_DEPLOYMENTS = {
    'pangolin': {
        'rpc': 'https://pangolin-rpc.darwinia.network',
        'address': '0x4214611Be6cA4E337b37e192abF076F715Af4CaE',
        'chain_id': 43,
        'deploy_block': 0x65c0c,
    },
    'crab': {
        'rpc': 'https://crab-rpc.darwinia.network',
        'address': '0xED1d1d219f85Bc634f250db5e77E0330Cddc9b2a',
        'chain_id': 44,
        'deploy_block': 0x65c0c,
    },
}

DEFAULT_NETWORK = 'pangolin'
DEFAULT_MAX_WORKERS = 4

# Role selector used by the grant-role / revoke-role commands
ROLE_SELECTORS = {
    1: 'TIMELOCK_ADMIN_ROLE',
    2: 'PROPOSER_ROLE',
    3: 'EXECUTOR_ROLE',
}

# Proposal lifecycle events; everything else the timelock emits is administrative
PROPOSAL_EVENTS = ('CallScheduled', 'CallExecuted', 'Cancelled')
ADMIN_EVENTS = ('MinDelayChange', 'RoleAdminChanged', 'RoleGranted', 'RoleRevoked')

