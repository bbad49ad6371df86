"""Configuration for the timelock proposal loader."""

import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv
from constants import TIMELOCK_DEPLOYMENTS, DEFAULT_NETWORK, DEFAULT_MAX_WORKERS


@dataclass(frozen=True)
class TimelockConfig:
    network: str
    rpc: str
    address: str
    chain_id: Optional[int]
    deploy_block: int
    max_workers: int = DEFAULT_MAX_WORKERS


def _int_env(key: str, default):
    value = os.getenv(key)
    if value is None or value == "":
        return default
    # Accept both decimal and 0x-prefixed block numbers
    return int(value, 0)


def load_config(network: Optional[str] = None) -> TimelockConfig:
    """Build config from the named deployment, letting environment variables override each field.

    Set TIMELOCK_NETWORK in your environment (or .env) to pick a deployment;
    WEB3_PROVIDER_URI, TIMELOCK_ADDRESS, TIMELOCK_CHAIN_ID and TIMELOCK_FROM_BLOCK
    point the tool at any other TimelockController.
    """
    load_dotenv()
    network = (network or os.getenv("TIMELOCK_NETWORK", DEFAULT_NETWORK)).lower()
    deployment = TIMELOCK_DEPLOYMENTS.get(network, {})
    rpc = os.getenv("WEB3_PROVIDER_URI") or deployment.get("rpc")
    address = os.getenv("TIMELOCK_ADDRESS") or deployment.get("address")
    if not rpc or not address:
        known = ", ".join(sorted(TIMELOCK_DEPLOYMENTS))
        raise ValueError(
            f"Unknown network '{network}' (known: {known}); set WEB3_PROVIDER_URI and TIMELOCK_ADDRESS instead"
        )
    max_workers = _int_env("TIMELOCK_MAX_WORKERS", DEFAULT_MAX_WORKERS)
    if max_workers < 1:
        raise ValueError(f"TIMELOCK_MAX_WORKERS must be at least 1, got {max_workers}")
    return TimelockConfig(
        network=network,
        rpc=rpc,
        address=address,
        chain_id=_int_env("TIMELOCK_CHAIN_ID", deployment.get("chain_id")),
        deploy_block=_int_env("TIMELOCK_FROM_BLOCK", deployment.get("deploy_block", 0)),
        max_workers=max_workers,
    )
