import json
import os

ABI_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'abis')
TIMELOCK_ABI_PATH = os.path.join(ABI_DIR, 'timelock.json')

def load_abi(path: str) -> list:
    """Load ABI from JSON file"""
    with open(path, 'r') as f:
        return json.load(f)
