import json
import os
from pathlib import Path
from typing import Dict, Any
from dotenv import load_dotenv

load_dotenv()

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_TARGETS_PATH = PACKAGE_DIR / "targets.json"

REQUIRED_ENV = ('MNEMONIC', 'NODE_URL')

def load_config(targets_path: str = None) -> Dict[str, Any]:
    """Load and validate configuration from targets.json and environment variables"""

    # Load the fixed on-chain configuration
    path = Path(targets_path) if targets_path else DEFAULT_TARGETS_PATH
    with open(path, 'r') as f:
        config = json.load(f)

    # ABI paths are relative to the targets file
    for section in (config['tokens']['reward'], config['tokens']['paired'],
                    config['pool'], config['masterchef'], config['router']):
        section['abi'] = str(path.parent / section['abi'])

    # Secrets come from the environment only
    for key in REQUIRED_ENV:
        if not os.getenv(key):
            raise ValueError(f"Missing {key} in environment")

    config['wallet'] = {
        'mnemonic': os.getenv('MNEMONIC'),
        'nodeUrl': os.getenv('NODE_URL'),
    }

    # Add global config from env
    config['global'] = {
        'logLevel': os.getenv('LOG_LEVEL', 'INFO').upper(),
        'logDir': os.getenv('LOG_DIR', 'data/logs'),
        'gasPriceGwei': float(os.getenv('GAS_PRICE_GWEI', 10)),
        'gasLimit': int(os.getenv('GAS_LIMIT', 200000)),
        'receiptTimeout': int(os.getenv('RECEIPT_TIMEOUT', 120)),
    }

    if config['global']['gasPriceGwei'] <= 0:
        raise ValueError("GAS_PRICE_GWEI must be positive")
    if config['global']['gasLimit'] <= 0:
        raise ValueError("GAS_LIMIT must be positive")

    return config
