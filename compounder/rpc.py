import json
import logging
from web3 import Web3
from web3.providers import HTTPProvider
from web3.middleware import ExtraDataToPOAMiddleware
from eth_account import Account
from eth_account.signers.local import LocalAccount
from tenacity import retry, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)

# Same derivation path ethers uses for Wallet.fromMnemonic
DEFAULT_HD_PATH = "m/44'/60'/0'/0/0"

Account.enable_unaudited_hdwallet_features()

def connect(node_url: str, timeout: int = 20) -> Web3:
    """Get a Web3 instance for the configured node"""
    w3 = Web3(HTTPProvider(node_url, request_kwargs={'timeout': timeout}))
    # Polygon blocks carry PoA extra data
    w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

    if not w3.is_connected():
        raise RuntimeError(f"No healthy RPC at {node_url}")

    logger.info(f"Connected to node, chain id {w3.eth.chain_id}")
    return w3

def account_from_mnemonic(mnemonic: str, path: str = DEFAULT_HD_PATH) -> LocalAccount:
    """Derive the signing account from a BIP-39 seed phrase"""
    account = Account.from_mnemonic(mnemonic.strip(), account_path=path)
    logger.info(f"Using account {account.address}")
    return account

def load_contract(w3: Web3, address: str, abi_path: str):
    """Load contract instance"""
    with open(abi_path, 'r') as f:
        abi = json.load(f)

    # Ensure checksum address
    address = Web3.to_checksum_address(address)
    return w3.eth.contract(address=address, abi=abi)

@retry(stop=stop_after_attempt(3), wait=wait_exponential(min=1, max=10), reraise=True)
def call_with_retry(contract_call):
    """Execute a read-only contract call with retry logic"""
    return contract_call.call()
