import logging
from typing import Dict, Any
from web3 import Web3
from eth_account.signers.local import LocalAccount

from compounder.amounts import format_gwei
from compounder.logging_config import compounder_logger
from compounder.models import GasOverrides

logger = logging.getLogger(__name__)

class TransactionFailedError(RuntimeError):
    """Raised when a mined transaction reverted (receipt status 0)"""

    def __init__(self, tx_hash: str, receipt: Dict[str, Any]):
        self.tx_hash = tx_hash
        self.receipt = receipt
        super().__init__(f"Transaction reverted: {tx_hash}")

class TransactionBuilder:
    """Build, sign and send legacy transactions with fixed gas overrides"""

    def __init__(self, w3: Web3, account: LocalAccount, chain_id: int,
                 explorer: str, receipt_timeout: int = 120):
        self.w3 = w3
        self.account = account
        self.chain_id = chain_id
        self.explorer = explorer
        self.receipt_timeout = receipt_timeout

    def build_transaction(self, call, overrides: GasOverrides) -> Dict[str, Any]:
        """Turn a bound contract function into a transaction dict"""
        params = {
            'from': self.account.address,
            'nonce': self.w3.eth.get_transaction_count(self.account.address, 'pending'),
            'chainId': self.chain_id,
            **overrides.as_tx_params(),
        }
        return call.build_transaction(params)

    def send_transaction(self, transaction: Dict[str, Any]) -> str:
        """Sign and send transaction"""
        signed_tx = self.account.sign_transaction(transaction)
        tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        tx_hash = Web3.to_hex(tx_hash)

        logger.info(f"Transaction sent: {tx_hash}")
        return tx_hash

    def wait_for_receipt(self, tx_hash: str) -> Dict[str, Any]:
        """Wait for transaction receipt, raising if it reverted"""
        receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout)

        if receipt['status'] != 1:
            logger.error(f"Transaction failed: {tx_hash}")
            raise TransactionFailedError(tx_hash, receipt)

        logger.info(f"Transaction confirmed: {tx_hash}")
        return receipt

    def execute(self, call, overrides: GasOverrides, label: str) -> Dict[str, Any]:
        """Send a contract call, wait for inclusion and log both stages

        Returns the receipt. Any failure propagates to the caller.
        """
        transaction = self.build_transaction(call, overrides)
        tx_hash = self.send_transaction(transaction)
        compounder_logger.info(
            f"{label} Transaction:\n{format_transaction(transaction, tx_hash, self.explorer)}",
            step=label, tx_hash=tx_hash)

        try:
            receipt = self.wait_for_receipt(tx_hash)
        except TransactionFailedError as e:
            compounder_logger.log_transaction(label, tx_hash, e.receipt.get('gasUsed', 0), 'reverted')
            raise

        compounder_logger.info(
            f"{label} Transaction Receipt:\n{format_receipt(receipt, self.explorer)}",
            step=label, tx_hash=tx_hash)
        compounder_logger.log_transaction(label, tx_hash, receipt['gasUsed'], 'success')
        return receipt

def format_transaction(transaction: Dict[str, Any], tx_hash: str, explorer: str) -> str:
    """Summary of a broadcast, not yet mined, transaction"""
    return '\n'.join([
        f"Nonce: {transaction['nonce']}",
        f"Gas Price: {format_gwei(transaction['gasPrice'])}",
        f"Gas Limit: {transaction['gas']}",
        f"Link: {explorer}{tx_hash}",
    ])

def format_receipt(receipt: Dict[str, Any], explorer: str) -> str:
    """Summary of a mined transaction"""
    tx_hash = Web3.to_hex(receipt['transactionHash'])
    return '\n'.join([
        f"Gas Used: {receipt['gasUsed']}",
        f"Link: {explorer}{tx_hash}",
    ])
