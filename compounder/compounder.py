#!/usr/bin/env python3

import sys
from typing import Dict, Any, List, Tuple

from rich.console import Console
from rich.table import Table
from web3 import Web3

from compounder.amounts import half, format_units, gwei_to_wei
from compounder.config import load_config
from compounder.contracts import Contracts, init_contracts
from compounder.logging_config import get_logger, setup_logging
from compounder.models import GasOverrides
from compounder.rpc import account_from_mnemonic, connect, call_with_retry
from compounder.tx import TransactionBuilder

# Not __name__: "python -m" would make it "__main__", outside the compounder logger
logger = get_logger("compounder.compounder")

class Compounder:
    """Claim, swap half, add liquidity, stake: one pass per run"""

    def __init__(self, contracts: Contracts, address: str, overrides: GasOverrides,
                 explorer: str = '', console: Console = None):
        self.contracts = contracts
        self.address = address
        self.overrides = overrides
        self.explorer = explorer
        self.console = console or Console()
        self.receipts: List[Tuple[str, Dict[str, Any]]] = []

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'Compounder':
        """Derive the account, connect to the node and bind the contracts"""
        global_config = config['global']
        account = account_from_mnemonic(config['wallet']['mnemonic'])
        w3 = connect(config['wallet']['nodeUrl'])

        explorer = config['chain']['explorer']
        tx_builder = TransactionBuilder(
            w3, account,
            chain_id=config['chain']['chainId'],
            explorer=explorer,
            receipt_timeout=global_config['receiptTimeout'],
        )
        overrides = GasOverrides(
            gas_price=gwei_to_wei(global_config['gasPriceGwei']),
            gas_limit=global_config['gasLimit'],
        )
        return cls(init_contracts(w3, config, tx_builder), account.address, overrides, explorer)

    def reward_balance(self) -> int:
        token = self.contracts.dino_token
        return call_with_retry(token.contract.functions.balanceOf(self.address))

    def run(self) -> List[Tuple[str, Dict[str, Any]]]:
        """Run the four steps in order; the first failure aborts the run"""
        c = self.contracts
        pool = c.dino_weth_pool
        self.receipts = []

        receipt = c.masterchef.claim_rewards(pool.pid, self.address, self.overrides)
        self.receipts.append(('Claim rewards', receipt))

        balance = self.reward_balance()
        logger.info(f"You have {format_units(balance)} {c.dino_token.name} in your wallet",
                    step='balance')

        receipt = c.router.swap_tokens(
            half(balance), c.dino_token, c.weth_token, self.address, self.overrides)
        self.receipts.append(('Swap', receipt))

        balance = self.reward_balance()
        receipt = c.router.add_liquidity(
            balance, c.dino_token, c.weth_token, self.address, self.overrides)
        self.receipts.append(('Add liquidity', receipt))

        receipt = c.masterchef.stake_lp(pool, self.address, self.overrides)
        self.receipts.append(('Stake LP', receipt))

        return self.receipts

    def print_summary(self):
        table = Table(title="Compound run")
        table.add_column("Step", style="cyan")
        table.add_column("Gas used", justify="right")
        table.add_column("Transaction", style="green")

        for step, receipt in self.receipts:
            tx_hash = Web3.to_hex(receipt['transactionHash'])
            table.add_row(step, str(receipt['gasUsed']), f"{self.explorer}{tx_hash}")

        self.console.print(table)

def main():
    """Entry point"""
    compounder = None
    try:
        config = load_config()
        setup_logging(config['global'])
        compounder = Compounder.from_config(config)
        compounder.run()
        compounder.print_summary()
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        # Show what already went through before the failing step
        if compounder is not None and compounder.receipts:
            compounder.print_summary()
        sys.exit(1)

if __name__ == "__main__":
    main()
