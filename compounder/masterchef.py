from typing import Dict, Any

from compounder.amounts import format_units
from compounder.logging_config import get_logger
from compounder.models import GasOverrides, LiquidityPool
from compounder.rpc import call_with_retry
from compounder.tx import TransactionBuilder

logger = get_logger(__name__)

class Masterchef:
    """Farm contract that pays the reward token to staked LP tokens"""

    def __init__(self, contract, tx_builder: TransactionBuilder, reward_symbol: str = 'DINO'):
        self.contract = contract
        self.tx_builder = tx_builder
        self.reward_symbol = reward_symbol

    def pending_rewards(self, pid: int, address: str) -> int:
        return call_with_retry(self.contract.functions.pendingDino(pid, address))

    def claim_rewards(self, pid: int, address: str, overrides: GasOverrides) -> Dict[str, Any]:
        """Claim pending rewards by withdrawing zero LP tokens from the pool"""
        logger.info("Claiming Rewards", step='claim', pid=pid)
        pending = self.pending_rewards(pid, address)
        logger.info(f"Attempting to withdraw rewards: {format_units(pending)} {self.reward_symbol}",
                    step='claim', pid=pid)

        receipt = self.tx_builder.execute(
            self.contract.functions.withdraw(pid, 0), overrides, 'Withdrawal')

        pending = self.pending_rewards(pid, address)
        logger.info(f"You now have pending rewards: {format_units(pending)} {self.reward_symbol}",
                    step='claim', pid=pid)
        return receipt

    def stake_lp(self, pool: LiquidityPool, address: str, overrides: GasOverrides) -> Dict[str, Any]:
        """Deposit the caller's whole LP balance under the pool id"""
        lp_balance = call_with_retry(pool.contract.functions.balanceOf(address))
        logger.info(f"Staking {format_units(lp_balance)} {pool.name} tokens",
                    step='stake', pid=pool.pid)

        return self.tx_builder.execute(
            self.contract.functions.deposit(pool.pid, lp_balance), overrides, 'Stake LP')
