from typing import Dict, Any, List

from compounder.amounts import slippage_floor, deadline, format_units
from compounder.logging_config import get_logger
from compounder.models import GasOverrides, Token
from compounder.rpc import call_with_retry
from compounder.tx import TransactionBuilder

logger = get_logger(__name__)

class AMMRouter:
    """V2-style router: getAmountsOut quotes plus swaps and liquidity adds"""

    def __init__(self, contract, tx_builder: TransactionBuilder):
        self.contract = contract
        self.tx_builder = tx_builder

    def get_amounts_out(self, amount: int, path: List[str]) -> List[int]:
        return call_with_retry(self.contract.functions.getAmountsOut(amount, path))

    def swap_tokens(self, amount: int, token_in: Token, token_out: Token,
                    address: str, overrides: GasOverrides) -> Dict[str, Any]:
        """Sell an exact amount of token_in for at least 95% of the quoted token_out"""
        path = [token_in.address, token_out.address]
        amounts = self.get_amounts_out(amount, path)
        amount_out_min = slippage_floor(amounts[1])

        logger.info(
            f"Selling {token_in.name} for {token_out.name}\n"
            f"tokenIn: {format_units(amount)} {token_in.name}\n"
            f"tokenOut: {format_units(amount_out_min)} {token_out.name}",
            step='swap')

        call = self.contract.functions.swapExactTokensForTokens(
            amount,
            amount_out_min,
            path,
            address,
            deadline()
        )
        return self.tx_builder.execute(call, overrides, 'Sell')

    def add_liquidity(self, amount: int, token_a: Token, token_b: Token,
                      address: str, overrides: GasOverrides) -> Dict[str, Any]:
        """Pair amount of token_a with its quoted value of token_b in the pool"""
        amount_a, amount_b = self.get_amounts_out(amount, [token_a.address, token_b.address])[:2]

        logger.info(
            f"Adding liquidity to {token_a.name}-{token_b.name} pool:\n"
            f"tokenA: {format_units(amount_a)} {token_a.name}\n"
            f"tokenB: {format_units(amount_b)} {token_b.name}",
            step='add_liquidity')

        call = self.contract.functions.addLiquidity(
            token_a.address,
            token_b.address,
            amount_a,
            amount_b,
            slippage_floor(amount_a),
            slippage_floor(amount_b),
            address,
            deadline()
        )
        return self.tx_builder.execute(call, overrides, 'Add Liquidity')
