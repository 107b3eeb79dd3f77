import time
from decimal import Decimal
from web3 import Web3

# 1/20 of a quote is the tolerated slippage (5%)
SLIPPAGE_DIVISOR = 20
DEADLINE_MINUTES = 10

def slippage_floor(quote: int) -> int:
    """Minimum acceptable output: the quote minus 5%, truncating the 5% part"""
    return quote - quote // SLIPPAGE_DIVISOR

def deadline(now: float = None, minutes: int = DEADLINE_MINUTES) -> int:
    """Unix timestamp (seconds) after which the router rejects the transaction"""
    if now is None:
        now = time.time()
    return int(now) + minutes * 60

def half(balance: int) -> int:
    return balance // 2

def format_units(value: int, decimals: int = 18) -> str:
    """Format a raw token amount for display"""
    if decimals == 18:
        return str(Web3.from_wei(value, 'ether'))
    return str(Decimal(value) / (Decimal(10) ** decimals))

def gwei_to_wei(gwei: float) -> int:
    return Web3.to_wei(Decimal(str(gwei)), 'gwei')

def format_gwei(wei: int) -> str:
    return str(Web3.from_wei(wei, 'gwei'))
