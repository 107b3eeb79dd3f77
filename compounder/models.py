from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class GasOverrides:
    """Fixed legacy gas settings applied to every transaction"""
    gas_price: int
    gas_limit: int

    def as_tx_params(self) -> Dict[str, int]:
        return {'gasPrice': self.gas_price, 'gas': self.gas_limit}


@dataclass(frozen=True)
class Token:
    name: str
    contract: Any

    @property
    def address(self) -> str:
        return self.contract.address


@dataclass(frozen=True)
class LiquidityPool:
    name: str
    pid: int
    contract: Any
