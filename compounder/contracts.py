from dataclasses import dataclass
from typing import Dict, Any
from web3 import Web3

from compounder.masterchef import Masterchef
from compounder.models import Token, LiquidityPool
from compounder.router import AMMRouter
from compounder.rpc import load_contract
from compounder.tx import TransactionBuilder


@dataclass
class Contracts:
    dino_token: Token
    weth_token: Token
    dino_weth_pool: LiquidityPool
    masterchef: Masterchef
    router: AMMRouter


def init_contracts(w3: Web3, config: Dict[str, Any], tx_builder: TransactionBuilder) -> Contracts:
    """Bind every configured on-chain resource to the connected node"""
    reward = config['tokens']['reward']
    paired = config['tokens']['paired']
    pool = config['pool']

    return Contracts(
        dino_token=Token(reward['name'], load_contract(w3, reward['address'], reward['abi'])),
        weth_token=Token(paired['name'], load_contract(w3, paired['address'], paired['abi'])),
        dino_weth_pool=LiquidityPool(
            pool['name'], pool['pid'], load_contract(w3, pool['address'], pool['abi'])),
        masterchef=Masterchef(
            load_contract(w3, config['masterchef']['address'], config['masterchef']['abi']),
            tx_builder,
            reward_symbol=reward['name'],
        ),
        router=AMMRouter(
            load_contract(w3, config['router']['address'], config['router']['abi']),
            tx_builder,
        ),
    )
