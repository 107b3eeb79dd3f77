from unittest.mock import MagicMock

import pytest
from hexbytes import HexBytes

from compounder.logging_config import compounder_logger, setup_logging
from compounder.models import GasOverrides, Token, LiquidityPool

WALLET = '0x1111111111111111111111111111111111111111'
DEV_MNEMONIC = 'test test test test test test test test test test test junk'
DEV_ADDRESS = '0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266'
DINO = '0xAa9654BECca45B5BDFA5ac646c939C62b527D394'
WETH = '0x7ceB23fD6bC0adD59E62ac25578270cFf1b9f619'
LP = '0x9f03309A588e33A239Bf49ed8D68b2D45C7A1F11'


def make_contract(address):
    contract = MagicMock()
    contract.address = address
    return contract


def make_receipt(tx_hash='0x' + 'ab' * 32, gas_used=21000, status=1):
    return {'transactionHash': HexBytes(tx_hash), 'gasUsed': gas_used, 'status': status}


@pytest.fixture
def overrides():
    return GasOverrides(gas_price=10 * 10**9, gas_limit=200000)


@pytest.fixture
def dino():
    return Token('DINO', make_contract(DINO))


@pytest.fixture
def weth():
    return Token('WETH', make_contract(WETH))


@pytest.fixture
def pool():
    return LiquidityPool('DINO-WETH LP', 11, make_contract(LP))


@pytest.fixture
def tx_builder():
    builder = MagicMock()
    builder.execute.return_value = make_receipt()
    return builder


@pytest.fixture
def log_dir(tmp_path):
    """Run with the real log handlers writing under tmp_path"""
    setup_logging({'logDir': str(tmp_path), 'logLevel': 'INFO'})
    yield tmp_path
    for logger in (compounder_logger.logger, compounder_logger.tx_logger):
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
    compounder_logger.tx_logger.propagate = True
    compounder_logger._setup_done = False


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv('MNEMONIC', DEV_MNEMONIC)
    monkeypatch.setenv('NODE_URL', 'http://localhost:8545')
    for key in ('LOG_LEVEL', 'LOG_DIR', 'GAS_PRICE_GWEI', 'GAS_LIMIT', 'RECEIPT_TIMEOUT'):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch
