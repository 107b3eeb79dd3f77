import io
import runpy
from unittest.mock import MagicMock, call

import pytest
from rich.console import Console

from compounder import compounder as compounder_module
from compounder.compounder import Compounder
from compounder.contracts import Contracts
from conftest import WALLET, make_receipt

EXPLORER = 'https://polygonscan.com/tx/'


@pytest.fixture
def contracts(dino, weth, pool):
    manager = MagicMock()
    manager.masterchef.claim_rewards.return_value = make_receipt('0x' + '01' * 32, 50000)
    manager.router.swap_tokens.return_value = make_receipt('0x' + '02' * 32, 120000)
    manager.router.add_liquidity.return_value = make_receipt('0x' + '03' * 32, 180000)
    manager.masterchef.stake_lp.return_value = make_receipt('0x' + '04' * 32, 90000)
    dino.contract.functions.balanceOf.return_value.call.side_effect = [1001, 600]

    contracts = Contracts(
        dino_token=dino,
        weth_token=weth,
        dino_weth_pool=pool,
        masterchef=manager.masterchef,
        router=manager.router,
    )
    contracts.manager = manager
    return contracts


@pytest.fixture
def compounder(contracts, overrides):
    console = Console(file=io.StringIO(), width=200)
    return Compounder(contracts, WALLET, overrides, explorer=EXPLORER, console=console)


def test_run_executes_steps_in_order(compounder, contracts, overrides, dino, weth, pool):
    compounder.run()

    assert contracts.manager.mock_calls == [
        call.masterchef.claim_rewards(11, WALLET, overrides),
        call.router.swap_tokens(500, dino, weth, WALLET, overrides),
        call.router.add_liquidity(600, dino, weth, WALLET, overrides),
        call.masterchef.stake_lp(pool, WALLET, overrides),
    ]


def test_run_returns_all_receipts(compounder):
    receipts = compounder.run()

    assert [step for step, _ in receipts] == ['Claim rewards', 'Swap', 'Add liquidity', 'Stake LP']
    assert [r['gasUsed'] for _, r in receipts] == [50000, 120000, 180000, 90000]


def test_failure_aborts_remaining_steps(compounder, contracts):
    contracts.manager.router.swap_tokens.side_effect = RuntimeError('execution reverted')

    with pytest.raises(RuntimeError, match='reverted'):
        compounder.run()

    contracts.manager.router.add_liquidity.assert_not_called()
    contracts.manager.masterchef.stake_lp.assert_not_called()


def test_summary_links_to_explorer(compounder):
    compounder.run()
    compounder.print_summary()

    output = compounder.console.file.getvalue()
    assert f"{EXPLORER}0x{'04' * 32}" in output
    assert 'Stake LP' in output


def test_main_exits_non_zero_on_config_error(monkeypatch):
    def broken_config():
        raise ValueError('Missing MNEMONIC in environment')

    monkeypatch.setattr(compounder_module, 'load_config', broken_config)

    with pytest.raises(SystemExit) as excinfo:
        compounder_module.main()
    assert excinfo.value.code == 1


def test_main_prints_steps_done_before_failure(compounder, contracts, monkeypatch):
    contracts.manager.router.add_liquidity.side_effect = RuntimeError('execution reverted')
    monkeypatch.setattr(compounder_module, 'load_config', lambda: {'global': {}})
    monkeypatch.setattr(compounder_module, 'setup_logging', lambda config: None)
    monkeypatch.setattr(Compounder, 'from_config', staticmethod(lambda config: compounder))

    with pytest.raises(SystemExit) as excinfo:
        compounder_module.main()

    assert excinfo.value.code == 1
    output = compounder.console.file.getvalue()
    assert 'Claim rewards' in output
    assert f"{EXPLORER}0x{'02' * 32}" in output
    assert 'Stake LP' not in output


@pytest.mark.filterwarnings('ignore::RuntimeWarning')
def test_run_as_script_logs_to_files(env, contracts, log_dir, monkeypatch):
    monkeypatch.setattr('compounder.rpc.connect', lambda node_url: MagicMock())
    monkeypatch.setattr('compounder.contracts.init_contracts', lambda w3, config, tx_builder: contracts)

    runpy.run_module('compounder.compounder', run_name='__main__')

    text = (log_dir / 'compounder.log').read_text()
    assert 'compounder.compounder - You have' in text
    assert 'DINO in your wallet' in text
    contracts.manager.masterchef.stake_lp.assert_called_once()
