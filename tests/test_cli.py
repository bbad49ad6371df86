import pytest
from web3 import Web3

import config
import timelock
from data_fetchers.timelock_client import TimelockClient
from conftest import NOW, FakeTimelockClient, cancelled, executed, pid, scheduled


@pytest.fixture(autouse=True)
def offline_config(monkeypatch):
    monkeypatch.setattr(config, 'load_dotenv', lambda: None)
    for key in ('TIMELOCK_NETWORK', 'WEB3_PROVIDER_URI', 'TIMELOCK_ADDRESS', 'TIMELOCK_MAX_WORKERS'):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr('utils.current_timestamp', lambda: NOW)


def chain():
    events = [
        scheduled(0xAA, block=500_000),
        scheduled(0xBB, block=500_001),
        scheduled(0xCC, block=500_002),
        executed(0xAA, block=500_010),
        cancelled(0xCC, block=500_011),
    ]
    timestamps = {pid(0xAA): NOW - 5, pid(0xBB): NOW + 500, pid(0xCC): NOW + 500}
    return FakeTimelockClient(events, timestamps=timestamps, head=500_100, fails=lambda lo, hi: hi - lo > 30)


def test_lists_all_proposals(capsys):
    assert timelock.main(['proposals'], client=chain()) == 0
    out = capsys.readouterr().out
    assert out.count(timelock.SEPARATOR) == 3
    assert f"id: {'aa' * 32}" in out
    assert 'status: executed' in out
    assert 'status: pending' in out
    assert 'status: cancelled' in out


def test_from_block_defaults_to_deployment_block():
    client = chain()
    timelock.main(['proposals'], client=client)
    assert client.queries[0][0] == 0x65c0c
    assert client.head_calls == 1


def test_filters_hide_statuses(capsys):
    assert timelock.main(['proposals', '--no-done', '--no-cancel'], client=chain()) == 0
    out = capsys.readouterr().out
    assert out.count(timelock.SEPARATOR) == 1
    assert f"id: {'bb' * 32}" in out


def test_explicit_hex_range(capsys):
    client = chain()
    assert timelock.main(['proposals', '-f', '500000', '-t', '0x7a130'], client=client) == 0
    assert client.queries[0] == (500_000, 500_016)
    assert client.head_calls == 0


def test_consistency_violation_exits_non_zero(capsys):
    assert timelock.main(['proposals', '--from-block', '500005'], client=chain()) == 1
    assert capsys.readouterr().out == ''


def test_min_delay(capsys):
    assert timelock.main(['min-delay'], client=FakeTimelockClient(min_delay=86400)) == 0
    assert capsys.readouterr().out.strip() == '86400'


def test_unknown_role_exits_non_zero(capsys):
    client = TimelockClient(Web3(), '0x4214611Be6cA4E337b37e192abF076F715Af4CaE')
    account = '0x000000000000000000000000000000000000dEaD'
    assert timelock.main(['grant-role', '9', account], client=client) == 1
    assert capsys.readouterr().out == ''


def test_cancel_prints_calldata(capsys):
    client = TimelockClient(Web3(), '0x4214611Be6cA4E337b37e192abF076F715Af4CaE')
    assert timelock.main(['cancel', '0x' + 'ab' * 32], client=client) == 0
    assert capsys.readouterr().out.strip().endswith('ab' * 32)


def test_bad_proposal_id_is_rejected():
    with pytest.raises(SystemExit):
        timelock.main(['cancel', '0x1234'], client=FakeTimelockClient())


def test_is_proposer(capsys):
    account = '0x000000000000000000000000000000000000dEaD'
    client = FakeTimelockClient(roles={'PROPOSER_ROLE': {account}})
    assert timelock.main(['is-proposer', account], client=client) == 0
    assert timelock.main(['is-executor', account], client=client) == 0
    assert capsys.readouterr().out.split() == ['True', 'False']


def test_execute_prints_calldata(capsys):
    client = TimelockClient(Web3(), '0x4214611Be6cA4E337b37e192abF076F715Af4CaE')
    target = '0x000000000000000000000000000000000000dEaD'
    argv = ['execute', target, '0', '0x1234', '0x' + '00' * 32, '0x' + '05' * 32]
    assert timelock.main(argv, client=client) == 0
    calldata = capsys.readouterr().out.strip()
    selector = bytes(Web3.keccak(text='execute(address,uint256,bytes,bytes32,bytes32)')[:4]).hex()
    assert calldata.startswith('0x' + selector)
    assert calldata == client.execute_calldata(target, 0, b'\x12\x34', b'\x00' * 32, b'\x05' * 32)
