"""
saveVerdict encoding, server-side submission guards and wallet error messages.
"""
import pytest
from web3 import Web3

from agent_jury.core.chain import CHAIN_ID, CONTRACT_ADDRESS
from agent_jury.models.verdict import SaveVerdictRequest
from agent_jury.services.chain_service import (
    ChainNotConfiguredError,
    ChainService,
    ChainTransactionError,
    describe_wallet_error,
    hash_case_text,
)

TEST_PRIVATE_KEY = "0x" + "11" * 32


def make_request(case_text: str = "A marketplace for hackathon teammates") -> SaveVerdictRequest:
    return SaveVerdictRequest(
        case_text=case_text,
        agents={
            "feasibility": {"score": 78},
            "innovation": {"score": 65},
            "risk": {"score": 25},
        },
        final_score=73,
        short_verdict="Ship MVP",
    )


def test_hash_case_text_is_keccak256():
    assert hash_case_text("") == "0xc5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"


def test_prepare_encodes_save_verdict_call():
    prepared = ChainService(private_key="").prepare_save_verdict(make_request())

    selector = Web3.to_hex(Web3.keccak(text="saveVerdict(bytes32,uint8,uint8,uint8,uint8,string)")[:4])
    assert prepared.data.startswith(selector)
    assert prepared.to == Web3.to_checksum_address(CONTRACT_ADDRESS)
    assert prepared.chain_id == CHAIN_ID
    assert prepared.case_hash == hash_case_text("A marketplace for hackathon teammates")
    assert prepared.args == {
        "caseHash": prepared.case_hash,
        "feasibility": 78,
        "innovation": 65,
        "risk": 25,
        "finalScore": 73,
        "shortVerdict": "Ship MVP",
    }
    # The hash is embedded right after the selector
    assert prepared.data[10:74] == prepared.case_hash[2:]


def test_submit_requires_private_key():
    with pytest.raises(ChainNotConfiguredError):
        ChainService(private_key="").submit_save_verdict(make_request())


def test_submit_maps_insufficient_funds(monkeypatch):
    class FakeFunction:
        def build_transaction(self, params):
            raise ValueError("insufficient funds for gas * price + value")

    class FakeFunctions:
        def saveVerdict(self, *args):
            return FakeFunction()

    class FakeContract:
        functions = FakeFunctions()

    class FakeEth:
        def contract(self, address=None, abi=None):
            return FakeContract()

        def get_transaction_count(self, address):
            return 0

    class FakeWeb3:
        eth = FakeEth()

        def is_connected(self):
            return True

    service = ChainService(private_key=TEST_PRIVATE_KEY, rpc_urls=["http://rpc"], web3_factory=lambda url: FakeWeb3())

    with pytest.raises(ChainTransactionError, match="Insufficient MON balance"):
        service.submit_save_verdict(make_request())


def test_submit_fails_when_no_rpc_is_connected():
    class OfflineWeb3:
        def is_connected(self):
            return False

    service = ChainService(private_key=TEST_PRIVATE_KEY, rpc_urls=["http://a", "http://b"], web3_factory=lambda url: OfflineWeb3())

    with pytest.raises(ChainTransactionError, match="Unable to reach"):
        service.submit_save_verdict(make_request())


@pytest.mark.parametrize("raw, expected", [
    ("MetaMask Tx Signature: User denied transaction signature.", "Transaction was rejected in the wallet."),
    ("user rejected action (action=\"sendTransaction\", code=ACTION_REJECTED)", "Transaction was rejected in the wallet."),
    ("insufficient funds for intrinsic transaction cost", "Insufficient MON balance to pay for gas."),
    ("nonce too low", "nonce too low"),
])
def test_describe_wallet_error(raw, expected):
    assert describe_wallet_error(Exception(raw)) == expected


def test_save_request_rounds_fractional_scores():
    request = SaveVerdictRequest(
        case_text="idea",
        agents={
            "feasibility": {"score": 78.4, "pros": ["Quick to build"]},
            "innovation": {"score": 64.5},
            "risk": {"score": 25.0},
        },
        final_score=72.6,
        short_verdict="Ship MVP",
    )

    assert request.agents.feasibility.score == 78
    assert request.agents.innovation.score == 65
    assert request.agents.risk.score == 25
    assert request.final_score == 73


def test_save_request_rejects_scores_outside_uint8_range_after_rounding():
    with pytest.raises(ValueError):
        SaveVerdictRequest(
            case_text="idea",
            agents={"feasibility": {"score": 100.6}, "innovation": {"score": 1}, "risk": {"score": 1}},
            final_score=50,
            short_verdict="Iterate First",
        )


def test_submit_rejects_invalid_private_key():
    service = ChainService(private_key="0xnothex", rpc_urls=["http://rpc"], web3_factory=lambda url: pytest.fail("must not connect"))

    with pytest.raises(ChainTransactionError, match="not a valid private key"):
        service.submit_save_verdict(make_request())
