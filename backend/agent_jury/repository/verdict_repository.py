from agent_jury.core.chain import CONTRACT_ABI, CONTRACT_ADDRESS, RPC_URLS, address_explorer_url
from agent_jury.core.config import CHAIN_RPC_TIMEOUT_SECONDS, HISTORY_LIMIT
from agent_jury.models.verdict import VerdictRecord
from datetime import datetime, timezone
from web3 import Web3


class ChainUnavailableError(Exception):
    """Raised when none of the configured RPC endpoints answers."""


class VerdictNotFoundError(Exception):
    """Raised when a verdict id is beyond the on-chain count."""


def connect_contract(rpc_url: str):
    """Bind the AgentJury contract to a single RPC endpoint."""
    w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": CHAIN_RPC_TIMEOUT_SECONDS}))
    return w3.eth.contract(address=Web3.to_checksum_address(CONTRACT_ADDRESS), abi=CONTRACT_ABI)


class VerdictRepository:
    """
    Read-only access to verdicts stored by the AgentJury contract.
    """

    def __init__(self, rpc_urls: list = None, contract_factory=None):
        self.rpc_urls = list(rpc_urls or RPC_URLS)
        self.contract_factory = contract_factory or connect_contract

    def get_verdict_count(self) -> int:
        _, count = self._first_reachable()
        return count

    def get_verdict(self, verdict_id: int) -> VerdictRecord:
        """
        Get a single verdict by its on-chain id.

        Raises:
            VerdictNotFoundError: If the id is not below the verdict count
            ChainUnavailableError: If no RPC endpoint answers
        """
        contract, count = self._first_reachable()
        if verdict_id < 0 or verdict_id >= count:
            raise VerdictNotFoundError(f"Verdict #{verdict_id} does not exist (count: {count})")
        try:
            raw = contract.functions.getVerdict(verdict_id).call()
        except Exception as e:
            raise ChainUnavailableError(f"Failed to fetch verdict #{verdict_id}: {str(e)}") from e
        return self._to_record(raw)

    def get_history(self, limit: int = HISTORY_LIMIT) -> list:
        """
        Get the most recent verdicts, newest first.

        Records that fail to load are skipped so that one bad entry does not
        hide the rest of the list.

        Args:
            limit (int): Maximum number of verdicts to fetch

        Returns:
            list: VerdictRecord items, empty when nothing was saved yet
        """
        contract, count = self._first_reachable()
        if count == 0:
            return []

        oldest = max(count - limit, 0)
        verdicts = []
        for verdict_id in range(count - 1, oldest - 1, -1):
            try:
                raw = contract.functions.getVerdict(verdict_id).call()
                verdicts.append(self._to_record(raw))
            except Exception as e:
                print(f"[Chain] Skipping verdict #{verdict_id}: {str(e)}")

        print(f"[Chain] Loaded {len(verdicts)} of {count - oldest} recent verdicts (total on-chain: {count})")
        return verdicts

    def _first_reachable(self) -> tuple:
        """Return (contract, verdict count) from the first RPC URL that answers."""
        for rpc_url in self.rpc_urls:
            try:
                contract = self.contract_factory(rpc_url)
                count = int(contract.functions.getVerdictCount().call())
                return contract, count
            except Exception as e:
                print(f"[Chain] RPC {rpc_url} unavailable: {str(e)}")

        raise ChainUnavailableError("Unable to reach any Monad Testnet RPC endpoint")

    def _to_record(self, raw) -> VerdictRecord:
        verdict_id, case_hash, feasibility, innovation, risk, final_score, short_verdict, submitter, timestamp = raw

        if isinstance(case_hash, (bytes, bytearray)):
            case_hash = "0x" + bytes(case_hash).hex()

        return VerdictRecord(
            id=int(verdict_id),
            case_hash=str(case_hash),
            feasibility=int(feasibility),
            innovation=int(innovation),
            risk=int(risk),
            final_score=int(final_score),
            short_verdict=str(short_verdict),
            submitter=str(submitter),
            timestamp=int(timestamp),
            formatted_time=datetime.fromtimestamp(int(timestamp), tz=timezone.utc).isoformat(),
            explorer_url=address_explorer_url(str(submitter)),
        )
