from agent_jury.core.chain import CHAIN_ID, CONTRACT_ABI, CONTRACT_ADDRESS, RPC_URLS, tx_explorer_url
from agent_jury.core.config import CHAIN_PRIVATE_KEY, CHAIN_RPC_TIMEOUT_SECONDS, CHAIN_RECEIPT_TIMEOUT_SECONDS
from agent_jury.models.verdict import PreparedTransaction, SaveVerdictRequest, SaveVerdictResponse
from eth_account import Account
from web3 import Web3
from web3.logs import DISCARD

# Substrings of wallet / node errors and the message shown to the user
WALLET_ERROR_MESSAGES = [
    (("user rejected", "user denied", "action_rejected"), "Transaction was rejected in the wallet."),
    (("insufficient funds",), "Insufficient MON balance to pay for gas."),
]


class ChainNotConfiguredError(Exception):
    """Raised when server-side submission is requested without a signing key."""


class ChainTransactionError(Exception):
    """Raised when a saveVerdict transaction cannot be sent or confirmed."""


def describe_wallet_error(err) -> str:
    """Map a wallet or node error to a short user-facing message."""
    message = str(err)
    lowered = message.lower()
    for markers, user_message in WALLET_ERROR_MESSAGES:
        if any(marker in lowered for marker in markers):
            return user_message
    return message


def hash_case_text(case_text: str) -> str:
    """keccak256 of the UTF-8 case text as a 0x-prefixed hex string."""
    return Web3.to_hex(Web3.keccak(text=case_text))


def connect_web3(rpc_url: str):
    return Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": CHAIN_RPC_TIMEOUT_SECONDS}))


class ChainService:
    """
    Records verdicts on the AgentJury contract.

    The browser wallet normally signs the transaction itself from the
    calldata returned by prepare_save_verdict. When CHAIN_PRIVATE_KEY is
    configured, submit_save_verdict signs and sends it from the server.
    """

    def __init__(self, private_key: str = None, rpc_urls: list = None, web3_factory=None):
        self.private_key = private_key if private_key is not None else CHAIN_PRIVATE_KEY
        self.rpc_urls = list(rpc_urls or RPC_URLS)
        self.web3_factory = web3_factory or connect_web3
        self.address = Web3.to_checksum_address(CONTRACT_ADDRESS)

    @property
    def can_submit(self) -> bool:
        return bool(self.private_key)

    def prepare_save_verdict(self, request: SaveVerdictRequest) -> PreparedTransaction:
        """
        Encode the saveVerdict call for the browser wallet.

        Args:
            request (SaveVerdictRequest): Case text, agent scores and verdict

        Returns:
            PreparedTransaction: Target address, calldata and decoded arguments
        """
        args = self._call_args(request)
        encoder = Web3().eth.contract(address=self.address, abi=CONTRACT_ABI)
        data = encoder.encode_abi("saveVerdict", args=list(args.values()))

        readable_args = dict(args)
        readable_args["caseHash"] = hash_case_text(request.case_text)

        return PreparedTransaction(
            to=self.address,
            data=data,
            chain_id=CHAIN_ID,
            case_hash=readable_args["caseHash"],
            args=readable_args,
        )

    def submit_save_verdict(self, request: SaveVerdictRequest) -> SaveVerdictResponse:
        """
        Sign and send saveVerdict with the server key and wait for 1 confirmation.

        Returns:
            SaveVerdictResponse: Transaction hash and the id from the VerdictSaved event

        Raises:
            ChainNotConfiguredError: If no signing key is configured
            ChainTransactionError: If sending or confirmation fails
        """
        if not self.can_submit:
            raise ChainNotConfiguredError("On-chain submission is not configured on this server (CHAIN_PRIVATE_KEY is not set).")

        args = self._call_args(request)
        try:
            account = Account.from_key(self.private_key)
        except (ValueError, TypeError) as e:
            print(f"[Chain] Invalid CHAIN_PRIVATE_KEY: {type(e).__name__}")
            raise ChainTransactionError("CHAIN_PRIVATE_KEY is not a valid private key.") from e

        w3 = self._connect()

        try:
            contract = w3.eth.contract(address=self.address, abi=CONTRACT_ABI)
            tx = contract.functions.saveVerdict(*args.values()).build_transaction({
                "from": account.address,
                "nonce": w3.eth.get_transaction_count(account.address),
                "chainId": CHAIN_ID,
            })
            signed = account.sign_transaction(tx)
            tx_hash = w3.eth.send_raw_transaction(signed.raw_transaction)
            print(f"[Chain] Sent saveVerdict transaction {Web3.to_hex(tx_hash)}")
            receipt = w3.eth.wait_for_transaction_receipt(tx_hash, timeout=CHAIN_RECEIPT_TIMEOUT_SECONDS)
            succeeded = receipt["status"] == 1
            if succeeded:
                events = contract.events.VerdictSaved().process_receipt(receipt, errors=DISCARD)
                verdict_id = int(events[0]["args"]["id"]) if events else 0
                tx_hash_hex = Web3.to_hex(receipt["transactionHash"])
        except Exception as e:
            print(f"[Chain] saveVerdict failed: {str(e)}")
            raise ChainTransactionError(describe_wallet_error(e)) from e

        if not succeeded:
            raise ChainTransactionError("Transaction reverted on-chain.")

        print(f"[Chain] Verdict #{verdict_id} confirmed in {tx_hash_hex}")
        return SaveVerdictResponse(
            tx_hash=tx_hash_hex,
            verdict_id=verdict_id,
            explorer_url=tx_explorer_url(tx_hash_hex),
        )

    def _call_args(self, request: SaveVerdictRequest) -> dict:
        # Keys follow the ABI parameter order of saveVerdict
        return {
            "caseHash": Web3.keccak(text=request.case_text),
            "feasibility": request.agents.feasibility.score,
            "innovation": request.agents.innovation.score,
            "risk": request.agents.risk.score,
            "finalScore": request.final_score,
            "shortVerdict": request.short_verdict,
        }

    def _connect(self):
        for rpc_url in self.rpc_urls:
            try:
                w3 = self.web3_factory(rpc_url)
                if w3.is_connected():
                    return w3
            except Exception as e:
                print(f"[Chain] RPC {rpc_url} unavailable: {str(e)}")
        raise ChainTransactionError("Unable to reach any Monad Testnet RPC endpoint")
