from agent_jury.core.config import MONAD_RPC_URLS

# Monad Testnet chain parameters (shape expected by wallet_addEthereumChain)
CHAIN_ID = 10143
CHAIN_ID_HEX = hex(CHAIN_ID)  # 0x279f
CHAIN_NAME = "Monad Testnet"
NATIVE_CURRENCY = {"name": "MON", "symbol": "MON", "decimals": 18}

DEFAULT_RPC_URLS = [
    "https://testnet-rpc.monad.xyz/",
    "https://rpc.ankr.com/monad_testnet",
    "https://monad-testnet.drpc.org",
]

# Comma-separated override from the environment, tried in order
RPC_URLS = [url.strip() for url in MONAD_RPC_URLS.split(",") if url.strip()] or DEFAULT_RPC_URLS

EXPLORER_URL = "https://testnet.monadexplorer.com/"

# AgentJury contract deployed on Monad Testnet
CONTRACT_ADDRESS = "0x9429A166CCE36262A9Dec2BE90C43AE685fB415B"

CONTRACT_ABI = [
    {
        "type": "function",
        "name": "saveVerdict",
        "inputs": [
            {"name": "caseHash", "type": "bytes32"},
            {"name": "feasibility", "type": "uint8"},
            {"name": "innovation", "type": "uint8"},
            {"name": "risk", "type": "uint8"},
            {"name": "finalScore", "type": "uint8"},
            {"name": "shortVerdict", "type": "string"},
        ],
        "outputs": [{"name": "id", "type": "uint256"}],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "getVerdictCount",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "getVerdict",
        "inputs": [{"name": "id", "type": "uint256"}],
        "outputs": [
            {
                "name": "",
                "type": "tuple",
                "components": [
                    {"name": "id", "type": "uint256"},
                    {"name": "caseHash", "type": "bytes32"},
                    {"name": "feasibility", "type": "uint8"},
                    {"name": "innovation", "type": "uint8"},
                    {"name": "risk", "type": "uint8"},
                    {"name": "finalScore", "type": "uint8"},
                    {"name": "shortVerdict", "type": "string"},
                    {"name": "submitter", "type": "address"},
                    {"name": "timestamp", "type": "uint256"},
                ],
            }
        ],
        "stateMutability": "view",
    },
    {
        "type": "event",
        "name": "VerdictSaved",
        "inputs": [
            {"name": "id", "type": "uint256", "indexed": True},
            {"name": "finalScore", "type": "uint8", "indexed": False},
        ],
        "anonymous": False,
    },
]


def chain_params() -> dict:
    """Public chain parameters for the browser wallet."""
    return {
        "chainId": CHAIN_ID_HEX,
        "chainName": CHAIN_NAME,
        "nativeCurrency": NATIVE_CURRENCY,
        "rpcUrls": RPC_URLS[:1],
        "blockExplorerUrls": [EXPLORER_URL],
        "contractAddress": CONTRACT_ADDRESS,
    }


def tx_explorer_url(tx_hash: str) -> str:
    return f"{EXPLORER_URL}tx/{tx_hash}"


def address_explorer_url(address: str) -> str:
    return f"{EXPLORER_URL}address/{address}"
