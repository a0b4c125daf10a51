"""obol: minimal Arbitrum Sepolia client for balances, gas prices and ETH transfers."""

__version__ = "0.3.0"

__all__ = [
    # Pipeline
    "send_transfer",
    "Stage",
    "Outcome",
    "TransferResult",
    # Components
    "RpcEndpoint",
    "RetryPolicy",
    "GasPricer",
    "GasEstimator",
    "GasInfo",
    "get_gas_info",
    "NonceProvider",
    "BalanceChecker",
    "Submitter",
    "TransactionSigner",
    "build_transfer",
    "sign_transaction",
    # Models
    "TransactionRequest",
    "SignedTransaction",
    "TransactionReceipt",
    # Errors
    "ObolError",
    "ValidationError",
    "NetworkError",
    "RpcError",
    "InsufficientFundsError",
    "SubmissionError",
    "ConfirmationIndeterminate",
    # Units & addresses
    "format_units",
    "parse_amount",
    "validate_address",
    "explorer_url",
    # Constants
    "CHAIN_ID",
    "BASE_TRANSFER_GAS",
    # ECDSA Identity
    "generate_eoa",
    "get_account",
    "get_address",
    "load_private_key",
]

from .errors import (
    ConfirmationIndeterminate,
    InsufficientFundsError,
    NetworkError,
    ObolError,
    RpcError,
    SubmissionError,
    ValidationError,
)
from .utils import explorer_url, format_units, parse_amount, validate_address
from .sigil.eth import generate_eoa, get_account, get_address, load_private_key
from .pneuma.models import (
    Outcome,
    SignedTransaction,
    Stage,
    TransactionReceipt,
    TransactionRequest,
    TransferResult,
)
from .pneuma.retry import RetryPolicy
from .pneuma.rpc import CHAIN_ID, RpcEndpoint
from .pneuma.gas import BASE_TRANSFER_GAS, GasEstimator, GasInfo, GasPricer, get_gas_info
from .pneuma.account import BalanceChecker, NonceProvider
from .pneuma.tx import Submitter, TransactionSigner, build_transfer, sign_transaction
from .pneuma.transfer import send_transfer
