import os
import logging
from typing import Any, Dict, Optional
from solders.pubkey import Pubkey
from dotenv import load_dotenv

from mintme.constants import DEFAULT_PROGRAM_ID, DEFAULT_UNIQUE_KEY, DEFAULT_URI
from mintme.errors import ConfigurationError
from mintme.schemas import RevokeConfig, SimpleTokenConfig

"""
Configuration Management for the MintMe SDK

This module loads the SDK settings from environment variables with sensible
defaults and holds the documented defaults used by the "simple" entry points.

Configuration Sources (in order of precedence):
1. Values passed explicitly to an operation
2. Environment variables (a local .env file is loaded on import)
3. Default values defined in this module

Environment Variables:
    RPC_ENDPOINT: Solana RPC endpoint URL
    MINTME_CLUSTER: Cluster name used in hints (devnet, testnet, mainnet-beta)
    MINTME_PROGRAM_ID: Address of the MintMe token program
    MINTME_IDL_PATH: Local IDL file tried when no IDL source is given
    MINTME_WALLET_PATH: Solana CLI keypair file used by the simple helpers
    MIN_CREATE_BALANCE_LAMPORTS: Balance required before creating a token
    REVOKE_FEE_LAMPORTS: Protocol fee charged by the revoke instruction
    CONFIRM_TIMEOUT_SECONDS: How long to wait for confirmation
    CONFIRM_POLL_INTERVAL_SECONDS: Delay between signature status checks
"""

# Set up logger
logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()


def _get_env_str(key: str, default: str, required: bool = False) -> str:
    """Get environment variable as string with validation."""
    value = os.getenv(key, default)
    if required and not value:
        raise ConfigurationError(f"Required environment variable {key} is not set")
    return value


def _get_env_int(key: str, default: int, min_val: Optional[int] = None, max_val: Optional[int] = None) -> int:
    """Get environment variable as integer with validation."""
    try:
        value = int(os.getenv(key, str(default)))
    except ValueError:
        raise ConfigurationError(f"Environment variable {key} must be a valid integer")
    if min_val is not None and value < min_val:
        raise ConfigurationError(f"Environment variable {key} must be >= {min_val}")
    if max_val is not None and value > max_val:
        raise ConfigurationError(f"Environment variable {key} must be <= {max_val}")
    return value


def _get_env_float(key: str, default: float, min_val: Optional[float] = None) -> float:
    """Get environment variable as float with validation."""
    try:
        value = float(os.getenv(key, str(default)))
    except ValueError:
        raise ConfigurationError(f"Environment variable {key} must be a valid float")
    if min_val is not None and value < min_val:
        raise ConfigurationError(f"Environment variable {key} must be >= {min_val}")
    return value


def _get_env_pubkey(key: str, default: str) -> Pubkey:
    """Get environment variable as Pubkey with validation."""
    value = os.getenv(key, default)
    try:
        return Pubkey.from_string(value)
    except ValueError as e:
        raise ConfigurationError(f"Environment variable {key} must be a valid public key: {e}")


# --- Solana Configuration ---
try:
    RPC_ENDPOINT = _get_env_str("RPC_ENDPOINT", "https://api.devnet.solana.com", required=True)
    CLUSTER = _get_env_str("MINTME_CLUSTER", "devnet")
    COMMITMENT = "confirmed"

    # --- Program Configuration ---
    PROGRAM_ID = _get_env_pubkey("MINTME_PROGRAM_ID", DEFAULT_PROGRAM_ID)
    DEFAULT_IDL_PATH = _get_env_str("MINTME_IDL_PATH", "./idl.json")

    # --- Wallet ---
    DEFAULT_WALLET_PATH = _get_env_str("MINTME_WALLET_PATH", "./wallet.json")

    # --- Fees ---
    MIN_CREATE_BALANCE_LAMPORTS = _get_env_int("MIN_CREATE_BALANCE_LAMPORTS", 10_000_000, min_val=0)
    REVOKE_FEE_LAMPORTS = _get_env_int("REVOKE_FEE_LAMPORTS", 10_000_000, min_val=0)

    # --- Confirmation ---
    CONFIRM_TIMEOUT_SECONDS = _get_env_float("CONFIRM_TIMEOUT_SECONDS", 60.0, min_val=0.0)
    CONFIRM_POLL_INTERVAL_SECONDS = _get_env_float("CONFIRM_POLL_INTERVAL_SECONDS", 2.0, min_val=0.0)

    logger.debug("Configuration loaded successfully")

except ConfigurationError as e:
    logger.error(f"Configuration error: {e}")
    raise


# --- Defaults for the simple helpers ---
DEFAULT_SIMPLE_CONFIG = SimpleTokenConfig(
    token_name="MINTME.DEV",
    token_symbol="MTM",
    unique_key=DEFAULT_UNIQUE_KEY,
    decimals=9,
    initial_supply=1_000_000_000,
    uri=DEFAULT_URI,
    revoke_mint=False,
    revoke_freeze=False,
    partner_wallet="7viHj1u6aQS9Nmc55FokX3B9NbDJUPwMYQvKgBfWeYXE",
    partner_amount=0,
    wallet_path=DEFAULT_WALLET_PATH,
    connection=RPC_ENDPOINT,
    cluster=CLUSTER,
)

DEFAULT_REVOKE_CONFIG = RevokeConfig(
    token_name="MINTME.DEV",
    unique_key=DEFAULT_UNIQUE_KEY,
    wallet_path=DEFAULT_WALLET_PATH,
    connection=RPC_ENDPOINT,
    cluster=CLUSTER,
)


def merge_config(defaults, overrides: Optional[Dict[str, Any]] = None):
    """
    Returns a copy of *defaults* with *overrides* applied.

    The merge is pure and does no value validation; unknown keys are rejected
    so that a typo does not silently fall back to a default.

    Raises:
        ConfigurationError: If an override names a field the config does not have.
    """
    overrides = {k: v for k, v in (overrides or {}).items() if v is not None}
    unknown = set(overrides) - set(type(defaults).model_fields)
    if unknown:
        raise ConfigurationError(f"Unknown configuration option(s): {', '.join(sorted(unknown))}")
    return defaults.model_copy(update=overrides)
