"""
Fixed addresses and seed strings shared by the MintMe program and its clients.
"""

from typing import Final

from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID
from solders.sysvar import RENT
from spl.token.constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID

# Metaplex token metadata program
TOKEN_METADATA_PROGRAM_ID: Final[Pubkey] = Pubkey.from_string(
    "metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s"
)

DEFAULT_PROGRAM_ID: Final[str] = "4eujMtc4dqftZ2ZZQbH4RAMK7mjf9DGpRMpWhLxYr7hB"

# PDA seeds
PAYMENT_SEED: Final[bytes] = b"payment_fixed"
MINT_SEED: Final[bytes] = b"token-mint"
METADATA_SEED: Final[bytes] = b"metadata"
NETWORK_FEE_CONFIG_SEED: Final[bytes] = b"network_fee_config"
REVOKE_FEE_CONFIG_SEED: Final[bytes] = b"revoke_fee_config"

MAX_SEED_LENGTH: Final[int] = 32
MAX_SEEDS: Final[int] = 16

# Used when the caller does not supply a unique key for the mint seed.
DEFAULT_UNIQUE_KEY: Final[str] = "mintme.dev"
DEFAULT_URI: Final[str] = "https://ipfs.mintme.dev/metadata.json"

LAMPORTS_PER_SOL: Final[int] = 1_000_000_000
MAX_SUPPLY: Final[int] = 2**64 - 1
MAX_DECIMALS: Final[int] = 9

# Base fee charged per transaction signature.
LAMPORTS_PER_SIGNATURE: Final[int] = 5000

__all__ = [
    "ASSOCIATED_TOKEN_PROGRAM_ID",
    "DEFAULT_PROGRAM_ID",
    "DEFAULT_UNIQUE_KEY",
    "DEFAULT_URI",
    "LAMPORTS_PER_SIGNATURE",
    "LAMPORTS_PER_SOL",
    "MAX_DECIMALS",
    "MAX_SEED_LENGTH",
    "MAX_SEEDS",
    "MAX_SUPPLY",
    "METADATA_SEED",
    "MINT_SEED",
    "NETWORK_FEE_CONFIG_SEED",
    "PAYMENT_SEED",
    "RENT",
    "REVOKE_FEE_CONFIG_SEED",
    "SYSTEM_PROGRAM_ID",
    "TOKEN_METADATA_PROGRAM_ID",
    "TOKEN_PROGRAM_ID",
]
