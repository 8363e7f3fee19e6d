"""
Program Derived Address (PDA) Derivation

Pure functions computing the deterministic accounts the MintMe program expects.
Every derivation is reproducible offline: identical inputs always yield the
same (address, bump) pair. Seeds longer than the runtime limit raise
AddressDerivationError instead of being truncated.

Seeds used by the program:
- payment account:     ["payment_fixed"]
- mint:                ["token-mint", payer, name, unique_key]
- network fee config:  ["network_fee_config"]
- revoke fee config:   ["revoke_fee_config"]
- metadata (Metaplex): ["metadata", metadata_program, mint] under the metadata program
"""
import asyncio
from typing import List, Optional, Sequence, Union

from solders.pubkey import Pubkey
from spl.token.instructions import get_associated_token_address

from mintme.constants import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    DEFAULT_UNIQUE_KEY,
    MAX_SEED_LENGTH,
    MAX_SEEDS,
    METADATA_SEED,
    MINT_SEED,
    NETWORK_FEE_CONFIG_SEED,
    PAYMENT_SEED,
    REVOKE_FEE_CONFIG_SEED,
    TOKEN_METADATA_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)
from mintme.errors import AddressDerivationError
from mintme.schemas import DerivedAddress, DerivedAddressSet

PubkeyLike = Union[Pubkey, str]


def to_pubkey(value: PubkeyLike, label: str = "public key") -> Pubkey:
    """Returns *value* as a Pubkey, decoding base-58 strings."""
    if isinstance(value, Pubkey):
        return value
    if isinstance(value, str):
        try:
            return Pubkey.from_string(value)
        except ValueError as e:
            raise AddressDerivationError(f"Invalid {label} '{value}': {e}")
    raise AddressDerivationError(f"Invalid {label}: expected a Pubkey or base-58 string, got {type(value).__name__}")


def _seed_bytes(seed: Union[bytes, str, Pubkey]) -> bytes:
    if isinstance(seed, Pubkey):
        return bytes(seed)
    if isinstance(seed, str):
        return seed.encode("utf-8")
    if isinstance(seed, (bytes, bytearray)):
        return bytes(seed)
    raise AddressDerivationError(f"Invalid seed {seed!r}: expected bytes, str or Pubkey, got {type(seed).__name__}")


def _find(seeds: Sequence[Union[bytes, str, Pubkey]], program_id: PubkeyLike) -> DerivedAddress:
    raw: List[bytes] = [_seed_bytes(s) for s in seeds]
    if len(raw) > MAX_SEEDS:
        raise AddressDerivationError(f"Too many seeds: {len(raw)} (maximum is {MAX_SEEDS})")
    for index, seed in enumerate(raw):
        if len(seed) > MAX_SEED_LENGTH:
            raise AddressDerivationError(
                f"Seed {index} ({seed[:16]!r}...) is {len(seed)} bytes; the maximum is {MAX_SEED_LENGTH}"
            )
    address, bump = Pubkey.find_program_address(raw, to_pubkey(program_id, "program id"))
    return DerivedAddress(address, bump)


def derive_payment_address(program_id: PubkeyLike) -> DerivedAddress:
    """Protocol fee/escrow account of the program."""
    return _find([PAYMENT_SEED], program_id)


def derive_mint_address(
    program_id: PubkeyLike,
    payer: PubkeyLike,
    name: str,
    unique_key: Optional[str] = None,
) -> DerivedAddress:
    """
    Mint account for a token created by *payer*.

    The unique key lets one payer create several tokens with the same name.
    When it is omitted the documented default "mintme.dev" is used, so retries
    of the same request always target the same mint.
    """
    if not unique_key:
        unique_key = DEFAULT_UNIQUE_KEY
    return _find([MINT_SEED, to_pubkey(payer, "payer"), name, unique_key], program_id)


def derive_associated_token_account(mint: PubkeyLike, owner: PubkeyLike) -> DerivedAddress:
    """Canonical associated token account of *owner* for *mint*."""
    mint_key = to_pubkey(mint, "mint")
    owner_key = to_pubkey(owner, "owner")
    address = get_associated_token_address(owner_key, mint_key)
    # Same seeds as the associated token program, to report the bump as well.
    _, bump = Pubkey.find_program_address(
        [bytes(owner_key), bytes(TOKEN_PROGRAM_ID), bytes(mint_key)], ASSOCIATED_TOKEN_PROGRAM_ID
    )
    return DerivedAddress(address, bump)


def derive_metadata_address(mint: PubkeyLike) -> DerivedAddress:
    """Metaplex metadata account of *mint*."""
    return _find(
        [METADATA_SEED, TOKEN_METADATA_PROGRAM_ID, to_pubkey(mint, "mint")],
        TOKEN_METADATA_PROGRAM_ID,
    )


def derive_network_fee_config_address(program_id: PubkeyLike) -> DerivedAddress:
    return _find([NETWORK_FEE_CONFIG_SEED], program_id)


def derive_revoke_fee_config_address(program_id: PubkeyLike) -> DerivedAddress:
    return _find([REVOKE_FEE_CONFIG_SEED], program_id)


async def derive_token_addresses(
    program_id: PubkeyLike,
    payer: PubkeyLike,
    name: str,
    unique_key: Optional[str] = None,
) -> DerivedAddressSet:
    """
    Derives every address the create and revoke instructions need.

    The program-level accounts and the mint are independent and are derived
    concurrently; the token account and metadata depend on the mint.
    """
    program_key = to_pubkey(program_id, "program id")
    payer_key = to_pubkey(payer, "payer")

    payment, mint, network_fee_config, revoke_fee_config = await asyncio.gather(
        asyncio.to_thread(derive_payment_address, program_key),
        asyncio.to_thread(derive_mint_address, program_key, payer_key, name, unique_key),
        asyncio.to_thread(derive_network_fee_config_address, program_key),
        asyncio.to_thread(derive_revoke_fee_config_address, program_key),
    )
    token_account, metadata = await asyncio.gather(
        asyncio.to_thread(derive_associated_token_account, mint.address, payer_key),
        asyncio.to_thread(derive_metadata_address, mint.address),
    )
    return DerivedAddressSet(
        mint=mint,
        payment=payment,
        token_account=token_account,
        metadata=metadata,
        network_fee_config=network_fee_config,
        revoke_fee_config=revoke_fee_config,
    )
