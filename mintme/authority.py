"""
Authority Revocation

Builds and submits the MintMe program's `revokeAuthority` instruction, which
permanently removes the mint and/or freeze authority of a token the payer
created. The program charges a revoke fee on top of the network fee, so the
payer's balance is checked before anything is sent.
"""
from typing import Any, Dict, Optional

from mintme.coder import build_instruction
from mintme.config import DEFAULT_REVOKE_CONFIG, PROGRAM_ID, REVOKE_FEE_LAMPORTS, merge_config
from mintme.constants import DEFAULT_UNIQUE_KEY, SYSTEM_PROGRAM_ID, TOKEN_PROGRAM_ID
from mintme.conversion import format_sol_amount
from mintme.errors import InputValidationError, InsufficientBalanceError, MintmeError
from mintme.idl import IdlSource, load_idl
from mintme.pda import derive_mint_address, derive_payment_address, derive_revoke_fee_config_address, to_pubkey
from mintme.results import SUBMISSION_ERRORS, failure_result
from mintme.schemas import OperationResult, OperationState
from mintme.solana_utils import estimate_fee, open_connection, prepare_message, send_and_confirm
from mintme.utils import LogFn, resolve_log_fn
from mintme.validation import validate_token_name
from mintme.wallet import resolve_identity


def _describe(revoke_mint: bool, revoke_freeze: bool) -> str:
    if revoke_mint and revoke_freeze:
        return "mint and freeze authorities"
    return "mint authority" if revoke_mint else "freeze authority"


async def revoke_authority(
    connection: Any,
    payer: Any,
    name: str,
    unique_key: Optional[str] = None,
    revoke_mint: bool = False,
    revoke_freeze: bool = False,
    program_id: Any = None,
    idl: IdlSource = None,
    revoke_fee_lamports: Optional[int] = None,
    logger: Optional[LogFn] = None,
) -> OperationResult:
    """
    Revokes the mint and/or freeze authority of the token *name* created by *payer*.

    The mint is re-derived from the payer, the name and the unique key, so the
    same values used at creation must be passed here.

    Raises:
        InputValidationError: If neither authority is selected or the name is invalid.
        InsufficientBalanceError: If the payer cannot cover the network and revoke fees.
        AddressDerivationError: If a seed is too long or a key is malformed.
        WalletLoadError: If the payer cannot be resolved.
    """
    log = resolve_log_fn(logger)

    identity = resolve_identity(payer)
    if not revoke_mint and not revoke_freeze:
        raise InputValidationError(["No authority specified: set revoke_mint and/or revoke_freeze"])
    name_check = validate_token_name(name)
    if not name_check.is_valid:
        raise InputValidationError([name_check.message])
    if not unique_key:
        log(f"Warning: No unique_key provided, using default '{DEFAULT_UNIQUE_KEY}'")
        unique_key = DEFAULT_UNIQUE_KEY

    program_key = to_pubkey(program_id or PROGRAM_ID, "program id")
    revoke_fee = REVOKE_FEE_LAMPORTS if revoke_fee_lamports is None else revoke_fee_lamports

    mint = derive_mint_address(program_key, identity.public_key, name, unique_key)
    payment = derive_payment_address(program_key)
    fee_config = derive_revoke_fee_config_address(program_key)
    log(f"Mint PDA: {mint.address}")
    log(f"Payment PDA: {payment.address}")
    log(f"Revoke Fee Config: {fee_config.address}")

    accounts = {
        "payer": identity.public_key,
        "mint": mint.address,
        "tokenProgram": TOKEN_PROGRAM_ID,
        "systemProgram": SYSTEM_PROGRAM_ID,
        "tokenPda": payment.address,
        "config": fee_config.address,
    }
    args = {
        "name": name,
        "uniqueKey": unique_key,
        "revokeMint": revoke_mint,
        "revokeFreeze": revoke_freeze,
    }

    conn, owned = open_connection(connection)
    program_idl = None
    try:
        program_idl = await load_idl(idl)
        instruction = build_instruction(program_idl, "revokeAuthority", program_key, accounts, args)
        message, blockhash = await prepare_message(conn, identity.public_key, [instruction])

        network_fee = await estimate_fee(conn, message)
        required = network_fee + revoke_fee
        balance = await conn.get_balance(identity.public_key)
        log(f"Balance: {format_sol_amount(balance)}")
        log(f"Estimated network fee: {format_sol_amount(network_fee, 6)}")
        log(f"Revoke fee: {format_sol_amount(revoke_fee)}")
        if balance < required:
            raise InsufficientBalanceError(
                f"Insufficient balance: {format_sol_amount(required, 6)} required, "
                f"{format_sol_amount(balance, 6)} available",
                required=required,
                balance=balance,
            )

        log(f"Revoking {_describe(revoke_mint, revoke_freeze)} for {name}...")
        signature = await send_and_confirm(conn, identity, message, blockhash)
    except SUBMISSION_ERRORS as e:
        return failure_result(e, log, "revoking authority", program_idl)
    finally:
        if owned:
            await conn.aclose()

    log(f"Revoked {_describe(revoke_mint, revoke_freeze)}: {signature}")
    return OperationResult(
        success=True,
        state=OperationState.confirmed,
        mint=str(mint.address),
        tx_signature=signature,
        token_name=name,
    )


async def revoke_authority_simple(config: Optional[Dict[str, Any]] = None, **overrides) -> OperationResult:
    """
    Revokes authorities using a partial configuration merged over the defaults.

    Every SDK error is returned as a failed OperationResult instead of being raised.
    """
    log = resolve_log_fn((config or {}).get("logger") or overrides.get("logger"))
    try:
        settings = merge_config(DEFAULT_REVOKE_CONFIG, {**(config or {}), **overrides})
        identity = resolve_identity(settings.wallet if settings.wallet is not None else settings.wallet_path)
        log(f"Address: {identity.public_key}")
        return await revoke_authority(
            settings.connection,
            identity,
            name=settings.token_name,
            unique_key=settings.unique_key,
            revoke_mint=settings.revoke_mint,
            revoke_freeze=settings.revoke_freeze,
            program_id=settings.program_id,
            idl=settings.idl,
            revoke_fee_lamports=settings.revoke_fee_lamports,
            logger=log,
        )
    except MintmeError as e:
        return failure_result(e, log, "in revoke_authority_simple")


async def revoke_mint_authority_simple(config: Optional[Dict[str, Any]] = None, **overrides) -> OperationResult:
    """Revokes only the mint authority."""
    return await revoke_authority_simple(config, **{**overrides, "revoke_mint": True, "revoke_freeze": False})


async def revoke_freeze_authority_simple(config: Optional[Dict[str, Any]] = None, **overrides) -> OperationResult:
    """Revokes only the freeze authority."""
    return await revoke_authority_simple(config, **{**overrides, "revoke_mint": False, "revoke_freeze": True})
