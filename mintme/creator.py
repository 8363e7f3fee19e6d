"""
Token Creation

Builds and submits the MintMe program's `createToken` instruction.

Operation flow (Validating -> Deriving -> Submitting -> Confirmed | Failed):
1. Resolve the payer identity and validate every token parameter; all
   violations are raised together before any network call
2. Derive the payment, mint, token account, metadata and fee config addresses
3. Scale the initial supply to base units when it is given in whole tokens
4. Load the IDL, encode arguments and accounts in IDL order
5. Sign, submit with preflight and wait for "confirmed"

Supply convention:
    `supply_unit=SupplyUnit.base` (the default for create_token) sends
    `initial_supply` unchanged; `SupplyUnit.human` multiplies it by
    10**decimals. create_token_simple always uses SupplyUnit.human.

Error handling:
    Validation, derivation, wallet and balance problems raise. IDL, network,
    confirmation and program errors come back as a failed OperationResult.
    Nothing is retried or rolled back: a failure after submission may already
    have debited fees on-chain.
"""
from typing import Any, Dict, Optional

from pydantic import ValidationError

from mintme.coder import build_instruction
from mintme.config import DEFAULT_SIMPLE_CONFIG, MIN_CREATE_BALANCE_LAMPORTS, PROGRAM_ID, merge_config
from mintme.constants import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    DEFAULT_UNIQUE_KEY,
    DEFAULT_URI,
    MAX_SUPPLY,
    RENT,
    SYSTEM_PROGRAM_ID,
    TOKEN_METADATA_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)
from mintme.conversion import format_sol_amount, sol_to_lamports, to_token_base_units
from mintme.errors import InputValidationError, InsufficientBalanceError, MintmeError
from mintme.idl import IdlSource, load_idl
from mintme.pda import derive_token_addresses, to_pubkey
from mintme.results import SUBMISSION_ERRORS, failure_result
from mintme.schemas import OperationResult, OperationState, SupplyUnit, TokenCreationRequest
from mintme.solana_utils import open_connection, prepare_message, send_and_confirm
from mintme.utils import LogFn, resolve_log_fn
from mintme.validation import validate_token_creation_params
from mintme.wallet import resolve_identity


def calculate_adjusted_supply(initial_supply: Any, decimals: int, supply_unit: SupplyUnit) -> int:
    """Returns the initial supply in base units according to *supply_unit*."""
    if SupplyUnit(supply_unit) is SupplyUnit.human:
        supply = to_token_base_units(initial_supply, decimals)
    else:
        supply = int(initial_supply)
    if supply > MAX_SUPPLY:
        raise InputValidationError(
            [f"Initial supply of {supply} base units must not exceed {MAX_SUPPLY}"], str(MAX_SUPPLY)
        )
    return supply


async def create_token(
    connection: Any,
    payer: Any,
    name: str,
    symbol: str,
    unique_key: Optional[str] = None,
    decimals: int = 9,
    initial_supply: Any = 1,
    uri: str = DEFAULT_URI,
    revoke_mint: bool = False,
    revoke_freeze: bool = False,
    partner_wallet: Any = None,
    partner_amount: int = 0,
    supply_unit: SupplyUnit = SupplyUnit.base,
    program_id: Any = None,
    idl: IdlSource = None,
    logger: Optional[LogFn] = None,
) -> OperationResult:
    """
    Creates a token through the MintMe program.

    Args:
        connection: A Connection, or an RPC endpoint URL (closed afterwards).
        payer: Keypair, Identity, wallet-file path or signer object.
        name: Token name, up to 32 characters.
        symbol: Token symbol, up to 10 uppercase letters and digits.
        unique_key: Extra mint seed so one payer can reuse a name. Defaults to
            "mintme.dev".
        decimals: Token decimals, 0 to 9.
        initial_supply: Supply to mint, interpreted according to *supply_unit*.
        uri: HTTPS metadata URI.
        revoke_mint: Revoke the mint authority once the supply is minted.
        revoke_freeze: Revoke the freeze authority.
        partner_wallet: Commission receiver; defaults to the payer.
        partner_amount: Commission in lamports.
        supply_unit: SupplyUnit.base or SupplyUnit.human.
        program_id: MintMe program address; defaults to config.PROGRAM_ID.
        idl: IDL source, see mintme.idl.load_idl.
        logger: Function receiving progress messages for this call.

    Returns:
        OperationResult with mint, token_account, metadata and tx_signature on
        success, or error details on failure.

    Raises:
        InputValidationError: If any token parameter is invalid.
        AddressDerivationError: If a seed is too long or a key is malformed.
        WalletLoadError: If the payer cannot be resolved.
    """
    log = resolve_log_fn(logger)

    # Validating
    identity = resolve_identity(payer)
    try:
        request = TokenCreationRequest(
            name=name,
            symbol=symbol,
            unique_key=unique_key,
            decimals=decimals,
            initial_supply=initial_supply,
            uri=uri,
            revoke_mint=revoke_mint,
            revoke_freeze=revoke_freeze,
            partner_wallet=partner_wallet,
            partner_amount=partner_amount,
            supply_unit=supply_unit,
        )
    except ValidationError as e:
        raise InputValidationError(
            [f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()], str(MAX_SUPPLY)
        )
    validation = validate_token_creation_params(request)
    if not validation.is_valid:
        log("Token validation failed:")
        for error in validation.errors:
            log(f"- {error}")
        log(f"Maximum supply allowed: {validation.max_supply}")
        raise InputValidationError(validation.errors, validation.max_supply)
    log(f"Maximum supply allowed: {validation.max_supply}")

    if not unique_key:
        log(f"Warning: No unique_key provided, using default '{DEFAULT_UNIQUE_KEY}'")
        unique_key = DEFAULT_UNIQUE_KEY

    program_key = to_pubkey(program_id or PROGRAM_ID, "program id")
    partner_key = to_pubkey(partner_wallet, "partner wallet") if partner_wallet else identity.public_key
    supply = calculate_adjusted_supply(initial_supply, int(decimals), request.supply_unit)
    log(f"Initial supply ({request.supply_unit.value} units): {initial_supply}")
    log(f"Initial supply (base units): {supply}")

    # Deriving
    addresses = await derive_token_addresses(program_key, identity.public_key, name, unique_key)
    log(f"Payment PDA: {addresses.payment.address}")
    log(f"Mint PDA: {addresses.mint.address}")
    log(f"Token Account: {addresses.token_account.address}")
    log(f"Metadata Account: {addresses.metadata.address}")
    log(f"Network Fee Config: {addresses.network_fee_config.address}")
    log(f"Partner: {partner_key}")

    accounts = {
        "payer": identity.public_key,
        "config": addresses.network_fee_config.address,
        "mint": addresses.mint.address,
        "tokenAccount": addresses.token_account.address,
        "metadata": addresses.metadata.address,
        "tokenPda": addresses.payment.address,
        "tokenProgram": TOKEN_PROGRAM_ID,
        "metadataProgram": TOKEN_METADATA_PROGRAM_ID,
        "systemProgram": SYSTEM_PROGRAM_ID,
        "partnerWallet": partner_key,
        "rent": RENT,
        "associatedTokenProgram": ASSOCIATED_TOKEN_PROGRAM_ID,
    }
    args = {
        "name": name,
        "symbol": symbol,
        "uniqueKey": unique_key,
        "decimals": int(decimals),
        "initialSupply": supply,
        "uri": uri,
        "revokeMint": request.revoke_mint,
        "revokeFreeze": request.revoke_freeze,
        "partnerWallet": partner_key,
        "partnerAmount": partner_amount,
    }

    # Submitting
    conn, owned = open_connection(connection)
    program_idl = None
    try:
        program_idl = await load_idl(idl)
        instruction = build_instruction(program_idl, "createToken", program_key, accounts, args)
        message, blockhash = await prepare_message(conn, identity.public_key, [instruction])
        signature = await send_and_confirm(conn, identity, message, blockhash)
    except SUBMISSION_ERRORS as e:
        return failure_result(e, log, "creating token", program_idl)
    finally:
        if owned:
            await conn.aclose()

    log(f"Token {symbol} created: {signature}")
    return OperationResult(
        success=True,
        state=OperationState.confirmed,
        mint=str(addresses.mint.address),
        token_account=str(addresses.token_account.address),
        metadata=str(addresses.metadata.address),
        tx_signature=signature,
        token_name=name,
        token_symbol=symbol,
    )


async def create_token_simple(config: Optional[Dict[str, Any]] = None, **overrides) -> OperationResult:
    """
    Creates a token from a partial configuration merged over the defaults.

    `initial_supply` is in whole tokens and `partner_amount` in SOL. The wallet
    comes from `wallet` when given, otherwise from `wallet_path`. Every SDK
    error is returned as a failed OperationResult instead of being raised.
    """
    log = resolve_log_fn((config or {}).get("logger") or overrides.get("logger"))
    try:
        settings = merge_config(DEFAULT_SIMPLE_CONFIG, {**(config or {}), **overrides})
        identity = resolve_identity(settings.wallet if settings.wallet is not None else settings.wallet_path)
        try:
            partner_lamports = sol_to_lamports(settings.partner_amount)
        except (ValueError, TypeError) as e:
            raise InputValidationError([f"Partner amount: {e}"])

        conn, owned = open_connection(settings.connection)
        try:
            balance = await conn.get_balance(identity.public_key)
            log(f"Address: {identity.public_key}")
            log(f"Balance: {format_sol_amount(balance)}")
            if balance < MIN_CREATE_BALANCE_LAMPORTS:
                hint = ""
                if settings.cluster == "devnet":
                    hint = f" Get SOL with: solana airdrop 2 {identity.public_key} --url devnet"
                raise InsufficientBalanceError(
                    f"Insufficient balance. You need at least {format_sol_amount(MIN_CREATE_BALANCE_LAMPORTS)}.{hint}",
                    required=MIN_CREATE_BALANCE_LAMPORTS,
                    balance=balance,
                )

            result = await create_token(
                conn,
                identity,
                name=settings.token_name,
                symbol=settings.token_symbol,
                unique_key=settings.unique_key,
                decimals=settings.decimals,
                initial_supply=settings.initial_supply,
                uri=settings.uri,
                revoke_mint=settings.revoke_mint,
                revoke_freeze=settings.revoke_freeze,
                partner_wallet=settings.partner_wallet,
                partner_amount=partner_lamports,
                supply_unit=SupplyUnit.human,
                program_id=settings.program_id,
                idl=settings.idl,
                logger=log,
            )
        finally:
            if owned:
                await conn.aclose()
    except MintmeError as e:
        return failure_result(e, log, "in create_token_simple")

    if result.success and settings.revoke_mint:
        log("Mint authority revoked.")
    if result.success and settings.revoke_freeze:
        log("Freeze authority revoked.")
    return result
