"""
Token Parameter Validation

Checks token metadata against the rules enforced by the MintMe program before
any network call is made. Each field has its own check returning a
FieldValidation; validate_token_creation_params runs every check and collects
all violations so the caller can fix them in one pass.
"""
import re
from typing import Any

from pydantic import AnyUrl, TypeAdapter, ValidationError
from solders.pubkey import Pubkey

from mintme.constants import MAX_DECIMALS, MAX_SUPPLY
from mintme.schemas import FieldValidation, SupplyValidation, TokenCreationRequest, ValidationResult

MAX_NAME_LENGTH = 32
MAX_SYMBOL_LENGTH = 10

_NAME_RE = re.compile(r"^[A-Za-z0-9 _.\-]+$")
_SYMBOL_RE = re.compile(r"^[A-Z0-9]+$")
_DIGITS_RE = re.compile(r"^[0-9]+$")
_BASE58_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")

_url_adapter = TypeAdapter(AnyUrl)


def validate_token_name(name: Any) -> FieldValidation:
    if not name or not isinstance(name, str):
        return FieldValidation(is_valid=False, message="Token name is required and must be a string")
    if len(name) > MAX_NAME_LENGTH:
        return FieldValidation(is_valid=False, message=f"Token name must be {MAX_NAME_LENGTH} characters or less")
    if not _NAME_RE.fullmatch(name):
        return FieldValidation(
            is_valid=False,
            message="Token name contains invalid characters. Use only letters, numbers, spaces, "
                    "underscores, hyphens, and periods",
        )
    return FieldValidation(is_valid=True)


def validate_token_symbol(symbol: Any) -> FieldValidation:
    if not symbol or not isinstance(symbol, str):
        return FieldValidation(is_valid=False, message="Token symbol is required and must be a string")
    if len(symbol) > MAX_SYMBOL_LENGTH:
        return FieldValidation(is_valid=False, message=f"Token symbol must be {MAX_SYMBOL_LENGTH} characters or less")
    if not _SYMBOL_RE.fullmatch(symbol):
        return FieldValidation(is_valid=False, message="Token symbol must contain only uppercase letters and numbers")
    return FieldValidation(is_valid=True)


def validate_decimals(decimals: Any) -> FieldValidation:
    if isinstance(decimals, bool) or not isinstance(decimals, (int, float)):
        return FieldValidation(is_valid=False, message="Decimals must be a number")
    if isinstance(decimals, float) and not decimals.is_integer():
        return FieldValidation(is_valid=False, message="Decimals must be an integer")
    if decimals < 0 or decimals > MAX_DECIMALS:
        return FieldValidation(is_valid=False, message=f"Decimals must be between 0 and {MAX_DECIMALS}")
    return FieldValidation(is_valid=True)


def validate_initial_supply(initial_supply: Any) -> SupplyValidation:
    """
    Validates the initial supply and reports the largest supply the program accepts.

    Strings must contain only digits; numbers must be whole. The value must be
    greater than 0 and fit in an unsigned 64-bit integer.
    """
    max_supply = str(MAX_SUPPLY)

    if isinstance(initial_supply, str):
        if not _DIGITS_RE.fullmatch(initial_supply):
            return SupplyValidation(is_valid=False, message="Initial supply must contain only digits", max_supply=max_supply)
        supply = int(initial_supply)
    elif isinstance(initial_supply, bool) or not isinstance(initial_supply, (int, float)):
        return SupplyValidation(
            is_valid=False, message="Initial supply must be a number or numeric string", max_supply=max_supply
        )
    elif isinstance(initial_supply, float) and not initial_supply.is_integer():
        return SupplyValidation(is_valid=False, message="Initial supply must be an integer", max_supply=max_supply)
    else:
        supply = int(initial_supply)

    if supply <= 0:
        return SupplyValidation(is_valid=False, message="Initial supply must be greater than 0", max_supply=max_supply)
    if supply > MAX_SUPPLY:
        return SupplyValidation(
            is_valid=False, message=f"Initial supply must not exceed {max_supply}", max_supply=max_supply
        )
    return SupplyValidation(is_valid=True, max_supply=max_supply)


def validate_uri(uri: Any) -> FieldValidation:
    if not uri or not isinstance(uri, str):
        return FieldValidation(is_valid=False, message="Metadata URI is required and must be a string")
    try:
        parsed = _url_adapter.validate_python(uri)
    except ValidationError:
        return FieldValidation(is_valid=False, message="Metadata URI must be a valid URL")
    if parsed.scheme != "https":
        return FieldValidation(is_valid=False, message="Metadata URI should use HTTPS protocol for security")
    return FieldValidation(is_valid=True)


def validate_public_key(public_key: Any) -> FieldValidation:
    if not public_key:
        return FieldValidation(is_valid=False, message="Public key is required")
    if isinstance(public_key, Pubkey):
        return FieldValidation(is_valid=True)
    if isinstance(public_key, str):
        if not _BASE58_RE.fullmatch(public_key):
            return FieldValidation(is_valid=False, message="Invalid Solana public key format")
        try:
            Pubkey.from_string(public_key)
        except ValueError:
            return FieldValidation(is_valid=False, message="Invalid Solana public key format")
        return FieldValidation(is_valid=True)
    return FieldValidation(is_valid=False, message="Public key must be a string or Pubkey object")


def validate_partner_amount(partner_amount: Any) -> FieldValidation:
    """Partner commission in lamports: a whole number between 0 and the u64 maximum."""
    if isinstance(partner_amount, bool) or not isinstance(partner_amount, int):
        return FieldValidation(is_valid=False, message="Partner amount must be a whole number of lamports")
    if partner_amount < 0 or partner_amount > MAX_SUPPLY:
        return FieldValidation(is_valid=False, message=f"Partner amount must be between 0 and {MAX_SUPPLY} lamports")
    return FieldValidation(is_valid=True)


def validate_token_creation_params(request: TokenCreationRequest) -> ValidationResult:
    """Runs every field check and returns all violations together."""
    errors = []

    for check in (
        validate_token_name(request.name),
        validate_token_symbol(request.symbol),
        validate_decimals(request.decimals),
    ):
        if not check.is_valid:
            errors.append(check.message)

    supply_check = validate_initial_supply(request.initial_supply)
    if not supply_check.is_valid:
        errors.append(supply_check.message)

    uri_check = validate_uri(request.uri)
    if not uri_check.is_valid:
        errors.append(uri_check.message)

    if request.partner_wallet:
        wallet_check = validate_public_key(request.partner_wallet)
        if not wallet_check.is_valid:
            errors.append(f"Partner wallet: {wallet_check.message}")

    amount_check = validate_partner_amount(request.partner_amount)
    if not amount_check.is_valid:
        errors.append(amount_check.message)

    return ValidationResult(is_valid=not errors, errors=errors, max_supply=supply_check.max_supply)


validate_all = validate_token_creation_params
