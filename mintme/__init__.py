"""
MintMe SDK Package Initialization

This package is a client for the MintMe token-issuance program on Solana. From
a handful of human-supplied token parameters it derives every program address
the program expects, assembles the instruction with its accounts in the order
the program's IDL declares, and submits it.

The package includes:
- Token creation and authority revocation, plus config-driven simple helpers
- Deterministic program-derived address helpers
- Parameter validation that reports every violation at once
- SOL and token unit conversion
- Wallet loading and external signer support
- A small async JSON-RPC connection built on httpx
- Custom error handling and an injectable log function
"""
from mintme.authority import (
    revoke_authority,
    revoke_authority_simple,
    revoke_freeze_authority_simple,
    revoke_mint_authority_simple,
)
from mintme.conversion import (
    format_sol_amount,
    from_token_base_units,
    lamports_to_sol,
    sol_to_lamports,
    to_token_base_units,
)
from mintme.creator import calculate_adjusted_supply, create_token, create_token_simple
from mintme.errors import (
    AddressDerivationError,
    ConfigurationError,
    ConfirmationTimeoutError,
    DescriptorLoadError,
    InputValidationError,
    InsufficientBalanceError,
    MintmeError,
    NetworkSubmissionError,
    RemoteProgramError,
    WalletLoadError,
)
from mintme.idl import embedded_idl, load_idl
from mintme.pda import (
    derive_associated_token_account,
    derive_metadata_address,
    derive_mint_address,
    derive_network_fee_config_address,
    derive_payment_address,
    derive_revoke_fee_config_address,
    derive_token_addresses,
)
from mintme.schemas import (
    DerivedAddress,
    DerivedAddressSet,
    OperationResult,
    OperationState,
    SupplyUnit,
    TokenCreationRequest,
    ValidationResult,
)
from mintme.solana_utils import Connection
from mintme.utils import set_custom_logger
from mintme.validation import (
    validate_all,
    validate_decimals,
    validate_initial_supply,
    validate_partner_amount,
    validate_public_key,
    validate_token_creation_params,
    validate_token_name,
    validate_token_symbol,
    validate_uri,
)
from mintme.wallet import ExternalSigner, KeypairIdentity, load_wallet_from_file, verify_wallet_file
