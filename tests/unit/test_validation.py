import pytest
from solders.keypair import Keypair

from mintme.schemas import TokenCreationRequest
from mintme.validation import (
    validate_all,
    validate_decimals,
    validate_initial_supply,
    validate_partner_amount,
    validate_public_key,
    validate_token_name,
    validate_token_symbol,
    validate_uri,
)

MAX_SUPPLY = "18446744073709551615"


def make_request(**overrides):
    params = dict(
        name="MTM",
        symbol="MTM",
        decimals=9,
        initial_supply=1_000_000_000,
        uri="https://ipfs.mintme.dev/metadata.json",
    )
    params.update(overrides)
    return TokenCreationRequest(**params)


def test_valid_request_has_no_errors():
    result = validate_all(make_request())
    assert result.is_valid
    assert result.errors == []
    assert result.max_supply == MAX_SUPPLY


def test_lowercase_symbol_is_rejected():
    result = validate_all(make_request(symbol="mtm"))
    assert not result.is_valid
    assert any("uppercase" in e for e in result.errors)


def test_negative_supply_reports_max_supply():
    result = validate_all(make_request(initial_supply=-5))
    assert not result.is_valid
    assert any("greater than 0" in e for e in result.errors)
    assert result.max_supply == MAX_SUPPLY


def test_all_violations_are_reported_together():
    result = validate_all(make_request(name="", symbol="toolongsymbol", decimals=12, uri="http://x.dev/a.json"))
    assert len(result.errors) == 4


def test_partner_wallet_is_checked_only_when_present():
    assert validate_all(make_request(partner_wallet=None)).is_valid
    result = validate_all(make_request(partner_wallet="not-a-key"))
    assert result.errors == ["Partner wallet: Invalid Solana public key format"]


@pytest.mark.parametrize("name", ["MINTME", "My Token", "a.b-c_d", "x" * 32])
def test_valid_names(name):
    assert validate_token_name(name).is_valid


@pytest.mark.parametrize("name", ["", None, "x" * 33, "bad$name", 12])
def test_invalid_names(name):
    assert not validate_token_name(name).is_valid


def test_symbol_length():
    assert validate_token_symbol("ABCDEFGHIJ").is_valid
    assert not validate_token_symbol("ABCDEFGHIJK").is_valid


@pytest.mark.parametrize("decimals,ok", [(0, True), (9, True), (9.0, True), (10, False), (-1, False), (True, False), ("9", False)])
def test_decimals(decimals, ok):
    assert validate_decimals(decimals).is_valid is ok


@pytest.mark.parametrize(
    "supply,ok",
    [(1, True), ("1000", True), (MAX_SUPPLY, True), (int(MAX_SUPPLY) + 1, False), (0, False), ("12a", False), (1.5, False)],
)
def test_initial_supply(supply, ok):
    result = validate_initial_supply(supply)
    assert result.is_valid is ok
    assert result.max_supply == MAX_SUPPLY


def test_supply_string_with_letters_mentions_digits():
    assert "only digits" in validate_initial_supply("12a").message


def test_uri_must_use_https():
    assert validate_uri("https://example.com/meta.json").is_valid
    assert "HTTPS" in validate_uri("http://example.com/meta.json").message
    assert not validate_uri("not a url").is_valid


def test_public_key():
    key = Keypair().pubkey()
    assert validate_public_key(key).is_valid
    assert validate_public_key(str(key)).is_valid
    assert not validate_public_key("0OIl").is_valid
    assert not validate_public_key(None).is_valid


@pytest.mark.parametrize(
    "check,value",
    [
        (validate_token_name, "MINTME\n"),
        (validate_token_symbol, "MTM\n"),
        (validate_initial_supply, "1000\n"),
        (validate_public_key, "7viHj1u6aQS9Nmc55FokX3B9NbDJUPwMYQvKgBfWeYXE\n"),
    ],
)
def test_trailing_newline_is_rejected(check, value):
    assert not check(value).is_valid


def test_request_with_trailing_newlines_is_invalid():
    result = validate_all(make_request(name="MINTME\n", symbol="MTM\n"))
    assert not result.is_valid
    assert len(result.errors) == 2


@pytest.mark.parametrize("amount,ok", [(0, True), (250_000_000, True), (int(MAX_SUPPLY), True), (-1, False), (int(MAX_SUPPLY) + 1, False), (0.5, False), (True, False), ("5", False)])
def test_partner_amount(amount, ok):
    assert validate_partner_amount(amount).is_valid is ok


def test_partner_amount_is_part_of_the_aggregate():
    result = validate_all(make_request(partner_amount=-1))
    assert result.errors == [f"Partner amount must be between 0 and {MAX_SUPPLY} lamports"]
