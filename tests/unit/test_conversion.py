from decimal import Decimal

import pytest

from mintme.conversion import (
    format_sol_amount,
    from_token_base_units,
    lamports_to_sol,
    sol_to_lamports,
    to_token_base_units,
)


def test_sol_to_lamports_uses_decimal_arithmetic():
    assert sol_to_lamports(1) == 1_000_000_000
    assert sol_to_lamports(0.1) == 100_000_000
    assert sol_to_lamports("0.000000001") == 1
    assert sol_to_lamports(Decimal("2.5")) == 2_500_000_000


def test_sol_to_lamports_rounds_half_up():
    assert sol_to_lamports("0.0000000005") == 1
    assert sol_to_lamports("0.0000000004") == 0


@pytest.mark.parametrize("lamports", [0, 1, 999, 5_000, 1_500_000_000, 2**53 - 1])
def test_lamports_round_trip(lamports):
    assert sol_to_lamports(lamports_to_sol(lamports)) == lamports


def test_format_sol_amount():
    assert format_sol_amount(1_500_000_000) == "1.5000 SOL"
    assert format_sol_amount(10_000_000) == "0.0100 SOL"
    assert format_sol_amount(5_000, 6) == "0.000005 SOL"


def test_token_base_units():
    assert to_token_base_units(1_000_000_000, 9) == 10**18
    assert to_token_base_units("1.5", 6) == 1_500_000
    assert to_token_base_units(7, 0) == 7
    assert from_token_base_units(1_500_000, 6) == Decimal("1.5")


def test_u64_scaled_amounts_keep_full_precision():
    assert to_token_base_units(18_446_744_073, 9) == 18_446_744_073_000_000_000


@pytest.mark.parametrize("bad", [True, "abc", float("nan"), float("inf"), None])
def test_invalid_amounts_raise(bad):
    with pytest.raises((ValueError, TypeError)):
        sol_to_lamports(bad)
