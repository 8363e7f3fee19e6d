from unittest.mock import MagicMock, patch

import pytest

from mintme import config, utils
from mintme.errors import ConfigurationError, RemoteProgramError
from mintme.results import failure_result, name_program_error
from mintme.schemas import OperationState


def test_merge_config_is_pure():
    merged = config.merge_config(config.DEFAULT_SIMPLE_CONFIG, {"token_name": "MINTME", "decimals": None})
    assert merged.token_name == "MINTME"
    assert merged.decimals == config.DEFAULT_SIMPLE_CONFIG.decimals
    assert config.DEFAULT_SIMPLE_CONFIG.token_name == "MINTME.DEV"


def test_merge_config_rejects_unknown_keys():
    with pytest.raises(ConfigurationError, match="tokn_name"):
        config.merge_config(config.DEFAULT_REVOKE_CONFIG, {"tokn_name": "X"})


def test_env_helpers(monkeypatch):
    monkeypatch.setenv("MINTME_TEST_INT", "abc")
    with pytest.raises(ConfigurationError):
        config._get_env_int("MINTME_TEST_INT", 1)
    monkeypatch.setenv("MINTME_TEST_INT", "-3")
    with pytest.raises(ConfigurationError):
        config._get_env_int("MINTME_TEST_INT", 1, min_val=0)
    monkeypatch.setenv("MINTME_TEST_KEY", "not-a-key")
    with pytest.raises(ConfigurationError):
        config._get_env_pubkey("MINTME_TEST_KEY", "11111111111111111111111111111111")


def test_log_function_resolution():
    override = MagicMock()
    custom = MagicMock()
    try:
        utils.set_custom_logger(custom)
        assert utils.resolve_log_fn(override) is override
        assert utils.resolve_log_fn() is custom
    finally:
        utils.set_custom_logger(None)
    with patch.object(utils, "logger") as mock_logger:
        assert utils.resolve_log_fn() is mock_logger.info


def test_program_error_names_fall_back_to_builtin_table():
    assert name_program_error(6003) == ("InvalidPda", "A provided account does not match the expected program address")
    assert name_program_error(9999) == (None, None)
    assert name_program_error(None) == (None, None)


def test_failure_result_for_unknown_program_error():
    log = MagicMock()
    result = failure_result(RemoteProgramError("custom program error: 0x270f", code=9999, logs=["log"]), log, "testing")
    assert result.state == OperationState.failed
    assert result.error == "custom program error: 0x270f"
    assert result.error_code == 9999
    assert result.error_name is None
    assert result.details["logs"] == ["log"]
    log.assert_called_once()
