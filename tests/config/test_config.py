from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest

from trailpack.config import (
    InvalidConfigurationError,
    MissingConfigurationError,
    get_inference_config,
    get_resolution_config,
    get_salesforce_config,
    get_storage_config,
    optional_env_var,
    optional_int_env_var,
    require_env_var,
    require_env_vars,
)


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", " value ")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_raises_when_any_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_VAR", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_VAR"])

    assert exc.value.names == ("MISSING_VAR",)
    assert "MISSING_VAR" in str(exc.value)


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


def test_optional_env_var_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BLANK_VAR", "")
    monkeypatch.delenv("UNSET_VAR", raising=False)

    assert optional_env_var("BLANK_VAR", "fallback") == "fallback"
    assert optional_env_var("UNSET_VAR", "fallback") == "fallback"


def test_salesforce_config_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SALESFORCE_INSTANCE_URL", "https://acme.my.salesforce.com/")
    monkeypatch.setenv("SALESFORCE_ACCESS_TOKEN", "00Dxx!token")
    monkeypatch.delenv("SALESFORCE_API_VERSION", raising=False)

    config = get_salesforce_config()

    assert config.instance_url == "https://acme.my.salesforce.com"
    assert config.data_path == "/services/data/v60.0"
    assert config.resilience.base_url == "https://acme.my.salesforce.com"
    assert config.resilience.default_headers is not None
    assert config.resilience.default_headers["Authorization"] == "Bearer 00Dxx!token"


def test_salesforce_config_requires_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SALESFORCE_INSTANCE_URL", "https://acme.my.salesforce.com")
    monkeypatch.delenv("SALESFORCE_ACCESS_TOKEN", raising=False)

    with pytest.raises(MissingConfigurationError, match="SALESFORCE_ACCESS_TOKEN"):
        get_salesforce_config()


def test_inference_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INFERENCE_API_KEY", "sk-test")
    monkeypatch.delenv("INFERENCE_BASE_URL", raising=False)
    monkeypatch.setenv("INFERENCE_MODEL", "my-model")

    config = get_inference_config()

    assert config.model == "my-model"
    assert config.temperature == 0.0
    assert config.resilience.base_url == "https://api.openai.com/v1"
    assert config.resilience.cache is None


def test_storage_paths_follow_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TRAILPACK_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("CATALOG_DATABASE_URI", raising=False)

    storage = get_storage_config()

    assert storage.catalog_file == (tmp_path / "data" / "catalog.db").resolve()
    assert not storage.data_dir.exists()
    assert storage.catalog_uri() == f"sqlite+pysqlite:///{storage.catalog_file}"
    assert storage.data_dir.is_dir()
    assert storage.http_cache_path().endswith("http_cache.db")


def test_catalog_uri_override_skips_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("TRAILPACK_DATA_DIR", str(tmp_path / "unused"))
    monkeypatch.setenv("CATALOG_DATABASE_URI", "sqlite+pysqlite:///:memory:")

    storage = get_storage_config()

    assert storage.catalog_uri() == "sqlite+pysqlite:///:memory:"
    assert not (tmp_path / "unused").exists()


def test_resolution_config_reads_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRAILPACK_MATCH_TOLERANCE_SECONDS", "30")
    monkeypatch.setenv("TRAILPACK_AUDIT_ROW_LIMIT", "50")
    monkeypatch.delenv("TRAILPACK_AUDIT_LOOKBACK_DAYS", raising=False)
    monkeypatch.delenv("TRAILPACK_MANIFEST_API_VERSION", raising=False)

    config = get_resolution_config()

    assert config.match_tolerance == timedelta(seconds=30)
    assert config.audit_row_limit == 50
    assert config.audit_lookback_days == 7
    assert config.manifest_api_version == "60.0"


@pytest.mark.parametrize("raw", ["soon", "-1"])
def test_invalid_integer_override_names_variable(
    monkeypatch: pytest.MonkeyPatch, raw: str
) -> None:
    monkeypatch.setenv("TRAILPACK_AUDIT_LOOKBACK_DAYS", raw)

    with pytest.raises(InvalidConfigurationError, match="TRAILPACK_AUDIT_LOOKBACK_DAYS") as exc:
        get_resolution_config()

    assert exc.value.value == raw


def test_optional_int_env_var_enforces_minimum(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ROW_LIMIT", "0")
    monkeypatch.delenv("UNSET_LIMIT", raising=False)

    assert optional_int_env_var("UNSET_LIMIT", 5) == 5
    assert optional_int_env_var("ROW_LIMIT", 5) == 0
    with pytest.raises(InvalidConfigurationError):
        optional_int_env_var("ROW_LIMIT", 5, minimum=1)
