from pathlib import Path

import pytest

from locsync.backend.config import load_settings
from locsync.backend.config.validator import main, validate_settings


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for variable in ("LOCSYNC_CONFIG", "LOCSYNC_TABLE_ID", "LOCSYNC_GRID_ID"):
        monkeypatch.delenv(variable, raising=False)


def test_configured_settings_are_valid(settings) -> None:
    assert validate_settings(settings) == []


def test_validator_flags_missing_table_identifier() -> None:
    errors = validate_settings(load_settings())

    assert any("sync.source.endpoint" in error for error in errors)


def test_validator_flags_non_http_endpoint(settings) -> None:
    source = settings.sync.source.model_copy(update={"endpoint_template": "ftp://host/${id}/${gid}"})
    broken = settings.model_copy(
        update={"sync": settings.sync.model_copy(update={"source": source})}
    )

    errors = validate_settings(broken)

    assert errors == ["sync.source.endpoint: must be an http(s) URL"]


def test_validator_flags_alphanumeric_separator(settings) -> None:
    source = settings.sync.source.model_copy(update={"separator": "x"})
    broken = settings.model_copy(
        update={"sync": settings.sync.model_copy(update={"source": source})}
    )

    assert any("separator" in error for error in validate_settings(broken))


def test_main_reports_status(tmp_path: Path, capsys) -> None:
    config = tmp_path / "locsync.yaml"
    config.write_text("sync:\n  source:\n    table_id: T1\n", encoding="utf-8")

    assert main([str(config)]) == 0
    assert "OK" in capsys.readouterr().out

    assert main([]) == 1
    assert "issue(s) detected" in capsys.readouterr().out
