from pathlib import Path

import pytest

from locsync.backend.cli import main


@pytest.fixture()
def config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for variable in ("LOCSYNC_CONFIG", "LOCSYNC_TABLE_ID", "LOCSYNC_GRID_ID"):
        monkeypatch.delenv(variable, raising=False)
    config = tmp_path / "locsync.yaml"
    config.write_text(
        "sync:\n"
        "  source:\n"
        "    table_id: T1\n"
        f"    cache_path: {tmp_path / 'localization.csv'}\n"
        "session:\n"
        "  preferences_path: null\n",
        encoding="utf-8",
    )
    return config


def test_cli_imports_cached_table(config_file: Path, tmp_path: Path, capsys) -> None:
    (tmp_path / "localization.csv").write_text(
        "key,English,Spanish\nHELLO,Hello,Hola\n", encoding="utf-8"
    )

    exit_code = main(["--config", str(config_file), "--from-cache"])

    output = capsys.readouterr().out
    assert exit_code == 0
    assert "imported from cache (Replace): 1 added" in output
    assert "languages: English, Spanish" in output


def test_cli_reports_missing_cache(config_file: Path, capsys) -> None:
    exit_code = main(["--config", str(config_file), "--from-cache", "--mode", "Merge"])

    assert exit_code == 1
    assert "CacheMissError" in capsys.readouterr().out


def test_cli_reports_bad_settings(tmp_path: Path, capsys) -> None:
    exit_code = main(["--config", str(tmp_path / "missing.yaml")])

    assert exit_code == 1
    assert "failed to load settings" in capsys.readouterr().out
