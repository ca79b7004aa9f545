"""Keep CLI tests away from the developer's real ~/.sheetledger configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from sheet_cli.shared import paths
from sheet_cli.shared.config import ENV_OVERRIDE_SPEC

FIXTURE_ROOT = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    config_dir = tmp_path / "sheetledger-config"
    monkeypatch.setenv(paths.CONFIG_DIR_ENV, str(config_dir))
    monkeypatch.delenv(paths.CONFIG_FILE_ENV, raising=False)
    for env_key, _ in ENV_OVERRIDE_SPEC.values():
        monkeypatch.delenv(env_key, raising=False)
    return config_dir


@pytest.fixture()
def household_csv() -> Path:
    return FIXTURE_ROOT / "household.csv"
