"""Tests for the guitarsleuth CLI commands.

Every test runs with plain (non-Rich) output and an isolated config file so
the user's real settings are never read or written.
"""

import json
from pathlib import Path

import pytest
from pytest import MonkeyPatch
from typer.testing import CliRunner

from guitarsleuth import __version__
from guitarsleuth.cli.commands import ExitCode, app
from guitarsleuth.utils import config as cfg

CATALOG_YAML = """\
models:
  - id: m-5014
    name: 5014 Dreadnought
    country: Japan
    production_start_year: 1974
    production_end_year: 1982
  - id: m-5024
    name: 5024 Folk
    country: Japan
patterns:
  - id: p1
    prefix: "45"
    year_range_start: 1976
    year_range_end: 1978
    model_id: m-5014
approved_guitars:
  - id: g1
    serial_number: "4512345"
    estimated_year: 1977
    model_id: m-5014
features:
  - id: tuner-open
    category: tuner
    name: Open gear
  - id: tuner-sealed
    category: tuner
    name: Sealed
  - id: shape-dread
    category: body_shape
    name: Dreadnought
model_features:
  - model_id: m-5014
    feature_id: tuner-open
    is_required: true
  - model_id: m-5014
    feature_id: shape-dread
  - model_id: m-5024
    feature_id: tuner-sealed
    is_required: true
  - model_id: m-5024
    feature_id: shape-dread
"""


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: MonkeyPatch) -> Path:
    """Point the config file at a temp dir and force plain output."""
    config_dir = tmp_path / "config"
    monkeypatch.setattr(cfg, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(cfg, "CONFIG_FILE", config_dir / "config.toml")
    monkeypatch.delenv("GUITARSLEUTH_CATALOG_PATH", raising=False)
    monkeypatch.delenv("GUITARSLEUTH_QUIZ_CATEGORIES_FILE", raising=False)
    monkeypatch.setenv("GUITARSLEUTH_NO_RICH", "1")
    return config_dir


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    path = tmp_path / "catalog.yaml"
    path.write_text(CATALOG_YAML)
    return path


def test_lookup_modern_serial(runner: CliRunner) -> None:
    result = runner.invoke(app, ["lookup", "e25115614"])
    assert result.exit_code == ExitCode.SUCCESS
    assert "E25115614" in result.stdout
    assert "2025" in result.stdout
    assert "China" in result.stdout
    assert "90% High confidence" in result.stdout


def test_lookup_json(runner: CliRunner) -> None:
    result = runner.invoke(app, ["lookup", "CS19045678", "--json"])
    assert result.exit_code == ExitCode.SUCCESS
    data = json.loads(result.stdout)
    assert data["estimated_year"] == 2019
    assert data["estimated_month"] == 4
    assert data["confidence_tier"] == "high"
    assert data["neck_block"] is None


def test_lookup_empty_serial_is_an_error(runner: CliRunner) -> None:
    result = runner.invoke(app, ["lookup", "   "])
    assert result.exit_code == ExitCode.ERROR
    assert "Please enter a serial number" in result.stdout


def test_lookup_vintage_needs_neck_block(runner: CliRunner) -> None:
    result = runner.invoke(app, ["lookup", "A1234"])
    assert result.exit_code == ExitCode.NEEDS_INSPECTION
    assert "--neck-block" in result.stdout


def test_lookup_with_decoded_neck_block(runner: CliRunner) -> None:
    result = runner.invoke(app, ["lookup", "A1234", "--neck-block", "52", "--json"])
    assert result.exit_code == ExitCode.SUCCESS
    data = json.loads(result.stdout)
    assert data["estimated_year"] == 1977
    assert data["confidence_percent"] == 95
    assert data["neck_block"]["kind"] == "decoded"


def test_lookup_with_ambiguous_neck_block(runner: CliRunner) -> None:
    result = runner.invoke(app, ["lookup", "A1234", "-n", "7"])
    assert result.exit_code == ExitCode.NEEDS_INSPECTION
    assert "1995 or 2007" in result.stdout


def test_lookup_uses_catalog(runner: CliRunner, catalog_file: Path) -> None:
    result = runner.invoke(app, ["lookup", "4512345", "-c", str(catalog_file), "--json"])
    assert result.exit_code == ExitCode.NEEDS_INSPECTION
    data = json.loads(result.stdout)
    assert data["exact_match"] is True
    assert data["confidence_percent"] == 95
    assert data["models"][0]["name"] == "5014 Dreadnought"


def test_lookup_missing_catalog(runner: CliRunner, tmp_path: Path) -> None:
    result = runner.invoke(app, ["lookup", "E25115614", "-c", str(tmp_path / "nope.yaml")])
    assert result.exit_code == ExitCode.ERROR
    assert "not found" in result.stdout


def test_neck_block_command(runner: CliRunner) -> None:
    result = runner.invoke(app, ["neck-block", "52"])
    assert result.exit_code == ExitCode.SUCCESS
    assert "1977" in result.stdout

    result = runner.invoke(app, ["neck-block", "07", "--json"])
    data = json.loads(result.stdout)
    assert data["kind"] == "ambiguous"
    assert data["possible_years"] == [1995, 2007]


def test_match_command(runner: CliRunner, catalog_file: Path) -> None:
    result = runner.invoke(
        app, ["match", "tuner-open", "shape-dread", "-c", str(catalog_file), "--json"]
    )
    assert result.exit_code == ExitCode.SUCCESS
    data = json.loads(result.stdout)
    assert [r["model_id"] for r in data] == ["m-5014", "m-5024"]
    assert data[0]["match_percentage"] == 100


def test_match_without_catalog(runner: CliRunner) -> None:
    result = runner.invoke(app, ["match", "tuner-open"])
    assert result.exit_code == ExitCode.SUCCESS
    assert "No models match" in result.stdout


def test_quiz_walk_through(runner: CliRunner, catalog_file: Path) -> None:
    # Tuners: 1 = Open gear. Body shape: 1 = Dreadnought.
    result = runner.invoke(app, ["quiz", "-c", str(catalog_file)], input="1\n1\n")
    assert result.exit_code == ExitCode.SUCCESS
    assert "Step 1 of 2" in result.stdout
    assert "Analysis complete." in result.stdout
    assert "5014 Dreadnought" in result.stdout
    assert "Tuners: Open gear" in result.stdout


def test_quiz_back_and_quit(runner: CliRunner, catalog_file: Path) -> None:
    result = runner.invoke(app, ["quiz", "-c", str(catalog_file)], input="2\nb\nq\n")
    assert result.exit_code == ExitCode.SUCCESS
    assert result.stdout.count("Step 1 of 2") == 2
    assert "Analysis complete." not in result.stdout


def test_quiz_without_features(runner: CliRunner) -> None:
    result = runner.invoke(app, ["quiz"])
    assert result.exit_code == ExitCode.SUCCESS
    assert "no features" in result.stdout


def test_config_sets_catalog_path(runner: CliRunner, catalog_file: Path) -> None:
    result = runner.invoke(app, ["config", "catalog.path", str(catalog_file)])
    assert result.exit_code == ExitCode.SUCCESS
    assert cfg.resolve_setting("catalog.path", default="") == str(catalog_file.resolve())

    result = runner.invoke(app, ["lookup", "4567890", "--json"])
    data = json.loads(result.stdout)
    assert data["confidence_percent"] == 65


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == ExitCode.SUCCESS
    assert f"GuitarSleuth version: {__version__}" in result.stdout


def test_no_rich_flag(runner: CliRunner, monkeypatch: MonkeyPatch) -> None:
    monkeypatch.delenv("GUITARSLEUTH_NO_RICH", raising=False)
    result = runner.invoke(app, ["--no-rich", "neck-block", "52"])
    assert result.exit_code == ExitCode.SUCCESS
    assert "\x1b[" not in result.stdout


def test_non_ascii_digit_neck_block_is_not_a_crash(runner: CliRunner) -> None:
    result = runner.invoke(app, ["neck-block", "²"])
    assert result.exit_code == ExitCode.SUCCESS
    assert "not decoded" in result.stdout

    result = runner.invoke(app, ["lookup", "A1234", "-n", "²", "--json"])
    assert result.exit_code == ExitCode.NEEDS_INSPECTION
    assert json.loads(result.stdout)["neck_block"]["kind"] == "undecoded"


def test_lookup_with_undecodable_catalog(runner: CliRunner, tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_bytes(b"models:\n  - id: m1\n    name: \xff\n")
    result = runner.invoke(app, ["lookup", "E25115614", "-c", str(path)])
    assert result.exit_code == ExitCode.ERROR
    assert "Could not parse" in result.stdout
