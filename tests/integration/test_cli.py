"""CLI tests for translation and configuration commands."""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from mtbatch.cli import app
from tests.doubles import uppercase_provider


def _write_config(tmp_path: Path, body: str) -> Path:
    """Write a YAML config file and return its path."""

    config_path = tmp_path / "mtbatch.yml"
    config_path.write_text(body, encoding="utf-8")
    return config_path


def test_translate_command_prints_translation(tmp_path: Path, mock_provider) -> None:
    """Translate should print one translated line per input text."""

    mock_provider(uppercase_provider)
    config_path = _write_config(tmp_path, "api_key: test-key\n")

    result = CliRunner().invoke(
        app,
        ["translate", "hello", "--source", "en", "--target", "es", "--config", str(config_path)],
    )

    assert result.exit_code == 0, result.output
    assert result.output.strip().splitlines() == ["hola"]


def test_translate_command_batches_texts_and_keeps_order(tmp_path: Path, mock_provider) -> None:
    """With `--batch`, texts should go out in one call and print in input order."""

    recorded = mock_provider(uppercase_provider)
    config_path = _write_config(tmp_path, "api_key: test-key\nbatch_size: 2\n")

    result = CliRunner().invoke(
        app,
        [
            "translate",
            "good",
            "morning",
            "-s",
            "en",
            "-t",
            "es",
            "--batch",
            "--config",
            str(config_path),
        ],
    )

    assert result.exit_code == 0, result.output
    assert result.output.strip().splitlines() == ["GOOD", "MORNING"]
    assert len(recorded) == 1


def test_translate_command_reports_missing_config_file(tmp_path: Path) -> None:
    """A missing config path should fail with a hint and exit code 1."""

    result = CliRunner().invoke(
        app,
        [
            "translate",
            "hello",
            "-s",
            "en",
            "-t",
            "es",
            "--config",
            str(tmp_path / "missing.yml"),
        ],
    )

    assert result.exit_code == 1
    assert "translate failed: Config file not found" in result.output
    assert "Hint: Provide an existing path via `--config <path.yaml>`." in result.output


def test_translate_command_requires_api_key(tmp_path: Path) -> None:
    """Without credentials the command should refuse to call the provider."""

    config_path = _write_config(tmp_path, "batch_size: 2\n")

    result = CliRunner().invoke(
        app,
        ["translate", "hello", "-s", "en", "-t", "es", "--config", str(config_path)],
    )

    assert result.exit_code == 1
    assert "Translation is disabled: no API key configured." in result.output


def test_translate_command_reports_invalid_config(tmp_path: Path) -> None:
    """Invalid config values should be reported as config errors."""

    config_path = _write_config(tmp_path, "batch_size: -3\n")

    result = CliRunner().invoke(
        app,
        ["translate", "hello", "-s", "en", "-t", "es", "--config", str(config_path)],
    )

    assert result.exit_code == 1
    assert "Invalid config file" in result.output
    assert "`batch_size` must be a positive integer" in result.output


def test_show_config_prints_non_secret_settings(tmp_path: Path) -> None:
    """Show-config should list settings while masking the API key."""

    config_path = _write_config(tmp_path, "api_key: sk-very-secret-key\nbatch_size: 7\n")

    result = CliRunner().invoke(app, ["show-config", "--config", str(config_path)])

    assert result.exit_code == 0, result.output
    assert "api_key: set" in result.output
    assert "batch_size: 7" in result.output
    assert "sk-very-secret-key" not in result.output
