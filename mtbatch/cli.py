"""Command-line interface for mtbatch.

Responsibilities:
- Expose user-facing commands for translating texts and inspecting settings.
- Convert CLI arguments into `TranslatorConfig` and run the translation client.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from .client import TranslationClient
from .config import ConfigLoader, TranslatorConfig
from .errors import CommandError, ConfigurationError
from .models.datatypes import TranslationRequest, TranslationResult
from .telemetry.logger import configure_logging

app = typer.Typer(
    name="mtbatch",
    no_args_is_help=True,
    help="Rate-limited batching LLM translation client.",
)

_CLI_LINGER_SECONDS = 1.0


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, CommandError):
        typer.secho(f"{command_name} failed: {exc.detail}", fg=typer.colors.RED, err=True)
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def _load_config(command_name: str, config_path: Path | None) -> TranslatorConfig:
    """Load YAML config when requested, environment config otherwise."""

    if config_path is None:
        try:
            return ConfigLoader.from_env()
        except ConfigurationError as exc:
            raise CommandError(
                command=command_name,
                detail=f"Invalid environment configuration: {exc}",
                hint="Fix `MTBATCH_*` variables and rerun.",
            ) from exc

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise CommandError(
            command=command_name,
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ConfigurationError as exc:
        raise CommandError(
            command=command_name,
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc


def _translate_all(
    client: TranslationClient, requests: list[TranslationRequest]
) -> list[TranslationResult]:
    """Translate requests, concurrently when they opt into batching."""

    if not any(request.is_batch for request in requests):
        return [client.translate(request) for request in requests]
    with ThreadPoolExecutor(max_workers=len(requests)) as executor:
        return list(executor.map(client.translate, requests))


@app.command("translate")
def translate_command(
    texts: Annotated[list[str], typer.Argument(help="Texts to translate.")],
    source: Annotated[str, typer.Option("--source", "-s", help="Source language tag.")],
    target: Annotated[str, typer.Option("--target", "-t", help="Target language tag.")],
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="YAML config file (defaults to `MTBATCH_*` env)."),
    ] = None,
    batch: Annotated[
        bool,
        typer.Option("--batch/--no-batch", help="Coalesce texts into batched provider calls."),
    ] = False,
    api_key: Annotated[
        str | None, typer.Option("--api-key", help="Provider API key override.")
    ] = None,
    model: Annotated[str | None, typer.Option("--model", help="Model id override.")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", help="Emit debug events.")] = False,
) -> None:
    """Translate texts and print one translation per line."""

    configure_logging(level="DEBUG" if verbose else "WARNING")
    try:
        config = _load_config("translate", config_file)
        linger = None
        if batch and config.batch_linger_seconds == 0:
            linger = _CLI_LINGER_SECONDS
        config = config.with_overrides(
            api_key=api_key,
            model=model,
            batch_linger_seconds=linger,
        )
        if not config.is_enabled:
            raise CommandError(
                command="translate",
                detail="Translation is disabled: no API key configured.",
                hint="Set `OPENAI_API_KEY` or pass `--api-key`.",
            )
        requests = [
            TranslationRequest(text, source, target, is_batch=batch) for text in texts
        ]
        with TranslationClient.from_config(config) as client:
            results = _translate_all(client, requests)
    except Exception as exc:
        exit_with_command_error("translate", exc)

    for result in results:
        typer.echo(result.translated_text if result.translated_text is not None else "")


@app.command("show-config")
def show_config_command(
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="YAML config file (defaults to `MTBATCH_*` env)."),
    ] = None,
) -> None:
    """Print resolved, non-secret settings."""

    try:
        config = _load_config("show-config", config_file)
    except Exception as exc:
        exit_with_command_error("show-config", exc)

    for key, value in sorted(config.as_display_metadata().items()):
        typer.echo(f"{key}: {value}")


def main() -> None:
    """Run the mtbatch CLI application."""

    app()


if __name__ == "__main__":
    main()
