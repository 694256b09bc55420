from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer

from .errors import ProviderError
from .provider import TerminologyProvider
from .resources import LogoStyle, PackageImages
from .secure_logger import get_secure_logger
from .settings import get_settings

app = typer.Typer(help="Query a terminology repository for term matches and suggestions.")


def _configure_logging(level: str) -> None:
    numeric_level = getattr(logging, level, logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(message)s",
        handlers=[logging.StreamHandler()],
    )
    get_secure_logger("termconnector", numeric_level)


def _open_provider(account_file: Path | None) -> TerminologyProvider:
    settings = get_settings()
    _configure_logging(settings.log_level)
    if account_file is not None:
        settings = replace(settings, account_file=account_file)
    try:
        return TerminologyProvider.from_settings(settings)
    except ProviderError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _echo_json(payload: object) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


AccountOption = typer.Option(None, "--account", "-a", help="Account descriptor XML (defaults to settings).")


@app.command()
def languages(account_file: Optional[Path] = AccountOption) -> None:
    """List the locales supported by the repository."""
    with _open_provider(account_file) as provider:
        _echo_json(sorted(str(locale) for locale in provider.context.require_languages()))


@app.command()
def targets(
    source_lang: str = typer.Argument(..., help="Source locale tag."),
    account_file: Optional[Path] = AccountOption,
) -> None:
    """List target locales available for a source locale."""
    with _open_provider(account_file) as provider:
        try:
            found = provider.get_targets(source_lang)
        except ProviderError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(code=1) from exc
        _echo_json(sorted(str(locale) for locale in found))


@app.command()
def translate(
    text: str = typer.Argument(..., help="Text to look up."),
    source_lang: str = typer.Option(..., "--source-lang", "-s", help="Source locale tag."),
    target_lang: str = typer.Option(..., "--target-lang", "-t", help="Target locale tag."),
    account_file: Optional[Path] = AccountOption,
) -> None:
    """Print the single best repository match for TEXT."""
    with _open_provider(account_file) as provider:
        try:
            provider.initialize(source_lang, target_lang)
            result = provider.translate(text)
        except ProviderError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(code=1) from exc
        _echo_json(result.to_dict())


@app.command()
def suggest(
    text: str = typer.Argument(..., help="Text to look up."),
    source_lang: str = typer.Option(..., "--source-lang", "-s", help="Source locale tag."),
    target_lang: str = typer.Option(..., "--target-lang", "-t", help="Target locale tag."),
    max_results: int = typer.Option(5, "--max", "-n", min=1, help="Maximum number of suggestions."),
    account_file: Optional[Path] = AccountOption,
) -> None:
    """Print up to --max suggestions for TEXT, best first."""
    with _open_provider(account_file) as provider:
        try:
            provider.initialize(source_lang, target_lang)
            results = provider.suggest(text, max_results)
        except ProviderError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(code=1) from exc
        _echo_json([result.to_dict() for result in results])


@app.command()
def logo(
    style: LogoStyle = typer.Argument(..., help="Logo style."),
    output_path: Path = typer.Option(..., "--output", "-o", help="Where to write the PNG."),
) -> None:
    """Write the provider logo for STYLE to a file."""
    output_path.write_bytes(PackageImages().load(style))
    typer.echo(f"Saved {style.value} logo to {output_path}")


if __name__ == "__main__":
    app()
