"""CLI interface for rimtranslator using Typer."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from rimtranslator import __version__
from rimtranslator.core.constants import DEFAULT_MODEL, SUPPORTED_LANGUAGES
from rimtranslator.errors import MissingCredentialsError
from rimtranslator.pipeline import BackendChoice

app = typer.Typer(
    name="rimtranslator",
    help="Automatic LLM translator for RimWorld mod XML files.",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)

_verbose = False
_quiet = False


def _print(msg: str, *, verbose_only: bool = False) -> None:
    """Print respecting --verbose/--quiet flags. Errors bypass --quiet."""
    if _quiet:
        return
    if verbose_only and not _verbose:
        return
    console.print(msg)


def _setup_logging(verbose: bool, quiet: bool) -> None:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.getLogger("rimtranslator").setLevel(level)


def _resolve_languages(requested: list[str] | None) -> list[str]:
    """Map --lang values onto RimWorld language folder names (case-insensitive)."""
    if not requested:
        return list(SUPPORTED_LANGUAGES)
    by_lower = {lang.lower(): lang for lang in SUPPORTED_LANGUAGES}
    resolved: list[str] = []
    for name in requested:
        lang = by_lower.get(name.lower())
        if lang is None:
            console.print(
                f"[red]Error:[/red] Unsupported language: {name}."
                " Run 'rimtranslator languages' for the list."
            )
            raise typer.Exit(1)
        if lang not in resolved:
            resolved.append(lang)
    return resolved


def version_callback(value: bool) -> None:
    if value:
        console.print(f"rimtranslator {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Show extra info (backend, cache hits, per-file progress).",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Only show errors.",
    ),
) -> None:
    """rimtranslator: Translate RimWorld mods into every game language."""
    global _verbose, _quiet
    _verbose = verbose
    _quiet = quiet
    load_dotenv()
    _setup_logging(verbose, quiet)


@app.command()
def translate(
    directory: Path = typer.Argument(
        Path(".."), help="Mod root directory. Defaults to the parent directory.",
    ),
    lang: list[str] | None = typer.Option(
        None, "--lang", "-l",
        help="Target language (repeatable). Defaults to all supported languages.",
    ),
    model: str = typer.Option(
        DEFAULT_MODEL, "--model", "-m",
        envvar="RIMTRANSLATOR_MODEL", help="Model name passed to the backend.",
    ),
    api_key: str | None = typer.Option(
        None, "--api-key", "-k",
        envvar="OPENAI_API_KEY", help="OpenAI API key.",
    ),
    backend_name: BackendChoice = typer.Option(
        BackendChoice.openai, "--backend", "-b",
        help="Backend: openai, dummy.",
    ),
    use_dummy: bool = typer.Option(
        False, "--dummy",
        help="Use dummy backend (shortcut for --backend dummy).",
    ),
    no_cache: bool = typer.Option(
        False, "--no-cache", help="Disable the prompt cache.",
    ),
    cache_dir: Path | None = typer.Option(
        None, "--cache-dir",
        envvar="RIMTRANSLATOR_CACHE_DIR", help="Prompt cache directory.",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run",
        help="Call the model and parse replies but don't write files.",
    ),
    report: Path | None = typer.Option(
        None, "--report", "-r",
        help="Save report to file (json/md/csv).",
    ),
) -> None:
    """Translate every mod XML file under DIRECTORY."""
    from rimtranslator.pipeline import batch_translate, create_backend, plan_units
    from rimtranslator.reporting.formatters import save_report
    from rimtranslator.reporting.report import BatchReport
    from rimtranslator.translation.cache import PromptCache

    if not directory.is_dir():
        console.print(f"[red]Error:[/red] Not a directory: {directory}")
        raise typer.Exit(1)
    directory = directory.resolve()

    languages = _resolve_languages(lang)
    if use_dummy:
        backend_name = BackendChoice.dummy

    cache = None if no_cache else PromptCache(cache_dir)
    try:
        backend, backend_label = create_backend(backend_name, api_key=api_key, cache=cache)
    except MissingCredentialsError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    units = plan_units(directory, languages)
    if not units:
        console.print(f"[yellow]No translatable files in {directory}[/yellow]")
        raise typer.Exit()

    _print(f"Found [green]{len(units)}[/green] translation units in {directory}\n")
    _print(f"Backend: [cyan]{backend_label}[/cyan]  Model: [cyan]{model}[/cyan]", verbose_only=True)
    if cache is not None:
        _print(f"Cache location: [dim]{cache.cache_dir}[/dim]", verbose_only=True)

    batch_report = BatchReport(
        input_directory=str(directory),
        backend=backend_label,
        model=model,
        languages=languages,
        dry_run=dry_run,
    )

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
        disable=_quiet,
    ) as progress:
        task = progress.add_task("Translating", total=len(units))

        def on_progress(phase: str, current: int, total: int, message: str) -> None:
            progress.update(task, completed=current, total=total, description=message)

        result = batch_translate(
            directory,
            backend=backend,
            model=model,
            languages=languages,
            dry_run=dry_run,
            on_progress=on_progress,
        )

    batch_report.add_result(result)
    batch_report.finish()

    summary = Table(title="Batch Summary")
    summary.add_column("Metric", style="bold")
    summary.add_column("Count", justify="right")
    summary.add_row("Translated", f"[green]{result.success_count}[/green]")
    summary.add_row("Errors", f"[red]{result.error_count}[/red]")
    summary.add_row("From cache", str(result.cache_hits))
    summary.add_row("Tokens used", str(result.total_tokens))
    summary.add_row("Total", str(result.total_units))
    console.print(summary)
    _print(f"Elapsed: {result.elapsed_seconds:.1f}s", verbose_only=True)

    if result.failures:
        err_table = Table(title="Errors")
        err_table.add_column("File", style="red")
        err_table.add_column("Language")
        err_table.add_column("Error")
        for failure in result.failures:
            err_table.add_row(failure.source, failure.language, failure.message)
        console.print(err_table)

    if report:
        save_report(batch_report, report)
        _print(f"Report saved: [cyan]{report}[/cyan]")

    if result.error_count:
        console.print(
            f"[red]Some files failed to process: {result.error_count} errors.[/red]"
        )
        raise typer.Exit(1)
    _print(f"[green]All files processed successfully: {result.success_count} files.[/green]")


@app.command()
def scan(
    directory: Path = typer.Argument(
        Path(".."), help="Mod root directory. Defaults to the parent directory.",
    ),
) -> None:
    """List the mod files that would be translated."""
    from rimtranslator.core.paths import relative_source, target_languages
    from rimtranslator.pipeline import discover_sources

    if not directory.is_dir():
        console.print(f"[red]Error:[/red] Not a directory: {directory}")
        raise typer.Exit(1)
    directory = directory.resolve()

    sources = discover_sources(directory)
    console.print(f"Found [green]{len(sources)}[/green] translatable files\n")

    table = Table(title=f"Translatable files in {directory.name}")
    table.add_column("File")
    table.add_column("Languages", justify="right")
    for source in sources:
        langs = target_languages(source, SUPPORTED_LANGUAGES, directory)
        table.add_row(relative_source(source, directory), str(len(langs)))
    console.print(table)


@app.command()
def languages() -> None:
    """List supported target languages."""
    for lang in SUPPORTED_LANGUAGES:
        console.print(lang)


@app.command(name="cache-info")
def cache_info(
    cache_dir: Path | None = typer.Option(
        None, "--cache-dir", envvar="RIMTRANSLATOR_CACHE_DIR",
    ),
) -> None:
    """Show prompt cache statistics."""
    from rimtranslator.translation.cache import PromptCache

    cache = PromptCache(cache_dir)
    console.print(f"Cached prompts: [green]{cache.count()}[/green]")
    console.print(f"Cache size: [green]{cache.size_bytes() / 1024:.1f} KiB[/green]")
    console.print(f"Cache location: [dim]{cache.cache_dir}[/dim]")


@app.command(name="cache-clear")
def cache_clear(
    cache_dir: Path | None = typer.Option(
        None, "--cache-dir", envvar="RIMTRANSLATOR_CACHE_DIR",
    ),
) -> None:
    """Clear the prompt cache."""
    from rimtranslator.translation.cache import PromptCache

    cache = PromptCache(cache_dir)
    deleted = cache.clear()
    console.print(f"Cleared [yellow]{deleted}[/yellow] cached prompts.")


if __name__ == "__main__":
    app()
