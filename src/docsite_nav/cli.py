"""Command-line entry point that emits sidebar and site configuration JSON.

The framework's build loads the JSON written here, so the sidebar is rescanned
every time the command runs. Diagnostics are logged as JSON lines on stderr;
stdout carries only the generated document.
"""

from __future__ import annotations

import json
import sys
import uuid
from pathlib import Path
from typing import Annotated, Any

import typer

from docsite_common.errors import DocsiteError, SettingsError
from docsite_common.logging import CorrelationContext, get_logger, setup_logging, with_fields
from docsite_common.problem_details import render_problem
from docsite_nav.diagnostics import DiagnosticLevel
from docsite_nav.schema import validate_sidebar
from docsite_nav.settings import DocsiteSettings, load_settings
from docsite_nav.sidebar import build_tree
from docsite_nav.site_config import build_site_config

__all__ = ["app", "config", "sidebar"]

LOGGER = get_logger(__name__)

app = typer.Typer(
    help="Generate documentation-site navigation from a docs directory.",
    no_args_is_help=True,
    add_completion=False,
)

DocsDirArgument = Annotated[
    Path | None,
    typer.Argument(
        help="Docs directory containing one folder per category (default: DOCSITE_DOCS_DIR).",
        show_default=False,
    ),
]
CategoryOption = Annotated[
    list[str] | None,
    typer.Option(
        "--category",
        "-c",
        help="Root category; repeat for several (default: DOCSITE_ROOT_CATEGORIES).",
        show_default=False,
    ),
]
SortOption = Annotated[
    bool | None,
    typer.Option("--sort/--no-sort", help="Order entries by name.", show_default=False),
]
LocaleOption = Annotated[
    str | None,
    typer.Option("--locale", help="Label locale, e.g. zh-CN or en-US.", show_default=False),
]
OutputOption = Annotated[
    Path | None,
    typer.Option("--output", "-o", help="Write JSON here instead of stdout.", metavar="PATH"),
]


def _load(
    docs_dir: Path | None,
    categories: list[str] | None,
    sort: bool | None,
    locale: str | None,
) -> DocsiteSettings:
    overrides: dict[str, Any] = {}
    if docs_dir is not None:
        overrides["docs_dir"] = docs_dir
    if categories:
        overrides["root_categories"] = tuple(categories)
    if sort is not None:
        overrides["sort_entries"] = sort
    if locale is not None:
        overrides["locale"] = locale
    try:
        settings = load_settings(**overrides)
    except SettingsError as exc:
        problem = exc.to_problem_details(instance="urn:docsite:settings")
        typer.echo(render_problem(problem), err=True)
        raise typer.Exit(code=1) from exc
    setup_logging(settings.log_level, stream=sys.stderr)
    return settings


def _emit(payload: object, output: Path | None) -> None:
    rendered = json.dumps(payload, ensure_ascii=False, indent=2)
    if output is None:
        typer.echo(rendered)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(rendered + "\n", encoding="utf-8")


@app.command()
def sidebar(
    docs_dir: DocsDirArgument = None,
    category: CategoryOption = None,
    sort: SortOption = None,
    locale: LocaleOption = None,
    output: OutputOption = None,
) -> None:
    """Scan the docs directory and print the sidebar tree.

    Raises
    ------
    typer.Exit
        With code 1 when settings are invalid or the output fails validation.
    """
    settings = _load(docs_dir, category, sort, locale)
    with CorrelationContext(uuid.uuid4().hex), with_fields(LOGGER, operation="cli.sidebar") as log:
        result = build_tree(
            settings.root_categories, settings.docs_dir, options=settings.sidebar_options()
        )
        result.diagnostics.emit(log)
        payload = result.to_dict()
        try:
            if settings.validate_output:
                validate_sidebar(payload)
        except DocsiteError as exc:
            log.log(
                exc.log_level,
                "Sidebar output rejected",
                exc_info=True,
                extra={"code": exc.code.value},
            )
            problem = exc.to_problem_details(instance="urn:docsite:sidebar")
            typer.echo(render_problem(problem), err=True)
            raise typer.Exit(code=1) from exc
        _emit(payload, output)
        log.info(
            "Sidebar written",
            extra={
                "category_count": len(payload),
                "skipped_entries": len(result.failures),
                "error_count": len(result.diagnostics.at_level(DiagnosticLevel.ERROR)),
            },
        )


@app.command()
def config(
    docs_dir: DocsDirArgument = None,
    category: CategoryOption = None,
    sort: SortOption = None,
    locale: LocaleOption = None,
    output: OutputOption = None,
) -> None:
    """Print the complete site configuration, sidebar included.

    Raises
    ------
    typer.Exit
        With code 1 when settings are invalid or the output fails validation.
    """
    settings = _load(docs_dir, category, sort, locale)
    with CorrelationContext(uuid.uuid4().hex):
        try:
            site = build_site_config(settings)
        except DocsiteError as exc:
            LOGGER.log(
                exc.log_level,
                "Site configuration failed",
                exc_info=True,
                extra={"operation": "cli.config", "code": exc.code.value},
            )
            problem = exc.to_problem_details(instance="urn:docsite:config")
            typer.echo(render_problem(problem), err=True)
            raise typer.Exit(code=1) from exc
        _emit(site.to_dict(), output)


def main() -> None:
    """Console-script entry point."""
    app()


if __name__ == "__main__":
    main()
