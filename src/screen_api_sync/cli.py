"""CLI entry point for screen-api-sync."""

import re
import sys
from pathlib import Path

import click
from notion_client import Client

from screen_api_sync.config import (
    DATABASE_ENV,
    DEFAULT_DOCS_URL,
    MAPPING_FILE,
    TOKEN_ENV,
    load_mapping,
    load_settings,
)
from screen_api_sync.errors import ConfigError
from screen_api_sync.notion.pages import NotionPages
from screen_api_sync.parser.swagger import DEFAULT_SPEC_FILES, load_specs
from screen_api_sync.render.document import render_screen
from screen_api_sync.sync import DocSync


def _slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-") or "screen"


def _load_specs(root: Path, spec_files: tuple[str, ...]) -> dict[str, dict]:
    specs = load_specs(root, spec_files or DEFAULT_SPEC_FILES)
    click.echo(f"Loaded {len(specs)} spec file(s): {', '.join(specs) or 'none'}")
    return specs


@click.group()
def main():
    """Screen API Sync — publish OpenAPI docs per screen to Notion."""
    pass


@main.command()
@click.option("--mapping", "mapping_path", default=MAPPING_FILE, type=click.Path(path_type=Path), help="Screen-to-endpoint mapping JSON file.")
@click.option("--root", default=".", type=click.Path(file_okay=False, path_type=Path), help="Directory the spec paths are relative to.")
@click.option("--spec", "spec_files", multiple=True, help="OpenAPI file to load (repeatable). Defaults to the standard three.")
@click.option("--token", envvar=TOKEN_ENV, default=None, help=f"Notion integration token (env: {TOKEN_ENV}).")
@click.option("--database-id", envvar=DATABASE_ENV, default=None, help=f"Target Notion database (env: {DATABASE_ENV}).")
@click.option("--docs-url", default=DEFAULT_DOCS_URL, help="Documentation URL set on newly created pages.")
def sync(mapping_path: Path, root: Path, spec_files: tuple[str, ...], token: str | None, database_id: str | None, docs_url: str):
    """Render every screen's API docs and replace its Notion page content."""
    try:
        settings = load_settings(token, database_id, docs_url)
        mapping = load_mapping(mapping_path)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Loaded {len(mapping.screens)} screen(s) from {mapping_path}")

    try:
        specs = _load_specs(root, spec_files)
        pages = NotionPages(Client(auth=settings.notion_token), settings.database_id, settings.docs_url)
        DocSync(pages, specs).sync_all(mapping)
    except Exception as e:
        click.echo(f"Sync failed: {e}", err=True)
        sys.exit(1)

    click.echo("Done!")


@main.command()
@click.option("-o", "--output", required=True, type=click.Path(file_okay=False, path_type=Path), help="Output directory for rendered documents.")
@click.option("--mapping", "mapping_path", default=MAPPING_FILE, type=click.Path(path_type=Path), help="Screen-to-endpoint mapping JSON file.")
@click.option("--root", default=".", type=click.Path(file_okay=False, path_type=Path), help="Directory the spec paths are relative to.")
@click.option("--spec", "spec_files", multiple=True, help="OpenAPI file to load (repeatable). Defaults to the standard three.")
@click.option("--screen", "screens", multiple=True, help="Only render these screens (repeatable).")
def render(output: Path, mapping_path: Path, root: Path, spec_files: tuple[str, ...], screens: tuple[str, ...]):
    """Render screen documents to local markdown files without touching Notion."""
    try:
        mapping = load_mapping(mapping_path)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    unknown = [s for s in screens if s not in mapping.screens]
    if unknown:
        raise click.BadParameter(f"unknown screen(s): {', '.join(unknown)}", param_hint="--screen")

    specs = _load_specs(root, spec_files)
    selected = screens or tuple(mapping.screens)

    output.mkdir(parents=True, exist_ok=True)
    for name in selected:
        file_path = output / f"{_slugify(name)}.md"
        file_path.write_text(render_screen(name, mapping.screens[name], specs), encoding="utf-8")
        click.echo(f"  Created {file_path}")

    click.echo(f"Rendered {len(selected)} screen(s) to {output}")
