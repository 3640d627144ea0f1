"""Sync orchestrator: pushes one rendered document per screen into Notion."""

from datetime import datetime, timezone

import click
from pydantic import BaseModel

from screen_api_sync.config import Mapping, Screen
from screen_api_sync.notion.pages import NotionPages
from screen_api_sync.render.document import render_screen


class SyncReport(BaseModel):
    """What happened to one screen's page during a run."""

    screen: str
    page_id: str
    created: bool
    blocks_deleted: int
    blocks_failed: int
    blocks_appended: int


def page_title_for(screen: str) -> str:
    return f"{screen} API Documentation"


class DocSync:
    """Runs the sync for every screen, strictly one after another."""

    def __init__(self, pages: NotionPages, specs: dict[str, dict]):
        self.pages = pages
        self.specs = specs

    def sync_all(self, mapping: Mapping) -> list[SyncReport]:
        """Sync every screen in mapping order. Any error aborts the run."""
        reports = []
        for name, screen in mapping.screens.items():
            reports.append(self.sync_screen(name, screen))
        click.echo(f"Synced {len(reports)} screen(s).")
        return reports

    def sync_screen(self, name: str, screen: Screen) -> SyncReport:
        click.echo(f"Syncing {name} ({len(screen.endpoints)} endpoints)...")

        page_id = self.pages.find_page_by_screen(name)
        created = page_id is None
        if created:
            click.echo(f"  No page found, creating '{page_title_for(name)}'...")
            page_id = self.pages.create_page(name, page_title_for(name))
            click.echo(f"  Created page {page_id}")
        else:
            click.echo(f"  Found page {page_id}")

        markdown = render_screen(name, screen, self.specs, synced_at=datetime.now(timezone.utc))

        click.echo("  Replacing page content...")
        cleared, appended = self.pages.update_page_content(page_id, markdown)
        if cleared.failed:
            click.echo(f"  Warning: {cleared.failed} block(s) could not be deleted", err=True)
        click.echo(f"  Removed {cleared.deleted} block(s), appended {appended}")

        self.pages.update_last_synced(page_id)
        click.echo(f"  {name} done.")

        return SyncReport(
            screen=name,
            page_id=page_id,
            created=created,
            blocks_deleted=cleared.deleted,
            blocks_failed=cleared.failed,
            blocks_appended=appended,
        )
