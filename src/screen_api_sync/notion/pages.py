"""Notion page operations used by the sync.

Wraps a ``notion_client.Client`` so the rest of the pipeline never talks to
the SDK directly. The client is injected, which lets tests pass a MagicMock.
"""

from datetime import date, datetime, timezone

from notion_client import Client
from notion_client.errors import HTTPResponseError, RequestTimeoutError
from pydantic import BaseModel

from .blocks import create_notion_blocks

PAGE_SIZE = 100  # Notion's max for list and append calls
TITLE_MARKER = "API"
DEFAULT_STATUS = "Approved"


class ClearResult(BaseModel):
    """Outcome of a best-effort clear: deleted and failed block counts."""

    deleted: int = 0
    failed: int = 0


class NotionPages:
    """Locate, create and rewrite documentation pages in one database."""

    def __init__(self, client: Client, database_id: str, docs_url: str):
        self.client = client
        self.database_id = database_id
        self.docs_url = docs_url

    # -- locate / create ------------------------------------------------------

    def find_page_by_screen(self, screen: str) -> str | None:
        """Return the id of the screen's documentation page, if one exists.

        Other pages may share the Screen tag, so only a page whose title
        contains "API" qualifies. Only the first page of query results is read.
        """
        response = self.client.databases.query(
            database_id=self.database_id,
            filter={"property": "Screen", "select": {"equals": screen}},
        )
        for page in response.get("results", []):
            if TITLE_MARKER in page_title(page):
                return page["id"]
        return None

    def create_page(self, screen: str, title: str) -> str:
        page = self.client.pages.create(
            parent={"database_id": self.database_id},
            properties={
                "Name": {"title": [{"text": {"content": title}}]},
                "Screen": {"select": {"name": screen}},
                "Status": {"select": {"name": DEFAULT_STATUS}},
                "API Endpoint": {"url": self.docs_url},
            },
        )
        return page["id"]

    # -- content --------------------------------------------------------------

    def clear_page_content(self, page_id: str) -> ClearResult:
        """Delete the page's child blocks, counting failures instead of raising."""
        response = self.client.blocks.children.list(block_id=page_id, page_size=PAGE_SIZE)
        result = ClearResult()
        for block in response.get("results", []):
            try:
                self.client.blocks.delete(block_id=block["id"])
            except (HTTPResponseError, RequestTimeoutError):
                result.failed += 1
            else:
                result.deleted += 1
        return result

    def append_blocks(self, page_id: str, blocks: list[dict]) -> int:
        """Append blocks in order, at most PAGE_SIZE per call. Returns the call count."""
        calls = 0
        for start in range(0, len(blocks), PAGE_SIZE):
            self.client.blocks.children.append(
                block_id=page_id,
                children=blocks[start:start + PAGE_SIZE],
            )
            calls += 1
        return calls

    def update_page_content(self, page_id: str, markdown: str) -> tuple[ClearResult, int]:
        """Replace all page content. Returns the clear result and blocks appended."""
        cleared = self.clear_page_content(page_id)
        blocks = create_notion_blocks(markdown)
        self.append_blocks(page_id, blocks)
        return cleared, len(blocks)

    def update_last_synced(self, page_id: str, today: date | None = None) -> None:
        today = today or datetime.now(timezone.utc).date()
        self.client.pages.update(
            page_id=page_id,
            properties={"Last Synced": {"date": {"start": today.isoformat()}}},
        )


def page_title(page: dict) -> str:
    """Plain-text title of a page object, whatever its title property is called."""
    for prop in page.get("properties", {}).values():
        if prop.get("type") == "title" or "title" in prop:
            return "".join(
                part.get("plain_text") or part.get("text", {}).get("content", "")
                for part in prop.get("title") or []
            )
    return ""
