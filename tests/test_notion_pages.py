from datetime import date, datetime, timezone
from unittest.mock import MagicMock, patch

import httpx
import pytest
from notion_client.errors import HTTPResponseError

from screen_api_sync.config import DEFAULT_DOCS_URL
from screen_api_sync.notion.pages import ClearResult, NotionPages, page_title


def _page(page_id: str, title: str) -> dict:
    return {
        "id": page_id,
        "properties": {
            "Name": {"type": "title", "title": [{"plain_text": title}]},
            "Screen": {"type": "select", "select": {"name": "Login"}},
        },
    }


def _api_error() -> HTTPResponseError:
    response = httpx.Response(404, request=httpx.Request("DELETE", "https://api.notion.com/v1/blocks/x"))
    return HTTPResponseError(response)


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def pages(client):
    return NotionPages(client, "db123", DEFAULT_DOCS_URL)


class TestFindPage:
    def test_queries_by_screen_select(self, pages, client):
        client.databases.query.return_value = {"results": []}
        pages.find_page_by_screen("Login")
        kwargs = client.databases.query.call_args[1]
        assert kwargs["database_id"] == "db123"
        assert kwargs["filter"] == {"property": "Screen", "select": {"equals": "Login"}}

    def test_returns_first_page_with_api_in_title(self, pages, client):
        client.databases.query.return_value = {"results": [
            _page("p1", "Login wireframes"),
            _page("p2", "Login API Documentation"),
            _page("p3", "Login API (old)"),
        ]}
        assert pages.find_page_by_screen("Login") == "p2"

    def test_none_when_no_title_matches(self, pages, client):
        client.databases.query.return_value = {"results": [_page("p1", "Login wireframes")]}
        assert pages.find_page_by_screen("Login") is None


class TestCreatePage:
    def test_default_properties(self, pages, client):
        client.pages.create.return_value = {"id": "new"}
        assert pages.create_page("Login", "Login API Documentation") == "new"
        kwargs = client.pages.create.call_args[1]
        assert kwargs["parent"] == {"database_id": "db123"}
        props = kwargs["properties"]
        assert props["Name"]["title"][0]["text"]["content"] == "Login API Documentation"
        assert props["Screen"] == {"select": {"name": "Login"}}
        assert props["Status"] == {"select": {"name": "Approved"}}
        assert props["API Endpoint"] == {"url": "https://docs.mentoroid.ai"}
        assert "Docs" not in props


class TestClearPageContent:
    def test_deletes_every_listed_block(self, pages, client):
        client.blocks.children.list.return_value = {"results": [{"id": "b1"}, {"id": "b2"}]}
        result = pages.clear_page_content("page")
        assert result == ClearResult(deleted=2, failed=0)
        assert client.blocks.children.list.call_args[1] == {"block_id": "page", "page_size": 100}
        deleted = [c[1]["block_id"] for c in client.blocks.delete.call_args_list]
        assert deleted == ["b1", "b2"]

    def test_failed_delete_is_counted_not_raised(self, pages, client):
        client.blocks.children.list.return_value = {"results": [{"id": "b1"}, {"id": "b2"}, {"id": "b3"}]}
        client.blocks.delete.side_effect = [None, _api_error(), None]
        result = pages.clear_page_content("page")
        assert result == ClearResult(deleted=2, failed=1)
        assert client.blocks.delete.call_count == 3


class TestAppendBlocks:
    def test_250_blocks_in_three_ordered_batches(self, pages, client):
        blocks = [{"n": i} for i in range(250)]
        assert pages.append_blocks("page", blocks) == 3
        batches = [c[1]["children"] for c in client.blocks.children.append.call_args_list]
        assert [len(b) for b in batches] == [100, 100, 50]
        assert [blk for batch in batches for blk in batch] == blocks

    def test_no_blocks_no_calls(self, pages, client):
        assert pages.append_blocks("page", []) == 0
        client.blocks.children.append.assert_not_called()


class TestUpdatePageContent:
    def test_clears_before_appending(self, pages, client):
        client.blocks.children.list.return_value = {"results": [{"id": "old"}]}
        cleared, appended = pages.update_page_content("page", "# Login\n\nText\n")
        assert cleared.deleted == 1
        assert appended == 3  # callout + heading + paragraph
        names = [c[0] for c in client.method_calls]
        assert names.index("blocks.delete") < names.index("blocks.children.append")

    def test_last_synced_is_date_only(self, pages, client):
        pages.update_last_synced("page", today=date(2026, 10, 18))
        kwargs = client.pages.update.call_args[1]
        assert kwargs["page_id"] == "page"
        assert kwargs["properties"] == {"Last Synced": {"date": {"start": "2026-10-18"}}}

    @patch("screen_api_sync.notion.pages.datetime")
    def test_last_synced_defaults_to_utc_date(self, mock_datetime, pages, client):
        mock_datetime.now.return_value = datetime(2026, 10, 18, 23, 59, tzinfo=timezone.utc)
        pages.update_last_synced("page")
        mock_datetime.now.assert_called_once_with(timezone.utc)
        kwargs = client.pages.update.call_args[1]
        assert kwargs["properties"] == {"Last Synced": {"date": {"start": "2026-10-18"}}}


class TestPageTitle:
    def test_joins_title_parts(self):
        page = {"properties": {"Title": {"type": "title", "title": [{"plain_text": "Login "}, {"plain_text": "API"}]}}}
        assert page_title(page) == "Login API"

    def test_no_title_property(self):
        assert page_title({"properties": {}}) == ""
