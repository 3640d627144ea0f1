"""Screen mapping and runtime settings.

The mapping file (``screen-api-mapping.json``) is the source of truth for which
endpoints belong to which screen. It is loaded once per run and never mutated.
"""

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from screen_api_sync.errors import ConfigError

MAPPING_FILE = "screen-api-mapping.json"
DEFAULT_DOCS_URL = "https://docs.mentoroid.ai"

TOKEN_ENV = "NOTION_API_KEY"
DATABASE_ENV = "NOTION_DATABASE_ID"


class EndpointDecl(BaseModel):
    """One endpoint declared for a screen."""

    model_config = ConfigDict(frozen=True)

    source: str  # spec file identifier, e.g. api/openapi.yaml
    method: str  # GET / POST / PUT / DELETE / PATCH
    path: str
    status: str = "active"  # active / planned

    @property
    def is_planned(self) -> bool:
        return self.status.lower() == "planned"


class Screen(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str = ""
    endpoints: list[EndpointDecl] = []


class Mapping(BaseModel):
    model_config = ConfigDict(frozen=True)

    screens: dict[str, Screen]


class Settings(BaseModel):
    """Credentials and target database for the Notion client."""

    model_config = ConfigDict(frozen=True)

    notion_token: str
    database_id: str
    docs_url: str = DEFAULT_DOCS_URL


def load_mapping(path: Path) -> Mapping:
    """Load the screen-to-endpoint mapping. Raises ConfigError if unusable."""
    if not path.exists():
        raise ConfigError(f"Mapping file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Mapping file {path} is not valid JSON: {e}") from e

    try:
        return Mapping.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Mapping file {path} is malformed: {e}") from e


def load_settings(token: str | None, database_id: str | None, docs_url: str | None = None) -> Settings:
    """Build settings from the credential and database id.

    Both values normally come from the environment; a missing or blank one is
    a fatal configuration error.
    """
    missing = [
        name
        for name, value in ((TOKEN_ENV, token), (DATABASE_ENV, database_id))
        if not value or not value.strip()
    ]
    if missing:
        raise ConfigError(f"Missing required environment variable(s): {', '.join(missing)}")

    return Settings(
        notion_token=token.strip(),
        database_id=database_id.strip(),
        docs_url=docs_url or DEFAULT_DOCS_URL,
    )
