"""Normalized endpoint models built from OpenAPI operations.

The resolver fills every optional field with its empty form so the renderer
can format them without checking for missing keys.
"""

from pydantic import BaseModel


class Param(BaseModel):
    """A single operation parameter (query, path, header, or cookie)."""

    name: str
    location: str = "query"  # query / path / header / cookie
    required: bool = False
    param_type: str = ""
    description: str = ""


class ResolvedEndpoint(BaseModel):
    """The detail record for one endpoint declaration."""

    method: str  # upper-cased
    path: str
    summary: str = ""
    description: str = ""
    parameters: list[Param] = []
    request_body: dict | None = None  # JSON schema of an application/json body
    responses: dict[str, str] = {}  # {status_code: description}
    tags: list[str] = []
