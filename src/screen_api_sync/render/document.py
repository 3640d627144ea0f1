"""Renders one markdown-like document per screen.

The output is line oriented: every line maps to exactly one Notion block, so
multi-line constructs (tables, code fences) are never emitted.
"""

import re
from datetime import datetime, timezone

from screen_api_sync.config import MAPPING_FILE, EndpointDecl, Screen
from screen_api_sync.parser.base import Param, ResolvedEndpoint
from screen_api_sync.parser.swagger import resolve_endpoint

MAX_DESCRIPTION_CHARS = 1000

PLANNED_NOTE = "*Planned — not yet deployed*"
NOT_FOUND_NOTE = "*Endpoint not found in spec*"
DIVIDER = "---"


def render_screen(
    name: str,
    screen: Screen,
    specs: dict[str, dict],
    synced_at: datetime | None = None,
) -> str:
    """Render the full document for a screen, endpoints in declaration order."""
    synced_at = synced_at or datetime.now(timezone.utc)

    lines = [f"# {name}", "", screen.description, "", DIVIDER, ""]
    for decl in screen.endpoints:
        lines.extend(_render_endpoint(decl, specs))

    lines.extend([
        f"*Last synced: {synced_at.isoformat()}*",
        f"*Source of truth: {MAPPING_FILE}*",
    ])
    return "\n".join(lines) + "\n"


def format_description(text: str) -> str:
    """Collapse runs of 3+ newlines to one blank line, then cap the length."""
    collapsed = re.sub(r"\n{3,}", "\n\n", text)
    return collapsed[:MAX_DESCRIPTION_CHARS]


def endpoint_heading(method: str, path: str) -> str:
    return f"## {method.upper()} `{path}`"


def _render_endpoint(decl: EndpointDecl, specs: dict[str, dict]) -> list[str]:
    heading = endpoint_heading(decl.method, decl.path)

    if decl.is_planned:
        return [heading, "", PLANNED_NOTE, "", DIVIDER, ""]

    endpoint = resolve_endpoint(specs, decl)
    if endpoint is None:
        return [heading, "", NOT_FOUND_NOTE, "", DIVIDER, ""]

    lines = [heading, ""]
    if endpoint.summary:
        lines.extend([f"**{endpoint.summary.strip()}**", ""])
    if endpoint.description:
        lines.extend([format_description(endpoint.description), ""])

    lines.extend(_render_parameters(endpoint.parameters))
    lines.extend(_render_request_body(endpoint))
    lines.extend(_render_responses(endpoint.responses))
    lines.extend([DIVIDER, ""])
    return lines


def _render_parameters(params: list[Param]) -> list[str]:
    if not params:
        return []
    lines = ["### Parameters", ""]
    for p in params:
        marker = "required" if p.required else "optional"
        lines.append(f"- `{p.name}` ({marker}): {p.description or p.param_type}")
    lines.append("")
    return lines


def _render_request_body(endpoint: ResolvedEndpoint) -> list[str]:
    schema = endpoint.request_body
    if schema is None:
        return []
    required = set(schema.get("required") or [])
    lines = ["### Request Body", ""]
    for name, prop in (schema.get("properties") or {}).items():
        prop = prop or {}
        marker = "required" if name in required else "optional"
        detail = prop.get("description") or prop.get("type") or ""
        lines.append(f"- `{name}` ({marker}): {detail}")
    lines.append("")
    return lines


def _render_responses(responses: dict[str, str]) -> list[str]:
    if not responses:
        return []
    lines = ["### Responses", ""]
    for code, description in responses.items():
        lines.append(f"- `{code}`: {description}")
    lines.append("")
    return lines
