"""OpenAPI document loading and endpoint lookup.

Specs are read from a fixed set of files. A missing file is skipped; lookups
against it simply fail later as "not found".
"""

from pathlib import Path

import yaml

from screen_api_sync.config import EndpointDecl
from .base import Param, ResolvedEndpoint

DEFAULT_SPEC_FILES = (
    "api/openapi.yaml",
    "in-game/openapi.yaml",
    "steam/openapi.yaml",
)


def load_specs(root: Path, files: tuple[str, ...] | list[str] = DEFAULT_SPEC_FILES) -> dict[str, dict]:
    """Parse every existing spec file under root, keyed by its relative path."""
    specs = {}
    for rel_path in files:
        file_path = root / rel_path
        if not file_path.exists():
            continue
        doc = yaml.safe_load(file_path.read_text(encoding="utf-8"))
        specs[rel_path] = doc or {}
    return specs


def resolve_endpoint(specs: dict[str, dict], decl: EndpointDecl) -> ResolvedEndpoint | None:
    """Look up the operation for a declaration, or None if it is not in the spec."""
    doc = specs.get(decl.source)
    if not doc:
        return None
    path_item = (doc.get("paths") or {}).get(decl.path)
    if not path_item:
        return None
    operation = path_item.get(decl.method.lower())
    if not isinstance(operation, dict):
        return None

    params = _merge_parameters(
        path_item.get("parameters") or [],
        operation.get("parameters") or [],
    )

    return ResolvedEndpoint(
        method=decl.method.upper(),
        path=decl.path,
        summary=operation.get("summary") or "",
        description=operation.get("description") or "",
        parameters=_parse_parameters(doc, params),
        request_body=_parse_request_body(doc, operation.get("requestBody")),
        responses=_parse_responses(doc, operation.get("responses") or {}),
        tags=operation.get("tags") or [],
    )


def _deref(doc: dict, node):
    """Follow local '#/...' $ref pointers. Unresolvable refs yield an empty dict."""
    seen = set()
    while isinstance(node, dict) and "$ref" in node:
        ref = node["$ref"]
        if not isinstance(ref, str) or not ref.startswith("#/") or ref in seen:
            return {}
        seen.add(ref)
        target = doc
        for part in ref[2:].split("/"):
            part = part.replace("~1", "/").replace("~0", "~")
            if not isinstance(target, dict) or part not in target:
                return {}
            target = target[part]
        node = target
    return node


def _merge_parameters(path_params: list[dict], op_params: list[dict]) -> list[dict]:
    """Path-level parameters apply to every operation unless overridden by (name, in)."""
    merged: dict[tuple, dict] = {}
    for p in path_params + op_params:
        key = (p.get("$ref"),) if "$ref" in p else (p.get("name"), p.get("in"))
        merged[key] = p
    return list(merged.values())


def _parse_parameters(doc: dict, params: list[dict]) -> list[Param]:
    result = []
    for raw in params:
        p = _deref(doc, raw)
        if not p.get("name"):
            continue
        schema = _deref(doc, p.get("schema") or {})
        result.append(
            Param(
                name=p["name"],
                location=p.get("in", "query"),
                required=bool(p.get("required", False)),
                param_type=str(schema.get("type") or ""),
                description=p.get("description") or "",
            )
        )
    return result


def _parse_request_body(doc: dict, body: dict | None) -> dict | None:
    body = _deref(doc, body)
    if not body:
        return None
    content = body.get("content") or {}
    if "application/json" not in content:
        return None
    schema = _deref(doc, (content["application/json"] or {}).get("schema"))
    if schema is None:
        return None
    properties = {
        name: _deref(doc, prop) for name, prop in (schema.get("properties") or {}).items()
    }
    return {**schema, "properties": properties}


def _parse_responses(doc: dict, responses: dict) -> dict[str, str]:
    result = {}
    for status_code, resp in responses.items():
        resp = _deref(doc, resp) or {}
        result[str(status_code)] = resp.get("description") or ""
    return result
