"""Translate rendered documents into Notion blocks.

Translation happens in two steps: ``classify_line`` turns a text line into a
schema-free ``Block`` and ``to_notion_block`` maps that onto Notion's JSON
block structure. Both are pure functions.
"""

from typing import Literal, NamedTuple

MAX_TEXT_CHARS = 2000  # Notion rich_text content limit

CALLOUT_TEXT = (
    "This page is generated from the OpenAPI specs and screen-api-mapping.json. "
    "Manual edits will be overwritten on the next sync."
)
CALLOUT_EMOJI = "🤖"

BlockKind = Literal[
    "heading_1",
    "heading_2",
    "heading_3",
    "bullet",
    "divider",
    "bold",
    "italic",
    "paragraph",
    "callout",
]


class Block(NamedTuple):
    kind: BlockKind
    text: str = ""


def classify_line(line: str) -> Block | None:
    """Classify one line by ordered prefix match on the raw text.

    Blank lines yield None. Indented lines never match a prefix, so they stay
    paragraphs with their indentation intact.
    """
    if not line.strip():
        return None

    if line.startswith("### "):
        return Block("heading_3", _truncate(line[4:]))
    if line.startswith("## "):
        return Block("heading_2", _truncate(line[3:]))
    if line.startswith("# "):
        return Block("heading_1", _truncate(line[2:]))
    if line.startswith("- "):
        return Block("bullet", _truncate(line[2:]))
    if line == "---":
        return Block("divider")
    if len(line) > 4 and line.startswith("**") and line.endswith("**"):
        return Block("bold", _truncate(line[2:-2]))
    if len(line) > 2 and line.startswith("*") and line.endswith("*"):
        return Block("italic", _truncate(line[1:-1]))
    return Block("paragraph", _truncate(line))


def parse_blocks(markdown: str) -> list[Block]:
    """Callout first, then one block per non-blank line, in order."""
    blocks = [Block("callout", CALLOUT_TEXT)]
    for line in markdown.splitlines():
        block = classify_line(line)
        if block is not None:
            blocks.append(block)
    return blocks


def create_notion_blocks(markdown: str) -> list[dict]:
    """Translate a rendered document into Notion block objects."""
    return [to_notion_block(b) for b in parse_blocks(markdown)]


def to_notion_block(block: Block) -> dict:
    if block.kind == "divider":
        return {"object": "block", "type": "divider", "divider": {}}

    if block.kind == "callout":
        return {
            "object": "block",
            "type": "callout",
            "callout": {
                "rich_text": _rich_text(block.text),
                "icon": {"type": "emoji", "emoji": CALLOUT_EMOJI},
                "color": "blue_background",
            },
        }

    if block.kind == "bullet":
        block_type = "bulleted_list_item"
    elif block.kind.startswith("heading_"):
        block_type = block.kind
    else:
        block_type = "paragraph"

    annotations = {}
    if block.kind == "bold":
        annotations = {"bold": True}
    elif block.kind == "italic":
        annotations = {"italic": True}

    return {
        "object": "block",
        "type": block_type,
        block_type: {"rich_text": _rich_text(block.text, annotations)},
    }


def _rich_text(text: str, annotations: dict | None = None) -> list[dict]:
    item = {"type": "text", "text": {"content": text}}
    if annotations:
        item["annotations"] = annotations
    return [item]


def _truncate(text: str) -> str:
    return text[:MAX_TEXT_CHARS]
