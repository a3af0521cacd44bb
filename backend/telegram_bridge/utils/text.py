"""Text helpers for relaying assistant content to Telegram.

Two jobs:
1. Flatten the host's structured message content into plain text
2. Convert the Markdown subset assistants emit into Telegram HTML
"""

import json
import re
from collections.abc import Mapping
from typing import Any

TRUNCATION_MARKER = "\n\n... (truncated)"
RAW_CONTENT_LIMIT = 500

PREVIEW_SOURCE_CHARS = 20
PREVIEW_MAX_CHARS = 18

# Order matters: every pattern below runs on already-escaped text
_CODE_BLOCK = re.compile(r"```(\w*)\n?([\s\S]*?)```")
_INLINE_CODE = re.compile(r"`([^`]+)`")
_BOLD = re.compile(r"\*\*(.+?)\*\*")
_ITALIC = re.compile(r"\*([^\s*][^*]*[^\s*])\*")
_ITALIC_SINGLE = re.compile(r"\*([^\s*])\*")
_LINK = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_STRIKE = re.compile(r"~~(.+?)~~")
_CODE_SLOT = re.compile(r"\x00(\d+)\x00")

# Keep ASCII word chars, whitespace and CJK ideographs in button previews
_PREVIEW_STRIP = re.compile(r"[^\w\s\u4e00-\u9fff]", re.ASCII)


def _part_text(part: Any) -> str | None:
    if isinstance(part, str):
        return part
    if not isinstance(part, Mapping):
        return None

    part_type = part.get("type")
    if part_type == "text" and isinstance(part.get("text"), str):
        return part["text"]
    if part_type == "step-start":
        return None
    if isinstance(part_type, str) and part_type.startswith("tool-"):
        return f"[🔧 {part_type[len('tool-'):]}]"
    return None


def extract_text(content: Any) -> str:
    """Flatten host message content into display text.

    Plain strings pass through untouched. Mappings carrying a ``parts`` list
    are joined part by part (text verbatim, tool calls as a bracketed tag,
    step markers dropped). A bare ``text`` field is used as-is. Anything else
    is serialised as JSON and capped.
    """
    if isinstance(content, str):
        return content
    if content is None or isinstance(content, (bool, int, float)):
        return ""

    parts = None
    if isinstance(content, Mapping):
        parts = content.get("parts")
        if not isinstance(parts, list):
            parts = None
            if isinstance(content.get("text"), str):
                return content["text"]
    elif isinstance(content, list):
        parts = content

    if parts is not None:
        texts = [text for text in map(_part_text, parts) if text is not None]
        return "\n".join(texts).strip()

    return json.dumps(content, ensure_ascii=False, default=str)[:RAW_CONTENT_LIMIT]


def _code_block(match: re.Match[str]) -> str:
    lang, code = match.group(1), match.group(2).strip()
    if lang:
        return f'<pre><code class="language-{lang}">{code}</code></pre>'
    return f"<pre><code>{code}</code></pre>"


def to_hypertext(text: str) -> str:
    """Convert assistant Markdown into Telegram's HTML parse mode."""
    result = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")

    # Code spans are parked in slots so the inline rules never reach inside them
    spans: list[str] = []

    def park(html: str) -> str:
        spans.append(html)
        return f"\x00{len(spans) - 1}\x00"

    result = _CODE_BLOCK.sub(lambda m: park(_code_block(m)), result)
    result = _INLINE_CODE.sub(lambda m: park(f"<code>{m.group(1)}</code>"), result)
    result = _BOLD.sub(r"<b>\1</b>", result)
    result = _ITALIC.sub(r"<i>\1</i>", result)
    result = _ITALIC_SINGLE.sub(r"<i>\1</i>", result)
    result = _LINK.sub(r'<a href="\2">\1</a>', result)
    result = _STRIKE.sub(r"<s>\1</s>", result)
    def unpark(match: re.Match[str]) -> str:
        index = int(match.group(1))
        return spans[index] if index < len(spans) else match.group(0)

    return _CODE_SLOT.sub(unpark, result)


def truncate(text: str, limit: int) -> str:
    """Cap ``text`` at ``limit`` characters, appending a visible marker."""
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def preview(text: str) -> str:
    """Short single-line label for a message button."""
    cleaned = text[:PREVIEW_SOURCE_CHARS].replace("\n", " ")
    cleaned = _PREVIEW_STRIP.sub("", cleaned).strip()
    return cleaned[:PREVIEW_MAX_CHARS] + "..."
