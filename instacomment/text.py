import re

_NAMED_ENTITIES = {
    "quot": '"',
    "#39": "'",
    "lt": "<",
    "gt": ">",
    "amp": "&",
}

_ENTITY_RE = re.compile(r"&(quot|#39|lt|gt|amp|#[0-9]+|#[xX][0-9a-fA-F]+);")
_WHITESPACE_RE = re.compile(r"\s+")


def strip_author_prefix(caption: str) -> str:
    """
    Drop a leading "<author>: " prefix. Everything up to and including the
    first colon goes; text without a colon is only trimmed.
    """
    _, sep, body = caption.partition(":")
    return body.strip() if sep else caption.strip()


def _replace_entity(match: re.Match) -> str:
    name = match.group(1)
    if name in _NAMED_ENTITIES:
        return _NAMED_ENTITIES[name]
    if name[1] in "xX":
        codepoint = int(name[2:], 16)
    else:
        codepoint = int(name[1:])
    # invalid code points stay as written
    if codepoint > 0x10FFFF or 0xD800 <= codepoint <= 0xDFFF:
        return match.group(0)
    return chr(codepoint)


def decode_entities(text: str) -> str:
    """Decode the named, decimal and hex character references in one pass."""
    return _ENTITY_RE.sub(_replace_entity, text)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_caption(raw: str | None, collapse: bool = False) -> str:
    if not raw:
        return ""
    caption = decode_entities(strip_author_prefix(raw))
    if collapse:
        caption = collapse_whitespace(caption)
    return caption
