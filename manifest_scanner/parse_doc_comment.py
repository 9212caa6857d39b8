"""Parser for ``/** ... */`` documentation comment blocks."""

import re

from manifest_scanner.doc_comment import DocComment, Tag

_BLOCK_RE = re.compile(r"/\*\*(.*?)\*/", re.DOTALL)
_GUTTER_RE = re.compile(r"^\s*\*(?!/) ?")
_TAG_RE = re.compile(r"^@(\S+)(.*)$")

_CLOSERS = {"{": "}", "[": "]"}


def parse_doc_comments(text: str) -> list[DocComment]:
    """Parse every ``/** */`` block found in ``text``."""
    return [_parse_block(m.group(1)) for m in _BLOCK_RE.finditer(text)]


def _parse_block(body: str) -> DocComment:
    """Split a block body into its description and tags."""
    description: list[str] = []
    tags: list[tuple[Tag, list[str]]] = []

    for i, raw in enumerate(body.replace("\r\n", "\n").split("\n")):
        # The first line directly follows "/**" and has no gutter.
        line = (raw if i == 0 else _GUTTER_RE.sub("", raw, count=1)).strip()
        match = _TAG_RE.match(line)
        if match:
            tag, rest = _parse_tag_line(match.group(1), match.group(2).strip())
            tags.append((tag, [rest] if rest else []))
        elif line and tags:
            tags[-1][1].append(line)
        elif line:
            description.append(line)

    parsed_tags = []
    for tag, lines in tags:
        tag.description = " ".join(lines)
        parsed_tags.append(tag)
    return DocComment(tags=parsed_tags, description=" ".join(description))


def _parse_tag_line(name: str, rest: str) -> tuple[Tag, str]:
    """Tokenize the remainder of a tag line into type, value and description."""
    tag = Tag(name=name)

    if rest.startswith("{"):
        tag.type, rest = _take_balanced(rest)

    if rest.startswith("["):
        inner, rest = _take_balanced(rest)
        tag.value = inner.split("=", 1)[0].strip()
    elif rest[:1] in ('"', "'"):
        close = rest.find(rest[0], 1)
        if close < 0:
            tag.value, rest = rest, ""
        else:
            tag.value, rest = rest[1:close], rest[close + 1 :].strip()
    elif rest:
        parts = rest.split(None, 1)
        tag.value = parts[0]
        rest = parts[1] if len(parts) > 1 else ""

    return tag, rest.strip()


def _take_balanced(text: str) -> tuple[str, str]:
    """Split a bracketed prefix such as ``{a | b}`` off ``text``."""
    opener = text[0]
    closer = _CLOSERS[opener]
    depth = 0
    for i, ch in enumerate(text):
        if ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth == 0:
                return text[1:i].strip(), text[i + 1 :].strip()
    return text[1:].strip(), ""
