"""Lookup of tag values in a parsed doc comment."""

from collections.abc import Iterable

from manifest_scanner.doc_comment import Tag


def get_tag_value(tags: Iterable[Tag], tag_name: str, *, full_text: bool = False) -> str | None:
    """Return the value of the first tag named ``tag_name``.

    With ``full_text`` the tag's trailing description is appended, separated by
    a single space, so multi-word values such as display names survive.
    """
    tag = next((t for t in tags if t.name == tag_name), None)
    if tag is None:
        return None

    components = [tag.value]
    if full_text and tag.description:
        components.append(tag.description)
    return " ".join(components)
