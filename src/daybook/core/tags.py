"""Pure tag handling - extraction, shortcut expansion, trailing-tag removal."""

import re

TAG_PATTERN = re.compile(r"#([a-zA-Z][a-zA-Z0-9_-]*)")

# #0 through #9
FAVORITE_TAG_PATTERN = re.compile(r"#([0-9])\b")

_TRAILING_TAG_PATTERN = re.compile(r"\s+#[a-zA-Z][a-zA-Z0-9_-]*$")
_TRAILING_TAGS_PATTERN = re.compile(r"(?:\s+#[a-zA-Z][a-zA-Z0-9_-]*)+$")


def extract_tags(content: str) -> list[str]:
    """Tags in order of appearance, without the ``#``."""
    return TAG_PATTERN.findall(content)


def expand_favorite_tags(content: str, favorite_tags: dict[str, str]) -> str:
    """
    Replace ``#1``-style shortcuts with the configured tag.

    Digits with no (or an empty) mapping are left as typed.
    """

    def replace(match: re.Match) -> str:
        tag = favorite_tags.get(match.group(1))
        return f"#{tag}" if tag else match.group(0)

    return FAVORITE_TAG_PATTERN.sub(replace, content)


def remove_last_trailing_tag(content: str) -> str | None:
    """Drop the last tag at the end of the content. None if there is none."""
    stripped = content.rstrip()
    match = _TRAILING_TAG_PATTERN.search(stripped)
    if not match:
        return None
    return stripped[: match.start()]


def remove_all_trailing_tags(content: str) -> str | None:
    """Drop every tag in the trailing run of tags. None if there is none."""
    stripped = content.rstrip()
    match = _TRAILING_TAGS_PATTERN.search(stripped)
    if not match:
        return None
    return stripped[: match.start()]
