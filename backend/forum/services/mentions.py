"""
Mention extraction.

A mention is "@" followed by one or more ASCII letters, digits or underscores.
"""
import re

MENTION_RE = re.compile(r"@([A-Za-z0-9_]+)")


def extract_mentions(text: str | None) -> list[str]:
    """
    Return the usernames mentioned in `text`, in order of appearance.

    Case is preserved and repeated mentions are kept, so
    "hello @bob and @Bob_2 twice @bob" gives ["bob", "Bob_2", "bob"].
    """
    if not text:
        return []
    return MENTION_RE.findall(text)
