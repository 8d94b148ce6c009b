from typing import Iterable, List, Optional

import settings


def slugify(value: str) -> str:
    """Lowercase, turn spaces into dashes and drop everything else outside [a-z0-9-]."""
    slug = []
    for char in value.lower():
        if char.isascii() and (char.isalnum() or char == "-"):
            slug.append(char)
        elif char == " ":
            slug.append("-")
    return "".join(slug)


class PageRegistry:
    """Internal pages a ``page`` menu item may point at."""

    def __init__(self, identifiers: Optional[Iterable[str]] = None):
        if identifiers is None:
            identifiers = settings.PAGE_IDENTIFIERS
        self.identifiers: List[str] = list(identifiers)

    def is_valid(self, identifier: str) -> bool:
        return identifier in self.identifiers

    def href_for(self, identifier: str) -> str:
        return "/" + slugify(identifier)


default_registry = PageRegistry()
