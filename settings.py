import logging
import os
from typing import List


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./navigation.db")
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
FRONTEND_PROJECT_NAME = os.getenv("FRONTEND_PROJECT_NAME", "Navigation Admin")

DEFAULT_PAGE_IDENTIFIERS = [
    "Products", "Solutions", "About", "Blog", "Case Studies",
    "Whitepapers", "Partners", "Contact",
]


def _page_identifiers() -> List[str]:
    raw = os.getenv("NAVIGATION_PAGE_IDENTIFIERS")
    if not raw:
        return list(DEFAULT_PAGE_IDENTIFIERS)
    return [value.strip() for value in raw.split(",") if value.strip()]


PAGE_IDENTIFIERS = _page_identifiers()


logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger("navigation")
