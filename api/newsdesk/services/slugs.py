"""Slug derivation and uniqueness for articles."""

import re
import secrets
import time
import unicodedata
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.models.article import Article

FALLBACK_SLUG = "article"
MAX_BASE_LENGTH = 200


def slugify(value: str) -> str:
    """
    Turn free text into a lowercase, hyphen-separated, URL-safe token.

    Accented characters are transliterated to ASCII; anything else that is
    not a letter or digit becomes a separator.
    """
    normalized = unicodedata.normalize("NFKD", value)
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii")
    base = re.sub(r"[^a-z0-9]+", "-", ascii_text.lower()).strip("-")
    base = base[:MAX_BASE_LENGTH].rstrip("-")
    return base or FALLBACK_SLUG


async def slug_taken(
    db: AsyncSession,
    slug: str,
    exclude_ids: Iterable[int] = (),
) -> bool:
    """Whether a live article other than ``exclude_ids`` already uses ``slug``."""
    query = select(Article.id).where(Article.slug == slug).where(Article.deleted_at.is_(None))
    excluded = [i for i in exclude_ids if i is not None]
    if excluded:
        query = query.where(Article.id.not_in(excluded))
    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none() is not None


async def unique_article_slug(
    db: AsyncSession,
    title: str,
    exclude_ids: Iterable[int] = (),
) -> str:
    """
    Derive a slug from ``title`` that no other live article holds.

    On collision the current unix time (seconds) is appended. Two collisions
    in the same second fall back to an extra random token.
    """
    excluded = tuple(exclude_ids)
    base = slugify(title)
    if not await slug_taken(db, base, excluded):
        return base

    candidate = f"{base}-{int(time.time())}"
    while await slug_taken(db, candidate, excluded):
        candidate = f"{base}-{int(time.time())}-{secrets.token_hex(2)}"
    return candidate
