"""Mention markup parsing for comment text."""

import re
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.db.base import is_valid_id
from photoshare.models import User

# @[Display Name](user-id), as produced by the client's mention input
MENTION_PATTERN = re.compile(r"@\[([^\]]+)\]\(([^)]+)\)")


@dataclass
class MentionResult:
    display_text: str
    mention_ids: list[str] = field(default_factory=list)


def parse_mentions(raw_text: str) -> tuple[str, list[str]]:
    """
    Rewrite mention markup to ``@Name`` and collect the referenced ids.

    Returns:
        Tuple of (display_text, candidate ids in first-occurrence order,
        duplicates removed). Ids are not validated here.
    """
    candidates: list[str] = []
    for match in MENTION_PATTERN.finditer(raw_text):
        user_id = match.group(2)
        if user_id not in candidates:
            candidates.append(user_id)
    display_text = MENTION_PATTERN.sub(r"@\1", raw_text)
    return display_text, candidates


async def extract_mentions(db: AsyncSession, raw_text: str) -> MentionResult:
    """
    Parse mentions and keep only ids of existing users.

    Malformed or dangling ids are dropped without error; their markup is
    still rewritten in the display text.
    """
    display_text, candidates = parse_mentions(raw_text)
    well_formed = [c for c in candidates if is_valid_id(c)]
    if not well_formed:
        return MentionResult(display_text=display_text)

    result = await db.execute(select(User.id).where(User.id.in_(well_formed)))
    existing = set(result.scalars().all())
    return MentionResult(
        display_text=display_text,
        mention_ids=[c for c in well_formed if c in existing],
    )
