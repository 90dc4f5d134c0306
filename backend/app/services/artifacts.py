"""
Persistence of generated artifacts (weekly summaries, monthly reports).

Each artifact is unique per owner and window. Generation reads the window,
builds the artifact and writes it in one transaction; the store's unique
constraint is the only lock. A concurrent generation that wins the insert
race surfaces here as IntegrityError and is resolved as an overwrite of the
winner's row, or as ConflictError when regeneration is disabled.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ConflictError

logger = logging.getLogger(__name__)

ArtifactT = TypeVar("ArtifactT")


async def save_generated(
    db: AsyncSession,
    *,
    find: Callable[[], Awaitable[ArtifactT | None]],
    build: Callable[[], ArtifactT],
    apply: Callable[[ArtifactT], None],
    allow_regeneration: bool,
    label: str,
    details: dict,
) -> ArtifactT:
    """
    Insert a new artifact or overwrite the existing one for the same window.

    Args:
        find: Loads the existing artifact for the window, if any.
        build: Returns a new, unsaved artifact.
        apply: Copies freshly generated content onto an existing artifact.
        allow_regeneration: Overwrite on repeat when true, ConflictError when false.
        label: Human-readable window description for messages.
        details: Window key, echoed in ConflictError details.
    """
    artifact = await find()
    if artifact is not None:
        if not allow_regeneration:
            raise ConflictError(f"{label} already exists.", details=details)
        apply(artifact)
        logger.info("Regenerated %s", label)
    else:
        artifact = build()
        db.add(artifact)
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            if not allow_regeneration:
                raise ConflictError(f"{label} already exists.", details=details)
            logger.warning("Concurrent generation of %s; overwriting the stored result", label)
            artifact = await find()
            if artifact is None:
                raise ConflictError(f"{label} could not be saved.", details=details)
            apply(artifact)
        else:
            logger.info("Generated %s", label)

    await db.commit()
    await db.refresh(artifact)
    return artifact
