"""Profile service: upsert, lookup, export and cascading delete."""

from neuracare.database import AtomicDocumentStore
from neuracare.logging_config import get_logger
from neuracare.models.document import Document, Profile
from neuracare.schemas.profile import ProfileExportResponse, ProfileRequest

logger = get_logger(__name__)


async def upsert_profile(
    store: AtomicDocumentStore, request: ProfileRequest
) -> Profile:
    """Create or replace a profile's editable fields.

    The stored lastAnalysis, consent and retentionUntil survive the save.

    Args:
        store: Document store.
        request: Validated profile request.

    Returns:
        The profile as persisted.
    """
    saved: Profile | None = None

    def apply(doc: Document) -> None:
        nonlocal saved
        existing = doc.profiles.get(request.user_id)
        saved = Profile(
            user_id=request.user_id,
            name=request.name,
            timezone=request.timezone,
            preferences=request.preferences,
            consent=existing.consent if existing else None,
            retention_until=existing.retention_until if existing else None,
            last_analysis=existing.last_analysis if existing else None,
        )
        doc.profiles[request.user_id] = saved

    await store.update(apply)
    logger.info("Profile saved", user_id=request.user_id)
    return saved


async def get_profile(store: AtomicDocumentStore, user_id: str) -> Profile | None:
    """Return the profile for ``user_id``, or None."""
    doc = await store.read()
    return doc.profiles.get(user_id)


async def export_profile(
    store: AtomicDocumentStore, user_id: str
) -> ProfileExportResponse | None:
    """Bundle a user's profile with their analyses and consents.

    Returns:
        The export bundle, or None if the user has no profile.
    """
    doc = await store.read()
    profile = doc.profiles.get(user_id)
    if profile is None:
        return None

    return ProfileExportResponse(
        profile=profile,
        analyses=doc.analyses_for(user_id),
        consents=doc.consents_for(user_id),
    )


async def delete_profile(store: AtomicDocumentStore, user_id: str) -> bool:
    """Hard-delete a profile and everything that references it.

    Analyses and consents for ``user_id`` are purged in the same update,
    even when no profile exists.

    Returns:
        True if a profile was removed.
    """
    removed = False
    purged: dict[str, int] = {}

    def apply(doc: Document) -> None:
        nonlocal removed
        removed = doc.profiles.pop(user_id, None) is not None

        analyses = [a for a in doc.analyses if a.user_id != user_id]
        consents = [c for c in doc.consents if c.user_id != user_id]
        purged["analyses"] = len(doc.analyses) - len(analyses)
        purged["consents"] = len(doc.consents) - len(consents)
        doc.analyses = analyses
        doc.consents = consents

    await store.update(apply)

    if removed:
        logger.info("Profile deleted", user_id=user_id, purged=purged)
    else:
        logger.warning(
            "Delete requested for unknown profile", user_id=user_id, purged=purged
        )
    return removed
