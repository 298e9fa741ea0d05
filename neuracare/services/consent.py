"""Consent state machine.

Per user:

    NO_PROFILE ──consent(true)──▶ CONSENT_ACTIVE
         │                            │
         └──consent(false)──▶ CONSENT_REVOKED_HOLD ──(hold passes)──▶ HOLD_EXPIRED

Any consent write moves to CONSENT_ACTIVE (given, hold cleared) or to
CONSENT_REVOKED_HOLD (revoked, hold set to now + retention days). Only
CONSENT_ACTIVE may run analyses; HOLD_EXPIRED behaves like NO_PROFILE
until fresh consent is given.
"""

from datetime import UTC, datetime, timedelta
from enum import StrEnum

from neuracare.config import settings
from neuracare.database import AtomicDocumentStore
from neuracare.exceptions import ConsentError
from neuracare.logging_config import get_logger
from neuracare.models.document import ConsentRecord, Document, Profile, ProfileConsent
from neuracare.schemas.consent import ConsentRequest

logger = get_logger(__name__)

REVOKED_MESSAGE = (
    "Consent has been revoked and data is pending deletion. "
    "Delete your data or re-consent to continue analysis."
)
REQUIRED_MESSAGE = "Consent is required before running burnout analysis."


class ConsentState(StrEnum):
    """Where a user sits in the consent lifecycle."""

    NO_PROFILE = "no_profile"
    CONSENT_ACTIVE = "consent_active"
    CONSENT_REVOKED_HOLD = "consent_revoked_hold"
    HOLD_EXPIRED = "hold_expired"


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def compute_retention_until(now: datetime | None = None) -> str:
    """ISO timestamp at which a revoked user's hold ends."""
    now = now or datetime.now(UTC)
    return (now + timedelta(days=settings.consent_retention_days)).isoformat()


def evaluate_consent_state(
    profile: Profile | None, now: datetime | None = None
) -> ConsentState:
    """Derive the consent state of a (possibly missing) profile."""
    if profile is None or profile.consent is None:
        return ConsentState.NO_PROFILE

    if profile.retention_until:
        now = now or datetime.now(UTC)
        if _parse_timestamp(profile.retention_until) > now:
            return ConsentState.CONSENT_REVOKED_HOLD
        return ConsentState.HOLD_EXPIRED

    if profile.consent.consent_given:
        return ConsentState.CONSENT_ACTIVE

    # Revoked without a hold on record: the hold can only have lapsed.
    return ConsentState.HOLD_EXPIRED


def ensure_analysis_allowed(
    profile: Profile | None, now: datetime | None = None
) -> None:
    """Raise ConsentError unless the profile is in CONSENT_ACTIVE.

    Raises:
        ConsentError: With a revoked-specific message during the hold,
            otherwise with a consent-required message.
    """
    state = evaluate_consent_state(profile, now)
    if state == ConsentState.CONSENT_ACTIVE:
        return
    if state == ConsentState.CONSENT_REVOKED_HOLD:
        raise ConsentError(REVOKED_MESSAGE, state)
    raise ConsentError(REQUIRED_MESSAGE, state)


async def record_consent(
    store: AtomicDocumentStore,
    request: ConsentRequest,
    now: datetime | None = None,
) -> ConsentRecord:
    """Append a consent record and project it onto the profile.

    Creates a Guest profile when the user has none yet.

    Args:
        store: Document store.
        request: Validated consent request.
        now: Clock override for the retention hold.

    Returns:
        The stored ConsentRecord.
    """
    record = ConsentRecord(
        user_id=request.user_id,
        consent_given=request.consent_given,
        timestamp=request.timestamp,
    )
    retention_until = None if record.consent_given else compute_retention_until(now)

    def apply(doc: Document) -> None:
        doc.consents.append(record)
        profile = doc.profiles.get(record.user_id) or Profile(user_id=record.user_id)
        doc.profiles[record.user_id] = profile.model_copy(
            update={
                "consent": ProfileConsent(
                    consent_given=record.consent_given,
                    timestamp=record.timestamp,
                ),
                "retention_until": retention_until,
            }
        )

    await store.update(apply)

    logger.info(
        "Consent recorded",
        user_id=record.user_id,
        consent_given=record.consent_given,
        retention_until=retention_until,
    )
    return record
