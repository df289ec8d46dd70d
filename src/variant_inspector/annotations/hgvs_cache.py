"""Per-record cache of alternative HGVS names with loading/error state."""

import logging

from ..models import HgvsState, Variant
from ..notifications import LoggingNotificationSink, NotificationLevel, NotificationSink
from .backend import AnnotationLookupService

logger = logging.getLogger(__name__)


def hgvs_key(record: Variant) -> str:
    """Cache key for a record.

    The primary name from the record's own hgvs field when there is one,
    otherwise the decimal position. Polymorphic occurrences sharing an HGVS
    name therefore share one entry.
    """
    hgvs = record.hgvs
    if isinstance(hgvs, list):
        if hgvs:
            return str(hgvs[0])
    elif isinstance(hgvs, str) and hgvs.strip():
        return hgvs
    return str(record.position)


def transcript_of(hgvs: str) -> str | None:
    """Transcript prefix of an HGVS name (text before the first colon)."""
    if ":" not in hgvs:
        return None
    return hgvs.split(":", 1)[0]


class HgvsAlternativesCache:
    """Fetches and caches alternative HGVS names per record.

    Entries are seeded once from persisted alternatives and never evicted;
    a lookup is skipped for records that already resolve to more than one
    name, which bounds the cache by the number of distinct records.
    """

    def __init__(
        self,
        service: AnnotationLookupService,
        notifier: NotificationSink | None = None,
    ):
        self.service = service
        self.notifier = notifier or LoggingNotificationSink()
        self._states: dict[str, HgvsState] = {}
        self.revision = 0

    def seed(self, persisted: dict[str, list[str]]) -> None:
        """Replace all entries with previously persisted alternatives."""
        self._states = {key: HgvsState.succeeded(alts) for key, alts in persisted.items()}
        self.revision += 1
        logger.debug("Seeded HGVS cache with %d entries", len(self._states))

    def _set(self, key: str, state: HgvsState) -> None:
        self._states[key] = state
        self.revision += 1

    def __len__(self) -> int:
        return len(self._states)

    def state(self, record: Variant) -> HgvsState | None:
        return self._states.get(hgvs_key(record))

    def resolve(self, record: Variant) -> list[str]:
        """Cached alternatives when present, otherwise the raw hgvs field."""
        state = self.state(record)
        if state and state.alternatives:
            return list(state.alternatives)
        return record.raw_hgvs

    def is_loading(self, record: Variant) -> bool:
        state = self.state(record)
        return bool(state and state.loading)

    def has_error(self, record: Variant) -> bool:
        state = self.state(record)
        return bool(state and state.error)

    async def fetch(self, record: Variant, job_id: str | None = None) -> HgvsState | None:
        """Look up alternative names for ``record`` and cache the outcome.

        The pending state is stored before the lookup is awaited and is always
        replaced by a success or error state; lookup and save errors are
        logged and notified, never raised. In-flight requests for the same
        key are not deduplicated here.

        Args:
            record: The variant to annotate.
            job_id: When set, successful results are saved back to this job.

        Returns:
            The final state for the record's key, or None when there was
            nothing to look up.
        """
        current = self.resolve(record)
        if len(current) > 1 or not current:
            return None

        primary = current[0]
        transcript = transcript_of(primary)
        if transcript is None:
            logger.debug("HGVS '%s' has no transcript prefix; skipping lookup", primary)
            return None

        key = hgvs_key(record)
        self._set(key, HgvsState.pending())

        try:
            alternatives = await self.service.lookup(
                transcript, record.position, record.ref, record.alt
            )
        except Exception:
            logger.exception("HGVS alternatives lookup for %s failed", primary)
            self._set(key, HgvsState.failed())
            self.notifier.notify("Failed to fetch HGVS alternatives", NotificationLevel.ERROR)
            return self._states[key]

        self._set(key, HgvsState.succeeded(alternatives))
        self.notifier.notify("Alternatives received", NotificationLevel.SUCCESS)

        if job_id:
            try:
                await self.service.persist_alternatives(job_id, primary, alternatives)
            except Exception as e:
                logger.error("Alternatives for %s were not saved: %s", primary, e)
                self.notifier.notify(
                    "Could not save alternatives to the job", NotificationLevel.ERROR
                )

        return self._states[key]
