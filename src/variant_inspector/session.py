"""Per-view variant list session wiring filters, counts, annotations and marks."""

import logging
from collections.abc import Callable
from dataclasses import astuple
from typing import Any

from .annotations import AnnotationLookupService, HgvsAlternativesCache
from .comments import CommentPanel, ConfirmationPrompt, comment_key
from .display import display_name, ensembl_search_url
from .errors import MissingContextError
from .facets import FacetCounter
from .filters import FilterEngine
from .index import VariantIndex
from .models import ALL, Facet, FilterState, HgvsState, JobComment, Variant
from .notifications import LoggingNotificationSink, NotificationLevel, NotificationSink
from .reconcile import VisibilityReconciler
from .report_marks import ReportMarkSet

logger = logging.getLogger(__name__)


async def _decline(message: str) -> bool:
    return False


class VariantListSession:
    """Single source of truth for one variant list view.

    Derived values (the filtered list and the facet counts) are pure
    functions of three inputs: the loaded index, the filter state and the
    HGVS cache contents. They are recomputed on demand and memoized on a
    snapshot of exactly those inputs.
    """

    def __init__(
        self,
        lookup_service: AnnotationLookupService,
        job_id: str | None = None,
        notifier: NotificationSink | None = None,
        report_marks: ReportMarkSet | None = None,
        confirm: ConfirmationPrompt | None = None,
        default_quality: str = "PASS",
    ):
        self.job_id = job_id
        self.notifier = notifier or LoggingNotificationSink()
        self.default_quality = default_quality
        self.report_marks = report_marks or ReportMarkSet()
        self.comments = CommentPanel(confirm or _decline)

        self.hgvs_cache = HgvsAlternativesCache(lookup_service, self.notifier)
        self.engine = FilterEngine(resolve_hgvs=self.hgvs_cache.resolve)
        self.counter = FacetCounter(self.engine)
        self.reconciler = VisibilityReconciler(self.engine)

        self.index = VariantIndex()
        self.state = FilterState()
        self._generation = 0
        self._derived: dict[str, tuple[tuple, Any]] = {}

    def load(
        self,
        index: VariantIndex,
        persisted_alternatives: dict[str, list[str]] | None = None,
        comments: dict[str, list[JobComment]] | None = None,
    ) -> None:
        """Replace the variant collection after an analysis refresh.

        Seeds the HGVS cache from persisted alternatives, takes comment
        threads from ``comments`` or else from the index, and selects the
        default quality when the collection has it.
        """
        self.index = index
        self._generation += 1

        alternatives = dict(index.hgvs_alternatives)
        alternatives.update(persisted_alternatives or {})
        self.hgvs_cache.seed(alternatives)
        self.comments.comments = dict(index.comments if comments is None else comments)

        if self.default_quality in index.available_qualities:
            self.state.quality = self.default_quality
        else:
            self.state.quality = ALL
        logger.info(
            "Session loaded %d variants (quality filter: %s)", len(index), self.state.quality
        )

    def _inputs(self) -> tuple:
        return (self._generation, astuple(self.state), self.hgvs_cache.revision)

    def _derive(self, name: str, compute: Callable[[], Any]) -> Any:
        # Cached values are never handed out directly; callers get copies.
        inputs = self._inputs()
        cached = self._derived.get(name)
        if cached is not None and cached[0] == inputs:
            return cached[1]
        value = compute()
        self._derived[name] = (inputs, value)
        return value

    # Filter selection events

    def set_search(self, text: str) -> None:
        self.state.search = text

    def set_filter(self, facet: Facet, value: str | None) -> None:
        self.state.set(facet, value or ALL)

    def set_type(self, value: str) -> None:
        self.set_filter(Facet.TYPE, value)

    def set_patient(self, value: str) -> None:
        self.set_filter(Facet.PATIENT, value)

    def set_quality(self, value: str | None) -> None:
        self.set_filter(Facet.QUALITY, value)

    def set_consequence(self, value: str) -> None:
        self.set_filter(Facet.CONSEQUENCE, value)

    def clear_filters(self) -> None:
        self.state = FilterState()

    # Derived views

    def _filtered(self) -> tuple[Variant, ...]:
        return self._derive("filtered", lambda: tuple(self.engine.apply(self.index, self.state)))

    @property
    def filtered(self) -> list[Variant]:
        return list(self._filtered())

    @property
    def total_count(self) -> int:
        return len(self._filtered())

    def facet_counts(self, facet: Facet) -> dict[str, int]:
        return dict(
            self._derive(
                f"counts:{facet.value}", lambda: self.counter.counts(self.index, self.state, facet)
            )
        )

    @property
    def type_counts(self) -> dict[str, int]:
        return self.facet_counts(Facet.TYPE)

    @property
    def patient_counts(self) -> dict[str, int]:
        return self.facet_counts(Facet.PATIENT)

    @property
    def quality_counts(self) -> dict[str, int]:
        return self.facet_counts(Facet.QUALITY)

    @property
    def consequence_counts(self) -> dict[str, int]:
        return self.facet_counts(Facet.CONSEQUENCE)

    # External selection

    def select(self, record: Variant) -> bool:
        """Relax whichever filters hide an externally selected record.

        Returns:
            True if the filter state changed.
        """
        return self.reconciler.ensure_visible(record, self.state)

    # Report marks

    def toggle_report(self, record: Variant) -> bool | None:
        """Toggle the record's report mark; None when there is no job."""
        try:
            marked = self.report_marks.toggle(self.job_id, record.position)
        except MissingContextError as e:
            self.notifier.notify(str(e), NotificationLevel.ERROR)
            return None

        self.notifier.notify(
            "Added to report" if marked else "Removed from report", NotificationLevel.SUCCESS
        )
        return marked

    def is_marked_for_report(self, record: Variant) -> bool:
        return self.report_marks.is_marked(self.job_id, record.position)

    # HGVS annotation

    async def request_alternatives(self, record: Variant) -> HgvsState | None:
        return await self.hgvs_cache.fetch(record, job_id=self.job_id)

    def hgvs_state(self, record: Variant) -> HgvsState | None:
        return self.hgvs_cache.state(record)

    def resolve_hgvs(self, record: Variant) -> list[str]:
        return self.hgvs_cache.resolve(record)

    def display_name(self, record: Variant) -> str:
        return display_name(record, self.hgvs_cache.resolve)

    def ensembl_url(self, record: Variant) -> str | None:
        return ensembl_search_url(record, self.hgvs_cache.resolve)

    # Comments

    def comments_for(self, record: Variant) -> list[JobComment]:
        return self.comments.comments_for(comment_key(record))
