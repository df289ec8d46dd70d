"""Multi-facet filter engine over variant records."""

from collections.abc import Callable, Iterable

from .models import ALL, FacetOverrides, FilterState, Variant
from .search import HgvsResolver, matches_search, normalize_query, raw_hgvs


def passes_quality(record: Variant, quality: str) -> bool:
    """Quality stage: records without a quality flag pass every selection."""
    if quality == ALL:
        return True
    if not record.filter:
        return True
    return record.filter == quality


def passes_type(record: Variant, variant_type: str) -> bool:
    selected = variant_type.lower()
    if selected == ALL.lower():
        return True
    return record.type.lower() == selected


def passes_patient(record: Variant, patient: str) -> bool:
    """Patient stage: the record's own patient or any companion's patient."""
    if patient == ALL:
        return True
    if record.patient == patient:
        return True
    return any(p.patient == patient for p in record.polymorphism)


def passes_consequence(record: Variant, consequence: str) -> bool:
    if consequence == ALL:
        return True
    return record.consequence == consequence


class FilterEngine:
    """Applies facet selections and free-text search to a record sequence.

    Stages run in a fixed order (quality, type, patient, consequence,
    search), each consuming the previous stage's output. Filtering is
    stable and never mutates the filter state it is given.
    """

    def __init__(self, resolve_hgvs: HgvsResolver = raw_hgvs):
        self.resolve_hgvs = resolve_hgvs

    def _stages(self, state: FilterState) -> list[tuple[str, Callable[[Variant], bool]]]:
        search = normalize_query(state.search)
        return [
            ("quality", lambda v: passes_quality(v, state.quality)),
            ("type", lambda v: passes_type(v, state.type)),
            ("patient", lambda v: passes_patient(v, state.patient)),
            ("consequence", lambda v: passes_consequence(v, state.consequence)),
            ("search", lambda v: matches_search(v, search, self.resolve_hgvs)),
        ]

    def apply(
        self,
        records: Iterable[Variant],
        state: FilterState,
        overrides: FacetOverrides | None = None,
    ) -> list[Variant]:
        """Return the records visible under ``state`` with ``overrides`` applied.

        Args:
            records: Input records; relative order is preserved.
            state: Live filter state (not modified).
            overrides: Optional per-call facet replacements, e.g. to count
                as if one facet were unset.

        Returns:
            The filtered records.
        """
        effective = state.with_overrides(overrides)
        result = list(records)
        for _name, predicate in self._stages(effective):
            result = [v for v in result if predicate(v)]
        return result

    def excluding_stages(self, record: Variant, state: FilterState) -> list[str]:
        """Names of the stages that would individually reject ``record``."""
        return [name for name, predicate in self._stages(state) if not predicate(record)]

    def is_visible(self, record: Variant, state: FilterState) -> bool:
        return not self.excluding_stages(record, state)
