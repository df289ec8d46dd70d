"""Leave-one-out facet counts."""

from collections import Counter
from collections.abc import Sequence

from .filters import FilterEngine
from .models import ALL, Facet, FacetOverrides, FilterState, Variant

NO_QUALITY = "N/A"


class FacetCounter:
    """Per-value record counts for each facet, ignoring that facet's own filter.

    The base set for a facet is the filter engine output with only that
    facet unset; the other facets and the search text stay live. Every
    mapping also carries an ``All`` entry equal to the base set size.
    """

    def __init__(self, engine: FilterEngine):
        self.engine = engine

    def base_set(
        self, records: Sequence[Variant], state: FilterState, facet: Facet
    ) -> list[Variant]:
        return self.engine.apply(records, state, FacetOverrides.unset(facet))

    def counts(
        self, records: Sequence[Variant], state: FilterState, facet: Facet
    ) -> dict[str, int]:
        base = self.base_set(records, state, facet)
        counter: Counter[str] = Counter()

        for v in base:
            if facet is Facet.TYPE:
                counter[v.type] += 1
            elif facet is Facet.QUALITY:
                counter[v.filter or NO_QUALITY] += 1
            elif facet is Facet.PATIENT:
                # one record counts once for each involved patient
                counter.update(v.involved_patients)
            elif v.consequence:
                counter[v.consequence] += 1

        counts = dict(counter)
        counts[ALL] = len(base)
        return counts

    def type_counts(self, records: Sequence[Variant], state: FilterState) -> dict[str, int]:
        return self.counts(records, state, Facet.TYPE)

    def quality_counts(self, records: Sequence[Variant], state: FilterState) -> dict[str, int]:
        return self.counts(records, state, Facet.QUALITY)

    def patient_counts(self, records: Sequence[Variant], state: FilterState) -> dict[str, int]:
        return self.counts(records, state, Facet.PATIENT)

    def consequence_counts(
        self, records: Sequence[Variant], state: FilterState
    ) -> dict[str, int]:
        return self.counts(records, state, Facet.CONSEQUENCE)

    def all_counts(
        self, records: Sequence[Variant], state: FilterState
    ) -> dict[Facet, dict[str, int]]:
        return {facet: self.counts(records, state, facet) for facet in Facet}
