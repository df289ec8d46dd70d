"""Free-text search over variant records."""

from collections.abc import Callable

from .models import Variant

HgvsResolver = Callable[[Variant], list[str]]


def normalize_query(query: str) -> str:
    return query.strip().lower()


def raw_hgvs(record: Variant) -> list[str]:
    return record.raw_hgvs


def search_projections(record: Variant, resolve_hgvs: HgvsResolver = raw_hgvs) -> list[str]:
    """Lower-cased strings a query is matched against.

    These are the ref+position+alt label, the position, every involved
    patient and every resolved HGVS name.
    """
    projections = [record.mutation.lower(), str(record.position)]
    projections.extend(p.lower() for p in record.involved_patients)
    projections.extend(h.lower() for h in resolve_hgvs(record))
    return projections


def matches_search(record: Variant, query: str, resolve_hgvs: HgvsResolver = raw_hgvs) -> bool:
    """Return True if any searchable projection contains the query.

    An empty (or whitespace-only) query matches every record.
    """
    needle = normalize_query(query)
    if not needle:
        return True
    return any(needle in text for text in search_projections(record, resolve_hgvs))
