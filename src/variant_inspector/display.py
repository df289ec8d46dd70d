"""Display helpers for variant records."""

from urllib.parse import quote

from .models import Variant
from .search import HgvsResolver, raw_hgvs

ENSEMBL_SEARCH_URL = "https://www.ensembl.org/Homo_sapiens/Search/Results?q={query}"


def display_name(record: Variant, resolve_hgvs: HgvsResolver = raw_hgvs) -> str:
    """Primary HGVS name, or the ref+position+alt label when there is none."""
    hgvs = resolve_hgvs(record)
    if hgvs:
        return hgvs[0]
    return record.mutation


def ensembl_search_url(record: Variant, resolve_hgvs: HgvsResolver = raw_hgvs) -> str | None:
    hgvs = resolve_hgvs(record)
    if not hgvs:
        return None
    return ENSEMBL_SEARCH_URL.format(query=quote(hgvs[0], safe=""))


def quality_color(qual: float) -> str:
    """CSS hsl colour from red (0) to green (100)."""
    hue = (qual / 100) * 120
    return f"hsl({hue:g}, 70%, 45%)"
