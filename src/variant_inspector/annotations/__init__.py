"""HGVS alternative-name lookup and caching."""

from .backend import AnnotationLookupService, BackendClient
from .hgvs_cache import HgvsAlternativesCache, hgvs_key, transcript_of

__all__ = [
    "AnnotationLookupService",
    "BackendClient",
    "HgvsAlternativesCache",
    "hgvs_key",
    "transcript_of",
]
