"""Minimal filter relaxation for externally selected records."""

import logging

from .filters import FilterEngine
from .models import ALL, FilterState, Variant

logger = logging.getLogger(__name__)

# Order in which dimensions are checked and, if conflicting, reset
RECONCILE_ORDER = ("search", "type", "patient", "quality", "consequence")


class VisibilityReconciler:
    """Relaxes only the filter dimensions that would hide a given record."""

    def __init__(self, engine: FilterEngine):
        self.engine = engine

    def conflicting_dimensions(self, record: Variant, state: FilterState) -> list[str]:
        excluded = set(self.engine.excluding_stages(record, state))
        return [name for name in RECONCILE_ORDER if name in excluded]

    def ensure_visible(self, record: Variant, state: FilterState) -> bool:
        """Reset each conflicting dimension of ``state`` in place.

        Each dimension is checked against the unfiltered record on its own.
        Dimensions that do not exclude the record are left untouched.

        Returns:
            True if any dimension was reset.
        """
        conflicts = self.conflicting_dimensions(record, state)
        for name in conflicts:
            setattr(state, name, "" if name == "search" else ALL)

        if conflicts:
            logger.debug(
                "Relaxed %s to show variant at position %d", ", ".join(conflicts), record.position
            )
        return bool(conflicts)
