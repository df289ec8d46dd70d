"""Per-job sets of variant positions marked for the report."""

import json
import logging
from pathlib import Path
from typing import Protocol

from .errors import MissingContextError, ReportStoreError

logger = logging.getLogger(__name__)


class ReportStore(Protocol):
    """Persistence for report marks, keyed by job id."""

    def load(self) -> dict[str, set[int]]: ...

    def save(self, marks: dict[str, set[int]]) -> None: ...


class InMemoryReportStore:
    def __init__(self) -> None:
        self._marks: dict[str, set[int]] = {}

    def load(self) -> dict[str, set[int]]:
        return {job: set(positions) for job, positions in self._marks.items()}

    def save(self, marks: dict[str, set[int]]) -> None:
        self._marks = {job: set(positions) for job, positions in marks.items()}


class JsonReportStore:
    """Stores marks as ``{"job_id": [positions, ...]}`` in a JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> dict[str, set[int]]:
        if not self.path.exists():
            return {}
        with open(self.path) as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ReportStoreError(f"Invalid JSON in {self.path}: {e}") from e
        try:
            return {str(job): {int(p) for p in positions} for job, positions in data.items()}
        except (AttributeError, TypeError, ValueError) as e:
            raise ReportStoreError(
                f"Expected job IDs mapped to position lists in {self.path}"
            ) from e

    def save(self, marks: dict[str, set[int]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {job: sorted(positions) for job, positions in marks.items()}
        with open(self.path, "w") as f:
            json.dump(data, f, indent=2)


class ReportMarkSet:
    """Toggleable membership of positions in a per-job report set."""

    def __init__(self, store: ReportStore | None = None):
        self.store = store or InMemoryReportStore()
        self._marks = self.store.load()

    def toggle(self, job_id: str | None, position: int) -> bool:
        """Flip membership of ``position`` for ``job_id``.

        Returns:
            True if the position is marked after the toggle.

        Raises:
            MissingContextError: If no job id is given.
        """
        if not job_id:
            raise MissingContextError("Job ID not found")

        positions = self._marks.setdefault(job_id, set())
        if position in positions:
            positions.remove(position)
            marked = False
        else:
            positions.add(position)
            marked = True

        self.store.save(self._marks)
        logger.debug("Report mark for job %s position %d -> %s", job_id, position, marked)
        return marked

    def is_marked(self, job_id: str | None, position: int) -> bool:
        if not job_id:
            return False
        return position in self._marks.get(job_id, set())

    def marked_positions(self, job_id: str) -> list[int]:
        return sorted(self._marks.get(job_id, set()))
