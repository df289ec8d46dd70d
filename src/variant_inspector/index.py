"""In-memory variant collection with facet value enumeration."""

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import VariantParseError
from .models import JobComment, Variant

logger = logging.getLogger(__name__)

VCF_SUFFIXES = (".vcf", ".vcf.gz", ".bcf")


@dataclass(frozen=True)
class VariantIndex:
    """Immutable-per-refresh collection of variant records.

    A refresh replaces the whole index; records are never mutated in place.
    """

    records: tuple[Variant, ...] = ()
    hgvs_alternatives: dict[str, list[str]] = field(default_factory=dict)
    comments: dict[str, list[JobComment]] = field(default_factory=dict)

    @classmethod
    def from_records(
        cls,
        records: Iterable[Variant],
        hgvs_alternatives: dict[str, list[str]] | None = None,
        comments: dict[str, list[JobComment]] | None = None,
    ) -> "VariantIndex":
        return cls(
            records=tuple(records),
            hgvs_alternatives=dict(hgvs_alternatives or {}),
            comments=dict(comments or {}),
        )

    @classmethod
    def from_json_data(cls, data: Any) -> "VariantIndex":
        """Build an index from analysis-result JSON.

        Accepts either a bare list of variant objects or an object with a
        ``variants`` list, an optional ``hgvs_alternatives`` mapping and an
        optional ``comments`` mapping of variant key to comment objects.
        """
        if isinstance(data, list):
            return cls.from_records(Variant.from_dict(v) for v in data)
        if isinstance(data, dict) and isinstance(data.get("variants"), list):
            alternatives = data.get("hgvs_alternatives") or {}
            if not isinstance(alternatives, dict):
                raise VariantParseError("hgvs_alternatives must be an object")
            comments = data.get("comments") or {}
            if not isinstance(comments, dict):
                raise VariantParseError("comments must be an object")
            try:
                parsed_comments = {
                    str(k): [JobComment.from_dict(c) for c in thread]
                    for k, thread in comments.items()
                }
            except (KeyError, TypeError) as e:
                raise VariantParseError(f"Invalid comment entry: {e}") from e
            return cls.from_records(
                (Variant.from_dict(v) for v in data["variants"]),
                {str(k): [str(a) for a in v] for k, v in alternatives.items()},
                parsed_comments,
            )
        raise VariantParseError("Expected a list of variants or an object with 'variants'")

    @classmethod
    def from_file(cls, path: Path) -> "VariantIndex":
        """Load an index from a JSON analysis result or a VCF file."""
        if not path.exists():
            raise FileNotFoundError(f"Variant file not found: {path}")

        if path.name.endswith(VCF_SUFFIXES):
            from .vcf_parser import iter_vcf_variants

            index = cls.from_records(iter_vcf_variants(path))
        else:
            with open(path) as f:
                try:
                    data = json.load(f)
                except json.JSONDecodeError as e:
                    raise VariantParseError(f"Invalid JSON in {path}: {e}") from e
            index = cls.from_json_data(data)

        logger.info("Loaded %d variants from %s", len(index), path)
        return index

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    @property
    def available_types(self) -> list[str]:
        return sorted({v.type for v in self.records})

    @property
    def available_qualities(self) -> list[str]:
        return sorted({v.filter for v in self.records if v.filter})

    @property
    def available_consequences(self) -> list[str]:
        return sorted({v.consequence for v in self.records if v.consequence})

    @property
    def available_patients(self) -> list[str]:
        patients: set[str] = set()
        for v in self.records:
            patients.update(v.involved_patients)
        return sorted(patients)

    def find_by_position(self, position: int) -> list[Variant]:
        """Top-level records at a position (positions repeat across patients)."""
        return [v for v in self.records if v.position == position]
