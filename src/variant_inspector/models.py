"""Data models for variant records, filter state and annotation state."""

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any

from .errors import VariantParseError

ALL = "All"


@dataclass
class Variant:
    """Represents a single genomic call as produced by the analysis backend."""

    position: int
    ref: str
    alt: str
    type: str
    patient: str

    # Quality flag (e.g. PASS); None means no quality information
    filter: str | None = None
    consequence: str | None = None
    hgvs: str | list[str] | None = None

    # Same call observed in other patients
    polymorphism: list["Variant"] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Variant":
        """Build a Variant from an analysis-result JSON object.

        Raises:
            VariantParseError: If a required field is missing or malformed.
        """
        missing = [k for k in ("position", "ref", "alt", "type", "patient") if k not in data]
        if missing:
            raise VariantParseError(f"Variant is missing required fields: {', '.join(missing)}")

        try:
            position = int(data["position"])
        except (TypeError, ValueError) as e:
            raise VariantParseError(f"Invalid position '{data['position']}'") from e

        hgvs = data.get("hgvs")
        if hgvs is not None and not isinstance(hgvs, str | list):
            raise VariantParseError(f"Invalid hgvs value at position {position}: {hgvs!r}")

        return cls(
            position=position,
            ref=str(data["ref"]),
            alt=str(data["alt"]),
            type=str(data["type"]),
            patient=str(data["patient"]),
            filter=data.get("filter") or None,
            consequence=data.get("consequence") or None,
            hgvs=[str(h) for h in hgvs] if isinstance(hgvs, list) else hgvs,
            polymorphism=[cls.from_dict(p) for p in data.get("polymorphism") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "position": self.position,
            "ref": self.ref,
            "alt": self.alt,
            "type": self.type,
            "patient": self.patient,
        }
        if self.filter is not None:
            data["filter"] = self.filter
        if self.consequence is not None:
            data["consequence"] = self.consequence
        if self.hgvs is not None:
            data["hgvs"] = self.hgvs
        if self.polymorphism:
            data["polymorphism"] = [p.to_dict() for p in self.polymorphism]
        return data

    @property
    def mutation(self) -> str:
        """Compact ref+position+alt label, e.g. ``A100G``."""
        return f"{self.ref}{self.position}{self.alt}"

    @property
    def raw_hgvs(self) -> list[str]:
        """The hgvs field normalized to a list (empty if absent)."""
        if not self.hgvs:
            return []
        if isinstance(self.hgvs, list):
            return list(self.hgvs)
        return [str(self.hgvs)]

    @property
    def involved_patients(self) -> list[str]:
        """Sorted distinct patients of this record and its companions."""
        patients = {self.patient}
        patients.update(p.patient for p in self.polymorphism)
        return sorted(patients)


class Facet(Enum):
    """Independently filterable dimensions over a variant collection."""

    TYPE = "type"
    PATIENT = "patient"
    QUALITY = "quality"
    CONSEQUENCE = "consequence"


@dataclass
class FacetOverrides:
    """Per-call facet replacements; None leaves the live selection in place."""

    type: str | None = None
    patient: str | None = None
    quality: str | None = None
    consequence: str | None = None

    @classmethod
    def unset(cls, facet: Facet) -> "FacetOverrides":
        """Overrides that clear one facet and leave the others live."""
        return cls(**{facet.value: ALL})


@dataclass
class FilterState:
    """The live facet selections and search text of one view."""

    type: str = ALL
    patient: str = ALL
    quality: str = ALL
    consequence: str = ALL
    search: str = ""

    def with_overrides(self, overrides: FacetOverrides | None) -> "FilterState":
        """Return a copy with non-None overrides applied; self is untouched."""
        if overrides is None:
            return replace(self)
        changes = {
            f.name: getattr(overrides, f.name)
            for f in fields(overrides)
            if getattr(overrides, f.name) is not None
        }
        return replace(self, **changes)

    def get(self, facet: Facet) -> str:
        return getattr(self, facet.value)

    def set(self, facet: Facet, value: str) -> None:
        setattr(self, facet.value, value)

    @property
    def is_neutral(self) -> bool:
        return (
            self.type.lower() == ALL.lower()
            and self.patient == ALL
            and self.quality == ALL
            and self.consequence == ALL
            and not self.search.strip()
        )


@dataclass
class HgvsState:
    """Per-key state of an HGVS alternatives lookup."""

    loading: bool = False
    error: bool = False
    alternatives: list[str] = field(default_factory=list)

    @classmethod
    def pending(cls) -> "HgvsState":
        return cls(loading=True)

    @classmethod
    def succeeded(cls, alternatives: list[str]) -> "HgvsState":
        return cls(alternatives=list(alternatives))

    @classmethod
    def failed(cls) -> "HgvsState":
        return cls(error=True)


@dataclass
class JobComment:
    """A reviewer comment attached to one variant of a job."""

    id: str
    text: str
    author: str | None = None
    created_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JobComment":
        return cls(
            id=str(data["id"]),
            text=str(data["text"]),
            author=data.get("author"),
            created_at=data.get("created_at"),
        )
