"""Pytest configuration and fixtures for variant-inspector tests."""

import json
from pathlib import Path

import pytest

from variant_inspector.models import Variant


def make_variant(
    position: int = 100,
    ref: str = "A",
    alt: str = "G",
    type: str = "SNV",
    patient: str = "P1",
    filter: str | None = "PASS",
    consequence: str | None = None,
    hgvs: str | list[str] | None = None,
    polymorphism: list[Variant] | None = None,
) -> Variant:
    """Build a Variant with sensible defaults for tests."""
    return Variant(
        position=position,
        ref=ref,
        alt=alt,
        type=type,
        patient=patient,
        filter=filter,
        consequence=consequence,
        hgvs=hgvs,
        polymorphism=polymorphism or [],
    )


@pytest.fixture
def cohort() -> list[Variant]:
    """A small multi-patient call set covering every facet."""
    return [
        make_variant(
            100,
            "A",
            "G",
            "SNV",
            "P1",
            "PASS",
            "missense_variant",
            "NM_000546.6:c.215C>G",
            polymorphism=[make_variant(100, "A", "G", "SNV", "P3")],
        ),
        make_variant(200, "CT", "C", "Indel", "P2", "LOW", "frameshift_variant"),
        make_variant(
            300, "G", "T", "SNV", "P2", None, "synonymous_variant", ["NM_007294.4:c.1A>T"]
        ),
        make_variant(400, "T", "C", "SNV", "P1", "PASS", None),
        make_variant(500, "AC", "GT", "MNV", "P3", "LOW", "missense_variant"),
    ]


@pytest.fixture
def variants_json(tmp_path: Path, cohort: list[Variant]) -> Path:
    path = tmp_path / "variants.json"
    path.write_text(json.dumps([v.to_dict() for v in cohort]))
    return path
