"""VCF to variant record conversion."""

import logging
import re
from collections.abc import Iterator
from pathlib import Path

from cyvcf2 import VCF

from .models import Variant

logger = logging.getLogger(__name__)

IMPACT_RANK = {"HIGH": 0, "MODERATE": 1, "LOW": 2, "MODIFIER": 3}


def classify_variant_type(ref: str, alt: str) -> str:
    """Classify variant type based on REF and ALT alleles."""
    if len(ref) == 1 and len(alt) == 1:
        return "SNV"
    elif len(ref) != len(alt):
        return "Indel"
    else:
        return "MNV"


def parse_csq_header(header_lines: list[str]) -> list[str]:
    """Parse VEP CSQ field structure from header."""
    csq_pattern = re.compile(r'##INFO=<ID=CSQ,.+Description=".*Format:\s*([^"]+)">')

    for line in header_lines:
        match = csq_pattern.match(line)
        if match:
            return match.group(1).split("|")

    return []


class VariantParser:
    """Converts cyvcf2 variant records into per-ALT Variant objects."""

    def __init__(self, samples: list[str], csq_fields: list[str], default_patient: str):
        self.samples = samples
        self.csq_fields = csq_fields
        self.default_patient = default_patient

    def parse_variant(self, variant) -> list[Variant]:
        """Parse a cyvcf2 variant; one record per ALT with at least one carrier."""
        records = []
        quality = self._quality_flag(variant.FILTER)

        for alt_index, alt in enumerate(variant.ALT, start=1):
            if alt is None:
                continue

            carriers = self._carriers(variant, alt_index)
            if self.samples and not carriers:
                continue
            if not carriers:
                carriers = [self.default_patient]

            consequence = None
            hgvs = None
            csq = variant.INFO.get("CSQ") if self.csq_fields else None
            if csq:
                annotation = self._parse_csq(csq, alt)
                if annotation:
                    consequence = annotation.get("Consequence") or None
                    hgvs = annotation.get("HGVSc") or None

            def build(patient: str) -> Variant:
                return Variant(
                    position=variant.POS,
                    ref=variant.REF,
                    alt=alt,
                    type=classify_variant_type(variant.REF, alt),
                    patient=patient,
                    filter=quality,
                    consequence=consequence,
                    hgvs=hgvs,
                )

            record = build(carriers[0])
            record.polymorphism = [build(p) for p in carriers[1:]]
            records.append(record)

        return records

    def _carriers(self, variant, alt_index: int) -> list[str]:
        """Samples whose genotype contains the given ALT allele index."""
        if not self.samples:
            return []
        carriers = []
        for sample, genotype in zip(self.samples, variant.genotypes, strict=False):
            # cyvcf2 genotypes are [allele, allele, ..., phased]
            if alt_index in genotype[:-1]:
                carriers.append(sample)
        return carriers

    def _quality_flag(self, vcf_filter: str | None) -> str:
        # cyvcf2 reports PASS and '.' as None
        if not vcf_filter or vcf_filter in (".", "PASS"):
            return "PASS"
        return vcf_filter.replace(";", ",")

    def _parse_csq(self, csq_value: str, alt: str) -> dict[str, str] | None:
        """Parse VEP CSQ field, selecting worst consequence for this ALT."""
        best = None
        best_rank = 999

        for annotation in csq_value.split(","):
            values = annotation.split("|")
            if len(values) != len(self.csq_fields):
                continue
            ann_dict = dict(zip(self.csq_fields, values, strict=False))

            if ann_dict.get("Allele", "") != alt:
                continue

            rank = IMPACT_RANK.get(ann_dict.get("IMPACT", "MODIFIER"), 3)
            if rank < best_rank:
                best = ann_dict
                best_rank = rank

        return best


def iter_vcf_variants(vcf_path: Path | str) -> Iterator[Variant]:
    """Stream Variant records out of a (possibly bgzipped) VCF file."""
    vcf_path = Path(vcf_path)
    vcf = VCF(str(vcf_path))
    try:
        csq_fields = parse_csq_header(vcf.raw_header.split("\n"))
        if not csq_fields:
            logger.info("No VEP CSQ header in %s; consequence and HGVS left empty", vcf_path)
        default_patient = vcf_path.name.split(".")[0]
        parser = VariantParser(list(vcf.samples), csq_fields, default_patient)

        for variant in vcf:
            yield from parser.parse_variant(variant)
    finally:
        vcf.close()
