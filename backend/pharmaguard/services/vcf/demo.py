"""
Synthetic VCF inputs for demos and tests.

Three scenarios over the same marker positions:
  normal     every marker homozygous reference
  high-risk  every marker homozygous alternate
  mixed      a realistic clinical mix of het and hom calls
"""
from __future__ import annotations

from typing import List, Tuple

SCENARIOS = ("normal", "high-risk", "mixed")

DEMO_SAMPLE_ID = "PATIENT_DEMO"

# (chrom, pos, rsid, ref, alt), hg38
_CORE_MARKERS: List[Tuple[str, int, str, str, str]] = [
    ("chr22", 42522613, "rs3892097",  "C", "T"),
    ("chr10", 96521657, "rs4244285",  "G", "A"),
    ("chr10", 96702047, "rs1799853",  "C", "T"),
    ("chr12", 21331549, "rs4149056",  "T", "C"),
    ("chr6",  18128382, "rs1800462",  "C", "A"),
    ("chr1",  97981395, "rs3918290",  "C", "T"),
]

_MIXED_ROWS: List[Tuple[str, int, str, str, str, str]] = [
    ("chr22", 42522613, "rs3892097",  "C", "T",   "0/1"),
    ("chr22", 42522613, "rs35742686", "C", "del", "0/0"),
    ("chr10", 96521657, "rs4244285",  "G", "A",   "0/1"),
    ("chr10", 96702047, "rs1799853",  "C", "T",   "1/1"),
    ("chr10", 96741053, "rs1057910",  "A", "C",   "0/0"),
    ("chr12", 21331549, "rs4149056",  "T", "C",   "0/1"),
    ("chr6",  18128382, "rs1800462",  "C", "A",   "0/0"),
    ("chr6",  18130918, "rs1800460",  "C", "A",   "0/1"),
    ("chr1",  97981395, "rs3918290",  "C", "T",   "0/0"),
    ("chr1",  98348885, "rs67376798", "A", "T",   "0/1"),
]


def _header(sample_id: str, vcf_version: str = "VCFv4.2") -> str:
    return "\n".join([
        f"##fileformat={vcf_version}",
        '##FILTER=<ID=PASS,Description="All filters passed">',
        '##FORMAT=<ID=GT,Number=1,Type=String,Description="Genotype">',
        "##contig=<ID=chr1,length=248956422>",
        "##contig=<ID=chr7,length=159345973>",
        "##contig=<ID=chr10,length=133797422>",
        "##contig=<ID=chr22,length=50818468>",
        f"#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\t{sample_id}",
    ])


def vcf_row(chrom: str, pos: int, rsid: str, ref: str, alt: str, gt: str) -> str:
    return f"{chrom}\t{pos}\t{rsid}\t{ref}\t{alt}\t.\tPASS\t.\tGT\t{gt}"


def build_vcf(rows, sample_id: str = DEMO_SAMPLE_ID) -> str:
    """VCF text from (chrom, pos, rsid, ref, alt, gt) rows."""
    return _header(sample_id) + "\n" + "".join(vcf_row(*row) + "\n" for row in rows)


def generate_demo_vcf(scenario: str = "mixed", sample_id: str = DEMO_SAMPLE_ID) -> str:
    if scenario == "normal":
        rows = [m + ("0/0",) for m in _CORE_MARKERS]
    elif scenario == "high-risk":
        rows = [m + ("1/1",) for m in _CORE_MARKERS]
    elif scenario == "mixed":
        rows = list(_MIXED_ROWS)
    else:
        raise ValueError(f"Unknown demo scenario {scenario!r}, expected one of {', '.join(SCENARIOS)}")
    return build_vcf(rows, sample_id)
