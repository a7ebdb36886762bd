from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from pharmaguard.services.pharmacogenomics.config import get_report_policy

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Constants & Configuration
# ----------------------------------------------------------------------

UNKNOWN_VERSION = "unknown"

# FORMAT / SAMPLE values assumed for sites-only files (< 10 columns)
DEFAULT_FORMAT = "GT"
DEFAULT_SAMPLE = "0/0"
MISSING_GT = "./."

MIN_DATA_COLUMNS = 8


@dataclass(frozen=True)
class VariantRecord:
    chromosome: str
    position: int
    id: str
    ref: str
    alt: str
    qual: str
    filter: str
    info: str
    format: str
    genotype: str             # raw GT field, e.g. "0|1"
    resolved_genotype: str    # allele letters, e.g. "C/T"


@dataclass
class VcfParseResult:
    records: List[VariantRecord]
    vcf_version: str
    sample_id: str
    errors: List[str] = field(default_factory=list)
    has_fileformat: bool = False

    @property
    def total_variants(self) -> int:
        return len(self.records)


class VcfParseError(ValueError):
    pass


def resolve_genotype(ref: str, alt: str, gt: str) -> str:
    """
    Resolve a GT field to allele letters using REF/ALT.

    Index 0 is REF, 1.. are the comma-separated ALT alleles. Phasing is not
    preserved. Non-numeric or out-of-range indices become ".".

      resolve_genotype("C", "T", "0|1")  -> "C/T"
      resolve_genotype("C", "T", "./.")  -> "./."
    """
    alleles = [ref] + alt.split(",")
    resolved: List[str] = []
    for token in gt.replace("|", "/").split("/"):
        try:
            idx = int(token)
        except ValueError:
            resolved.append(".")
            continue
        resolved.append(alleles[idx] if 0 <= idx < len(alleles) else ".")
    return "/".join(resolved)


def extract_gt(format_field: str, sample_field: str) -> str:
    """Pick the GT value out of a FORMAT/SAMPLE column pair ("GT:DP", "0|1:20" -> "0|1")."""
    format_keys = format_field.split(":")
    if "GT" not in format_keys:
        return MISSING_GT
    gt_index = format_keys.index("GT")
    sample_values = sample_field.split(":")
    if gt_index >= len(sample_values):
        return MISSING_GT
    return sample_values[gt_index]


def parse_vcf(content: Union[str, bytes, Iterable[str]]) -> VcfParseResult:
    """
    Parse VCF text into ordered variant records.

    Metadata lines set the detected version, the #CHROM header sets the sample
    identifier (``report_policy.default_sample_id`` when absent or blank), every
    other non-blank line is a data record. Malformed rows
    (fewer than 8 columns, non-integer POS) are skipped and reported in
    ``errors``; they never abort the parse.

    Args:
        content: File text, raw bytes (decoded as UTF-8) or a line iterable.
    """
    records: List[VariantRecord] = []
    errors: List[str] = []
    vcf_version = UNKNOWN_VERSION
    default_sample_id = get_report_policy().default_sample_id
    sample_id = default_sample_id
    fileformat_seen = False

    for raw in _normalize_to_lines(content):
        line = raw.strip()
        if not line:
            continue

        if line.startswith("##"):
            if line.startswith("##fileformat=VCF"):
                vcf_version = line.split("=", 1)[1]
                fileformat_seen = True
            continue

        if line.startswith("#CHROM"):
            cols = line.split("\t")
            if len(cols) > 9:
                sample_id = cols[9].strip() or default_sample_id
            continue

        record, error = _parse_record_line(line)
        if error is not None:
            logger.warning("VCF line skipped: %s", error)
            errors.append(error)
            continue
        records.append(record)

    logger.info(
        "Parsed %d VCF records (%d skipped), version=%s, sample=%s",
        len(records), len(errors), vcf_version, sample_id,
    )

    return VcfParseResult(
        records=records,
        vcf_version=vcf_version,
        sample_id=sample_id,
        errors=errors,
        has_fileformat=fileformat_seen,
    )


def _parse_record_line(line: str) -> Tuple[Optional[VariantRecord], Optional[str]]:
    cols = line.split("\t")
    if len(cols) < MIN_DATA_COLUMNS:
        return None, f"Skipped malformed line ({len(cols)} columns): {line[:60]}"

    chrom, pos_s, vid, ref, alt, qual, flt, info = cols[:8]
    format_field = cols[8] if len(cols) > 8 else DEFAULT_FORMAT
    sample_field = cols[9] if len(cols) > 9 else DEFAULT_SAMPLE

    try:
        pos = int(pos_s)
    except ValueError:
        return None, f"Invalid position: {pos_s}"

    gt = extract_gt(format_field, sample_field)

    return VariantRecord(
        chromosome=chrom,
        position=pos,
        id="" if vid == "." else vid,
        ref=ref,
        alt=alt,
        qual=qual,
        filter=flt,
        info=info,
        format=format_field,
        genotype=gt,
        resolved_genotype=resolve_genotype(ref, alt, gt),
    ), None


def _normalize_to_lines(content: Union[str, bytes, Iterable[str]]) -> Iterator[str]:
    if isinstance(content, bytes):
        text = content.decode("utf-8", errors="replace")
        yield from text.splitlines()
        return
    if isinstance(content, str):
        yield from content.splitlines()
        return
    if isinstance(content, Iterable):
        yield from content
        return
    raise VcfParseError(f"Cannot read VCF content of type {type(content).__name__}")
