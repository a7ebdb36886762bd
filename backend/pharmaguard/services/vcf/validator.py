"""
Structural pre-flight checks run on a parsed VCF before any report is built.

The parser itself is tolerant (bad rows are skipped and listed in
``VcfParseResult.errors``); these checks reject inputs that cannot yield a
meaningful analysis at all.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from pharmaguard.services.pharmacogenomics.marker_catalog import TARGET_GENES

from .parser import VcfParseError, VcfParseResult

logger = logging.getLogger(__name__)


class VcfValidationError(VcfParseError):
    pass


def validate_vcf(
    parsed: VcfParseResult,
    *,
    by_gene: Optional[Dict[str, List]] = None,
    require_all_genes: bool = False,
    genes: Iterable[str] = TARGET_GENES,
) -> None:
    """
    Raise VcfValidationError naming the first violated invariant.

    Checks, in order:
      1. a ``##fileformat=VCF`` line was present
      2. at least one data record parsed
      3. every record has a chromosome, a positive position and a GT value
      4. (only if ``require_all_genes``) every gene has at least one marker
    """
    if not parsed.has_fileformat:
        raise VcfValidationError("Invalid VCF header: missing '##fileformat=VCF' line")

    if not parsed.records:
        detail = f" ({len(parsed.errors)} malformed lines skipped)" if parsed.errors else ""
        raise VcfValidationError(f"VCF contains no variants{detail}")

    for record in parsed.records:
        if not record.chromosome or record.position <= 0 or not record.genotype:
            raise VcfValidationError(
                f"Malformed VCF record detected: chrom={record.chromosome!r} "
                f"pos={record.position} gt={record.genotype!r}"
            )

    if require_all_genes:
        if by_gene is None:
            raise ValueError("require_all_genes needs the per-gene variant map")
        missing = [g for g in genes if not by_gene.get(g)]
        if missing:
            raise VcfValidationError(
                f"VCF is missing marker variants for required genes: {', '.join(missing)}"
            )

    logger.info("VCF passed structural validation (%d records)", len(parsed.records))
