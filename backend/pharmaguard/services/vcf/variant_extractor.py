from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from pharmaguard.services.pharmacogenomics.marker_catalog import TARGET_GENES, get_marker
from pharmaguard.services.pharmacogenomics.models import DetectedVariant, MarkerMapping

from .parser import VariantRecord

logger = logging.getLogger(__name__)

HOM_REF = "Hom-Ref"
HOM_ALT = "Hom-Alt"
HET = "Het"

_HOM_REF_PREFIXES = ("0/0", "0|0")
_HOM_ALT_CALLS = ("1/1", "1|1")


def classify_zygosity(raw_gt: str) -> str:
    """
    Biallelic zygosity from the raw GT string.

    Returns:
      'Hom-Ref'  : starts with 0/0 or 0|0
      'Hom-Alt'  : exactly 1/1 or 1|1
      'Het'      : anything else, including multi-allelic calls such as 2/1
    """
    if raw_gt.startswith(_HOM_REF_PREFIXES):
        return HOM_REF
    if raw_gt in _HOM_ALT_CALLS:
        return HOM_ALT
    return HET


def assign_star_allele(mapping: MarkerMapping, zygosity: str) -> str:
    if zygosity == HOM_REF:
        return mapping.star_allele_ref
    if zygosity == HOM_ALT:
        return f"{mapping.star_allele_alt}/{mapping.star_allele_alt}"
    return f"{mapping.star_allele_ref}/{mapping.star_allele_alt}"


def extract_pharmacogenes(
    records: Sequence[VariantRecord],
    *,
    genes: Optional[Iterable[str]] = None,
) -> Dict[str, List[DetectedVariant]]:
    """
    Group catalog markers found in ``records`` by gene.

    Every requested gene is present in the result, with an empty list when no
    marker was observed. Records without an ID or with an ID outside the
    marker catalog are ignored.
    """
    allowed = list(genes) if genes is not None else list(TARGET_GENES)
    out: Dict[str, List[DetectedVariant]] = {g: [] for g in allowed}

    for record in records:
        mapping = get_marker(record.id)
        if mapping is None or mapping.gene not in out:
            continue

        zygosity = classify_zygosity(record.genotype)
        out[mapping.gene].append(
            DetectedVariant(
                rsid=record.id,
                genotype=record.resolved_genotype,
                star_allele=assign_star_allele(mapping, zygosity),
                chromosome=record.chromosome,
                position=record.position,
                ref=record.ref,
                alt=record.alt,
            )
        )

    logger.info(
        "Marker hits per gene: %s",
        ", ".join(f"{g}={len(vs)}" for g, vs in out.items()),
    )
    return out
