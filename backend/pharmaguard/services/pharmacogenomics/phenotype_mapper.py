"""
Phenotype Mapper - Diplotype derivation and metabolizer phenotype inference.

Alleles observed at catalog markers are tallied per functional class and the
tallies are run through a fixed, ordered decision table per gene family.
All results are deterministic.
"""

import logging
import re
from typing import List, Optional, Sequence

from .marker_catalog import get_marker, wildtype_allele, wildtype_diplotype
from .models import AlleleFunctionCounts, DetectedVariant, FunctionImpact, Phenotype

logger = logging.getLogger(__name__)

# Enzyme genes scored with the metabolizer decision table
METABOLIZER_GENES = frozenset({"CYP2D6", "CYP2C19", "CYP2C9", "TPMT", "DPYD"})

# Transporter genes: same counters, coarser PM/IM/NM cut-offs
TRANSPORTER_GENES = frozenset({"SLCO1B1"})

_ALLELE_SEPARATOR = re.compile(r"[/|]")


def split_alleles(genotype: str) -> List[str]:
    """'C/T' or 'C|T' -> ['C', 'T']"""
    return _ALLELE_SEPARATOR.split(genotype)


class PhenotypeMapper:
    """Maps a gene's detected variants to a metabolizer phenotype."""

    def count_allele_functions(self, variants: Sequence[DetectedVariant]) -> AlleleFunctionCounts:
        """
        Tally every resolved allele by function.

        The reference letter counts as functional; any other called letter
        counts toward the marker's impact class. Missing calls ('.') are not
        counted. With nothing counted at all, two functional alleles are
        assumed.
        """
        counts = AlleleFunctionCounts()

        for variant in variants:
            mapping = get_marker(variant.rsid)
            if mapping is None:
                continue

            for allele in split_alleles(variant.genotype):
                if allele == mapping.ref:
                    counts.functional += 1
                elif allele != ".":
                    self._count_alternate(counts, mapping.function_impact)

        if counts.is_empty():
            counts.functional = 2

        return counts

    @staticmethod
    def _count_alternate(counts: AlleleFunctionCounts, impact: FunctionImpact) -> None:
        if impact == FunctionImpact.NO_FUNCTION:
            counts.no_function += 1
        elif impact == FunctionImpact.REDUCED:
            counts.reduced += 1
        elif impact == FunctionImpact.INCREASED:
            counts.increased += 1
        else:
            counts.functional += 1

    def infer_phenotype(self, gene: str, variants: Sequence[DetectedVariant]) -> Phenotype:
        """
        Phenotype for ``gene``. Unsupported genes give Unknown; a supported gene
        with no detected markers is a Normal Metabolizer.
        """
        if gene not in METABOLIZER_GENES and gene not in TRANSPORTER_GENES:
            logger.warning("No phenotype rules for gene %s", gene)
            return Phenotype.UNKNOWN

        if not variants:
            return Phenotype.NM

        counts = self.count_allele_functions(variants)
        phenotype = self.classify(gene, counts)
        logger.debug("%s allele counts %s -> %s", gene, counts, phenotype.value)
        return phenotype

    @staticmethod
    def classify(gene: str, counts: AlleleFunctionCounts) -> Phenotype:
        """Ordered decision table; first matching row wins."""
        nf, red, fn, inc = counts.no_function, counts.reduced, counts.functional, counts.increased

        if gene in METABOLIZER_GENES:
            if nf >= 2:
                return Phenotype.PM
            if nf == 1 and red >= 1:
                return Phenotype.PM
            if nf == 1 and fn >= 1:
                return Phenotype.IM
            if red >= 2:
                return Phenotype.IM
            if red == 1 and fn >= 1:
                return Phenotype.IM
            if inc >= 2:
                return Phenotype.URM
            if inc == 1 and fn >= 1:
                return Phenotype.RM
            return Phenotype.NM

        if gene in TRANSPORTER_GENES:
            if nf >= 2 or red >= 2:
                return Phenotype.PM
            if nf >= 1 or red >= 1:
                return Phenotype.IM
            return Phenotype.NM

        return Phenotype.UNKNOWN


class DiplotypeResolver:
    """Reduces a gene's detected star alleles to a two-allele diplotype."""

    def resolve_diplotype(self, gene: str, variants: Sequence[DetectedVariant]) -> str:
        """
        Distinct alternate star alleles (in order of first appearance) are
        paired with the wildtype allele, or with each other when two or more
        were seen. Only the first two are kept.
        """
        if not variants:
            return wildtype_diplotype(gene)

        labels: List[str] = []
        for variant in variants:
            label = self._alternate_label(variant)
            if label is not None and label not in labels:
                labels.append(label)

        wildtype = wildtype_allele(gene)
        if not labels:
            return f"{wildtype}/{wildtype}"
        if len(labels) == 1:
            return f"{wildtype}/{labels[0]}"
        if len(labels) > 2:
            logger.info("%s: %d distinct alleles, keeping %s", gene, len(labels), labels[:2])
        return f"{labels[0]}/{labels[1]}"

    @staticmethod
    def _alternate_label(variant: DetectedVariant) -> Optional[str]:
        mapping = get_marker(variant.rsid)
        if mapping is None:
            return None
        carries_alt = any(a != mapping.ref and a != "." for a in split_alleles(variant.genotype))
        return mapping.star_allele_alt if carries_alt else None
