"""
marker_catalog.py
=================
Pharmacogenomic marker panel: rsID -> gene, REF/ALT letters, star alleles and
functional impact of the alternate allele for the 6 target genes.

Sources: PharmVar, CPIC, ClinVar
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from .models import FunctionImpact, MarkerMapping

_NO = FunctionImpact.NO_FUNCTION
_DEC = FunctionImpact.REDUCED
_NORM = FunctionImpact.NORMAL
_INC = FunctionImpact.INCREASED

TARGET_GENES: Tuple[str, ...] = (
    "CYP2D6",
    "CYP2C19",
    "CYP2C9",
    "SLCO1B1",
    "TPMT",
    "DPYD",
)

# Genes whose reference haplotype is not plain *1
_WILDTYPE_ALLELE: Mapping[str, str] = MappingProxyType({"SLCO1B1": "*1a"})

MARKER_CATALOG: Tuple[MarkerMapping, ...] = (
    # ── CYP2D6 ──────────────────────────────────────────────────────────────
    MarkerMapping("rs3892097",  "CYP2D6",  "C", "T",   "*1",  "*4",        _NO),    # splice defect
    MarkerMapping("rs35742686", "CYP2D6",  "C", "del", "*1",  "*3",        _NO),    # frameshift
    MarkerMapping("rs5030655",  "CYP2D6",  "A", "del", "*1",  "*6",        _NO),    # frameshift
    MarkerMapping("rs16947",    "CYP2D6",  "G", "A",   "*1",  "*2",        _NORM),
    MarkerMapping("rs1135840",  "CYP2D6",  "G", "C",   "*1",  "*10",       _DEC),

    # ── CYP2C19 ─────────────────────────────────────────────────────────────
    MarkerMapping("rs4244285",  "CYP2C19", "G", "A",   "*1",  "*2",        _NO),
    MarkerMapping("rs4986893",  "CYP2C19", "G", "A",   "*1",  "*3",        _NO),
    MarkerMapping("rs12248560", "CYP2C19", "C", "T",   "*1",  "*17",       _INC),

    # ── CYP2C9 ──────────────────────────────────────────────────────────────
    MarkerMapping("rs1799853",  "CYP2C9",  "C", "T",   "*1",  "*2",        _DEC),
    MarkerMapping("rs1057910",  "CYP2C9",  "A", "C",   "*1",  "*3",        _NO),
    MarkerMapping("rs28371686", "CYP2C9",  "G", "A",   "*1",  "*5",        _DEC),

    # ── SLCO1B1 ─────────────────────────────────────────────────────────────
    MarkerMapping("rs4149056",  "SLCO1B1", "T", "C",   "*1a", "*5",        _DEC),
    MarkerMapping("rs2306283",  "SLCO1B1", "A", "G",   "*1a", "*1b",       _NORM),

    # ── TPMT ────────────────────────────────────────────────────────────────
    MarkerMapping("rs1800462",  "TPMT",    "C", "A",   "*1",  "*2",        _NO),
    MarkerMapping("rs1800460",  "TPMT",    "C", "A",   "*1",  "*3B",       _NO),
    MarkerMapping("rs1142345",  "TPMT",    "T", "C",   "*1",  "*3C",       _NO),

    # ── DPYD ────────────────────────────────────────────────────────────────
    MarkerMapping("rs3918290",  "DPYD",    "C", "T",   "*1",  "*2A",       _NO),
    MarkerMapping("rs55886062", "DPYD",    "C", "T",   "*1",  "*13",       _NO),
    MarkerMapping("rs67376798", "DPYD",    "A", "T",   "*1",  "HapB3",     _DEC),
    MarkerMapping("rs75017182", "DPYD",    "C", "T",   "*1",  "c.1236G>A", _DEC),
)


def _index_by_rsid(catalog: Tuple[MarkerMapping, ...]) -> Mapping[str, MarkerMapping]:
    index: Dict[str, MarkerMapping] = {}
    for mapping in catalog:
        # first entry wins for duplicated identifiers
        index.setdefault(mapping.rsid.lower(), mapping)
    return MappingProxyType(index)


_MARKERS_BY_RSID: Mapping[str, MarkerMapping] = _index_by_rsid(MARKER_CATALOG)


def get_marker(rsid: Optional[str]) -> Optional[MarkerMapping]:
    """Case-insensitive catalog lookup. Returns None for unknown or empty IDs."""
    if not rsid:
        return None
    return _MARKERS_BY_RSID.get(rsid.lower())


def wildtype_allele(gene: str) -> str:
    """Reference star allele used for a gene's wildtype diplotype."""
    return _WILDTYPE_ALLELE.get(gene, "*1")


def wildtype_diplotype(gene: str) -> str:
    allele = wildtype_allele(gene)
    return f"{allele}/{allele}"


def markers_for_gene(gene: str) -> Tuple[MarkerMapping, ...]:
    return tuple(m for m in MARKER_CATALOG if m.gene == gene)
