from __future__ import annotations

import json
import sys
from pathlib import Path

from pharmaguard.core import logging as _logging  # noqa: F401  (configures root logger)
from pharmaguard.services.pipeline.analysis_pipeline import run_analysis_pipeline

from .demo import SCENARIOS, generate_demo_vcf
from .validator import VcfValidationError

USAGE = (
    "Usage: python -m pharmaguard.services.vcf <path-to.vcf> [--patient-id ID] [--no-validate]\n"
    f"       python -m pharmaguard.services.vcf --demo {{{','.join(SCENARIOS)}}}"
)


def _option(argv: list[str], name: str):
    """Value following ``name``; None if absent, '' if the flag has no value."""
    if name not in argv:
        return None
    idx = argv.index(name) + 1
    return argv[idx] if idx < len(argv) else ""


def main(argv: list[str]) -> int:
    if len(argv) < 2 or "--help" in argv:
        print(USAGE)
        return 0

    demo = _option(argv, "--demo")
    if demo is not None:
        if demo not in SCENARIOS:
            print(f"Unknown demo scenario: {demo!r}")
            return 2
        text = generate_demo_vcf(demo)
    else:
        path = Path(argv[1])
        if not path.exists():
            print(f"File not found: {path}")
            return 2
        text = path.read_text(encoding="utf-8", errors="replace")

    patient_id = _option(argv, "--patient-id")
    if patient_id == "":
        print("Error: --patient-id requires a value")
        return 2

    try:
        result = run_analysis_pipeline(text, patient_id, validate="--no-validate" not in argv)
    except VcfValidationError as e:
        print(f"VCF validation failed: {e}")
        return 2

    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
