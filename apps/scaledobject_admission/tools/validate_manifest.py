"""
Validate ScaledObjects in YAML/JSON manifests without a cluster.

    python -m apps.scaledobject_admission.tools.validate_manifest deploy/*.yaml

Exit code: 0 all valid, 1 at least one invalid ScaledObject, 2 a file
could not be read or parsed.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence

import yaml
from pydantic import ValidationError

from apps.scaledobject_admission.models.scaledobject_models import ScaledObject
from apps.scaledobject_admission.runtime.validator import derive_effective_config, run_checks

logger = logging.getLogger("scaledobject.admission.tools.validate_manifest")

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_UNREADABLE = 2


def iter_scaled_objects(text: str) -> Iterator[Dict[str, Any]]:
    """Yield every document of kind ScaledObject (JSON is valid YAML)."""
    for doc in yaml.safe_load_all(text):
        if isinstance(doc, dict) and doc.get("kind") == "ScaledObject":
            yield doc


def evaluate_document(doc: Dict[str, Any]) -> Dict[str, Any]:
    try:
        scaled_object = ScaledObject.model_validate(doc)
    except ValidationError as exc:
        meta = doc.get("metadata") or {}
        return {
            "identifier": f"scaledobject.{meta.get('namespace', '')}.{meta.get('name', '')}".lower(),
            "valid": False,
            "errors": [f"invalid ScaledObject: {exc.error_count()} schema error(s)"],
            "effective": None,
        }

    results = run_checks(scaled_object.spec)
    effective = derive_effective_config(scaled_object)
    return {
        "identifier": effective.identifier,
        "valid": all(r.ok for _, r in results),
        "errors": [f"{name}: {r.message}" for name, r in results if not r.ok],
        "effective": effective,
    }


def print_report(path: str, report: Dict[str, Any]) -> None:
    print(f"===== {report['identifier']} ({path}) =====")
    print(f"Valid:             {report['valid']}")

    for err in report["errors"]:
        print(f"  - {err}")

    eff = report["effective"]
    if eff is not None:
        print(f"Min/Max Replicas:  {eff.min_replicas}/{eff.max_replicas}")
        print(f"Scaling Modifiers: {eff.using_modifiers}")
        print(f"Paused:            {eff.paused}")


def validate_paths(paths: Sequence[str]) -> int:
    exit_code = EXIT_OK

    for path in paths:
        try:
            text = Path(path).read_text(encoding="utf-8")
            docs = list(iter_scaled_objects(text))
        except (OSError, yaml.YAMLError) as exc:
            logger.error("Cannot read %s: %s", path, exc)
            exit_code = EXIT_UNREADABLE
            continue

        if not docs:
            logger.warning("No ScaledObject found in %s", path)

        for doc in docs:
            report = evaluate_document(doc)
            print_report(path, report)
            if not report["valid"] and exit_code == EXIT_OK:
                exit_code = EXIT_INVALID

    return exit_code


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Validate ScaledObject manifests.")
    parser.add_argument("paths", nargs="+", help="YAML or JSON manifest files")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    return validate_paths(args.paths)


if __name__ == "__main__":
    sys.exit(main())
