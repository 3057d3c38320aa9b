"""JSON export for resolved crates."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable

from cratenix.export.order import build_order
from cratenix.metadata.indexed import IndexedMetadata
from cratenix.resolve.models import CrateDerivation

logger = logging.getLogger("cratenix.export.json")


def crates_document(
    metadata: IndexedMetadata, crates: Iterable[CrateDerivation]
) -> Dict[str, Any]:
    """Build the JSON-serializable document for a resolved crate set.

    Crates are listed in build order.
    """
    return {
        "root": metadata.root,
        "workspace_members": sorted(metadata.workspace_members),
        "crates": [crate.model_dump(mode="json") for crate in build_order(crates)],
    }


def export_json(
    metadata: IndexedMetadata, crates: Iterable[CrateDerivation], output_path: Path
) -> None:
    """Export resolved crates to a JSON file.

    Args:
        metadata: Indexed metadata the crates were resolved from.
        crates: Resolved crates.
        output_path: Output file path.
    """
    logger.info("Exporting crates to JSON: %s", output_path)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    data = crates_document(metadata, crates)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    logger.info("JSON export completed: %d crates", len(data["crates"]))
