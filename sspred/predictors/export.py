"""
Result export for secondary-structure predictions.

Every predictor returns a ``PredictionResult``; this module writes those
results in a uniform layout:
- Per-residue TSV tables (position, residue, predicted class)
- Region TSV tables (class, start, end, length, residues, score)
- JSON documents with the full result
- Batch export with a per-sequence summary table
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Union

import pandas as pd

from ..core.models import Conformation, PredictionResult

logger = logging.getLogger(__name__)

RESIDUE_COLUMNS = ["id", "pos", "aa", "ss", "predictor"]
REGION_COLUMNS = ["id", "conformation", "start", "end", "length", "sequence", "score"]


# ============================================================================
# TABLES
# ============================================================================

def residues_to_frame(result: PredictionResult) -> pd.DataFrame:
    """Per-residue table; ``pos`` is 1-indexed."""
    rows = [
        {
            "id": result.sequence_id,
            "pos": i + 1,
            "aa": aa,
            "ss": ss,
            "predictor": result.predictor_name,
        }
        for i, (aa, ss) in enumerate(zip(result.sequence, result.structure))
    ]
    return pd.DataFrame(rows, columns=RESIDUE_COLUMNS)


def regions_to_frame(result: PredictionResult) -> pd.DataFrame:
    """
    Region table for all three classes.

    ``start`` is 1-indexed and ``end`` inclusive, matching ``pos`` in the
    residue table.
    """
    rows = []
    for conformation in Conformation:
        for region in result.regions(conformation):
            rows.append({
                "id": result.sequence_id,
                "conformation": conformation.value,
                "start": region.start + 1,
                "end": region.end,
                "length": region.length,
                "sequence": result.region_sequence(region),
                "score": region.score,
            })
    frame = pd.DataFrame(rows, columns=REGION_COLUMNS)
    return frame.sort_values("start", kind="stable").reset_index(drop=True)


# ============================================================================
# DATA EXPORT FUNCTIONS
# ============================================================================

def export_to_tsv(result: PredictionResult, filepath: Union[str, Path]) -> Path:
    """
    Export per-residue predictions to TSV.

    Columns: id, pos, aa, ss, predictor

    Returns:
        Path to created file
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    frame = residues_to_frame(result)
    frame.to_csv(filepath, sep="\t", index=False)

    logger.info(f"Exported {len(frame)} residues to {filepath}")
    return filepath


def export_regions_to_tsv(result: PredictionResult, filepath: Union[str, Path]) -> Path:
    """
    Export helix, strand and coil regions to TSV.

    Columns: id, conformation, start, end, length, sequence, score
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    frame = regions_to_frame(result)
    frame.to_csv(filepath, sep="\t", index=False)

    logger.info(f"Exported {len(frame)} regions to {filepath}")
    return filepath


def result_to_dict(result: PredictionResult) -> dict:
    """JSON-ready dictionary of a result, including class composition."""
    data = result.model_dump(mode="json")
    data["composition"] = result.composition()
    return data


def export_to_json(result: PredictionResult, filepath: Union[str, Path]) -> Path:
    """Write a single result as indented JSON."""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with open(filepath, "w") as f:
        json.dump(result_to_dict(result), f, indent=2)

    logger.info(f"Exported {result.sequence_id} to {filepath}")
    return filepath


def export_batch_results(
    results: list[PredictionResult],
    output_dir: Union[str, Path],
) -> dict[str, dict[str, Path]]:
    """
    Export multiple prediction results to a directory.

    Creates per-sequence residue and region TSV files plus ``summary.tsv``
    with one row per sequence.

    Returns:
        Dictionary mapping sequence_id to {tsv, regions} paths
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = {}
    summary_rows = []

    for result in results:
        safe_id = _safe_filename(result.sequence_id)

        paths[result.sequence_id] = {
            "tsv": export_to_tsv(result, output_dir / f"{safe_id}.tsv"),
            "regions": export_regions_to_tsv(result, output_dir / f"{safe_id}_regions.tsv"),
        }

        composition = result.composition()
        summary_rows.append({
            "id": result.sequence_id,
            "predictor": result.predictor_name,
            "length": len(result.sequence),
            "helix_fraction": composition["H"],
            "strand_fraction": composition["E"],
            "coil_fraction": composition["C"],
            "n_helix_regions": len(result.helix_regions),
            "n_strand_regions": len(result.strand_regions),
            "structure": result.structure,
        })

    summary_path = output_dir / "summary.tsv"
    pd.DataFrame(summary_rows).to_csv(summary_path, sep="\t", index=False)

    logger.info(f"Batch export complete: {len(results)} sequences to {output_dir}")
    return paths


def _safe_filename(name: str) -> str:
    """Convert string to safe filename."""
    return re.sub(r"[^A-Za-z0-9._-]", "_", name)
