"""
Benchmark runner for systematic predictor evaluation.

This module provides the BenchmarkRunner class, which runs secondary-
structure predictors over proteins with known structure and collects Q3
and per-class metrics.

Usage
-----
    >>> records = read_benchmark_file("benchmark.txt")
    >>> runner = BenchmarkRunner()
    >>> runner.add_predictor("ChouFasman")
    >>> runner.add_predictor("GOR", model_path="gor_model.json")
    >>> for result in runner.run(records, dataset_name="benchmark"):
    ...     print(result.summary())

Dataset files
-------------
Plain text, blank lines ignored, in one of three layouts:

- ``name / sequence / structure`` triples
- ``sequence / structure`` pairs (ids ``Protein 1``, ``Protein 2``, ...)
- a single sequence line (no observed structure)

The triple layout is chosen when the line count is a multiple of three and
the first line looks like a name (shorter than the second line, or
containing a digit).
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

import pandas as pd

from ..core.exceptions import MalformedInputError, MissingResourceError
from ..core.models import ProteinRecord
from ..predictors.base import BasePredictor, get_predictor
from .metrics import BenchmarkResult, evaluate_structure, q3_accuracy

logger = logging.getLogger(__name__)


# =============================================================================
# Dataset Loading
# =============================================================================

def read_benchmark_file(path: Union[str, Path]) -> list[ProteinRecord]:
    """
    Read proteins with observed structure from a benchmark text file.

    Raises:
        MissingResourceError: If the file cannot be read
        MalformedInputError: If the file is empty
    """
    path = Path(path)
    try:
        text = path.read_text()
    except OSError as e:
        raise MissingResourceError(f"Unable to read benchmark file {path}: {e}") from e

    lines = [line.strip() for line in text.splitlines() if line.strip()]
    if not lines:
        raise MalformedInputError(f"Benchmark file is empty: {path}")

    n = len(lines)
    records = []

    if n % 3 == 0 and (len(lines[0]) < len(lines[1]) or re.search(r"\d", lines[0])):
        for i in range(0, n, 3):
            records.append(ProteinRecord(
                id=lines[i], sequence=lines[i + 1], observed_structure=lines[i + 2]
            ))
        layout = "name/sequence/structure"
    elif n % 2 == 0:
        for i in range(0, n, 2):
            records.append(ProteinRecord(
                id=f"Protein {i // 2 + 1}", sequence=lines[i], observed_structure=lines[i + 1]
            ))
        layout = "sequence/structure"
    else:
        records.append(ProteinRecord(id="Protein 1", sequence=lines[0]))
        layout = "single sequence"

    logger.info(f"Read {len(records)} entries from {path} ({layout} layout)")
    return records


# =============================================================================
# Benchmark Runner
# =============================================================================

@dataclass
class RunnerConfig:
    """
    Configuration for benchmark runner.

    Attributes:
        save_individual_results: Whether to store per-sample scores
    """
    save_individual_results: bool = True


class BenchmarkRunner:
    """
    Orchestrates predictor evaluation against proteins of known structure.

    Predictor errors propagate: a benchmark either completes for every
    protein or fails.
    """

    def __init__(self, config: Optional[RunnerConfig] = None):
        self.config = config or RunnerConfig()
        self.predictors: dict[str, BasePredictor] = {}

    def add_predictor(
        self,
        name: str,
        predictor: Optional[BasePredictor] = None,
        **kwargs,
    ):
        """
        Add a predictor to the benchmark.

        Args:
            name: Predictor name (must be registered if predictor not provided)
            predictor: Optional predictor instance
            **kwargs: Constructor arguments, e.g. ``model_path``
        """
        if predictor is None:
            predictor = get_predictor(name, **kwargs)

        self.predictors[predictor.name] = predictor
        logger.info(f"Added predictor: {predictor.name}")

    def run(
        self,
        records: list[ProteinRecord],
        dataset_name: str = "dataset",
        progress_callback: Optional[Callable[[int, int, str], None]] = None,
    ) -> list[BenchmarkResult]:
        """
        Run every registered predictor on the records.

        Records without observed structure are skipped.

        Returns:
            List of BenchmarkResult objects, one per predictor
        """
        if not self.predictors:
            raise ValueError("No predictors registered. Call add_predictor() first.")

        labeled = [r for r in records if r.observed_structure]
        if len(labeled) < len(records):
            logger.warning(
                f"Skipping {len(records) - len(labeled)} entries without observed structure"
            )

        results = []
        for predictor in self.predictors.values():
            logger.info(f"Evaluating {predictor.name} on {dataset_name}...")
            results.append(
                self._evaluate_predictor(predictor, labeled, dataset_name, progress_callback)
            )
        return results

    def _evaluate_predictor(
        self,
        predictor: BasePredictor,
        records: list[ProteinRecord],
        dataset_name: str,
        progress_callback: Optional[Callable] = None,
    ) -> BenchmarkResult:
        start_time = time.time()

        per_sample = []
        pooled_pred = []
        pooled_obs = []

        for i, record in enumerate(records):
            if progress_callback:
                progress_callback(i + 1, len(records), predictor.name)

            result = predictor.predict(record)
            observed = record.observed_structure

            n = min(len(result.structure), len(observed))
            pooled_pred.append(result.structure[:n])
            pooled_obs.append(observed[:n])

            if self.config.save_individual_results:
                per_sample.append({
                    "id": record.id,
                    "predictor": predictor.name,
                    "length": len(record.sequence),
                    "q3": q3_accuracy(result.structure, observed),
                    "predicted": result.structure,
                    "observed": observed,
                })

        runtime = time.time() - start_time

        scores = [q3_accuracy(p, o) for p, o in zip(pooled_pred, pooled_obs)]
        overall = evaluate_structure("".join(pooled_pred), "".join(pooled_obs))

        return BenchmarkResult(
            predictor_name=predictor.name,
            dataset_name=dataset_name,
            n_samples=len(records),
            mean_q3=sum(scores) / len(scores) if scores else 0.0,
            overall=overall,
            per_sample_results=per_sample,
            runtime_seconds=runtime,
        )


def results_to_frame(results: list[BenchmarkResult]) -> pd.DataFrame:
    """Per-sample scores of every result as one long table."""
    rows = [row for result in results for row in result.per_sample_results]
    return pd.DataFrame(rows, columns=["id", "predictor", "length", "q3", "predicted", "observed"])
