"""
Tests for benchmark metrics and the benchmark runner.
"""

import numpy as np
import pytest

from sspred.benchmark import (
    BenchmarkRunner,
    RunnerConfig,
    calculate_class_metrics,
    calculate_mcc,
    calculate_sov,
    compare_predictors,
    evaluate_structure,
    q3_accuracy,
    rank_predictors,
    read_benchmark_file,
    results_to_frame,
)
from sspred.core.exceptions import MalformedInputError, MissingResourceError
from sspred.core.models import Conformation, ProteinRecord
from sspred.predictors.chou_fasman import ChouFasmanPredictor


class TestQ3:
    """Tests for three-state accuracy."""

    def test_perfect(self):
        assert q3_accuracy("HHEECC", "HHEECC") == 1.0

    def test_unresolved_positions_ignored(self):
        assert q3_accuracy("HHEC", "HXEE") == pytest.approx(2 / 3)

    def test_common_prefix_only(self):
        assert q3_accuracy("HHHH", "HH") == 1.0
        assert q3_accuracy("HC", "HHHH") == 0.5

    def test_nothing_to_compare(self):
        assert q3_accuracy("HHH", "XXX") == 0.0
        assert q3_accuracy("HHH", "") == 0.0
        assert q3_accuracy("HHH", None) == 0.0


class TestClassMetrics:
    """Tests for one-versus-rest metrics."""

    def test_confusion_counts(self):
        m = calculate_class_metrics("HHEC", "HEEC", Conformation.HELIX)
        assert (m.tp, m.fp, m.fn, m.tn) == (1, 1, 0, 2)
        assert m.sensitivity == 1.0
        assert m.precision == 0.5

    def test_observed_non_he_labels_are_coil(self):
        m = calculate_class_metrics("CCC", "TS-", Conformation.COIL)
        assert m.tp == 3

    def test_mcc_perfect_and_degenerate(self):
        assert calculate_mcc(5, 5, 0, 0) == pytest.approx(1.0)
        assert calculate_mcc(0, 10, 0, 0) == 0.0

    def test_evaluate_structure(self):
        metrics = evaluate_structure("HHEECC", "HHEXCE")
        assert metrics.n_compared == 5
        assert metrics.n_correct == 4
        assert metrics.q3 == pytest.approx(0.8)
        assert set(metrics.per_class) == {"H", "E", "C"}
        assert "Q3" in metrics.summary()


class TestSov:

    def test_identical_segments(self):
        labels = np.array([False, True, True, True, False])
        assert calculate_sov(labels, labels) == pytest.approx(1.0)

    def test_no_segments_either_side(self):
        empty = np.zeros(4, dtype=bool)
        assert calculate_sov(empty, empty) == 1.0

    def test_missed_segment(self):
        observed = np.array([True, True, False, False])
        predicted = np.zeros(4, dtype=bool)
        assert calculate_sov(observed, predicted) == 0.0

    def test_partial_overlap(self):
        observed = np.array([True, True, True, True, False, False])
        predicted = np.array([False, False, True, True, True, True])
        # overlap 2, extent 6, delta min(4, 2, 2, 2) = 2
        assert calculate_sov(observed, predicted) == pytest.approx(4 / 6)


class TestReadBenchmarkFile:
    """Tests for dataset text layouts."""

    def test_triples(self, tmp_path):
        path = tmp_path / "bench.txt"
        path.write_text("1abc\nMKVLA\nCEEHH\n\n2xyz\nGGAL\nCCHH\n")
        records = read_benchmark_file(path)
        assert [r.id for r in records] == ["1abc", "2xyz"]
        assert records[0].observed_structure == "CEEHH"

    def test_name_with_digit_of_any_length(self, tmp_path):
        path = tmp_path / "bench.txt"
        path.write_text("protein_number_1\nMKV\nCEE\n")
        assert read_benchmark_file(path)[0].id == "protein_number_1"

    def test_pairs(self, tmp_path):
        path = tmp_path / "bench.txt"
        path.write_text("MKVLA\nCEEHH\nGGAL\nCCHH\n")
        records = read_benchmark_file(path)
        assert [r.id for r in records] == ["Protein 1", "Protein 2"]
        assert records[1].sequence == "GGAL"

    def test_single_sequence(self, tmp_path):
        path = tmp_path / "bench.txt"
        path.write_text("MKVLA\n")
        records = read_benchmark_file(path)
        assert len(records) == 1
        assert records[0].observed_structure is None

    def test_empty_file(self, tmp_path):
        path = tmp_path / "bench.txt"
        path.write_text("\n\n")
        with pytest.raises(MalformedInputError):
            read_benchmark_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(MissingResourceError):
            read_benchmark_file(tmp_path / "none.txt")


class TestBenchmarkRunner:
    """Tests for predictor evaluation."""

    RECORDS = [
        ProteinRecord(id="helix", sequence="EEEEEEEEEE", observed_structure="HHHHHHHHHH"),
        ProteinRecord(id="strand", sequence="VVVVVVVVVV", observed_structure="EEEEEXXXXX"),
        ProteinRecord(id="unlabeled", sequence="GGGG"),
    ]

    def test_requires_predictors(self):
        with pytest.raises(ValueError, match="No predictors"):
            BenchmarkRunner().run(self.RECORDS)

    def test_run(self):
        runner = BenchmarkRunner()
        runner.add_predictor("ChouFasman")
        results = runner.run(self.RECORDS, dataset_name="toy")

        assert len(results) == 1
        result = results[0]
        assert result.predictor_name == "ChouFasman"
        assert result.dataset_name == "toy"
        assert result.n_samples == 2
        assert result.mean_q3 == pytest.approx(1.0)
        assert result.overall.n_compared == 15
        assert "Mean Q3" in result.summary()

    def test_progress_callback(self):
        runner = BenchmarkRunner()
        runner.add_predictor("ChouFasman", predictor=ChouFasmanPredictor())
        runner.add_predictor("ImprovedChouFasman")
        calls = []
        runner.run(self.RECORDS, progress_callback=lambda i, n, name: calls.append((i, n, name)))
        assert len(calls) == 4
        assert calls[0] == (1, 2, "ChouFasman")

    def test_individual_results_optional(self):
        runner = BenchmarkRunner(RunnerConfig(save_individual_results=False))
        runner.add_predictor("ChouFasman")
        assert runner.run(self.RECORDS)[0].per_sample_results == []

    def test_results_to_frame(self):
        runner = BenchmarkRunner()
        runner.add_predictor("ChouFasman")
        runner.add_predictor("ImprovedChouFasman")
        frame = results_to_frame(runner.run(self.RECORDS))
        assert len(frame) == 4
        assert list(frame.columns) == ["id", "predictor", "length", "q3", "predicted", "observed"]

    def test_compare_and_rank(self):
        runner = BenchmarkRunner()
        runner.add_predictor("ChouFasman")
        runner.add_predictor("ImprovedChouFasman")
        comparison = compare_predictors(runner.run(self.RECORDS))
        assert "mcc_H" in comparison["ChouFasman"]
        ranking = rank_predictors(comparison)
        assert ranking[0][0] == "ChouFasman"
        assert ranking[0][1] >= ranking[1][1]
