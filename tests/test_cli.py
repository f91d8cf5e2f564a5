"""
Tests for the command-line interface.
"""

import json

import pandas as pd
import pytest
from click.testing import CliRunner

from sspred.cli.main import cli
from sspred.core.sequence import sequence_to_profile
from sspred.predictors.gor import GORModel, train_gor


UBIQUITIN = "MQIFVKTLTGKTITLEVEPSDTIENVKAKIQDKEGIPPDQQRLIFAGKQLEDGRTLSDYNIQKESTLHLVLRLRGG"
UBIQUITIN_SS = "CEEEEEECCCCCEEEEEECCCCCHHHHHHHHHHHCCCCCCEEEEEECCEECCCCCCCCCCCCCCCEEEEEEECCCC"


def write_pssm(path, length):
    header = ["", "Last position-specific scoring matrix", "   A R N D"]
    footer = [""] * 6
    rows = [
        f"{i + 1:5d} A   " + " ".join(["-1"] * 20) + "   " + " ".join(["5"] * 20) + "  0.50 0.12"
        for i in range(length)
    ]
    path.write_text("\n".join(header + rows + footer) + "\n")
    return path


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def model_path(tmp_path):
    path = tmp_path / "gor_model.json"
    train_gor([(sequence_to_profile(UBIQUITIN), UBIQUITIN_SS)], window_size=17).save(path)
    return path


class TestPredictCommand:
    """Tests for `sspred predict`."""

    def test_sequence_text(self, runner):
        result = runner.invoke(cli, ["-q", "predict", "--seq", "EEEEEEEEEE"])
        assert result.exit_code == 0
        assert "HHHHHHHHHH" in result.output

    def test_sequence_json(self, runner):
        result = runner.invoke(cli, ["-q", "predict", "--seq", "EEEEEEEEEE", "-f", "json"])
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload[0]["structure"] == "HHHHHHHHHH"
        assert payload[0]["predictor_name"] == "ChouFasman"

    def test_fasta_to_tsv(self, runner, tmp_path):
        fasta = tmp_path / "in.fasta"
        fasta.write_text(">ubq\n" + UBIQUITIN + "\n>short\nEEEEEEEEEE\n")
        out_dir = tmp_path / "results"
        result = runner.invoke(
            cli, ["-q", "predict", str(fasta), "-m", "ImprovedChouFasman", "-f", "tsv", "-o", str(out_dir)]
        )
        assert result.exit_code == 0
        summary = pd.read_csv(out_dir / "summary.tsv", sep="\t")
        assert summary["id"].tolist() == ["ubq", "short"]

    def test_plain_sequence_file(self, runner, tmp_path):
        path = tmp_path / "query.txt"
        path.write_text("eeeee\neeeee\n")
        result = runner.invoke(cli, ["-q", "predict", str(path), "-f", "json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)[0]["sequence_id"] == "query"

    def test_gor_with_model(self, runner, model_path):
        result = runner.invoke(
            cli, ["-q", "predict", "--seq", UBIQUITIN, "-m", "gor", "--model", str(model_path), "-f", "json"]
        )
        assert result.exit_code == 0
        assert len(json.loads(result.stdout)[0]["structure"]) == len(UBIQUITIN)

    def test_gor_profile(self, runner, model_path, tmp_path):
        pssm = write_pssm(tmp_path / "1abc.pssm", 6)
        result = runner.invoke(
            cli, ["-q", "predict", "--pssm", str(pssm), "-m", "GOR", "--model", str(model_path), "-f", "json"]
        )
        assert result.exit_code == 0
        payload = json.loads(result.stdout)[0]
        assert payload["sequence_id"] == "1abc"
        assert payload["sequence"] == "XXXXXX"

    def test_gor_without_model_fails(self, runner):
        result = runner.invoke(cli, ["-q", "predict", "--seq", "MVLSEG", "-m", "GOR"])
        assert result.exit_code == 1
        assert "trained model" in result.output

    def test_model_with_rule_based_method_fails(self, runner, model_path):
        result = runner.invoke(cli, ["-q", "predict", "--seq", "EEEEEEEEEE", "--model", str(model_path)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "does not load a trained model" in result.output

    def test_json_on_stdout_without_quiet(self, runner):
        result = runner.invoke(cli, ["predict", "--seq", "EEEEEEEEEE", "-f", "json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)[0]["structure"] == "HHHHHHHHHH"
        assert "SSPred" in result.stderr

    def test_profile_needs_gor(self, runner, tmp_path):
        pssm = write_pssm(tmp_path / "1abc.pssm", 6)
        result = runner.invoke(cli, ["-q", "predict", "--pssm", str(pssm)])
        assert result.exit_code == 1

    def test_requires_one_source(self, runner):
        assert runner.invoke(cli, ["-q", "predict"]).exit_code == 1
        assert runner.invoke(cli, ["-q", "predict", "--seq", "AAA", "--pssm", __file__]).exit_code == 1

    def test_unknown_method(self, runner):
        result = runner.invoke(cli, ["-q", "predict", "--seq", "MVLSEG", "-m", "Nope"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_invalid_sequence(self, runner):
        result = runner.invoke(cli, ["-q", "predict", "--seq", "MVL123"])
        assert result.exit_code == 1


class TestTrainCommand:

    def test_train(self, runner, tmp_path):
        (tmp_path / "pssm").mkdir()
        (tmp_path / "dssp").mkdir()
        (tmp_path / "ids.txt").write_text("1abc\n")
        write_pssm(tmp_path / "pssm" / "1abc.pssm", 4)
        (tmp_path / "dssp" / "1abc.dssp").write_text(">1abc\nHHEC\n")
        out = tmp_path / "model.json"

        result = runner.invoke(cli, [
            "-q", "train",
            "--ids", str(tmp_path / "ids.txt"),
            "--pssm-dir", str(tmp_path / "pssm"),
            "--dssp-dir", str(tmp_path / "dssp"),
            "-w", "5",
            "-o", str(out),
        ])

        assert result.exit_code == 0
        assert GORModel.load(out).window_size == 5

    def test_train_aborts_on_missing_label(self, runner, tmp_path):
        (tmp_path / "ids.txt").write_text("1abc\n")
        write_pssm(tmp_path / "1abc.pssm", 4)
        out = tmp_path / "model.json"

        result = runner.invoke(cli, [
            "-q", "train",
            "--ids", str(tmp_path / "ids.txt"),
            "--pssm-dir", str(tmp_path),
            "--dssp-dir", str(tmp_path),
            "-o", str(out),
        ])

        assert result.exit_code == 1
        assert "Training failed" in result.output
        assert not out.exists()


class TestOtherCommands:

    def test_dssp2hec(self, runner, tmp_path):
        lines = ["DSSP header", "  #  RESIDUE AA STRUCTURE BP1 BP2  ACC"]
        lines += [f"{i + 1:5d}{i + 1:5d} A {aa}  {ss}          0   0   50"
                  for i, (aa, ss) in enumerate(zip("MKVLA", "HGEBT"))]
        path = tmp_path / "1abc.dssp"
        path.write_text("\n".join(lines) + "\n")

        result = runner.invoke(cli, ["-q", "dssp2hec", str(path)])
        assert result.exit_code == 0
        assert result.stdout.strip() == "HHEEC"

    def test_benchmark(self, runner, tmp_path, model_path):
        dataset = tmp_path / "bench.txt"
        dataset.write_text(
            "1ubq\n" + UBIQUITIN + "\n" + UBIQUITIN_SS + "\n"
            "helix1\nEEEEEEEEEE\nHHHHHHHHHH\n"
        )
        out = tmp_path / "scores.tsv"

        result = runner.invoke(
            cli, ["-q", "benchmark", str(dataset), "--model", str(model_path), "-o", str(out)]
        )

        assert result.exit_code == 0
        assert "Summary" in result.output
        scores = pd.read_csv(out, sep="\t")
        assert set(scores["predictor"]) == {"ChouFasman", "ImprovedChouFasman", "GOR"}
        assert len(scores) == 6

    def test_benchmark_selected_method(self, runner, tmp_path):
        dataset = tmp_path / "bench.txt"
        dataset.write_text("EEEEEEEEEE\nHHHHHHHHHH\n")
        out = tmp_path / "scores.tsv"
        result = runner.invoke(cli, ["-q", "benchmark", str(dataset), "-m", "ChouFasman", "-o", str(out)])
        assert result.exit_code == 0
        assert pd.read_csv(out, sep="\t")["q3"].tolist() == [1.0]

    def test_list_predictors(self, runner):
        result = runner.invoke(cli, ["-q", "list-predictors"])
        assert result.exit_code == 0
        assert "GOR" in result.output

    def test_info(self, runner):
        result = runner.invoke(cli, ["-q", "info", "gor"])
        assert result.exit_code == 0
        assert "statistical" in result.output

    def test_info_unknown(self, runner):
        assert runner.invoke(cli, ["-q", "info", "nope"]).exit_code == 1

    def test_validate_sequence(self, runner):
        assert runner.invoke(cli, ["-q", "validate-sequence", "MVLSEGEWQL"]).exit_code == 0
        assert runner.invoke(cli, ["-q", "validate-sequence", "XXXXXXXXXA"]).exit_code == 1

    def test_banner_unless_quiet(self, runner):
        result = runner.invoke(cli, ["list-predictors"])
        assert "SSPred" in result.output
