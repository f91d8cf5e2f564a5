#!/usr/bin/env python3
"""
SSPred Example: Predicting Secondary Structure

This script demonstrates the core functionality of SSPred on a few
well-characterized proteins, comparing the rule-based methods and showing
how a GOR model is trained, saved and reused.

Run with: python examples/basic_usage.py
"""

import tempfile
from pathlib import Path

from sspred import ProteinRecord, get_predictor, list_predictors, predict
from sspred.benchmark import evaluate_structure
from sspred.core.models import Conformation
from sspred.core.propensity import CHOU_FASMAN_SCALES
from sspred.core.sequence import sequence_to_profile
from sspred.predictors.gor import GORModel, predict_gor, train_gor
from sspred.predictors.regions import RegionAlgebra


# Sperm whale myoglobin (1-60): mostly α-helical
MYOGLOBIN = "VLSEGEWQLVLHVWAKVEADVAGHGQDILIRLFKSHPETLEKFDRVKHLKTEAEMKASED"

# Human ubiquitin: mixed α/β fold
UBIQUITIN = "MQIFVKTLTGKTITLEVEPSDTIENVKAKIQDKEGIPPDQQRLIFAGKQLEDGRTLSDYNIQKESTLHLVLRLRGG"

# Ubiquitin DSSP reduced to three states (PDB 1UBQ)
UBIQUITIN_SS = "CEEEEEECCCCCEEEEEECCCCCHHHHHHHHHHHCCCCCCEEEEEECCEECCCCCCCCCCCCCCCEEEEEEECCCC"


def print_header(title: str):
    """Print a formatted section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def compare_rule_based_methods():
    """
    Run the classical and wavelet-nucleated Chou-Fasman methods side by side.
    """
    print_header("Rule-based methods on myoglobin and ubiquitin")

    for protein_id, sequence in (("myoglobin", MYOGLOBIN), ("ubiquitin", UBIQUITIN)):
        protein = ProteinRecord(id=protein_id, sequence=sequence)
        print(f"\n{protein_id} ({protein.sequence_length} residues)")
        print(f"  {'sequence':<20} {protein.sequence}")
        for method in ("ChouFasman", "ImprovedChouFasman"):
            result = predict(protein, method=method)
            print(f"  {method:<20} {result.structure}")

        result = predict(protein, method="ChouFasman")
        for region in result.helix_regions:
            print(
                f"    helix {region.start}-{region.end} "
                f"{result.region_sequence(region)} <Pα>={region.score:.2f}"
            )


def walk_through_region_algebra():
    """
    Show the individual steps of the classical pipeline for one sequence.
    """
    print_header("Region algebra, step by step")

    sequence = MYOGLOBIN
    algebra = RegionAlgebra(CHOU_FASMAN_SCALES)

    nuclei = algebra.find_nucleation_regions(sequence, 4, 6, 1.0, Conformation.HELIX)
    print(f"Helix nucleation windows: {len(nuclei)}")

    extended = algebra.extend_all(sequence, nuclei, Conformation.HELIX)
    kept = algebra.filter(sequence, extended, Conformation.HELIX, 1.03)
    merged = algebra.merge(kept)
    print(f"After extension/filter/merge: {[(r.start, r.end) for r in merged]}")


def train_and_use_gor():
    """
    Train a tiny GOR model on a single labeled protein, persist it and
    predict with the reloaded model.
    """
    print_header("GOR model training")

    profile = sequence_to_profile(UBIQUITIN)
    model = train_gor([(profile, UBIQUITIN_SS)], window_size=17)

    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "gor_model.json"
        model.save(path)
        reloaded = GORModel.load(path)

        structure = predict_gor(reloaded, profile)
        metrics = evaluate_structure(structure, UBIQUITIN_SS)
        print(f"Self-consistency Q3 on ubiquitin: {metrics.q3:.3f}")

        gor = get_predictor("GOR", model_path=path)
        print(f"Myoglobin (GOR):  {gor.predict_sequence(MYOGLOBIN).structure}")


def main():
    print("Registered predictors:")
    for info in list_predictors():
        print(f"  {info['name']:<20} {info['type']:<16} {info['description']}")

    compare_rule_based_methods()
    walk_through_region_algebra()
    train_and_use_gor()


if __name__ == "__main__":
    main()
