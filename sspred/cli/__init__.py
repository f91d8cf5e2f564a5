"""
Command-line interface for SSPred.

The CLI provides entry points for all major functionality without
requiring Python programming knowledge:

1. **Prediction**: Predict H/E/C strings from FASTA, raw sequences or PSSMs
2. **Training**: Build GOR models from profile and label directories
3. **Benchmarking**: Score methods against observed structure

Usage patterns:
    sspred predict sequences.fasta -m ImprovedChouFasman
    sspred train --ids train.txt --pssm-dir pssm/ --dssp-dir dssp/
    sspred benchmark benchmark.txt --model gor_model.json
"""

from .main import cli, main

__all__ = ["cli", "main"]
