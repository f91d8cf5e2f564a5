"""
SSPred test suite.

Tests are organized by module:
- test_core: Data models and propensity tables
- test_sequence: Sequence parsing, encoding and label runs
- test_formats: PSSM, DSSP and label file readers
- test_regions: Region algebra of the rule-based methods
- test_predictors: Predictor interface, registry and rule-based methods
- test_wavelet: Wavelet transform and site extension
- test_gor: GOR training, persistence and prediction
- test_benchmark: Metrics and benchmark runner
- test_export: TSV and JSON export
- test_cli: Command-line interface
"""
