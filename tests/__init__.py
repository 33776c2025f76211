"""
bda_demos — Test Suite
======================

Test modules:
- test_draws.py: DrawSet container and InferenceData conversion
- test_diagnostics.py: R-hat, ESS and the diagnostic report
- test_summary.py: Summary tables and quantiles
- test_derived.py: Derived quantities and posterior probabilities
- test_comparison.py: PSIS-LOO and model comparison
- test_config.py, test_datasets.py, test_plotting.py: ambient modules
- test_sampler.py, test_workflow.py: PyMC adapter and demos (slow)
- test_notebook_demos.py: command line of examples/notebook_demos.py
"""
