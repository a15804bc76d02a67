"""
Benchmark harness: YAML experiment config, measurement, runner and CLI.

    from insertionbench.bench.runner import run_experiment
"""
