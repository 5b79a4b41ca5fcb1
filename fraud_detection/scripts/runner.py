"""
Runs the pipeline once for every parameter combination of a JSON parameter file.

The file holds a list of parameter sets. Every value is either a single value, a list of values or
``{"range": [start, stop, step]}`` (stop included). All combinations of a set are run one after
another, each in its own process.
"""
import json
import logging
import subprocess
import sys
from itertools import product

import numpy as np

from fraud_detection.shared.errors import InvalidConfiguration
from fraud_detection.shared.logger_config import setup_logger

logger = logging.getLogger()


def resolve_range(start, stop, step):
    """Returns the values from ``start`` to ``stop`` (inclusive) in steps of ``step``."""
    if step <= 0 or stop < start:
        raise InvalidConfiguration(f"Invalid range [{start}, {stop}, {step}]")
    num_values = int(round((stop - start) / step)) + 1
    return [round(float(value), 10) for value in np.linspace(start, start + (num_values - 1) * step, num_values)]


def load_params(param_file):
    """Loads the parameters from the JSON file and creates all combinations."""
    with open(param_file, "r") as f:
        raw_params = json.load(f)

    full_param_list = []

    for param_set in raw_params:
        resolved_params = {}

        for key, value in param_set.items():
            if isinstance(value, dict) and "range" in value:
                resolved_params[key] = resolve_range(*value["range"])
            elif isinstance(value, list):
                resolved_params[key] = value
            else:
                resolved_params[key] = [value]

        keys, values = zip(*resolved_params.items())
        for combination in product(*values):
            full_param_list.append(dict(zip(keys, combination)))

    return full_param_list


def build_wandb_name(params):
    """Names a W&B run after its threshold, beta and variance magnitude, leaving out absent ones."""
    parts = [("t", params.get("threshold")), ("b", params.get("beta", 1.0)), ("vm", params.get("variance_magnitude"))]
    return "_".join(f"{prefix}{value}" for prefix, value in parts if value is not None)


def build_command(params, seed=42):
    """Builds the command line of one pipeline run."""
    cmd = [sys.executable, "-m", "fraud_detection.pipeline.main"]
    for key, value in params.items():
        if isinstance(value, bool):
            # store_true flags
            if value:
                cmd.append(f"--{key}")
            continue
        cmd.append(f"--{key}")
        cmd.append(str(value))

    if params.get("wandb_logging") and "wandb_name" not in params:
        cmd.append("--wandb_name")
        cmd.append(build_wandb_name(params))

    if "seed" not in params:
        cmd.append("--seed")
        cmd.append(str(seed))

    return cmd


def batch_run(param_file="./config/params.json"):
    params_list = load_params(param_file)

    for i, params in enumerate(params_list):
        logger.info(f"Running variant {i + 1} with parameters: {params}")

        result = subprocess.run(build_command(params), capture_output=True, text=True)

        logger.info(f"Variant {i + 1} finished with return code {result.returncode}")
        logger.info(f"Standard Output:\n{result.stdout}")
        if result.returncode != 0:
            logger.error(f"Standard Error:\n{result.stderr}")


if __name__ == "__main__":
    setup_logger(is_verbose=False)
    batch_run()
