# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Runner submodule for filtering a request described in JSON.

Usage:
    python -m attribute_limit.runner < input.json > output.json

Exports:
    Executor: Builds the filter chain and runs it over one request
    FilterFactory: Creates filter instances from configuration
    RunnerInput: Input schema
    RunnerOutput: Output schema
"""

from .executor import ExecutionError, Executor
from .factory import FilterFactory, FilterFactoryError
from .schema import (
    FilterConfigSchema,
    RequestStateSchema,
    RunnerInput,
    RunnerOutput,
)

__all__ = [
    "ExecutionError",
    "Executor",
    "FilterConfigSchema",
    "FilterFactory",
    "FilterFactoryError",
    "RequestStateSchema",
    "RunnerInput",
    "RunnerOutput",
]
