# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Entry point for the attribute_limit runner.

Usage:
    python -m attribute_limit.runner < input.json > output.json

The runner reads JSON input from stdin, applies the configured filters,
and writes JSON output to stdout.  Diagnostics go to stderr at the level
named by ``ATTRIBUTE_LIMIT_LOG_LEVEL`` (default ``WARNING``).

Exit codes:
    0: Success
    1: Failure (error details in JSON output)
"""

from __future__ import annotations

import logging
import os
import sys

from .executor import Executor
from .schema import RunnerInput, RunnerOutput

LOG_LEVEL_ENV = "ATTRIBUTE_LIMIT_LOG_LEVEL"


def configure_logging() -> None:
    level = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    configure_logging()
    try:
        input_data = RunnerInput.model_validate_json(sys.stdin.read())
        output = Executor().execute(input_data)
        print(output.model_dump_json())
        return 0 if output.success else 1

    except Exception as e:
        # Ensure we always output valid JSON, even on unexpected errors
        error_output = RunnerOutput(
            success=False,
            error=str(e),
            error_type=type(e).__name__,
        )
        print(error_output.model_dump_json())
        return 1


if __name__ == "__main__":
    sys.exit(main())
