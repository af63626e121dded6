# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Executor for running a filter chain over one request.

Orchestrates the full execution flow:
1. Build filters from configuration
2. Assemble them into a ProcessingChain
3. Build the request state
4. Run the chain
5. Return structured result
"""

from __future__ import annotations

import logging

from attribute_limit import AuthenticationRequestState, ProcessingChain
from attribute_limit.exceptions import AttributeLimitError

from .factory import FilterFactory, FilterFactoryError
from .schema import RequestStateSchema, RunnerInput, RunnerOutput

logger = logging.getLogger(__name__)


class ExecutionError(Exception):
    """Raised when a filter fails for a reason other than its configuration."""

    pass


class Executor:
    """Runs the configured filters against the input request.

    Example:
        executor = Executor()
        output = executor.execute(input_data)
    """

    def __init__(self, factory: FilterFactory | None = None) -> None:
        """Initialize executor with optional injected factory.

        Args:
            factory: Optional factory to use instead of a fresh one.
                     Useful for testing.
        """
        self._factory = factory or FilterFactory()

    def execute(self, input_data: RunnerInput) -> RunnerOutput:
        """Execute the full filter flow.

        Args:
            input_data: Complete runner input

        Returns:
            RunnerOutput with success/failure and attributes/error details

        Note:
            This method catches all exceptions and returns them as
            RunnerOutput errors, ensuring valid JSON is always returned.
        """
        try:
            return self._execute_internal(input_data)
        except FilterFactoryError as e:
            return self._error_output(e, "FilterFactoryError")
        except ExecutionError as e:
            return self._error_output(e, "ExecutionError")
        except AttributeLimitError as e:
            return self._error_output(e, type(e).__name__)
        except Exception as e:
            logger.exception("Unexpected error while filtering attributes")
            return self._error_output(e, type(e).__name__)

    def _execute_internal(self, input_data: RunnerInput) -> RunnerOutput:
        """Internal execution logic.

        Separated from execute() to allow exception propagation
        for testing while execute() catches all errors.
        """
        chain = ProcessingChain()
        for filter_ in self._factory.create_all(input_data.filters):
            chain.add_filter(filter_)

        state = self._build_state(input_data.state)
        try:
            chain.process(state)
        except AttributeLimitError:
            raise
        except Exception as e:
            raise ExecutionError(f"Filter chain failed: {e}") from e

        return RunnerOutput(success=True, attributes=state.attributes)

    def _build_state(self, schema: RequestStateSchema) -> AuthenticationRequestState:
        # Deep-copied so filtering never mutates the validated input
        copy = schema.model_copy(deep=True)
        return AuthenticationRequestState(
            attributes=copy.attributes,
            destination=copy.destination,
            source=copy.source,
        )

    def _error_output(self, error: Exception, error_type: str) -> RunnerOutput:
        logger.debug("Runner failed with %s: %s", error_type, error)
        return RunnerOutput(success=False, error=str(error), error_type=error_type)
