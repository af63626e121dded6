# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Data transfer objects for runner input/output.

These Pydantic models define the JSON contract between the host pipeline
and the Python runner.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class FilterConfigSchema(BaseModel):
    """Single filter configuration.

    JSON objects only have string keys, so bare attribute names (the
    integer-indexed entries of the option mapping) travel in ``attributes``
    and everything else in ``config``.

    Attributes:
        name: Unique identifier for this filter instance
        type: Filter type (e.g., "attribute_limit")
        attributes: Attribute names released with all of their values
        config: Named options and per-attribute value constraints
    """

    name: str
    type: str = "attribute_limit"
    attributes: list[str] = Field(default_factory=list)
    config: dict[str, Any] = Field(default_factory=dict)

    def to_options(self) -> dict[Any, Any]:
        """Merge both parts into the option mapping filters are built from."""
        options: dict[Any, Any] = dict(enumerate(self.attributes))
        options.update(self.config)
        return options


class RequestStateSchema(BaseModel):
    """Request state handed over by the pipeline.

    Attributes:
        attributes: Attribute name to list of values
        destination: Relying-party metadata (``attributes``, ``entityid``)
        source: Identity-provider metadata (``attributes``)
    """

    attributes: dict[str, list[str]] = Field(default_factory=dict)
    destination: dict[str, Any] = Field(default_factory=dict)
    source: dict[str, Any] = Field(default_factory=dict)


class RunnerInput(BaseModel):
    """Complete input read from stdin.

    Attributes:
        filters: Filter configurations, applied in order
        state: The request to filter
    """

    filters: list[FilterConfigSchema] = Field(default_factory=list)
    state: RequestStateSchema


class RunnerOutput(BaseModel):
    """Complete output written to stdout.

    The runner always outputs valid JSON matching this schema,
    even on errors.

    Attributes:
        success: Whether every filter completed
        attributes: Released attributes (on success)
        error: Error message (on failure)
        error_type: Error class name (on failure)
    """

    success: bool
    attributes: dict[str, list[str]] | None = None
    error: str = ""
    error_type: str = ""
