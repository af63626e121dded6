"""ProcessingChain — runs an ordered list of filters against one request."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from attribute_limit.filters.base import ProcessingFilter
    from attribute_limit.state import AuthenticationRequestState


class ProcessingChain:
    """Holds an ordered chain of filters and applies them to a request state.

    Filters execute in **registration order**, each one seeing the state as
    the previous one left it.  An exception raised by a filter aborts the
    chain and propagates to the caller.
    """

    def __init__(self) -> None:
        self._filters: list[ProcessingFilter] = []

    # ── registration ─────────────────────────────────────────

    def add_filter(self, filter_: ProcessingFilter) -> None:
        """Append *filter_* to the chain."""
        self._filters.append(filter_)

    # ── evaluation ───────────────────────────────────────────

    def process(self, state: AuthenticationRequestState) -> None:
        for filter_ in self._filters:
            filter_.process(state)

    # ── introspection ────────────────────────────────────────

    def get_filter(self, name: str) -> ProcessingFilter | None:
        """Look up a registered filter by its ``name``."""
        for filter_ in self._filters:
            if filter_.name == name:
                return filter_
        return None

    def list_filters(self) -> list[str]:
        """Return the names of all registered filters in chain order."""
        return [f.name for f in self._filters]

    def export(self) -> dict[str, Any]:
        """Return a JSON-serializable snapshot of all registered filters."""
        filters = [f.export() for f in self._filters]
        return {
            "filters": filters,
            "filter_count": len(filters),
        }
