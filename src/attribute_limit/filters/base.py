"""ProcessingFilter ABC — the single abstraction every filter implements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from attribute_limit.state import AuthenticationRequestState


class ProcessingFilter(ABC):
    """Base class for every filter in a processing chain.

    Subclasses **must** define a ``name`` property (or class attribute) and
    implement ``process``.

    Filters receive exclusive access to the request state for the duration of
    one ``process`` call and mutate it in place.  They return nothing; errors
    are raised.  Configuration is parsed once at construction and never
    changed afterwards, so one instance may serve any number of requests.

    Class Variables:
        _filter_type: Type identifier for serialization (e.g., "attribute_limit").
        _filter_version: Version string for the filter's config schema.
        _filter_description: Human-readable description of the filter.
    """

    _filter_type: ClassVar[str] = "base"
    _filter_version: ClassVar[str] = "1.0"
    _filter_description: ClassVar[str] = ""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this filter instance."""
        ...

    @abstractmethod
    def process(self, state: AuthenticationRequestState) -> None:
        """Apply the filter to *state* in place."""
        ...

    def export(self) -> dict[str, Any]:
        """Return a JSON-serializable snapshot of this filter.

        Subclasses should call ``super().export()`` and populate the
        ``"config"`` key in the returned dict.
        """
        return {
            "name": self.name,
            "type": self._filter_type,
            "version": self._filter_version,
            "description": self._filter_description,
            "config": {},
        }
