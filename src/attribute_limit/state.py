"""AuthenticationRequestState — the mutable attribute bag handed to every filter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class AuthenticationRequestState:
    """Caller-owned, request-scoped state that travels through the filter chain.

    Attributes:
        attributes:  Attribute name → ordered list of string values.  Filters
                     narrow or delete entries **in place**.
        destination: Relying-party (SP) metadata.  May carry an ``attributes``
                     allow-list and the relying party's ``entityid``.
        source:      Identity-provider metadata.  May carry a fallback
                     ``attributes`` allow-list.
    """

    attributes: dict[str, list[str]] = field(default_factory=dict)
    destination: dict[str, Any] = field(default_factory=dict)
    source: dict[str, Any] = field(default_factory=dict)

    @property
    def relying_party(self) -> str | None:
        """The destination's ``entityid``, or ``None`` when absent."""
        return self.destination.get("entityid")
