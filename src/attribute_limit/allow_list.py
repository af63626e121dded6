"""Allow-list entries and the container the filter consults per attribute.

An allow-list mixes two kinds of entry in one ordered structure:

* ``Unconstrained(name)`` — release the attribute with all of its values.
* ``ValueConstrained(name, permitted_values)`` — release only the values that
  also appear in ``permitted_values``.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from attribute_limit._internal.encoding import to_json
from attribute_limit.exceptions import ConfigError

_LIST_TYPES = (list, tuple, set, frozenset)


def is_list_shaped(value: Any) -> bool:
    """``True`` for the container types accepted as a list of values."""
    return isinstance(value, _LIST_TYPES)


@dataclass(frozen=True)
class Unconstrained:
    name: str

    def export(self) -> Any:
        return self.name


@dataclass(frozen=True)
class ValueConstrained:
    name: str
    permitted_values: tuple[str, ...]

    def narrow(self, values: Iterable[str]) -> list[str]:
        """Intersect *values* with the permitted values.

        The result follows the permitted list's order and holds no duplicates.
        """
        present = set(values)
        return list(dict.fromkeys(v for v in self.permitted_values if v in present))

    def export(self) -> Any:
        return {self.name: list(self.permitted_values)}


AllowListEntry = Unconstrained | ValueConstrained


class AllowList:
    """Ordered, immutable collection of allow-list entries.

    An empty ``AllowList`` denies everything; "no limit" is represented by the
    absence of an allow-list (``None``), never by an empty one.
    """

    def __init__(self, entries: Iterable[AllowListEntry] = ()) -> None:
        self._entries: tuple[AllowListEntry, ...] = tuple(entries)
        self._unconstrained: frozenset[str] = frozenset(
            e.name for e in self._entries if isinstance(e, Unconstrained)
        )
        # Later entries for the same name replace earlier ones.
        self._constraints: dict[str, ValueConstrained] = {
            e.name: e for e in self._entries if isinstance(e, ValueConstrained)
        }

    @classmethod
    def parse(cls, raw: Any, *, owner: str) -> AllowList:
        """Build an allow-list from metadata-supplied data.

        Accepts either a sequence of bare names and ``{name: None | [values]}``
        mappings, or a single mapping of ``name -> None | [values]``.  ``None``
        means the attribute is released with all of its values.

        Raises:
            ConfigError: If an entry has the wrong shape.  *owner* names the
                filter in the error message.
        """
        entries: list[AllowListEntry] = []
        if isinstance(raw, Mapping):
            entries.extend(_entry(n, v, owner) for n, v in raw.items())
        elif isinstance(raw, (list, tuple)):
            for item in raw:
                if isinstance(item, str):
                    entries.append(Unconstrained(item))
                elif isinstance(item, Mapping):
                    entries.extend(_entry(n, v, owner) for n, v in item.items())
                else:
                    raise ConfigError(owner, f"Invalid attribute name: {to_json(item)}")
        else:
            raise ConfigError(
                owner, f"Allowed attributes must be a list or a mapping: {to_json(raw)}"
            )
        return cls(entries)

    # ── lookup ───────────────────────────────────────────────

    def is_unconstrained(self, name: str) -> bool:
        return name in self._unconstrained

    def constraint_for(self, name: str) -> ValueConstrained | None:
        return self._constraints.get(name)

    def names(self) -> list[str]:
        """Attribute names in entry order, without duplicates."""
        return list(dict.fromkeys(e.name for e in self._entries))

    # ── container protocol ───────────────────────────────────

    def __iter__(self) -> Iterator[AllowListEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AllowList):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"AllowList({list(self._entries)!r})"

    def export(self) -> list[Any]:
        return [e.export() for e in self._entries]


def _checked_name(name: Any, owner: str) -> str:
    if not isinstance(name, str):
        raise ConfigError(owner, f"Invalid attribute name: {to_json(name)}")
    return name


def _entry(name: Any, values: Any, owner: str) -> AllowListEntry:
    if values is None:
        return Unconstrained(_checked_name(name, owner))
    return value_constraint(name, values, owner=owner)


def value_constraint(name: Any, values: Any, *, owner: str) -> ValueConstrained:
    """Build a ``ValueConstrained`` entry, checking that *values* is a list of strings.

    Raises:
        ConfigError: If *name* is not a string or *values* is not a list of strings.
    """
    name = _checked_name(name, owner)
    if not is_list_shaped(values):
        raise ConfigError(owner, f"Values for {to_json(name)} must be specified in a list.")
    for value in values:
        if not isinstance(value, str):
            raise ConfigError(
                owner, f"Invalid value for {to_json(name)}: {to_json(value)}"
            )
    return ValueConstrained(name, tuple(values))
