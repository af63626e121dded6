"""AttributeLimit — decides which attributes are released to a relying party."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from attribute_limit._internal.encoding import to_json
from attribute_limit.allow_list import (
    AllowList,
    AllowListEntry,
    Unconstrained,
    is_list_shaped,
    value_constraint,
)
from attribute_limit.exceptions import ConfigError, MissingRelyingPartyError
from attribute_limit.filters.base import ProcessingFilter

if TYPE_CHECKING:
    from attribute_limit.state import AuthenticationRequestState

_BILATERAL_OPTIONS = ("bilateralSPs", "bilateralAttributes")


class AttributeLimit(ProcessingFilter):
    """Removes or narrows every attribute the effective allow-list does not permit.

    The effective allow-list is chosen per request:

    1. ``default`` is true → the request-scoped list (destination metadata,
       then source metadata), falling back to the static list.
    2. otherwise a non-empty static list wins.
    3. otherwise the request-scoped list; when there is none, the request is
       left untouched.

    For each attribute, in order: an unconstrained entry keeps it; a
    value-constrained entry narrows its values and keeps it if any remain;
    a bilateral rule for the current relying party keeps it as it is;
    anything else drops it.

    Parameters:
        config: Option mapping.  Integer keys carry bare attribute names,
                ``"default"`` / ``"bilateralSPs"`` / ``"bilateralAttributes"``
                are options, and any other string key maps an attribute name
                to its permitted values.
        name:   Filter name, used as prefix in errors and log lines.
        logger: Logger for debug diagnostics.  Defaults to this module's.

    Raises:
        ConfigError: If *config* is malformed.
    """

    _filter_type = "attribute_limit"
    _filter_description = "Limit released attributes and their values"

    def __init__(
        self,
        config: Mapping[Any, Any],
        *,
        name: str = "AttributeLimit",
        logger: logging.Logger | None = None,
    ) -> None:
        self._name = name
        self._log = logger or logging.getLogger(__name__)

        if not isinstance(config, Mapping):
            raise ConfigError(name, f"Configuration must be a mapping: {to_json(config)}")

        use_request_scoped = False
        entries: list[AllowListEntry] = []
        bilateral: dict[str, Mapping[str, frozenset[str]]] = {}

        for key, value in config.items():
            if key == "default":
                use_request_scoped = bool(value)
            elif isinstance(key, int) and not isinstance(key, bool):
                if not isinstance(value, str):
                    raise ConfigError(name, f"Invalid attribute name: {to_json(value)}")
                entries.append(Unconstrained(value))
            elif key in _BILATERAL_OPTIONS:
                bilateral[key] = self._parse_bilateral(key, value)
            elif isinstance(key, str):
                entries.append(value_constraint(key, value, owner=name))
            else:
                raise ConfigError(name, f"Invalid option: {to_json(key)}")

        self._use_request_scoped_config = use_request_scoped
        self._static_allow_list = AllowList(entries)
        empty: Mapping[str, frozenset[str]] = MappingProxyType({})
        self._bilateral_by_sp = bilateral.get("bilateralSPs", empty)
        self._bilateral_by_attribute = bilateral.get("bilateralAttributes", empty)

        self._log.debug(
            "%s: Allowed attributes at construct: %s",
            self._name,
            to_json(self._static_allow_list.export()),
        )

    def _parse_bilateral(self, option: str, value: Any) -> Mapping[str, frozenset[str]]:
        if not isinstance(value, Mapping):
            raise ConfigError(
                self._name,
                f"Invalid option {option}: must be specified as a mapping: {to_json(value)}",
            )
        for members in value.values():
            if not is_list_shaped(members) or not all(isinstance(m, str) for m in members):
                raise ConfigError(
                    self._name,
                    f"An invalid value in option {option}: "
                    f"must be specified in a list of strings: {to_json(value)}",
                )
        return MappingProxyType({key: frozenset(members) for key, members in value.items()})

    # ── read-only configuration ──────────────────────────────

    @property
    def name(self) -> str:
        return self._name

    @property
    def use_request_scoped_config(self) -> bool:
        return self._use_request_scoped_config

    @property
    def static_allow_list(self) -> AllowList:
        return self._static_allow_list

    @property
    def bilateral_by_sp(self) -> Mapping[str, frozenset[str]]:
        return self._bilateral_by_sp

    @property
    def bilateral_by_attribute(self) -> Mapping[str, frozenset[str]]:
        return self._bilateral_by_attribute

    def export(self) -> dict[str, Any]:
        data = super().export()
        data["config"] = {
            "default": self._use_request_scoped_config,
            "attributes": self._static_allow_list.export(),
            "bilateralSPs": {k: sorted(v) for k, v in self._bilateral_by_sp.items()},
            "bilateralAttributes": {
                k: sorted(v) for k, v in self._bilateral_by_attribute.items()
            },
        }
        return data

    # ── evaluation ───────────────────────────────────────────

    def resolve_request_scoped_allow_list(
        self, state: AuthenticationRequestState
    ) -> AllowList | None:
        """Return the allow-list carried by the request's metadata.

        Destination (SP) metadata wins over source (IdP) metadata.  ``None``
        means neither side limits the attributes; an empty list denies all.
        """
        self._log.debug("%s: state full destination: %s", self._name, to_json(state.destination))
        if "attributes" in state.destination:
            raw = state.destination["attributes"]
            self._log.debug("%s: state destination: %s", self._name, to_json(raw))
            return AllowList.parse(raw, owner=self._name)
        self._log.debug("%s: state destination: NONE", self._name)

        if "attributes" in state.source:
            raw = state.source["attributes"]
            self._log.debug("%s: state source: %s", self._name, to_json(raw))
            return AllowList.parse(raw, owner=self._name)
        self._log.debug("%s: state source: NONE", self._name)

        return None

    def _effective_allow_list(self, state: AuthenticationRequestState) -> AllowList | None:
        if self._use_request_scoped_config:
            allow_list = self.resolve_request_scoped_allow_list(state)
            return self._static_allow_list if allow_list is None else allow_list
        if self._static_allow_list:
            return self._static_allow_list
        return self.resolve_request_scoped_allow_list(state)

    def _is_bilateral(self, attr_name: str, relying_party: str | None) -> bool:
        if self._bilateral_by_sp and attr_name in self._bilateral_by_sp.get(
            relying_party, frozenset()
        ):
            return True
        if self._bilateral_by_attribute and relying_party in self._bilateral_by_attribute.get(
            attr_name, frozenset()
        ):
            return True
        return False

    def process(self, state: AuthenticationRequestState) -> None:
        allow_list = self._effective_allow_list(state)
        if allow_list is None:
            self._log.debug("%s: no limit on attributes", self._name)
            return

        attributes = state.attributes
        self._log.debug("%s: Attributes before filter: %s", self._name, to_json(attributes))

        relying_party: str | None = None
        if self._bilateral_by_sp or self._bilateral_by_attribute:
            relying_party = state.relying_party
            if relying_party is None:
                raise MissingRelyingPartyError(self._name)

        for attr_name in list(attributes):
            self._log.debug("%s: check: %s", self._name, to_json(attr_name))
            if allow_list.is_unconstrained(attr_name):
                continue

            constraint = allow_list.constraint_for(attr_name)
            if constraint is not None:
                # Narrowing sticks even when a bilateral rule rescues the attribute below.
                attributes[attr_name] = constraint.narrow(attributes[attr_name])
                if attributes[attr_name]:
                    self._log.debug("%s: passed %s", self._name, attr_name)
                    continue

            if self._is_bilateral(attr_name, relying_party):
                self._log.debug("%s: bilateral pass: %s", self._name, to_json(attr_name))
                continue

            self._log.debug("%s: drop: %s", self._name, to_json(attr_name))
            del attributes[attr_name]

        self._log.debug("%s: Attributes after filter: %s", self._name, to_json(attributes))
