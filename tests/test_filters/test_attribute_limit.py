"""Tests for AttributeLimit.process — the release decision."""

import copy
import logging

import pytest

from attribute_limit import (
    AttributeLimit,
    AuthenticationRequestState,
    ConfigError,
    MissingRelyingPartyError,
)

SP = "https://sp.example.org"


def _state(attributes, destination=None, source=None):
    return AuthenticationRequestState(
        attributes=attributes,
        destination={"entityid": SP, **(destination or {})},
        source=source or {},
    )


# ── scenarios ────────────────────────────────────────────────


def test_static_list_drops_unlisted():
    state = _state({"mail": ["a@x.org"], "cn": ["Alice"], "uid": ["alice"]})
    AttributeLimit({0: "mail", 1: "cn"}).process(state)
    assert state.attributes == {"mail": ["a@x.org"], "cn": ["Alice"]}


def test_value_constraint_narrows():
    state = _state({"mail": ["a@x.org", "c@x.org"]})
    AttributeLimit({"mail": ["a@x.org", "b@x.org"]}).process(state)
    assert state.attributes == {"mail": ["a@x.org"]}


def test_bilateral_sp_rescues_empty_intersection():
    state = _state({"mail": ["z@x.org"]}, destination={"entityid": "sp1"})
    AttributeLimit({"mail": ["a@x.org"], "bilateralSPs": {"sp1": ["mail"]}}).process(state)
    assert state.attributes == {"mail": []}


def test_destination_list_applies_when_default():
    state = _state(
        {"eduPersonPrincipalName": ["alice@example.org"], "cn": ["Alice"], "uid": ["alice"]},
        destination={"attributes": ["eduPersonPrincipalName"]},
    )
    AttributeLimit({"default": True}).process(state)
    assert state.attributes == {"eduPersonPrincipalName": ["alice@example.org"]}


def test_no_limit_anywhere_passes_everything(sp_state, attributes):
    expected = copy.deepcopy(attributes)
    AttributeLimit({"default": False}).process(sp_state)
    assert sp_state.attributes == expected


# ── allow-list precedence ────────────────────────────────────


def test_static_list_ignores_metadata_when_not_default():
    state = _state(
        {"mail": ["a@x.org"], "cn": ["Alice"]},
        destination={"attributes": ["cn"]},
        source={"attributes": ["cn"]},
    )
    AttributeLimit({0: "mail"}).process(state)
    assert state.attributes == {"mail": ["a@x.org"]}


def test_destination_beats_source_and_static_when_default():
    state = _state(
        {"mail": ["a@x.org"], "cn": ["Alice"], "uid": ["alice"]},
        destination={"attributes": ["uid"]},
        source={"attributes": ["cn"]},
    )
    AttributeLimit({"default": True, 0: "mail"}).process(state)
    assert state.attributes == {"uid": ["alice"]}


def test_source_used_when_destination_has_no_list():
    state = _state(
        {"mail": ["a@x.org"], "cn": ["Alice"]},
        source={"attributes": ["cn"]},
    )
    AttributeLimit({"default": True, 0: "mail"}).process(state)
    assert state.attributes == {"cn": ["Alice"]}


def test_static_fallback_when_default_and_no_metadata():
    state = _state({"mail": ["a@x.org"], "cn": ["Alice"]})
    AttributeLimit({"default": True, 0: "mail"}).process(state)
    assert state.attributes == {"mail": ["a@x.org"]}


def test_default_with_nothing_configured_drops_all():
    state = _state({"mail": ["a@x.org"], "cn": ["Alice"]})
    AttributeLimit({"default": True}).process(state)
    assert state.attributes == {}


def test_metadata_used_when_static_list_empty():
    state = _state(
        {"mail": ["a@x.org"], "cn": ["Alice"]},
        source={"attributes": ["mail"]},
    )
    AttributeLimit({}).process(state)
    assert state.attributes == {"mail": ["a@x.org"]}


def test_empty_metadata_list_denies_all():
    state = _state({"mail": ["a@x.org"]}, destination={"attributes": []})
    AttributeLimit({}).process(state)
    assert state.attributes == {}


def test_metadata_value_constraints():
    state = _state(
        {"eduPersonAffiliation": ["student", "member", "staff"]},
        destination={"attributes": ["cn", {"eduPersonAffiliation": ["staff", "member"]}]},
    )
    AttributeLimit({}).process(state)
    assert state.attributes == {"eduPersonAffiliation": ["staff", "member"]}


def test_malformed_metadata_constraint_raises():
    state = _state({"mail": ["a@x.org"]}, destination={"attributes": {"mail": "a@x.org"}})
    with pytest.raises(ConfigError, match="must be specified in a list"):
        AttributeLimit({"default": True}).process(state)


def test_resolve_request_scoped_allow_list():
    f = AttributeLimit({})
    assert f.resolve_request_scoped_allow_list(_state({})) is None
    found = f.resolve_request_scoped_allow_list(_state({}, source={"attributes": ["cn"]}))
    assert found.names() == ["cn"]


# ── per-attribute decisions ──────────────────────────────────


def test_unconstrained_attribute_untouched():
    values = ["a@x.org", "b@x.org", "a@x.org"]
    state = _state({"mail": values})
    AttributeLimit({0: "mail"}).process(state)
    assert state.attributes["mail"] is values
    assert values == ["a@x.org", "b@x.org", "a@x.org"]


def test_narrowed_values_follow_permitted_order():
    state = _state({"eduPersonAffiliation": ["member", "student", "staff", "member"]})
    AttributeLimit({"eduPersonAffiliation": ["staff", "member"]}).process(state)
    assert state.attributes == {"eduPersonAffiliation": ["staff", "member"]}


def test_empty_intersection_without_bilateral_drops():
    state = _state({"mail": ["z@x.org"]})
    AttributeLimit({"mail": ["a@x.org"]}).process(state)
    assert state.attributes == {}


def test_bilateral_sp_keeps_unlisted_attribute():
    state = _state({"mail": ["a@x.org"], "uid": ["alice"]})
    AttributeLimit({0: "mail", "bilateralSPs": {SP: ["uid"]}}).process(state)
    assert state.attributes == {"mail": ["a@x.org"], "uid": ["alice"]}


def test_bilateral_sp_other_relying_party():
    state = _state({"mail": ["a@x.org"], "uid": ["alice"]})
    AttributeLimit({0: "mail", "bilateralSPs": {"https://other.example.org": ["uid"]}}).process(
        state
    )
    assert state.attributes == {"mail": ["a@x.org"]}


def test_bilateral_attribute_keeps_unlisted_attribute():
    state = _state({"mail": ["a@x.org"], "uid": ["alice"]})
    AttributeLimit({0: "mail", "bilateralAttributes": {"uid": [SP]}}).process(state)
    assert state.attributes == {"mail": ["a@x.org"], "uid": ["alice"]}


def test_bilateral_attribute_rescues_empty_intersection():
    state = _state({"mail": ["z@x.org"]})
    AttributeLimit({"mail": ["a@x.org"], "bilateralAttributes": {"mail": [SP]}}).process(state)
    assert state.attributes == {"mail": []}


def test_bilateral_attribute_other_relying_party():
    state = _state({"uid": ["alice"]})
    AttributeLimit({0: "mail", "bilateralAttributes": {"uid": ["sp2"]}}).process(state)
    assert state.attributes == {}


def test_bilateral_does_not_undo_successful_narrowing():
    state = _state({"mail": ["a@x.org", "z@x.org"]})
    AttributeLimit({"mail": ["a@x.org"], "bilateralSPs": {SP: ["mail"]}}).process(state)
    assert state.attributes == {"mail": ["a@x.org"]}


def test_missing_relying_party_with_bilateral_rules():
    state = AuthenticationRequestState(attributes={"uid": ["alice"]})
    with pytest.raises(MissingRelyingPartyError):
        AttributeLimit({0: "mail", "bilateralSPs": {SP: ["uid"]}}).process(state)


def test_missing_relying_party_without_bilateral_rules_is_fine():
    state = AuthenticationRequestState(attributes={"uid": ["alice"], "mail": ["a@x.org"]})
    AttributeLimit({0: "mail"}).process(state)
    assert state.attributes == {"mail": ["a@x.org"]}


def test_no_attributes():
    state = _state({})
    AttributeLimit({0: "mail"}).process(state)
    assert state.attributes == {}


# ── properties ───────────────────────────────────────────────


@pytest.mark.parametrize(
    "config, destination",
    [
        ({0: "mail", 1: "cn"}, {}),
        ({"eduPersonAffiliation": ["staff", "member"], 0: "uid"}, {}),
        ({"mail": ["nobody@x.org"], "bilateralSPs": {SP: ["mail"]}}, {}),
        ({"default": True}, {"attributes": ["cn", {"mail": ["a.smith@example.org"]}]}),
        ({}, {"attributes": []}),
    ],
)
def test_idempotent(attributes, config, destination):
    f = AttributeLimit(config)
    once = _state(copy.deepcopy(attributes), destination=destination)
    f.process(once)
    twice = _state(copy.deepcopy(once.attributes), destination=destination)
    f.process(twice)
    assert twice.attributes == once.attributes


def test_shared_filter_serves_many_requests(attributes):
    f = AttributeLimit({0: "cn", "eduPersonAffiliation": ["member"]})
    for _ in range(3):
        state = _state(copy.deepcopy(attributes))
        f.process(state)
        assert state.attributes == {"cn": ["Alice Smith"], "eduPersonAffiliation": ["member"]}
    assert f.static_allow_list.names() == ["cn", "eduPersonAffiliation"]


# ── diagnostics ──────────────────────────────────────────────


def test_debug_log_lines(caplog, sp_state):
    with caplog.at_level(logging.DEBUG, logger="attribute_limit"):
        AttributeLimit({0: "mail"}, name="limit").process(sp_state)
    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("limit: Attributes before filter:") for m in messages)
    assert 'limit: drop: "uid"' in messages
    assert any(m.startswith("limit: Attributes after filter:") for m in messages)


def test_logging_does_not_change_outcome(attributes):
    silent = logging.getLogger("attribute_limit.tests.silent")
    silent.disabled = True
    loud = logging.getLogger("attribute_limit.tests.loud")
    loud.setLevel(logging.DEBUG)

    config = {0: "cn", "mail": ["alice@example.org"], "bilateralSPs": {SP: ["uid"]}}
    quiet_state = _state(copy.deepcopy(attributes))
    noisy_state = _state(copy.deepcopy(attributes))
    AttributeLimit(config, logger=silent).process(quiet_state)
    AttributeLimit(config, logger=loud).process(noisy_state)

    assert quiet_state.attributes == noisy_state.attributes == {
        "mail": ["alice@example.org"],
        "cn": ["Alice Smith"],
        "uid": ["alice"],
    }


def test_malformed_metadata_values_raise():
    state = _state({"mail": ["a@x.org"]}, destination={"attributes": {"mail": [["a@x.org"]]}})
    with pytest.raises(ConfigError, match='Invalid value for "mail"'):
        AttributeLimit({}).process(state)


def test_metadata_sequence_accepts_none_as_unconstrained():
    state = _state(
        {"mail": ["a@x.org", "b@x.org"], "uid": ["alice"]},
        destination={"attributes": [{"mail": None}]},
    )
    AttributeLimit({"default": True}).process(state)
    assert state.attributes == {"mail": ["a@x.org", "b@x.org"]}
