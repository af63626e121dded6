"""Shared test fixtures."""

import copy

import pytest

from attribute_limit import AuthenticationRequestState, ProcessingChain


@pytest.fixture
def chain():
    return ProcessingChain()


@pytest.fixture
def attributes():
    return {
        "mail": ["alice@example.org", "a.smith@example.org"],
        "cn": ["Alice Smith"],
        "uid": ["alice"],
        "eduPersonAffiliation": ["member", "staff", "student"],
    }


@pytest.fixture
def sp_state(attributes):
    """A request bound for https://sp.example.org with no metadata allow-lists."""
    return AuthenticationRequestState(
        attributes=copy.deepcopy(attributes),
        destination={"entityid": "https://sp.example.org"},
        source={"entityid": "https://idp.example.org"},
    )
