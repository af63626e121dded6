"""attribute_limit — attribute release policy for federated authentication.

Filters chain in registration order, narrowing the request's attribute bag
as they go.  The first error stops the chain.
"""

from attribute_limit.allow_list import AllowList, Unconstrained, ValueConstrained
from attribute_limit.chain import ProcessingChain
from attribute_limit.exceptions import (
    AttributeLimitError,
    ConfigError,
    MissingRelyingPartyError,
)
from attribute_limit.filters import AttributeLimit, ProcessingFilter
from attribute_limit.state import AuthenticationRequestState

__all__ = [
    "AllowList",
    "AttributeLimit",
    "AttributeLimitError",
    "AuthenticationRequestState",
    "ConfigError",
    "MissingRelyingPartyError",
    "ProcessingChain",
    "ProcessingFilter",
    "Unconstrained",
    "ValueConstrained",
]
