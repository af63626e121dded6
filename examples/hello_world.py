"""
attribute_limit — Hello World

Filters chain in registration order, narrowing the attribute bag
as they go. The first error stops the chain.
"""

import json
import logging

from attribute_limit import AttributeLimit, AuthenticationRequestState, ProcessingChain


def release(chain: ProcessingChain, entityid: str, metadata: dict | None = None) -> None:
    state = AuthenticationRequestState(
        attributes={
            "uid": ["alice"],
            "cn": ["Alice Smith"],
            "mail": ["alice@example.org", "alice@private.example"],
            "eduPersonAffiliation": ["member", "staff", "student"],
            "eduPersonPrincipalName": ["alice@example.org"],
        },
        destination={"entityid": entityid, **(metadata or {})},
    )
    chain.process(state)
    print(f"  {entityid}")
    print(f"    {json.dumps(state.attributes)}")


def main():
    logging.basicConfig(level=logging.INFO)

    # ──────────────────────────────────────
    #  1. Build the chain once
    # ──────────────────────────────────────
    chain = ProcessingChain()
    chain.add_filter(
        AttributeLimit(
            {
                0: "cn",
                1: "eduPersonPrincipalName",
                "mail": ["alice@example.org"],
                "eduPersonAffiliation": ["member", "staff"],
                "default": True,
                "bilateralSPs": {"https://wiki.example.org": ["uid"]},
                "bilateralAttributes": {"mail": ["https://lists.example.org"]},
            },
            name="release_policy",
        )
    )

    # ──────────────────────────────────────
    #  2. Filter requests (one state per request)
    # ──────────────────────────────────────
    print("Static allow-list:")
    release(chain, "https://portal.example.org")

    print("Bilateral rule for the wiki adds uid:")
    release(chain, "https://wiki.example.org")

    print("SP metadata takes precedence because default is set:")
    release(chain, "https://library.example.org", {"attributes": ["eduPersonPrincipalName"]})

    print("\nExported chain:")
    print(json.dumps(chain.export(), indent=2))


if __name__ == "__main__":
    main()
