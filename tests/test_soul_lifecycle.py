from __future__ import annotations

import uuid

import pytest

from soulbounds.core import (
    AccountAlreadyHasSoul,
    IdentityIsNotUnique,
    InMemorySoulRegistry,
    Soul,
    SoulDoesNotExist,
)

TRADER1 = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
TRADER2 = "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC"
URL = "https://deniz.io/sbt"


def test_mint_then_get_soul_returns_identity_and_url() -> None:
    reg = InMemorySoulRegistry()
    identity = str(uuid.uuid4())

    info = reg.mint(TRADER1, identity, URL)

    assert info.account == TRADER1.lower()
    soul, keys, values = reg.get_soul(TRADER1, False)
    assert soul == Soul(identity=identity, url=URL)
    assert keys == []
    assert values == []


def test_mint_emits_mint_event_with_account() -> None:
    reg = InMemorySoulRegistry()
    reg.mint(TRADER1, "id-1", URL)

    events = reg.events()
    assert [e.kind for e in events] == ["Mint"]
    assert events[0].account == TRADER1.lower()


def test_mint_with_existing_identity_fails_for_any_account() -> None:
    reg = InMemorySoulRegistry()
    reg.mint(TRADER1, "shared", URL)

    with pytest.raises(IdentityIsNotUnique):
        reg.mint(TRADER2, "shared", URL)
    with pytest.raises(IdentityIsNotUnique):
        reg.mint(TRADER1, "shared", URL)

    assert not reg.has_soul(TRADER2)
    assert reg.account_of_identity("shared") == TRADER1.lower()


def test_mint_over_live_soul_fails_and_keeps_original() -> None:
    reg = InMemorySoulRegistry()
    reg.mint(TRADER1, "first", URL)
    revision = reg.global_revision()

    with pytest.raises(AccountAlreadyHasSoul):
        reg.mint(TRADER1, "second", "https://other")

    assert reg.get_soul(TRADER1).soul.identity == "first"
    assert reg.account_of_identity("second") is None
    assert reg.global_revision() == revision


def test_account_is_case_insensitive() -> None:
    reg = InMemorySoulRegistry()
    reg.mint(TRADER2, "id", URL)

    assert reg.has_soul(TRADER2.lower())
    assert reg.has_soul(TRADER2.upper().replace("0X", "0x"))


def test_burn_frees_identity_for_remint() -> None:
    reg = InMemorySoulRegistry()
    identity = str(uuid.uuid4())
    reg.mint(TRADER1, identity, URL)

    reg.burn(TRADER1)

    with pytest.raises(SoulDoesNotExist):
        reg.get_soul(TRADER1, False)
    assert reg.account_of_identity(identity) is None

    reg.mint(TRADER1, identity, URL)
    soul, _, _ = reg.get_soul(TRADER1, False)
    assert soul.identity == identity


def test_burned_identity_can_move_to_another_account() -> None:
    reg = InMemorySoulRegistry()
    reg.mint(TRADER1, "mobile", URL)
    reg.burn(TRADER1)

    reg.mint(TRADER2, "mobile", URL)
    assert reg.account_of_identity("mobile") == TRADER2.lower()


def test_burn_twice_fails_second_time() -> None:
    reg = InMemorySoulRegistry()
    reg.mint(TRADER1, "id", URL)
    reg.burn(TRADER1)

    with pytest.raises(SoulDoesNotExist):
        reg.burn(TRADER1)


def test_burn_drops_metadata() -> None:
    reg = InMemorySoulRegistry()
    reg.allow_metadata_key("score")
    reg.mint(TRADER1, "id", URL)
    reg.set_metadata(TRADER1, "score", "1500")

    reg.burn(TRADER1)
    reg.mint(TRADER1, "id", URL)

    _, keys, values = reg.get_soul(TRADER1, True)
    assert keys == []
    assert values == []


def test_get_soul_with_metadata_before_any_write_is_empty() -> None:
    reg = InMemorySoulRegistry()
    reg.mint(TRADER2, str(uuid.uuid4()), URL)

    soul, keys, values = reg.get_soul(TRADER2, True)
    assert soul.url == URL
    assert (keys, values) == ([], [])


def test_missing_soul_operations_fail_with_soul_does_not_exist() -> None:
    reg = InMemorySoulRegistry()
    reg.allow_metadata_key("k")

    for call in (
        lambda: reg.burn(TRADER1),
        lambda: reg.get_soul(TRADER1, True),
        lambda: reg.set_metadata(TRADER1, "k", "v"),
        lambda: reg.get_metadata(TRADER1, "k"),
        lambda: reg.delete_metadata(TRADER1, "k"),
    ):
        with pytest.raises(SoulDoesNotExist):
            call()


def test_soul_does_not_exist_is_a_key_error() -> None:
    reg = InMemorySoulRegistry()
    with pytest.raises(KeyError):
        reg.get_soul(TRADER1)


def test_invalid_inputs_raise_value_error() -> None:
    reg = InMemorySoulRegistry()

    with pytest.raises(ValueError):
        reg.mint("trader1", "id", URL)
    with pytest.raises(ValueError):
        reg.mint("0x1234", "id", URL)
    with pytest.raises(ValueError, match="identity cannot be empty"):
        reg.mint(TRADER1, "", URL)

    assert reg.list_souls() == []
    assert reg.global_revision() == 0


def test_list_souls_in_mint_order() -> None:
    reg = InMemorySoulRegistry()
    reg.mint(TRADER2, "b", URL)
    reg.mint(TRADER1, "a", URL)

    assert reg.list_souls() == [TRADER2.lower(), TRADER1.lower()]
    assert [s.identity for s in reg.souls()] == ["b", "a"]


def test_reset_clears_souls_keys_and_history() -> None:
    reg = InMemorySoulRegistry()
    reg.allow_metadata_key("k")
    reg.mint(TRADER1, "id", URL)
    before = reg.global_revision()

    reg.reset()

    assert reg.list_souls() == []
    assert reg.allowed_metadata_keys() == []
    assert reg.events() == []
    assert reg.account_of_identity("id") is None
    assert reg.global_revision() > before
