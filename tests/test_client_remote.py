from __future__ import annotations

import uuid

import pytest

from soulbounds.core import (
    AccountAlreadyHasSoul,
    IdentityIsNotUnique,
    MetadataKeyNotAllowed,
    MetaKeyNotFound,
    NotAuthorized,
    SoulDoesNotExist,
    encode_key,
)
from soulbounds.runtime.server import SoulboundsServer, run
from soulbounds.sdk.client import SoulboundsClient

TOKEN = "remote-s3cret"


def _fresh_account() -> str:
    return "0x" + uuid.uuid4().hex + uuid.uuid4().hex[:8]


@pytest.fixture(scope="module")
def server() -> SoulboundsServer:
    srv = run(host="127.0.0.1", port=0, new_server=True, admin_token=TOKEN)
    assert isinstance(srv, SoulboundsServer)
    return srv


def test_client_round_trip(server: SoulboundsServer) -> None:
    client = server.as_client(admin_token=TOKEN)
    client.allow_metadata_key("remoteTweets")
    client.allow_metadata_key("remoteLikes")
    identity = str(uuid.uuid4())

    trader = client.mint(_fresh_account(), identity, "https://deniz.io/sbt")
    trader.set_metadata("remoteTweets", "10")
    trader.set_metadata("remoteLikes", b"\x00\xff")
    trader.set_metadata("remoteTweets", "15")

    soul, keys, values = client.get_soul(trader, True)
    assert soul.identity == identity
    assert keys == [encode_key("remoteTweets"), encode_key("remoteLikes")]
    assert values == [b"15", b"\x00\xff"]

    assert client.get_metadata(trader, "remoteTweets") == b"15"
    assert client.account_of_identity(identity) == trader
    assert client.has_soul(trader)
    assert trader in client.list_souls()
    assert client.is_metadata_key_allowed("remoteTweets")
    assert encode_key("remoteLikes") in client.allowed_metadata_keys()

    client.delete_metadata(trader, "remoteTweets")
    with pytest.raises(MetaKeyNotFound):
        client.get_metadata(trader, "remoteTweets")

    trader.burn()
    assert not client.has_soul(trader)
    assert client.account_of_identity(identity) is None


def test_client_reraises_domain_errors(server: SoulboundsServer) -> None:
    client = server.as_client(admin_token=TOKEN)
    identity = str(uuid.uuid4())
    account = _fresh_account()
    client.mint(account, identity, "u")

    with pytest.raises(IdentityIsNotUnique):
        client.mint(_fresh_account(), identity, "u")
    with pytest.raises(AccountAlreadyHasSoul):
        client.mint(account, str(uuid.uuid4()), "u")
    with pytest.raises(MetadataKeyNotAllowed):
        client.set_metadata(account, "remoteNeverAllowed", "1")
    with pytest.raises(SoulDoesNotExist):
        client.get_soul(_fresh_account())
    with pytest.raises(ValueError):
        client.get_soul("not-an-address")


def test_client_without_token_is_rejected(server: SoulboundsServer) -> None:
    anonymous = server.as_client()
    with pytest.raises(NotAuthorized):
        anonymous.allow_metadata_key("remoteAnon")

    assert isinstance(anonymous.global_revision(), int)


def test_server_and_client_share_state(server: SoulboundsServer) -> None:
    client = server.as_client(admin_token=TOKEN)
    server.allow_metadata_key("remoteShared")
    local = server.mint(_fresh_account(), str(uuid.uuid4()), "u")
    local.set_metadata("remoteShared", "in-process")

    assert client.get_metadata(local, "remoteShared") == b"in-process"
    before = client.events()["globalRevision"]
    client.soul(local).set_metadata("remoteShared", "over-http")
    assert server.get_metadata(local, "remoteShared") == b"over-http"
    assert client.events(since=0)["globalRevision"] > before


def test_client_looks_up_identities_with_reserved_characters(server: SoulboundsServer) -> None:
    client = server.as_client(admin_token=TOKEN)
    suffix = uuid.uuid4().hex[:8]
    odd = f"user?{suffix}#x"
    did = f"did:web:deniz.io/users/{suffix}"
    odd_account = client.mint(_fresh_account(), odd, "u")
    did_account = client.mint(_fresh_account(), did, "u")

    assert client.account_of_identity(odd) == odd_account
    assert client.account_of_identity(did) == did_account
    assert client.account_of_identity(odd) == server.account_of_identity(odd)
    assert client.account_of_identity(f"user?{suffix}") is None


def test_server_matches_client_surface(server: SoulboundsServer) -> None:
    client = server.as_client(admin_token=TOKEN)
    server.allow_metadata_key("remoteInfo")
    account = server.mint(_fresh_account(), str(uuid.uuid4()), "https://deniz.io/sbt")
    account.set_metadata("remoteInfo", "42")

    assert server.get_soul_info(account) == client.get_soul_info(account)
    assert server.get_soul_info(account)["metadata"][0]["value"] == "42"

    local_events = server.events(since=0)
    remote_events = client.events(since=0)
    assert local_events["globalRevision"] == remote_events["globalRevision"]
    assert local_events["events"] == remote_events["events"]
    assert local_events["events"][-1]["kind"] == "MetadataSet"


def test_run_auto_attaches_to_existing_server(server: SoulboundsServer) -> None:
    attached = run(host=server.host, port=server.port, admin_token=TOKEN)

    assert isinstance(attached, SoulboundsClient)
    assert attached.base_url.rstrip("/") == f"http://{server.host}:{server.port}"


def test_run_new_server_ignores_env_url(server: SoulboundsServer, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SOULBOUNDS_URL", f"http://{server.host}:{server.port}")

    attached = run(host="127.0.0.1", port=0)
    assert isinstance(attached, SoulboundsClient)

    fresh = run(host="127.0.0.1", port=0, new_server=True)
    assert isinstance(fresh, SoulboundsServer)
    assert (fresh.host, fresh.port) != (server.host, server.port)


def test_server_reset_is_visible_to_clients(server: SoulboundsServer) -> None:
    client = server.as_client(admin_token=TOKEN)
    account = server.mint(_fresh_account(), str(uuid.uuid4()), "u")
    before = client.global_revision()

    server.reset()

    assert not client.has_soul(account)
    assert client.list_souls() == []
    assert client.events(since=0)["events"] == []
    assert server.global_revision() > before
