from __future__ import annotations

import contextlib
import logging
import socket
import threading
import time
import webbrowser
from dataclasses import dataclass, replace
from typing import Any

import uvicorn

from ..api.serializers import event_to_dict, soul_to_dict
from ..config import configure_logging, load_settings
from ..core.keys import MetadataKey, normalize_account
from ..core.registry import REGISTRY
from ..core.souls import SoulView
from ..sdk.client import SoulboundsClient
from ..sdk.handles import SoulHandle
from .app import create_app

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SoulboundsServer:
    """In-process handle to a server started by `run()`.

    Calls go straight to the process registry; the HTTP API served at `url`
    exposes the same state to remote clients. `timeout_s` is accepted for
    parity with `SoulboundsClient` and ignored.
    """

    host: str
    port: int
    url: str

    def as_client(self, *, admin_token: str | None = None) -> SoulboundsClient:
        return SoulboundsClient(self.url.rstrip("/"), admin_token=admin_token)

    def soul(self, account: str) -> SoulHandle:
        return SoulHandle(normalize_account(account), ops=self)

    def mint(self, account: str, identity: str, url: str, *, timeout_s: float = 10.0) -> SoulHandle:  # noqa: ARG002
        info = REGISTRY.mint(account, identity, url)
        return SoulHandle(info.account, ops=self)

    def burn(self, account: str, *, timeout_s: float = 10.0) -> None:  # noqa: ARG002
        REGISTRY.burn(account)

    def get_soul(self, account: str, include_metadata: bool = False, *, timeout_s: float = 10.0) -> SoulView:  # noqa: ARG002
        return REGISTRY.get_soul(account, include_metadata)

    def get_soul_info(self, account: str, *, timeout_s: float = 10.0) -> dict[str, Any]:  # noqa: ARG002
        return soul_to_dict(REGISTRY.soul_info(account, include_metadata=True), include_metadata=True)

    def has_soul(self, account: str, *, timeout_s: float = 10.0) -> bool:  # noqa: ARG002
        return REGISTRY.has_soul(account)

    def list_souls(self, *, timeout_s: float = 10.0) -> list[str]:  # noqa: ARG002
        return REGISTRY.list_souls()

    def account_of_identity(self, identity: str, *, timeout_s: float = 10.0) -> str | None:  # noqa: ARG002
        return REGISTRY.account_of_identity(identity)

    def allow_metadata_key(self, key: str | bytes, *, timeout_s: float = 10.0) -> None:  # noqa: ARG002
        REGISTRY.allow_metadata_key(key)

    def disallow_metadata_key(self, key: str | bytes, *, timeout_s: float = 10.0) -> None:  # noqa: ARG002
        REGISTRY.disallow_metadata_key(key)

    def is_metadata_key_allowed(self, key: str | bytes, *, timeout_s: float = 10.0) -> bool:  # noqa: ARG002
        return REGISTRY.is_metadata_key_allowed(key)

    def allowed_metadata_keys(self, *, timeout_s: float = 10.0) -> list[MetadataKey]:  # noqa: ARG002
        return REGISTRY.allowed_metadata_keys()

    def set_metadata(self, account: str, key: str | bytes, value: str | bytes, *, timeout_s: float = 10.0) -> None:  # noqa: ARG002
        REGISTRY.set_metadata(account, key, value)

    def get_metadata(self, account: str, key: str | bytes, *, timeout_s: float = 10.0) -> bytes:  # noqa: ARG002
        return REGISTRY.get_metadata(account, key)

    def delete_metadata(self, account: str, key: str | bytes, *, timeout_s: float = 10.0) -> None:  # noqa: ARG002
        REGISTRY.delete_metadata(account, key)

    def global_revision(self, *, timeout_s: float = 10.0) -> int:  # noqa: ARG002
        return REGISTRY.global_revision()

    def events(self, since: int = 0, *, timeout_s: float = 10.0) -> dict[str, Any]:  # noqa: ARG002
        return {
            "globalRevision": REGISTRY.global_revision(),
            "events": [event_to_dict(e) for e in REGISTRY.events(int(since))],
        }

    def reset(self, *, timeout_s: float = 10.0) -> None:  # noqa: ARG002
        REGISTRY.reset()


def _find_free_port(host: str) -> int:
    with contextlib.closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind((host, 0))
        return int(s.getsockname()[1])


def _normalize_base_url(url: str) -> str:
    url = url.strip()
    if not url:
        return ""
    # Allow passing just host:port.
    if "://" not in url:
        url = "http://" + url
    return url.rstrip("/")


def _is_server_alive(base_url: str, *, timeout_s: float = 0.2) -> bool:
    """Best-effort probe to determine if a soulbounds server is reachable."""

    import httpx

    try:
        with httpx.Client(base_url=base_url, timeout=timeout_s) as client:
            r = client.get("/healthz")
            if r.status_code != 200:
                return False
            return bool(r.json().get("ok"))
    except (httpx.HTTPError, ValueError):
        return False


def _wait_until_alive(base_url: str, *, timeout_s: float) -> bool:
    deadline = time.monotonic() + timeout_s
    while time.monotonic() < deadline:
        if _is_server_alive(base_url, timeout_s=0.2):
            return True
        time.sleep(0.02)
    return False


def run(
    *,
    host: str = "127.0.0.1",
    port: int = 0,
    open_browser: bool = False,
    log_level: str | None = None,
    access_log: bool = False,
    new_server: bool = False,
    connect_timeout_s: float = 0.2,
    startup_timeout_s: float = 5.0,
    admin_token: str | None = None,
) -> SoulboundsServer | SoulboundsClient:
    """Start the soulbounds API with a single Python call.

    Behavior:
    - If SOULBOUNDS_URL is set, we *attach* to that existing server (client mode) unless
      `new_server=True`.
    - Otherwise, if `port != 0` and a server is already reachable at http://{host}:{port},
      we attach to it (client mode) unless `new_server=True`.
    - Otherwise we start a new local server (server mode) and return a `SoulboundsServer`.

    Notes:
    - `port=0` means "pick a free port", so there's nothing to attach to.
    - `admin_token` overrides SOULBOUNDS_ADMIN_TOKEN for a new server and is sent
      by the returned client when attaching.
    - Uvicorn's per-request access log is off by default since pollers hit
      `/api/events` frequently.
    """

    settings = load_settings()
    if admin_token is not None:
        settings = replace(settings, admin_token=admin_token)
    level = (log_level or settings.log_level).upper()
    configure_logging(level)

    env_url = _normalize_base_url(settings.url)

    # 1) Try attaching to an explicitly provided server.
    if env_url and not new_server:
        if _is_server_alive(env_url, timeout_s=connect_timeout_s):
            logger.info("Attaching to soulbounds server at %s", env_url)
            if open_browser:
                webbrowser.open(env_url + "/docs")
            return SoulboundsClient(env_url, admin_token=settings.admin_token)

    # 2) Try attaching to host/port if they are explicitly chosen.
    if port != 0 and not new_server:
        default_url = _normalize_base_url(f"http://{host}:{port}")
        if _is_server_alive(default_url, timeout_s=connect_timeout_s):
            logger.info("Attaching to soulbounds server at %s", default_url)
            if open_browser:
                webbrowser.open(default_url + "/docs")
            return SoulboundsClient(default_url, admin_token=settings.admin_token)

    # 3) Start a fresh server.
    if port == 0:
        port = _find_free_port(host)

    if settings.admin_token is None:
        logger.warning("No admin token configured; every caller may mint, burn and edit the allow-list")

    app = create_app(settings)

    config = uvicorn.Config(app, host=host, port=port, log_level=level.lower(), access_log=access_log)
    server = uvicorn.Server(config)

    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()

    base_url = f"http://{host}:{port}"
    if not _wait_until_alive(base_url, timeout_s=startup_timeout_s):
        raise RuntimeError(f"soulbounds server did not start on {base_url} within {startup_timeout_s}s")
    logger.info("soulbounds server listening on %s", base_url)

    url = base_url + "/"
    if open_browser:
        webbrowser.open(url + "docs")

    return SoulboundsServer(host=host, port=port, url=url)
