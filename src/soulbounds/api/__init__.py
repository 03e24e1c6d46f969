from __future__ import annotations

import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .._version import __version__
from ..config import Settings, load_settings
from ..core.access import AdminPolicy, policy_from_token
from ..core.registry import REGISTRY, InMemorySoulRegistry
from .auth import admin_guard
from .errors import install_error_handlers
from .parsing import since_or_400
from .routes import mount_keys_api, mount_souls_api
from .serializers import event_to_dict

logger = logging.getLogger(__name__)


def create_api_app(
    *,
    registry: InMemorySoulRegistry | None = None,
    settings: Settings | None = None,
    policy: AdminPolicy | None = None,
) -> FastAPI:
    reg = registry if registry is not None else REGISTRY
    cfg = settings if settings is not None else load_settings()
    admin_policy = policy if policy is not None else policy_from_token(cfg.admin_token)
    logger.debug("Admin policy: %s", type(admin_policy).__name__)

    app = FastAPI(title="soulbounds", version=__version__)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cfg.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)

    require_admin = admin_guard(admin_policy)
    mount_souls_api(app, registry=reg, require_admin=require_admin)
    mount_keys_api(app, registry=reg, require_admin=require_admin)

    @app.get("/healthz")
    def healthz() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/api/events")
    def events(since: str | None = None) -> dict:
        # Polling endpoint; `since` is the last seq the caller has seen.
        return {
            "globalRevision": reg.global_revision(),
            "events": [event_to_dict(e) for e in reg.events(since_or_400(since))],
        }

    @app.post("/api/reset", dependencies=[Depends(require_admin)])
    def reset_registry() -> dict[str, bool]:
        reg.reset()
        return {"ok": True}

    return app
