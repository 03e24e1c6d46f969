from __future__ import annotations

from ._version import __version__
from .core.errors import (
    AccountAlreadyHasSoul,
    IdentityIsNotUnique,
    MetadataKeyNotAllowed,
    MetaKeyNotFound,
    NotAuthorized,
    SoulboundsError,
    SoulDoesNotExist,
)
from .core.registry import REGISTRY, InMemorySoulRegistry
from .core.souls import Soul, SoulView
from .runtime.server import SoulboundsServer, run
from .sdk.client import SoulboundsClient
from .sdk.handles import SoulHandle

__all__ = [
    "__version__",
    "run",
    "SoulboundsServer",
    "SoulboundsClient",
    "SoulHandle",
    "REGISTRY",
    "InMemorySoulRegistry",
    "Soul",
    "SoulView",
    "SoulboundsError",
    "IdentityIsNotUnique",
    "AccountAlreadyHasSoul",
    "SoulDoesNotExist",
    "MetadataKeyNotAllowed",
    "MetaKeyNotFound",
    "NotAuthorized",
]
