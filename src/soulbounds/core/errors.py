from __future__ import annotations


class SoulboundsError(Exception):
    """Base class for every registry failure.

    `code` is the stable kind name. The HTTP layer puts it in the error
    envelope and the SDK uses it to re-raise the same class client-side.
    """

    code = "SoulboundsError"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class IdentityIsNotUnique(SoulboundsError):
    code = "IdentityIsNotUnique"


class AccountAlreadyHasSoul(SoulboundsError):
    code = "AccountAlreadyHasSoul"


class SoulDoesNotExist(SoulboundsError, KeyError):
    code = "SoulDoesNotExist"


class MetadataKeyNotAllowed(SoulboundsError):
    code = "MetadataKeyNotAllowed"


class MetaKeyNotFound(SoulboundsError, KeyError):
    code = "MetaKeyNotFound"


class NotAuthorized(SoulboundsError):
    code = "NotAuthorized"


ERRORS_BY_CODE: dict[str, type[SoulboundsError]] = {
    cls.code: cls
    for cls in (
        IdentityIsNotUnique,
        AccountAlreadyHasSoul,
        SoulDoesNotExist,
        MetadataKeyNotAllowed,
        MetaKeyNotFound,
        NotAuthorized,
    )
}
