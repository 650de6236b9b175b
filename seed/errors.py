"""Error taxonomy for a seed run.

Every :class:`SeedError` is fatal: the entry point logs it and exits with a
non-zero status.  :class:`AssetFetchError` is the single tolerated failure;
the product stage logs it and carries on without the image.
"""


class SeedError(Exception):
    """Base class for errors that abort the whole run."""


class FixtureLoadError(SeedError):
    """A fixture file is missing, unreadable, or malformed."""


class SchemaResetError(SeedError):
    """Dropping or recreating the tables of a storage target failed."""


class ReferenceNotFoundError(SeedError):
    """A fixture refers to a category, color, or size that was never seeded."""

    def __init__(self, kind: str, name: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"can't find {kind} with name = {name!r}")


class StorageError(SeedError):
    """The database rejected a create, save, or query during a seed stage."""


class AssetFetchError(Exception):
    """Downloading or caching a remote image failed."""

    def __init__(self, url: str, reason: object) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"open file ({url!r}) failure, got err {reason}")
