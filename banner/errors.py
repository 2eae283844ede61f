"""
Error taxonomy for banner composition.

Every failure aborts the whole composition; there is no partial image.
"""


class BannerError(Exception):
    """Base class for all banner errors."""


class MissingInputError(BannerError):
    """A required upstream value is absent (e.g. the CSV URL)."""


class FetchError(BannerError):
    """A collaborator request failed or returned a non-success status."""


class DecodeError(BannerError):
    """Fetched bytes could not be decoded."""


class LayoutError(BannerError):
    """An internal layout invariant was violated."""


class FontNotRegisteredError(BannerError):
    """A font family was requested before being registered."""
