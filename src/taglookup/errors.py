"""Error types raised by the tag-library lookup."""

from __future__ import annotations


class TaglibError(Exception):
    """Base class for tag-library errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidTaglibError(TaglibError):
    """Raised when a library passed to the lookup is missing or malformed."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)
        self.message = message


class InvalidTransformerError(TaglibError):
    """Raised when a transformer entry has no path."""

    def __init__(self, entry: object, tag_name: str | None = None) -> None:
        self.entry = entry
        self.tag_name = tag_name
        scope = f"tag <{tag_name}>" if tag_name else "template"
        super().__init__(f"invalid transformer for {scope}: {entry!r}")


class InvalidMigratorError(TaglibError):
    """Raised when a migrator entry is not callable."""

    def __init__(self, entry: object, tag_name: str | None = None) -> None:
        self.entry = entry
        self.tag_name = tag_name
        scope = f"tag <{tag_name}>" if tag_name else "template"
        super().__init__(f"invalid migrator for {scope}: {entry!r}")
