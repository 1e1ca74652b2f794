"""Exceptions raised by the snapshot, sync and polling layers."""

from __future__ import annotations


class MalformedSnapshotError(Exception):
    """Snapshot payload does not have the expected NetJSON shape.

    Raised by the parser for invalid JSON, missing required fields, or an
    unrecognized ``type`` discriminator. A sync pass that hits this error is
    skipped and the render sink keeps its previous state.

    Attributes:
        reason: Short description of what was wrong
        path: Location of the offending value inside the payload (e.g. ``collection[1].links[0]``)
        message: Human-readable error message
    """

    def __init__(
        self,
        reason: str,
        *,
        path: str | None = None,
        message: str | None = None,
    ) -> None:
        self.reason = reason
        self.path = path
        self.message = message or self._default_message()
        super().__init__(self.message)

    def _default_message(self) -> str:
        if self.path:
            return f"Malformed snapshot at {self.path}: {self.reason}"
        return f"Malformed snapshot: {self.reason}"


class TransportError(Exception):
    """Snapshot could not be fetched from its source.

    Covers network failures and non-success HTTP statuses. The poll loop
    treats it as "no update this tick" and schedules the next attempt.

    Attributes:
        source: Description of the snapshot source (URL or path)
        status_code: HTTP status code, if the server answered
        message: Human-readable error message
    """

    def __init__(
        self,
        source: str,
        *,
        status_code: int | None = None,
        message: str | None = None,
    ) -> None:
        self.source = source
        self.status_code = status_code
        self.message = message or self._default_message()
        super().__init__(self.message)

    def _default_message(self) -> str:
        if self.status_code is not None:
            return f"Fetching {self.source} failed with status {self.status_code}"
        return f"Fetching {self.source} failed"


class SettingsError(ValueError):
    """Invalid viewer configuration value.

    Attributes:
        key: Name of the offending setting
        value: The rejected value
    """

    def __init__(self, key: str, value: object, message: str | None = None) -> None:
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid value for setting '{key}': {value!r}")
