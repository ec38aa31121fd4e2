"""Error taxonomy for session loading, scene dispatch and persistence."""

from __future__ import annotations


class ScenarioError(Exception):
    """Base class for every error raised by chatscene."""


class SessionNotFoundError(ScenarioError):
    """Store has no record for the (chat, user) key. Recoverable on load."""


class SceneNotFoundError(ScenarioError):
    """Leave was requested but the current scene is not registered."""


class SessionDecodeError(ScenarioError):
    """Stored payload could not be decoded into the requested data type."""


class SessionEncodeError(ScenarioError):
    """Session data could not be encoded. Always a caller bug."""


class SceneTypeMismatchError(ScenarioError, TypeError):
    """Scene was invoked with a context whose data type it does not declare."""


class StoreError(ScenarioError):
    """Store read/write failed or timed out."""
