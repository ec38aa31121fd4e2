"""Scene dispatch and session persistence for chat bots."""

from chatscene.config.models import ScenarioConfig, WizardConfig
from chatscene.domain.errors import (
    ScenarioError,
    SceneNotFoundError,
    SceneTypeMismatchError,
    SessionDecodeError,
    SessionEncodeError,
    SessionNotFoundError,
    StoreError,
)
from chatscene.domain.session import ErasedSession, Session, from_erased, to_erased
from chatscene.domain.update import Update
from chatscene.infrastructure.session_store import InMemorySessionStore, SessionStore
from chatscene.orchestration.context import Context
from chatscene.orchestration.scenario import Scenario
from chatscene.orchestration.scene import BaseScene, Scene
from chatscene.orchestration.wizard import Wizard, WizardStep

__all__ = [
    "BaseScene",
    "Context",
    "ErasedSession",
    "InMemorySessionStore",
    "Scenario",
    "ScenarioConfig",
    "ScenarioError",
    "Scene",
    "SceneNotFoundError",
    "SceneTypeMismatchError",
    "Session",
    "SessionDecodeError",
    "SessionEncodeError",
    "SessionNotFoundError",
    "SessionStore",
    "StoreError",
    "Update",
    "Wizard",
    "WizardConfig",
    "WizardStep",
    "from_erased",
    "to_erased",
]
