"""Session records: erased (storage) form and typed (application) form."""

from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from chatscene.domain.errors import SessionDecodeError, SessionEncodeError

DataT = TypeVar("DataT")

# Payloads meaning "no previous value"
_EMPTY_PAYLOADS = frozenset({b"", b"null", b"{}"})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ErasedSession(BaseModel):
    """Storage shape: data is kept as an opaque JSON blob."""

    chat_id: int = 0
    user_id: int = 0
    scene: str = Field(default="", description="Empty string means no active scene")
    step: int = Field(default=0, description="Scene-defined cursor; wizard uses -1 for finished")
    data: bytes = b"{}"
    updated: datetime = Field(default_factory=_utcnow)


class Session(BaseModel, Generic[DataT]):
    """Application shape: data is a decoded value of the scene's data type."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    chat_id: int = 0
    user_id: int = 0
    scene: str = ""
    step: int = 0
    data: DataT
    updated: datetime = Field(default_factory=_utcnow)


def is_untyped(data_type: Any) -> bool:
    return data_type is None or data_type is Any or data_type is dict


def zero_value(data_type: Any) -> Any:
    """Zero value for a data type: {} for untyped data, else data_type()."""
    if is_untyped(data_type):
        return {}
    return data_type()


@lru_cache(maxsize=None)
def _adapter(data_type: Any) -> TypeAdapter:
    if is_untyped(data_type):
        return TypeAdapter(Any)
    return TypeAdapter(data_type)


def session_key(chat_id: int, user_id: int) -> str:
    return f"{chat_id}:{user_id}"


def to_erased(session: Session[Any], data_type: Any = None) -> ErasedSession:
    """
    Encode session data to JSON and stamp updated=now.
    Raises SessionEncodeError if the data cannot be encoded.
    """
    adapter = _adapter(data_type)
    try:
        payload = adapter.dump_json(session.data)
    except (PydanticSerializationError, ValueError, TypeError) as e:
        raise SessionEncodeError(f"to_erased: {e}") from e
    return ErasedSession(
        chat_id=session.chat_id,
        user_id=session.user_id,
        scene=session.scene,
        step=session.step,
        data=payload,
        updated=_utcnow(),
    )


def from_erased(erased: ErasedSession | None, data_type: Any = None) -> Session[Any]:
    """
    Decode an erased session into a typed one.
    Missing, empty, null and {} payloads yield the zero value of data_type;
    any other malformed payload raises SessionDecodeError.
    """
    if erased is None:
        erased = ErasedSession()

    raw = (erased.data or b"").strip()
    if raw in _EMPTY_PAYLOADS:
        data = zero_value(data_type)
    else:
        try:
            data = _adapter(data_type).validate_json(raw)
        except ValidationError as e:
            raise SessionDecodeError(f"from_erased: {e}") from e

    return Session(
        chat_id=erased.chat_id,
        user_id=erased.user_id,
        scene=erased.scene,
        step=erased.step,
        data=data,
        updated=erased.updated,
    )
