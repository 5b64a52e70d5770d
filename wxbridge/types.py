"""Records describing users, chats and message payloads exchanged with the agent."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, TypeVar

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1

_T = TypeVar("_T")
_E = TypeVar("_E", bound=Enum)


class _WireEnum(str, Enum):
    """String enum whose value is its wire name."""

    def __str__(self) -> str:
        return self.value


class ChatType(_WireEnum):
    PRIVATE = "private"
    GROUP = "group"


def _object(data: Any, what: str) -> Mapping:
    if not isinstance(data, Mapping):
        raise ValueError(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


def _present(data: Mapping, key: str) -> Any:
    if key not in data:
        raise ValueError(f"missing field `{key}`")
    return data[key]


def _str(data: Mapping, key: str) -> str:
    value = _present(data, key)
    if not isinstance(value, str):
        raise ValueError(f"field `{key}` must be a string")
    return value


def _opt_str(data: Mapping, key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"field `{key}` must be a string")
    return value


def _int(data: Mapping, key: str) -> int:
    value = _present(data, key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field `{key}` must be an integer")
    if not _I64_MIN <= value <= _I64_MAX:
        raise ValueError(f"field `{key}` is out of range")
    return value


def _float(data: Mapping, key: str) -> float:
    value = _present(data, key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"field `{key}` must be a number")
    return float(value)


def _enum(data: Mapping, key: str, enum_cls: type[_E]) -> _E:
    value = _str(data, key)
    try:
        return enum_cls(value)
    except ValueError:
        raise ValueError(f"unknown variant `{value}` for field `{key}`") from None


def _str_list(data: Mapping, key: str) -> list[str]:
    if key not in data:
        return []
    value = data[key]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"field `{key}` must be a list of strings")
    return list(value)


def _bytes(data: Mapping, key: str) -> bytes:
    value = _present(data, key)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if not isinstance(value, list) or not all(
        isinstance(item, int) and not isinstance(item, bool) and 0 <= item <= 255
        for item in value
    ):
        raise ValueError(f"field `{key}` must be a list of bytes")
    return bytes(value)


def _put(out: dict, key: str, value: Any) -> None:
    if value is not None:
        out[key] = value


@dataclass
class User:
    id: str
    username: str
    remark: Optional[str] = None

    def to_dict(self) -> dict:
        out = {"id": self.id, "username": self.username}
        _put(out, "remark", self.remark)
        return out

    @classmethod
    def from_dict(cls, data: Any) -> "User":
        data = _object(data, "user")
        return cls(
            id=_str(data, "id"),
            username=_str(data, "username"),
            remark=_opt_str(data, "remark"),
        )


@dataclass
class Chat:
    id: str
    chat_type: ChatType
    title: Optional[str] = None

    def to_dict(self) -> dict:
        out = {"id": self.id, "type": self.chat_type.value}
        _put(out, "title", self.title)
        return out

    @classmethod
    def from_dict(cls, data: Any) -> "Chat":
        data = _object(data, "chat")
        return cls(
            id=_str(data, "id"),
            chat_type=_enum(data, "type", ChatType),
            title=_opt_str(data, "title"),
        )


@dataclass
class ReplyInfo:
    id: str
    timestamp: int
    sender: str
    content: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ts": self.timestamp,
            "sender": self.sender,
            "content": self.content,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "ReplyInfo":
        data = _object(data, "reply")
        return cls(
            id=_str(data, "id"),
            timestamp=_int(data, "ts"),
            sender=_str(data, "sender"),
            content=_str(data, "content"),
        )


@dataclass
class BlobData:
    binary: bytes
    name: Optional[str] = None
    mime: Optional[str] = None

    def to_dict(self) -> dict:
        out: dict = {}
        _put(out, "name", self.name)
        _put(out, "mime", self.mime)
        out["binary"] = list(self.binary)
        return out

    @classmethod
    def from_dict(cls, data: Any) -> "BlobData":
        data = _object(data, "blob")
        return cls(
            binary=_bytes(data, "binary"),
            name=_opt_str(data, "name"),
            mime=_opt_str(data, "mime"),
        )


@dataclass
class LocationData:
    longitude: float
    latitude: float
    name: Optional[str] = None
    address: Optional[str] = None

    def to_dict(self) -> dict:
        out: dict = {}
        _put(out, "name", self.name)
        _put(out, "address", self.address)
        out["longitude"] = self.longitude
        out["latitude"] = self.latitude
        return out

    @classmethod
    def from_dict(cls, data: Any) -> "LocationData":
        data = _object(data, "location")
        return cls(
            longitude=_float(data, "longitude"),
            latitude=_float(data, "latitude"),
            name=_opt_str(data, "name"),
            address=_opt_str(data, "address"),
        )


@dataclass
class AppData:
    title: Optional[str] = None
    description: Optional[str] = None
    source: Optional[str] = None
    url: Optional[str] = None
    content: Optional[str] = None
    blobs: Optional[dict[str, BlobData]] = None

    def to_dict(self) -> dict:
        out: dict = {}
        _put(out, "title", self.title)
        _put(out, "desc", self.description)
        _put(out, "source", self.source)
        _put(out, "url", self.url)
        _put(out, "raw", self.content)
        if self.blobs is not None:
            out["blobs"] = {key: blob.to_dict() for key, blob in self.blobs.items()}
        return out

    @classmethod
    def from_dict(cls, data: Any) -> "AppData":
        data = _object(data, "app")
        raw_blobs = data.get("blobs")
        blobs = None
        if raw_blobs is not None:
            blobs = {
                key: BlobData.from_dict(value)
                for key, value in _object(raw_blobs, "blobs").items()
            }
        return cls(
            title=_opt_str(data, "title"),
            description=_opt_str(data, "desc"),
            source=_opt_str(data, "source"),
            url=_opt_str(data, "url"),
            content=_opt_str(data, "raw"),
            blobs=blobs,
        )


@dataclass
class UserInfo:
    id: str
    name: str
    avatar: Optional[str] = None
    remark: Optional[str] = None

    def to_dict(self) -> dict:
        out = {"id": self.id, "name": self.name}
        _put(out, "avatar", self.avatar)
        _put(out, "remark", self.remark)
        return out

    @classmethod
    def from_dict(cls, data: Any) -> "UserInfo":
        data = _object(data, "user info")
        return cls(
            id=_str(data, "id"),
            name=_str(data, "name"),
            avatar=_opt_str(data, "avatar"),
            remark=_opt_str(data, "remark"),
        )


@dataclass
class GroupInfo:
    id: str
    name: str
    avatar: Optional[str] = None
    notice: Optional[str] = None
    members: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        out = {"id": self.id, "name": self.name}
        _put(out, "avatar", self.avatar)
        _put(out, "notice", self.notice)
        out["members"] = list(self.members)
        return out

    @classmethod
    def from_dict(cls, data: Any) -> "GroupInfo":
        data = _object(data, "group info")
        return cls(
            id=_str(data, "id"),
            name=_str(data, "name"),
            avatar=_opt_str(data, "avatar"),
            notice=_opt_str(data, "notice"),
            members=_str_list(data, "members"),
        )