"""High-level operations on one user's WeChat session, carried out through the agent."""

from __future__ import annotations

import base64
import binascii
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from .protocol import Request, RequestType
from .service import WechatError, WechatService
from .types import GroupInfo, UserInfo, _object, _opt_str, _put, _str

_T = TypeVar("_T")


@dataclass
class GroupMember:
    id: str
    name: str
    nickname: Optional[str] = None

    def to_dict(self) -> dict:
        out = {"id": self.id, "name": self.name}
        _put(out, "nickname", self.nickname)
        return out

    @classmethod
    def from_dict(cls, data: Any) -> "GroupMember":
        data = _object(data, "group member")
        return cls(
            id=_str(data, "id"),
            name=_str(data, "name"),
            nickname=_opt_str(data, "nickname"),
        )


def _b64encode(data: bytes) -> str:
    return base64.b64encode(bytes(data)).decode("ascii")


def _b64decode(text: str) -> bytes:
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise WechatError(f"base64 decode error: {exc}") from exc


def _list_of(parse: Callable[[Any], _T]) -> Callable[[Any], list[_T]]:
    def parse_list(data: Any) -> list[_T]:
        if not isinstance(data, list):
            raise ValueError(f"expected a list, got {type(data).__name__}")
        return [parse(item) for item in data]

    return parse_list


def _as_str(data: Any) -> str:
    if not isinstance(data, str):
        raise ValueError(f"expected a string, got {type(data).__name__}")
    return data


def _parse(data: Any, parse: Callable[[Any], _T]) -> _T:
    if data is None:
        raise WechatError("invalid response")
    try:
        return parse(data)
    except ValueError as exc:
        raise WechatError(f"invalid response: {exc}") from exc


def _text_field(data: Any, key: str, what: str) -> str:
    value = data.get(key) if isinstance(data, dict) else None
    if not isinstance(value, str):
        raise WechatError(f"no {what} in response")
    return value


class WechatClient:
    """Issues requests to the agent on behalf of one Matrix user."""

    def __init__(self, mxid: str, service: WechatService):
        self.mxid = mxid
        self.service = service

    def __repr__(self) -> str:
        return f"WechatClient(mxid={self.mxid!r})"

    async def _send(self, request_type: RequestType, data: Any = None):
        return await self.service.request(self.mxid, Request(request_type, data))

    async def _call(self, request_type: RequestType, data: Any = None) -> Any:
        """Send a request and return its data, raising the agent's error if any."""
        response = await self._send(request_type, data)
        if response.error is not None:
            raise response.error
        return response.data

    async def _send_message(
        self, request_type: RequestType, payload: dict, reply_to: Optional[str]
    ) -> str:
        if reply_to is not None:
            payload["reply_to"] = reply_to
        data = await self._call(request_type, payload)
        return _text_field(data, "msg_id", "msg_id")

    async def _download(self, request_type: RequestType, xml: str, key: str) -> bytes:
        data = await self._call(request_type, [xml])
        return _b64decode(_text_field(data, key, key))

    async def connect(self) -> None:
        await self._send(RequestType.CONNECT)

    async def disconnect(self) -> None:
        await self._send(RequestType.DISCONNECT)

    async def is_logged_in(self) -> bool:
        data = await self._call(RequestType.IS_LOGIN)
        return data if isinstance(data, bool) else False

    async def get_self(self) -> UserInfo:
        return _parse(await self._call(RequestType.GET_SELF), UserInfo.from_dict)

    async def get_user_info(self, wxid: str) -> UserInfo:
        data = await self._call(RequestType.GET_USER_INFO, [wxid])
        return _parse(data, UserInfo.from_dict)

    async def get_friend_list(self) -> list[UserInfo]:
        data = await self._call(RequestType.GET_FRIEND_LIST)
        return _parse(data, _list_of(UserInfo.from_dict))

    async def get_group_list(self) -> list[GroupInfo]:
        data = await self._call(RequestType.GET_GROUP_LIST)
        return _parse(data, _list_of(GroupInfo.from_dict))

    async def get_group_info(self, group_id: str) -> GroupInfo:
        data = await self._call(RequestType.GET_GROUP_INFO, [group_id])
        return _parse(data, GroupInfo.from_dict)

    async def get_group_members(self, group_id: str) -> list[GroupMember]:
        data = await self._call(RequestType.GET_GROUP_MEMBERS, [group_id])
        return _parse(data, _list_of(GroupMember.from_dict))

    async def get_group_member_nickname(self, group_id: str, member_id: str) -> str:
        data = await self._call(RequestType.GET_GROUP_MEMBER_NICKNAME, [group_id, member_id])
        return _parse(data, _as_str)

    async def send_text_message(
        self, chat_id: str, text: str, reply_to: Optional[str] = None
    ) -> str:
        payload = {"chat_id": chat_id, "text": text}
        return await self._send_message(RequestType.SEND_TEXT, payload, reply_to)

    async def send_image_message(
        self, chat_id: str, image_data: bytes, reply_to: Optional[str] = None
    ) -> str:
        payload = {"chat_id": chat_id, "image": _b64encode(image_data)}
        return await self._send_message(RequestType.SEND_IMAGE, payload, reply_to)

    async def send_video_message(
        self, chat_id: str, video_data: bytes, reply_to: Optional[str] = None
    ) -> str:
        payload = {"chat_id": chat_id, "video": _b64encode(video_data)}
        return await self._send_message(RequestType.SEND_VIDEO, payload, reply_to)

    async def send_file_message(
        self,
        chat_id: str,
        file_data: bytes,
        filename: str,
        reply_to: Optional[str] = None,
    ) -> str:
        payload = {"chat_id": chat_id, "file": _b64encode(file_data), "filename": filename}
        return await self._send_message(RequestType.SEND_FILE, payload, reply_to)

    async def send_emoji_message(self, chat_id: str, emoji_data: bytes) -> str:
        payload = {"chat_id": chat_id, "emoji": _b64encode(emoji_data)}
        return await self._send_message(RequestType.SEND_EMOJI, payload, None)

    async def revoke_message(self, chat_id: str, msg_id: str) -> None:
        await self._call(RequestType.REVOKE_MSG, [chat_id, msg_id])

    async def download_image(self, xml: str) -> bytes:
        return await self._download(RequestType.DOWNLOAD_IMAGE, xml, "image")

    async def download_video(self, xml: str) -> bytes:
        return await self._download(RequestType.DOWNLOAD_VIDEO, xml, "video")

    async def download_audio(self, xml: str) -> bytes:
        return await self._download(RequestType.DOWNLOAD_AUDIO, xml, "audio")

    async def download_file(self, xml: str) -> bytes:
        return await self._download(RequestType.DOWNLOAD_FILE, xml, "file")

    async def set_nickname(self, nickname: str) -> None:
        await self._call(RequestType.SET_NICKNAME, [nickname])

    async def set_avatar(self, avatar_data: bytes) -> None:
        await self._call(RequestType.SET_AVATAR, [_b64encode(avatar_data)])

    async def get_qrcode(self) -> bytes:
        data = await self._call(RequestType.GET_QRCODE)
        return _b64decode(_text_field(data, "qrcode", "qrcode"))

    async def accept_friend(self, v3: str) -> None:
        await self._call(RequestType.ACCEPT_FRIEND, [v3])

    async def create_group(self, user_ids: Iterable[str], name: str) -> str:
        data = await self._call(RequestType.CREATE_GROUP, [list(user_ids), name])
        return _text_field(data, "group_id", "group_id")

    async def set_group_name(self, group_id: str, name: str) -> None:
        await self._call(RequestType.SET_GROUP_NAME, [group_id, name])

    async def invite_group_member(self, group_id: str, user_ids: Iterable[str]) -> None:
        await self._call(RequestType.INVITE_GROUP_MEMBER, [group_id, list(user_ids)])

    async def remove_group_member(self, group_id: str, user_ids: Iterable[str]) -> None:
        await self._call(RequestType.REMOVE_GROUP_MEMBER, [group_id, list(user_ids)])

    async def quit_group(self, group_id: str) -> None:
        await self._call(RequestType.QUIT_GROUP, [group_id])

    async def refresh_contacts(self) -> None:
        await self._call(RequestType.REFRESH_CONTACTS)

    async def sync_messages(self) -> None:
        await self._call(RequestType.SYNC_MESSAGES)