import json

import pytest

from wxbridge.protocol import (
    ErrorResponse,
    Event,
    EventType,
    Message,
    MessageType,
    Request,
    RequestType,
    Response,
    ResponseType,
)
from wxbridge.types import Chat, ChatType, GroupInfo, ReplyInfo, User, UserInfo


@pytest.mark.parametrize(
    "member, name",
    [
        (RequestType.EVENT, "event"),
        (RequestType.LOGIN_QR, "login_qr"),
        (RequestType.GET_GROUP_MEMBER_NICKNAME, "get_group_member_nickname"),
        (RequestType.GET_QRCODE, "get_qrcode"),
        (RequestType.SYNC_MESSAGES, "sync_messages"),
    ],
)
def test_request_type_display(member, name):
    assert str(member) == name


def test_qrcode_wire_name_differs_from_display():
    assert RequestType.GET_QRCODE.value == "get_q_r_code"
    assert RequestType("get_q_r_code") is RequestType.GET_QRCODE


def test_response_type_mirrors_request_type():
    for member in RequestType:
        mirrored = ResponseType(member.value)
        assert mirrored.value == member.value
        assert str(mirrored) == str(member)
    assert len(list(ResponseType)) == len(list(RequestType))


def test_message_and_event_type_display():
    request_msg = Message.request(1, "@a:example.com", Request(RequestType.CONNECT))
    response_msg = Message.from_dict({"id": 2, "mxid": "@a:example.com", "type": "response"})
    assert str(request_msg.msg_type) == "request"
    assert str(response_msg.msg_type) == "response"
    assert str(EventType("voip")) == "voip"
    assert str(EventType("sticker")) == "sticker"


def test_error_response_display_and_wire():
    err = ErrorResponse(code="M_UNKNOWN", message="Unknown error", http_status=500)
    assert str(err) == f"{err.code}: {err.message}"
    assert err.to_dict() == {"code": "M_UNKNOWN", "message": "Unknown error"}
    restored = ErrorResponse.from_dict(err.to_dict())
    assert restored.http_status == 0
    assert restored.code == "M_UNKNOWN"


def test_error_response_is_raisable():
    err = ErrorResponse.from_dict({"code": "E", "message": "bad"})
    with pytest.raises(ErrorResponse) as info:
        raise err
    assert info.value is err
    assert info.value.message == "bad"
    assert str(info.value) == "E: bad"


def test_request_without_data_omits_key():
    assert Request(RequestType.CONNECT).to_dict() == {"type": "connect"}


def test_request_round_trip():
    req = Request(RequestType.GET_USER_INFO, data=["wxid_a"])
    assert Request.from_dict(req.to_dict()) == req


def test_request_unknown_type_raises():
    with pytest.raises(ValueError):
        Request.from_dict({"type": "fly"})


def test_response_round_trip_with_error():
    resp = Response(ResponseType.SEND_TEXT, error=ErrorResponse(code="E", message="m"))
    restored = Response.from_dict(resp.to_dict())
    assert restored == resp
    assert not restored.is_success()


def test_response_success_and_bool():
    resp = Response.from_dict({"type": "is_login", "data": True})
    assert resp.is_success()
    assert resp.as_bool() is True
    assert Response(ResponseType.IS_LOGIN, data="yes").as_bool() is None


def test_response_as_user_info():
    resp = Response(ResponseType.GET_SELF, data={"id": "wxid", "name": "Me"})
    assert resp.as_user_info() == UserInfo(id="wxid", name="Me")
    assert Response(ResponseType.GET_SELF, data={"id": "wxid"}).as_user_info() is None
    assert Response(ResponseType.GET_SELF).as_user_info() is None


def test_response_as_group_info_and_lists():
    group = {"id": "g", "name": "G", "members": ["a"]}
    resp = Response(ResponseType.GET_GROUP_LIST, data=[group])
    assert resp.as_group_list() == [GroupInfo(id="g", name="G", members=["a"])]
    assert Response(ResponseType.GET_GROUP_INFO, data=group).as_group_info().members == ["a"]
    assert Response(ResponseType.GET_GROUP_LIST, data=group).as_group_list() is None


def test_response_as_user_list():
    resp = Response(ResponseType.GET_FRIEND_LIST, data=[{"id": "a", "name": "A"}])
    assert resp.as_user_list() == [UserInfo(id="a", name="A")]
    assert Response(ResponseType.GET_FRIEND_LIST, data=[{"id": "a"}]).as_user_list() is None


def test_response_strings():
    assert Response(ResponseType.GET_SELF, data=["a", "b"]).as_string_list() == ["a", "b"]
    assert Response(ResponseType.GET_SELF, data=["a", 1]).as_string_list() is None
    assert Response(ResponseType.GET_GROUP_MEMBER_NICKNAME, data="nick").as_string() == "nick"
    assert Response(ResponseType.GET_SELF, data=3).as_string() is None


def test_message_request_builds_request_envelope():
    req = Request(RequestType.SET_NICKNAME, data=["nick"])
    msg = Message.request(7, "@alice:example.com", req)
    assert msg.msg_type is MessageType.REQUEST
    assert msg.to_dict()["type"] == "request"
    assert msg.as_request() == req


def test_message_without_data():
    msg = Message(id=1, mxid="@a:example.com", msg_type=MessageType.RESPONSE)
    assert "data" not in msg.to_dict()
    assert msg.as_request() is None
    assert msg.as_response() is None


def test_message_as_response():
    msg = Message(
        id=3,
        mxid="@a:example.com",
        msg_type=MessageType.RESPONSE,
        data={"type": "send_text", "data": {"msg_id": "42"}},
    )
    resp = msg.as_response()
    assert resp.response_type is ResponseType.SEND_TEXT
    assert resp.data == {"msg_id": "42"}


def test_message_as_request_invalid_returns_none():
    msg = Message(id=1, mxid="m", msg_type=MessageType.REQUEST, data={"type": "nope"})
    assert msg.as_request() is None


def test_message_json_round_trip():
    msg = Message.request(5, "@b:example.com", Request(RequestType.GET_QRCODE))
    text = msg.to_json()
    assert json.loads(text)["data"] == {"type": "get_q_r_code"}
    assert Message.from_json(text) == msg


@pytest.mark.parametrize(
    "text",
    ["not json", '{"id": 1, "mxid": "m"}', '{"id": "1", "mxid": "m", "type": "request"}'],
)
def test_message_from_json_rejects_bad_input(text):
    with pytest.raises(ValueError):
        Message.from_json(text)


def _event():
    return Event(
        id="evt1",
        timestamp=1700000000,
        from_user=User(id="wxid_b", username="bob"),
        chat=Chat(id="room@chatroom", chat_type=ChatType.GROUP, title="Room"),
        event_type=EventType.TEXT,
        content="hello",
        mentions=["wxid_a"],
        reply=ReplyInfo(id="m0", timestamp=1, sender="wxid_a", content="hi"),
    )


def test_event_round_trip():
    event = _event()
    data = event.to_dict()
    assert data["from"] == {"id": "wxid_b", "username": "bob"}
    assert data["type"] == "text"
    assert Event.from_dict(data) == event


def test_event_omits_empty_mentions_and_defaults_them():
    event = _event()
    event.mentions = []
    data = event.to_dict()
    assert "mentions" not in data
    assert Event.from_dict(data).mentions == []


def test_event_missing_chat_raises():
    data = _event().to_dict()
    del data["chat"]
    with pytest.raises(ValueError):
        Event.from_dict(data)