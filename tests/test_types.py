import pytest

from wxbridge.types import (
    AppData,
    BlobData,
    Chat,
    ChatType,
    GroupInfo,
    LocationData,
    ReplyInfo,
    User,
    UserInfo,
)


def test_user_round_trip_with_remark():
    user = User(id="wxid_a", username="alice", remark="Al")
    assert User.from_dict(user.to_dict()) == user


def test_user_omits_missing_remark():
    assert "remark" not in User(id="wxid_a", username="alice").to_dict()


def test_user_ignores_unknown_fields_and_null_optional():
    user = User.from_dict({"id": "x", "username": "y", "remark": None, "extra": 1})
    assert user == User(id="x", username="y")


def test_user_missing_field_raises():
    with pytest.raises(ValueError):
        User.from_dict({"id": "x"})


def test_non_object_raises():
    with pytest.raises(ValueError):
        User.from_dict(["x", "y"])


def test_chat_uses_type_key():
    chat = Chat(id="room", chat_type=ChatType.GROUP, title="Friends")
    data = chat.to_dict()
    assert data["type"] == "group"
    assert Chat.from_dict(data) == chat


def test_chat_type_display():
    private = Chat.from_dict({"id": "wxid_a", "type": "private"})
    group = Chat.from_dict({"id": "room", "type": "group"})
    assert str(private.chat_type) == "private"
    assert str(group.chat_type) == "group"
    assert ChatType("group") is ChatType.GROUP


def test_chat_unknown_type_raises():
    with pytest.raises(ValueError):
        Chat.from_dict({"id": "room", "type": "channel"})


def test_reply_info_uses_ts_key():
    reply = ReplyInfo(id="m1", timestamp=1700000000, sender="bob", content="hi")
    data = reply.to_dict()
    assert data["ts"] == 1700000000
    assert "timestamp" not in data
    assert ReplyInfo.from_dict(data) == reply


@pytest.mark.parametrize("bad", ["1", 1.5, True, 2**64])
def test_reply_info_rejects_non_i64_timestamp(bad):
    with pytest.raises(ValueError):
        ReplyInfo.from_dict({"id": "m", "ts": bad, "sender": "s", "content": "c"})


def test_blob_round_trip():
    blob = BlobData(binary=b"\x00\x01\xff", name="a.bin", mime="application/octet-stream")
    data = blob.to_dict()
    assert data["binary"] == [0, 1, 255]
    assert BlobData.from_dict(data) == blob


@pytest.mark.parametrize("bad", [[256], [-1], "abc", [True]])
def test_blob_rejects_bad_binary(bad):
    with pytest.raises(ValueError):
        BlobData.from_dict({"binary": bad})


def test_location_accepts_integer_coordinates():
    loc = LocationData.from_dict({"longitude": 120, "latitude": 30.5})
    assert loc.longitude == 120.0
    assert loc.latitude == 30.5
    assert loc.name is None


def test_location_round_trip():
    loc = LocationData(longitude=1.25, latitude=-3.5, name="Here", address="Street")
    assert LocationData.from_dict(loc.to_dict()) == loc


def test_app_data_renamed_keys():
    app = AppData(title="T", description="D", content="<xml/>")
    data = app.to_dict()
    assert data["desc"] == "D"
    assert data["raw"] == "<xml/>"
    assert "description" not in data


def test_app_data_empty_serialises_to_empty_object():
    assert AppData().to_dict() == {}


def test_app_data_blobs_round_trip():
    app = AppData(url="http://localhost/x", blobs={"thumb": BlobData(binary=b"ab")})
    restored = AppData.from_dict(app.to_dict())
    assert restored == app
    assert restored.blobs["thumb"].binary == b"ab"


def test_user_info_missing_name_raises():
    with pytest.raises(ValueError):
        UserInfo.from_dict({"id": "wxid"})


def test_user_info_round_trip():
    info = UserInfo(id="wxid", name="Alice", avatar="http://localhost/a.png")
    assert UserInfo.from_dict(info.to_dict()) == info


def test_group_info_members_default_empty():
    group = GroupInfo.from_dict({"id": "g@chatroom", "name": "G"})
    assert group.members == []
    assert group.to_dict()["members"] == []


def test_group_info_round_trip():
    group = GroupInfo(id="g", name="G", notice="hello", members=["a", "b"])
    assert GroupInfo.from_dict(group.to_dict()) == group


@pytest.mark.parametrize("bad", [None, "a", [1]])
def test_group_info_rejects_bad_members(bad):
    with pytest.raises(ValueError):
        GroupInfo.from_dict({"id": "g", "name": "G", "members": bad})