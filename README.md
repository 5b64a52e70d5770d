# wxbridge

The WeChat side of a Matrix-WeChat puppeting bridge, as a library. It runs
a WebSocket endpoint that an agent on the WeChat side connects to. It also
gives the bridge an async client that sends requests to that agent and
receives the events the agent pushes.

## Installation

```
pip install wxbridge
```

## Modules

- `wxbridge.types` holds the records that go over the wire: `User`, `Chat`,
  `ReplyInfo`, `BlobData`, `LocationData`, `AppData`, `UserInfo` and
  `GroupInfo`, plus the `ChatType` enum (`private`, `group`). Each record has
  `to_dict()` and a `from_dict()` class method. `from_dict()` raises
  `ValueError` on a missing or mistyped field. Optional fields left as `None`
  are not written out.
- `wxbridge.protocol` holds the message envelope. `Message` wraps a `Request`
  or a `Response` in its `data`. It has `to_json()` / `from_json()`,
  `Message.request(msg_id, mxid, request)`, `as_request()` and
  `as_response()`. `Response` offers `is_success()` and typed accessors:
  `as_bool()`, `as_string()`, `as_string_list()`, `as_user_info()`,
  `as_group_info()`, `as_user_list()` and `as_group_list()`. Each returns
  `None` when the data does not fit. Inbound `Event`s arrive as requests of
  type `RequestType.EVENT`. `ErrorResponse` is the error an agent reports,
  and it is also an exception.
- `wxbridge.service.WechatService(addr, secret, *, request_timeout=30.0)`
  accepts agent connections on `GET /` through aiohttp. An agent must send
  `Authorization: Basic <secret>`; any other request gets HTTP 403.
  `request(mxid, request)` sends the request to an agent that is connected
  and waits for the response with the same id. `subscribe_events()` returns
  an `asyncio.Queue` that gets every valid event. The queue holds 1024
  events; when it is full, the oldest is dropped. `unsubscribe_events(queue)`
  stops delivery. `make_app()` returns the `aiohttp.web.Application`, and
  `start()` serves it on `addr` (`host:port`) until it is cancelled.
  `attach(addr, send)`, `detach(addr)` and `handle_json_message(text)` let
  you plug in a transport of your own.
- `wxbridge.client.WechatClient(mxid, service)` is a client for one user. Its
  coroutines cover the session (`connect`, `disconnect`, `is_logged_in`,
  `get_self`, `get_qrcode`), contacts (`get_user_info`, `get_friend_list`,
  `accept_friend`, `refresh_contacts`) and groups (`get_group_list`,
  `get_group_info`, `get_group_members`, `get_group_member_nickname`,
  `create_group`, `set_group_name`, `invite_group_member`,
  `remove_group_member`, `quit_group`). They also cover messages:
  `send_text_message`, `send_image_message`, `send_video_message`,
  `send_file_message`, `send_emoji_message`, `revoke_message` and
  `sync_messages`. Media comes down with `download_image`, `download_video`,
  `download_audio` and `download_file`, and the profile is changed with
  `set_nickname` and `set_avatar`. Binary payloads are passed as `bytes`
  and sent base64-encoded. `GroupMember` is the record that
  `get_group_members` returns.

## Errors

- `wxbridge.service.WechatError` is raised in these cases:
  - no agent is connected;
  - the request cannot be sent;
  - the request times out;
  - a response lacks the field expected (for example `no msg_id in response`)
    or cannot be parsed (`invalid response: ...`);
  - base64 data is bad.
- `wxbridge.protocol.ErrorResponse` is raised when the agent answers with an
  error. Its text is `"<code>: <message>"`.

`connect()` and `disconnect()` do not check the agent's answer for an error.
`is_logged_in()` returns `False` when the answer is not a boolean.

## Example

```python
import asyncio

from wxbridge.client import WechatClient
from wxbridge.service import WechatService


async def run():
    service = WechatService("0.0.0.0:17778", "secret")
    server = asyncio.create_task(service.start())

    events = service.subscribe_events()
    client = WechatClient("@alice:example.com", service)

    # Once an agent has connected:
    # await client.connect()
    # if await client.is_logged_in():
    #     friends = await client.get_friend_list()
    #     await client.send_text_message(friends[0].id, "hello", None)

    event = await events.get()
    print(event.event_type, event.content)
    server.cancel()


asyncio.run(run())
```

## Wire format

Each WebSocket text frame is one JSON message:

```json
{"id": 1, "mxid": "@alice:example.com", "type": "request",
 "data": {"type": "send_text", "data": {"chat_id": "wxid_example", "text": "hi"}}}
```

A response carries the same `id`, with `"type": "response"`. Its `data`
holds `type` and may also hold `error` (`{"code": ..., "message": ...}`) and
`data`. Operation names are written in snake case. `RequestType.GET_QRCODE`
is the one case to watch: it goes over the wire as `get_q_r_code`, but its
`str()` is `get_qrcode`. Frames that cannot be parsed are ignored.

## What this package does not do

The package has no command-line program, and it does not talk to a Matrix
homeserver. It also does not store users, portals or message mappings.
Those parts are up to the application that uses `WechatService` and
`WechatClient`.

## Running the tests

```
pip install -e .[test]
pytest
```