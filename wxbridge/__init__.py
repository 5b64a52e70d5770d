"""WeChat agent WebSocket service, wire protocol types and per-user async client."""

__version__ = "0.1.0"
__all__ = ["types", "protocol", "service", "client"]