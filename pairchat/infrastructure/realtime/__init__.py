from pairchat.infrastructure.realtime.websocket_event_bus import WebSocketEventBus

__all__ = ["WebSocketEventBus"]
