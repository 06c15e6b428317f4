from pairchat.presentation.realtime.chat_socket import router as chat_socket_router

__all__ = ["chat_socket_router"]
