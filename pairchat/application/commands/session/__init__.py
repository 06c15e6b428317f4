from pairchat.application.commands.session.join import JoinCommand, JoinHandler
from pairchat.application.commands.session.leave import LeaveCommand, LeaveHandler

__all__ = [
    "JoinCommand",
    "JoinHandler",
    "LeaveCommand",
    "LeaveHandler",
]
