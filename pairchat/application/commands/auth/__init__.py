from pairchat.application.commands.auth.login import LoginCommand, LoginHandler

__all__ = ["LoginCommand", "LoginHandler"]
