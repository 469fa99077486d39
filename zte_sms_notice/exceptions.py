"""Exceptions raised while talking to the router and the push relay."""

from typing import Dict, Optional


class RouterError(Exception):
    """Base exception for router web API failures"""
    pass


class TransportError(RouterError):
    """Network failure, timeout or non-2xx HTTP status"""
    pass


class ProtocolError(RouterError):
    """Response body does not have the expected shape"""
    pass


class AuthenticationError(RouterError):
    """Router rejected the login"""

    def __init__(self, message: str, code: Optional[int] = None):
        self.code = code
        super().__init__(message)


class SessionExpiredError(RouterError):
    """Router no longer reports the session as logged in"""
    pass


class NotAuthorizedError(RouterError):
    """Mutating call attempted before an AD token was derived"""
    pass


class CommandRejectedError(RouterError):
    """Router answered a set command with something other than success"""

    def __init__(self, message: str, result: Optional[str] = None):
        self.result = result
        super().__init__(message)


class NotificationError(Exception):
    """Push delivery failed for one or more recipient keys"""

    def __init__(self, message: str, failures: Optional[Dict[str, str]] = None):
        self.failures = failures or {}
        super().__init__(message)
