"""Exceptions raised by the jump engine."""

from __future__ import annotations


class JumpError(Exception):
    """Base class for jumpy errors."""


class InvalidArgument(JumpError, ValueError):
    """Malformed request, e.g. a negative label count."""


class OutOfCapacity(JumpError, ValueError):
    """More labels requested than the alphabet can produce."""


class InactiveSessionError(JumpError, RuntimeError):
    """A keystroke was fed to a session that is not active."""


class ConfigError(JumpError):
    """Configuration file is unreadable or has wrong value types."""
