"""Exception taxonomy shared by the board engine, codec and match layers."""

from __future__ import annotations


class KonaneError(Exception):
    """Base class for every error raised by this package."""


class FormatError(KonaneError):
    """A packet is malformed, undersized or carries an unexpected opcode."""


class RuleViolation(KonaneError):
    """A move breaks the Konane jumping rules for the current board."""


class ProtocolTimeout(KonaneError, TimeoutError):
    """A peer did not answer within the protocol-level deadline."""


class TransportFailure(KonaneError):
    """The connection to a peer could not be established or was lost."""


class PlayerFault(KonaneError):
    """An external player raised or returned nothing."""


class PlayerLoadError(KonaneError):
    """A player identifier could not be resolved to a player implementation."""
