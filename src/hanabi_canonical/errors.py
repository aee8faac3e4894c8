"""Exception types raised by the encoder."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Malformed game or encoder configuration, raised at construction."""


class EncodingInvariantError(AssertionError):
    """
    An observation violated an encoding precondition or a layout invariant.

    These are caller or programmer defects (desynchronized observation,
    corrupted knowledge, layout drift). The current call is aborted and no
    partial vector is returned.
    """
