#!/usr/bin/env python3
"""
KUBEFILL ERRORS
---------------
Exception types raised by the layers around the substitution core.
The core itself never raises.

Author: KubeFill Team
Date: 2026-01-16
"""


class KubefillError(RuntimeError):
    """Base class for every failure the engine reports per file."""


class ConfigError(KubefillError):
    """The operator configuration could not be read or is malformed."""


class ManifestError(KubefillError):
    """A manifest document could not be turned into a typed object."""
