# ─── errors.py ────────────────────────────────────────────────────────────
"""Exceptions raised by the footprint reporter."""


class FootprintError(Exception):
    """Base class for every error the reporter raises on purpose."""


class MissingArtifactError(FootprintError):
    """A build artifact (.elf / .bin / .stat) is not where we expect it."""

    def __init__(self, path):
        super().__init__(f"{path} not found")
        self.path = path


class ToolchainError(FootprintError):
    """nm / objdump could not be found or returned an error."""


class FeatureConfigError(FootprintError):
    """The feature definition file is unreadable or malformed."""
