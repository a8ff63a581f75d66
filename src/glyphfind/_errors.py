"""Exceptions raised by glyphfind."""


class GlyphfindError(Exception):
    """Base class for all glyphfind errors."""


class ConfigError(GlyphfindError):
    """Configuration file could not be parsed."""


class DatasetError(GlyphfindError):
    """Character dataset could not be read."""


class TerminalError(GlyphfindError):
    """Terminal could not be switched into interactive mode."""


class InputError(GlyphfindError):
    """Terminal input became unreadable while a session was running."""
