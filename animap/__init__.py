"""Anime release-title to AniList catalog mapper."""

__version__ = "1.0.0"
