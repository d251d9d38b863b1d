"""Test helper utilities for animap tests."""

from .entries import make_entry
from .fixture_catalog import FixtureCatalog, load_fixture_entries

__all__ = ["FixtureCatalog", "load_fixture_entries", "make_entry"]
