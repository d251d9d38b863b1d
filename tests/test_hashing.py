"""Unit tests for hashing utilities."""

from animap.utils.hashing import compute_cache_key


class TestComputeCacheKey:
    """Tests for compute_cache_key function."""

    def test_compute_cache_key_basic(self):
        """Test the key is a 64-character SHA256 hex digest."""
        key = compute_cache_key("search", "Solo Leveling")

        assert len(key) == 64
        assert all(c in "0123456789abcdef" for c in key)

    def test_compute_cache_key_deterministic(self):
        """Test that key computation is deterministic."""
        assert compute_cache_key("search", "Frieren") == compute_cache_key("search", "Frieren")

    def test_compute_cache_key_namespaces_are_distinct(self):
        """Test that the same value in different namespaces gives different keys."""
        assert compute_cache_key("search", "176496") != compute_cache_key("media", "176496")

    def test_compute_cache_key_normalizes_namespace(self):
        """Test that namespace is lower-cased and stripped."""
        assert compute_cache_key("  SEARCH ", "Frieren") == compute_cache_key("search", "Frieren")

    def test_compute_cache_key_collapses_value_whitespace(self):
        """Test that whitespace runs in the value are collapsed."""
        assert compute_cache_key("search", "  Solo   Leveling ") == compute_cache_key(
            "search", "Solo Leveling"
        )

    def test_compute_cache_key_value_case_sensitive(self):
        """Test that the value is not case-folded."""
        assert compute_cache_key("search", "Frieren") != compute_cache_key("search", "frieren")

    def test_compute_cache_key_accepts_integers(self):
        """Test that non-string values are stringified."""
        assert compute_cache_key("media", 176496) == compute_cache_key("media", "176496")
