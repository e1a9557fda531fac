"""Tests for the look-aside caches."""

from theme_forge.cache import AnalysisCache, ContentCache, ContrastCache


class TestContentCache:
    """Test the bounded content cache."""

    def setup_method(self):
        """Create a small cache."""
        self.cache = ContentCache(max_size=2, name="test cache")

    def test_get_and_set(self):
        """Stored values come back and count as hits."""
        self.cache.set("a", 1)
        assert self.cache.get("a") == 1
        assert self.cache.get("missing") is None
        assert self.cache.stats() == {"size": 1, "hits": 1, "misses": 1}

    def test_get_or_compute(self):
        """Compute runs only on a miss."""
        calls = []

        def compute():
            calls.append(1)
            return "value"

        assert self.cache.get_or_compute("k", compute) == "value"
        assert self.cache.get_or_compute("k", compute) == "value"
        assert len(calls) == 1

    def test_evicts_least_used(self):
        """A full cache evicts the entry with the fewest hits."""
        self.cache.set("a", 1)
        self.cache.set("b", 2)
        self.cache.get("a")
        self.cache.set("c", 3)
        assert "a" in self.cache
        assert "b" not in self.cache
        assert "c" in self.cache
        assert len(self.cache) == 2

    def test_clear(self):
        """Clearing empties the cache and resets counters."""
        self.cache.set("a", 1)
        self.cache.get("a")
        self.cache.clear()
        assert len(self.cache) == 0
        assert self.cache.stats() == {"size": 0, "hits": 0, "misses": 0}


class TestContrastCache:
    """Test contrast cache keys."""

    def test_key_ignores_hex_case(self):
        """Keys are case-insensitive on colors."""
        a = ContrastCache.make_key("#FFFFFF", "#000000", False, False, False, False, None)
        b = ContrastCache.make_key("#ffffff", "#000000", False, False, False, False, "")
        assert a == b

    def test_key_includes_flags(self):
        """Role flags and category distinguish keys."""
        a = ContrastCache.make_key("#ffffff", "#000000", False, False, False, False, "X")
        b = ContrastCache.make_key("#ffffff", "#000000", True, False, False, False, "X")
        c = ContrastCache.make_key("#ffffff", "#000000", False, False, False, False, "Y")
        assert len({a, b, c}) == 3


class TestAnalysisCache:
    """Test the inference cache pair."""

    def test_clear_and_stats(self):
        """Both caches clear together and report stats."""
        cache = AnalysisCache(max_size=10)
        cache.seeds.set("s", [])
        cache.variants.set("v", [])
        assert cache.stats()["seeds"]["size"] == 1
        cache.clear()
        assert len(cache.seeds) == 0
        assert len(cache.variants) == 0
