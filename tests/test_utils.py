"""Tests for meshsync._utils."""

from meshsync._utils import has_prefix, has_suffix, strip_prefix


class TestHasPrefix:
    def test_match(self):
        assert has_prefix("192.168.0.7", "192.168.0.")

    def test_no_match(self):
        assert not has_prefix("10.0.0.7", "192.168.0.")

    def test_pattern_longer_than_value(self):
        assert not has_prefix("10", "10.0.0.")

    def test_empty_prefix_always_matches(self):
        assert has_prefix("anything", "")


class TestHasSuffix:
    def test_match(self):
        assert has_suffix("10Mbit/s", "bit/s")

    def test_no_match(self):
        assert not has_suffix("10Mbit", "bit/s")

    def test_pattern_longer_than_value(self):
        assert not has_suffix("s", "bit/s")

    def test_equal_strings(self):
        assert has_suffix("bit/s", "bit/s")


class TestStripPrefix:
    def test_strips_matching_prefix(self):
        assert strip_prefix("192.168.0.7", "192.168.0.") == "7"

    def test_keeps_value_without_prefix(self):
        assert strip_prefix("fd00::1", "192.168.0.") == "fd00::1"

    def test_empty_prefix_is_noop(self):
        assert strip_prefix("192.168.0.7", "") == "192.168.0.7"

    def test_whole_value_as_prefix(self):
        assert strip_prefix("abc", "abc") == ""
