"""Tests for viewer settings and the override merge rule."""

from __future__ import annotations

import logging

import pytest

from meshsync.exceptions import SettingsError
from meshsync.settings import AddressFamily, ViewerSettings, merge_settings


class TestDefaults:
    def test_default_values(self):
        s = ViewerSettings()
        assert s.address_family is AddressFamily.IPV4
        assert s.node_prefix == {"ipv4": "", "ipv6": ""}
        assert s.edge_suffix == ""
        assert s.poll_interval_ms == 5000
        assert s.poll_enabled is True
        assert s.root_highlight["border"] == "#2BE97C"
        assert s.url is None

    def test_defaults_are_not_shared(self):
        a = ViewerSettings()
        b = ViewerSettings()
        a.node_prefix["ipv4"] = "10."
        assert b.node_prefix["ipv4"] == ""

    def test_prefix_for_active_family(self):
        s = ViewerSettings(node_prefix={"ipv4": "192.168.0.", "ipv6": "fd00::"})
        assert s.prefix_for() == "192.168.0."
        assert s.prefix_for(AddressFamily.IPV6) == "fd00::"


class TestValidation:
    def test_string_family_is_coerced(self):
        assert ViewerSettings(address_family="ipv6").address_family is AddressFamily.IPV6

    def test_unknown_family_rejected(self):
        with pytest.raises(SettingsError) as exc_info:
            ViewerSettings(address_family="ipx")
        assert exc_info.value.key == "address_family"

    @pytest.mark.parametrize("interval", [0, -100])
    def test_non_positive_interval_rejected(self, interval):
        with pytest.raises(SettingsError, match="poll_interval_ms"):
            ViewerSettings(poll_interval_ms=interval)

    @pytest.mark.parametrize("interval", [1.5, "2000", True])
    def test_non_integer_interval_rejected(self, interval):
        with pytest.raises(SettingsError, match="must be an integer"):
            ViewerSettings(poll_interval_ms=interval)

    def test_with_changes_validates(self):
        with pytest.raises(SettingsError):
            ViewerSettings().with_changes(poll_interval_ms=0)

    def test_with_changes_returns_copy(self):
        s = ViewerSettings()
        changed = s.with_changes(edge_suffix="bit/s")
        assert changed.edge_suffix == "bit/s"
        assert s.edge_suffix == ""


class TestFromMapping:
    def test_known_keys_are_copied(self):
        s = ViewerSettings.from_mapping({"edge_suffix": "bit/s", "poll_interval_ms": 2000, "address_family": "ipv6"})
        assert s.edge_suffix == "bit/s"
        assert s.poll_interval_ms == 2000
        assert s.address_family is AddressFamily.IPV6

    def test_unknown_keys_are_ignored(self):
        s = ViewerSettings.from_mapping({"dynamic_layout": False})
        assert s == ViewerSettings()

    def test_type_mismatch_is_ignored(self, caplog):
        with caplog.at_level(logging.WARNING, logger="meshsync.settings"):
            s = ViewerSettings.from_mapping({"poll_interval_ms": "fast", "poll_enabled": "yes"})
        assert s.poll_interval_ms == 5000
        assert s.poll_enabled is True
        assert "poll_interval_ms" in caplog.text

    def test_bool_is_not_an_int(self):
        s = ViewerSettings.from_mapping({"poll_interval_ms": True})
        assert s.poll_interval_ms == 5000

    def test_none_default_accepts_any_type(self):
        s = ViewerSettings.from_mapping({"url": "http://127.0.0.1:8080/netjson"})
        assert s.url == "http://127.0.0.1:8080/netjson"

    def test_nested_mappings_merge(self):
        s = ViewerSettings.from_mapping({"node_prefix": {"ipv4": "192.168.0."}})
        assert s.node_prefix == {"ipv4": "192.168.0.", "ipv6": ""}

    def test_deeply_nested_mappings_merge(self):
        s = ViewerSettings.from_mapping({"root_highlight": {"highlight": {"border": "#000000"}}})
        assert s.root_highlight["highlight"] == {"border": "#000000", "background": "#D2FFE5"}
        assert s.root_highlight["border"] == "#2BE97C"

    def test_none_overrides_is_defaults(self):
        assert ViewerSettings.from_mapping(None) == ViewerSettings()

    def test_round_trip_through_mapping(self):
        s = ViewerSettings(edge_suffix="bit/s", address_family=AddressFamily.IPV6)
        assert ViewerSettings.from_mapping(s.to_mapping()) == s


class TestMergeSettings:
    def test_merge_in_place(self):
        target = {"a": 1, "b": {"c": "x"}}
        merge_settings(target, {"a": 2, "b": {"c": "y"}, "z": 0})
        assert target == {"a": 2, "b": {"c": "y"}}

    def test_scalar_does_not_replace_mapping(self):
        target = {"b": {"c": "x"}}
        merge_settings(target, {"b": "flat"})
        assert target == {"b": {"c": "x"}}
