"""Tests for eas_build/enums.py."""

import pytest

from eas_build.enums import CredentialsSource, Platform, RequestedPlatform, Workflow
from eas_build.exceptions import ConfigurationError


class TestRequestedPlatform:
    """Test parsing and expansion of platform selections."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("android", RequestedPlatform.ANDROID),
            ("ios", RequestedPlatform.IOS),
            ("all", RequestedPlatform.ALL),
            (" iOS ", RequestedPlatform.IOS),
        ],
    )
    def test_parse(self, value, expected):
        assert RequestedPlatform.parse(value) is expected

    @pytest.mark.parametrize("value", [None, "", "web", "windows"])
    def test_parse_rejects_unknown(self, value):
        """Missing and unknown platforms name the valid values."""
        with pytest.raises(ConfigurationError, match=r"\[android\|ios\|all\]"):
            RequestedPlatform.parse(value)

    def test_all_expands_android_first(self):
        assert RequestedPlatform.ALL.platforms == (Platform.ANDROID, Platform.IOS)

    def test_single_platform(self):
        assert RequestedPlatform.IOS.platforms == (Platform.IOS,)


class TestStringValues:
    """Test that enums render as their wire values."""

    def test_str(self):
        assert str(Platform.ANDROID) == "android"
        assert str(Workflow.MANAGED) == "managed"
        assert str(CredentialsSource.AUTO) == "auto"
        assert str(RequestedPlatform.ALL) == "all"

    def test_compare_with_plain_strings(self):
        assert Workflow.GENERIC == "generic"
        assert CredentialsSource("remote") is CredentialsSource.REMOTE
