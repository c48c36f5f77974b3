from __future__ import annotations

import pytest

from imagemagick_installer.version import Version, strip_v


def test_parse_imagemagick_style_versions():
    v = Version.parse("7.1.0-62")
    assert v.segments == (7, 1, 0, 62)
    assert str(v) == "7.1.0-62"


def test_leading_v_is_ignored():
    assert Version.parse("v3.8.1") == Version.parse("3.8.1")


def test_missing_segments_count_as_zero():
    assert Version.parse("4.0") == Version.parse("4.0.0")
    assert hash(Version.parse("4.0")) == hash(Version.parse("4.0.0"))
    assert Version.parse("4.0.1") > Version.parse("4.0")


def test_segments_compare_numerically():
    assert Version.parse("4.10.0") > Version.parse("4.9.9")
    assert Version.parse("7.1.0-10") > Version.parse("7.1.0-9")
    assert sorted(
        [Version.parse("1.10"), Version.parse("1.2.3.4"), Version.parse("1.2")],
    ) == [Version.parse("1.2"), Version.parse("1.2.3.4"), Version.parse("1.10")]


@pytest.mark.parametrize("text", ["", "v", "latest", "1..2"])
def test_rejects_non_versions(text):
    with pytest.raises(ValueError):
        Version.parse(text)


def test_strip_v():
    assert strip_v("v1.17.6") == "1.17.6"
    assert strip_v("7.1.1-29") == "7.1.1-29"
    assert strip_v("") == ""
