import pytest

from repokit.release import BumpType, Version


@pytest.mark.parametrize(
    "current, kind, expected",
    [
        ("1.2.3", BumpType.PATCH, "1.2.4"),
        ("1.2.3", BumpType.MINOR, "1.3.0"),
        ("1.2.3", BumpType.MAJOR, "2.0.0"),
        ("0.0.0", BumpType.PATCH, "0.0.1"),
        ("0.9.9", BumpType.MINOR, "0.10.0"),
        ("9.9.9", BumpType.MAJOR, "10.0.0"),
    ],
)
def test_bump(current, kind, expected):
    assert str(Version.parse(current).bump(kind)) == expected


def test_bump_accepts_strings():
    assert Version(1, 2, 3).bump("minor") == Version(1, 3, 0)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("v1.2.3", Version(1, 2, 3)),
        ("1.2.3", Version(1, 2, 3)),
        ("1.2", Version(1, 2, 0)),
        ("v7", Version(7, 0, 0)),
        ("", Version(0, 0, 0)),
    ],
)
def test_parse(text, expected):
    assert Version.parse(text) == expected


def test_parse_custom_prefix():
    assert Version.parse("release-2.0.1", prefix="release-") == Version(2, 0, 1)


@pytest.mark.parametrize("text", ["1.2.x", "v1.2.3-beta", "1.2.3.4", "latest"])
def test_parse_invalid(text):
    with pytest.raises(ValueError):
        Version.parse(text)


def test_tag():
    assert Version(1, 3, 0).tag() == "v1.3.0"
    assert Version(1, 3, 0).tag("") == "1.3.0"


def test_ordering():
    assert Version(1, 10, 0) > Version(1, 9, 9)


def test_bump_type_parse():
    assert BumpType.parse("MAJOR") is BumpType.MAJOR
    with pytest.raises(ValueError, match="Use: patch, minor, or major"):
        BumpType.parse("huge")
