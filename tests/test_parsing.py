import pytest

from herunt.tools.parsing import (
    OutputParseError,
    parse_cli_version,
    parse_created_app_name,
    parse_info_app_name,
    parse_remote_branches,
    parse_version,
    version_at_least,
)


@pytest.mark.parametrize(
    "installed, accepted",
    [
        ("2.39.1", False),
        ("2.39.2", True),
        ("2.40.0", True),
        ("3.0.0", True),
    ],
)
def test_version_against_minimum(installed, accepted):
    assert version_at_least(installed, "2.39.2") is accepted


def test_version_orders_numerically_not_lexically():
    assert parse_version("2.10.0") > parse_version("2.9.9")
    assert parse_version("10.0.0") > parse_version("9.99.99")


def test_prerelease_only_matters_when_cores_equal():
    assert parse_version("2.40.0-beta.1") > parse_version("2.39.2")
    assert parse_version("2.39.2-rc.1") < parse_version("2.39.2")
    assert parse_version("1.0.0-alpha") < parse_version("1.0.0-alpha.1")
    assert parse_version("1.0.0-alpha.2") < parse_version("1.0.0-alpha.10")
    assert parse_version("1.0.0-1") < parse_version("1.0.0-alpha")


def test_build_metadata_is_ignored():
    assert parse_version("2.39.2+build.7") == parse_version("2.39.2")
    assert version_at_least("2.39.2+sha.abc", "2.39.2")


@pytest.mark.parametrize("bad", ["", "2.39", "two.three.four", "2.39.2.1", "02.1.0"])
def test_parse_version_rejects_non_semver(bad):
    with pytest.raises(OutputParseError):
        parse_version(bad)


def test_parse_cli_version_classic_toolbelt():
    v = parse_cli_version("heroku-toolbelt/3.43.2 (x86_64-darwin10.8.0) ruby/1.9.3\n")
    assert str(v) == "3.43.2"


def test_parse_cli_version_modern_cli_with_trailing_notice():
    out = "heroku/8.7.1 linux-x64 node-v20.10.0\n\n Warning: heroku update available\n"
    assert parse_cli_version(out).core == (8, 7, 1)


@pytest.mark.parametrize("out", ["", "   \n", "heroku 8.7.1", "/8.7.1 linux", "heroku/ linux", "heroku/latest linux"])
def test_parse_cli_version_unreadable(out):
    with pytest.raises(OutputParseError):
        parse_cli_version(out)


def test_parse_created_app_name_classic():
    out = "Creating sushi-123... done, stack is cedar\nhttp://sushi-123.herokuapp.com/ | git@heroku.com:sushi-123.git\n"
    assert parse_created_app_name(out) == "sushi-123"


def test_parse_created_app_name_modern_badge():
    out = "Creating app... done, ⬢ peaceful-river-12345\nhttps://peaceful-river-12345.herokuapp.com/\n"
    assert parse_created_app_name(out) == "peaceful-river-12345"


def test_parse_created_app_name_without_marker():
    with pytest.raises(OutputParseError):
        parse_created_app_name("done\n")


def test_parse_info_app_name():
    assert parse_info_app_name("=== sushi-123\nAddons: none\n") == "sushi-123"
    assert parse_info_app_name("=== ⬢ peaceful-river-12345\nStack: heroku-22\n") == "peaceful-river-12345"
    assert parse_info_app_name("Addons: none\n") is None


def test_parse_remote_branches():
    out = "  heroku/HEAD -> heroku/master\n  heroku/master\n  origin/main\n"
    assert parse_remote_branches(out, "heroku") == ["master"]
    assert parse_remote_branches(out, "origin") == ["main"]
    assert parse_remote_branches("", "heroku") == []
