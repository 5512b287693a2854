import re

import pytest

from expokit.naming import derive_display_name, derive_slug, replace_all

SLUG_RE = re.compile(r"^(?:[a-z0-9]+(?:-[a-z0-9]+)*)?$")


@pytest.mark.parametrize(
    ("basename", "slug", "name"),
    [
        ("new-awesome-app", "new-awesome-app", "New Awesome App"),
        ("My_Cool App!!", "my-cool-app", "My Cool App"),
        ("--Taco--App--", "taco-app", "Taco App"),
        ("app2go", "app2go", "App2go"),
        ("3d viewer", "3d-viewer", "3d Viewer"),
        ("___", "", ""),
    ],
)
def test_derives_slug_and_display_name(basename: str, slug: str, name: str):
    assert derive_slug(basename) == slug
    assert derive_display_name(derive_slug(basename)) == name


@pytest.mark.parametrize(
    "basename",
    ["Hello World", "  spaced  out ", "ÜberApp", "a.b.c", "UPPER_case-Mixed99", "!!!", "x"],
)
def test_slug_uses_lowercase_alphanumerics_and_inner_hyphens(basename: str):
    slug = derive_slug(basename)

    assert SLUG_RE.match(slug)
    assert derive_slug(slug) == slug


def test_display_name_capitalizes_every_word():
    name = derive_display_name("my-cool-app")

    assert "-" not in name
    assert all(word[0].isupper() for word in name.split(" "))


def test_replace_all_counts_literal_matches():
    content, count = replace_all("a.b a.b axb", "a.b", "z")

    assert content == "z z axb"
    assert count == 2


def test_replace_all_without_match_returns_input():
    assert replace_all("unchanged", "missing", "x") == ("unchanged", 0)
    assert replace_all("unchanged", "", "x") == ("unchanged", 0)
