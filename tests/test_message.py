"""
Squashed Commit Message Test Suite.
"""

from hosts.models import Author
from reconciler.message import build_message


def test_body_is_kept_without_co_authors():
    assert build_message("Fixes bug", []) == "Fixes bug"


def test_co_author_trailer_is_appended():
    message = build_message("Fixes bug", [Author(name="Jane", email="j@x.com")])

    assert message == "Fixes bug\n\nCo-authored-by: Jane <j@x.com>"


def test_co_authors_keep_their_order():
    co_authors = [
        Author(name="Zoe", email="zoe@example.com"),
        Author(name="Adam", email="adam@example.com"),
    ]

    message = build_message("Add feature\n\nDetails.", co_authors)

    assert message.splitlines() == [
        "Add feature",
        "",
        "Details.",
        "",
        "Co-authored-by: Zoe <zoe@example.com>",
        "Co-authored-by: Adam <adam@example.com>",
    ]


def test_empty_body_with_co_authors():
    message = build_message("", [Author(name="Jane", email="j@x.com")])

    assert message == "\n\nCo-authored-by: Jane <j@x.com>"
