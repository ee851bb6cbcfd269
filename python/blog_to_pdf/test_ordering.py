from datetime import date

import pytest

from blog_to_pdf.models import Dated, Post, Undated
from blog_to_pdf.ordering import date_sort_key, parse_post_date, sort_posts


def post(title, when):
    return Post(title=title, content="", date=when)


def test_parse_post_date():
    assert parse_post_date("Monday 01 January 2024") == Dated(date(2024, 1, 1))
    assert parse_post_date("Wednesday 01 January 2025") == Dated(date(2025, 1, 1))
    assert parse_post_date("  Friday 9 February 2024 ") == Dated(date(2024, 2, 9))
    assert parse_post_date("N/A") == Undated("N/A")
    assert parse_post_date("") == Undated("")
    assert parse_post_date("2024-01-01") == Undated("2024-01-01")
    assert parse_post_date(None) == Undated("None")


def test_parse_post_date_rejects_wrong_weekday():
    assert parse_post_date("Tuesday 01 January 2024") == Undated("Tuesday 01 January 2024")


def test_parse_post_date_tries_formats_in_order():
    formats = ("%A %d %B %Y", "%Y-%m-%d")
    assert parse_post_date("2024-03-05", formats) == Dated(date(2024, 3, 5))
    assert parse_post_date("Monday 01 January 2024", formats) == Dated(date(2024, 1, 1))


def test_date_sort_key():
    dated = Dated(date(2024, 1, 1))
    undated = Undated("N/A")
    assert date_sort_key(undated) < date_sort_key(dated)
    assert date_sort_key(undated, "last") > date_sort_key(dated, "last")
    with pytest.raises(ValueError):
        date_sort_key(undated, "middle")


def test_sort_posts_scenario_undated_first():
    posts = [
        post("new", "Wednesday 01 January 2025"),
        post("unknown", "N/A"),
        post("old", "Monday 01 January 2024"),
    ]
    assert [p.title for p in sort_posts(posts)] == ["unknown", "old", "new"]


def test_sort_posts_scenario_undated_last():
    posts = [
        post("new", "Wednesday 01 January 2025"),
        post("unknown", "N/A"),
        post("old", "Monday 01 January 2024"),
    ]
    assert [p.title for p in sort_posts(posts, undated="last")] == ["old", "new", "unknown"]


def test_sort_posts_is_stable():
    posts = [
        post("b1", "Monday 01 January 2024"),
        post("u1", "N/A"),
        post("a", "Sunday 31 December 2023"),
        post("b2", "Monday 01 January 2024"),
        post("u2", "garbage"),
        post("b3", "Monday 01 January 2024"),
    ]
    assert [p.title for p in sort_posts(posts)] == ["u1", "u2", "a", "b1", "b2", "b3"]


def test_sort_posts_returns_new_list():
    posts = [post("b", "Wednesday 01 January 2025"), post("a", "Monday 01 January 2024")]
    ordered = sort_posts(posts)
    assert [p.title for p in posts] == ["b", "a"]
    assert [p.title for p in ordered] == ["a", "b"]
