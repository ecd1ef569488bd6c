"""Password vault tests."""

from __future__ import annotations

import pytest

from finboard.services import passwords


@pytest.fixture
def entry_factory(session_factory, user_id):
    def _create(website_name: str = "Example", category: str | None = None, **overrides):
        data = {
            "website_name": website_name,
            "username": "me@example.com",
            "password": "hunter22",
            "category": category,
        }
        data.update(overrides)
        return passwords.create_entry(data, user_id=user_id, session_factory=session_factory)

    return _create


def test_entries_listed_by_site_name(entry_factory, session_factory, user_id):
    entry_factory("Zebra Bank")
    entry_factory("Acme Mail")

    names = [e.website_name for e in passwords.list_entries(user_id=user_id, session_factory=session_factory)]

    assert names == ["Acme Mail", "Zebra Bank"]


def test_search_matches_name_username_and_url(entry_factory, session_factory, user_id):
    entry_factory("Bank", website_url="https://bank.test")
    entry_factory("Forum", username="gamer42")
    entry_factory("Mail")

    def search(term):
        return [
            e.website_name
            for e in passwords.list_entries(user_id=user_id, session_factory=session_factory, search=term)
        ]

    assert search("bank.TEST") == ["Bank"]
    assert search("GAMER") == ["Forum"]
    assert search("example.com") == ["Bank", "Mail"]


def test_group_by_category_puts_uncategorized_last(entry_factory, session_factory, user_id):
    entry_factory("One")
    entry_factory("Two", category="social")
    entry_factory("Three", category="Banking")

    groups = passwords.group_by_category(
        passwords.list_entries(user_id=user_id, session_factory=session_factory)
    )

    assert list(groups) == ["Banking", "social", passwords.UNCATEGORIZED]
    assert [e.website_name for e in groups[passwords.UNCATEGORIZED]] == ["One"]


def test_update_and_delete_are_owner_scoped(entry_factory, session_factory, user_id, other_user_id):
    entry = entry_factory()

    assert passwords.update_entry(
        entry.id, {"password": "stolen"}, user_id=other_user_id, session_factory=session_factory
    ) is None
    updated = passwords.update_entry(
        entry.id, {"password": "rotated-1"}, user_id=user_id, session_factory=session_factory
    )
    assert updated.password == "rotated-1"

    assert passwords.delete_entries([entry.id], user_id=other_user_id, session_factory=session_factory) == 0
    assert passwords.delete_entries([entry.id], user_id=user_id, session_factory=session_factory) == 1
    assert passwords.get_entry(entry.id, user_id=user_id, session_factory=session_factory) is None
