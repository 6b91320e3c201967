import pytest

from app.services.rollover_service import RolloverService
from tests.helpers import API, auth_headers

TASKS_URL = f"{API}/tasks"
ROLLOVER_URL = f"{API}/tasks/rollover"
YESTERDAY = "2025-03-09"


def list_tasks(client, token, date=None):
    params = {"date": date} if date else None
    response = client.get(TASKS_URL, params=params, headers=auth_headers(token))
    assert response.status_code == 200
    return response.json()["tasks"]


@pytest.fixture
def yesterdays_tasks(client, clock, register_user):
    """Alice ends yesterday with two open tasks and one finished task."""
    token, _ = register_user("alice")
    clock.advance(days=-1)
    created = {}
    for title, description in [
        ("walk dog", "around the park"),
        ("pay rent", None),
        ("buy milk", None),
    ]:
        payload = {"title": title, "description": description}
        response = client.post(TASKS_URL, json=payload, headers=auth_headers(token))
        created[title] = response.json()
    client.put(
        f"{TASKS_URL}/{created['buy milk']['id']}",
        json={"is_completed": True},
        headers=auth_headers(token),
    )
    clock.advance(days=1)
    return token


def test_rollover_copies_incomplete_tasks(client, yesterdays_tasks):
    token = yesterdays_tasks

    response = client.post(ROLLOVER_URL, headers=auth_headers(token))

    assert response.status_code == 200
    assert response.json() == {"moved": 2}
    today = list_tasks(client, token)
    assert sorted(t["title"] for t in today) == ["pay rent", "walk dog"]
    for task in today:
        assert task["is_completed"] is False
        assert task["completed_at"] is None
    walk_dog = next(t for t in today if t["title"] == "walk dog")
    assert walk_dog["description"] == "around the park"


def test_rollover_leaves_originals_untouched(client, yesterdays_tasks):
    token = yesterdays_tasks
    before = list_tasks(client, token, YESTERDAY)

    client.post(ROLLOVER_URL, headers=auth_headers(token))

    after = list_tasks(client, token, YESTERDAY)
    assert after == before
    today_ids = {t["id"] for t in list_tasks(client, token)}
    assert today_ids.isdisjoint({t["id"] for t in before})


def test_rollover_with_nothing_to_move(client, register_user):
    token, _ = register_user("alice")

    response = client.post(ROLLOVER_URL, headers=auth_headers(token))

    assert response.json() == {"moved": 0}
    assert list_tasks(client, token) == []


def test_repeated_rollover_copies_again(client, yesterdays_tasks):
    token = yesterdays_tasks

    first = client.post(ROLLOVER_URL, headers=auth_headers(token)).json()
    second = client.post(ROLLOVER_URL, headers=auth_headers(token)).json()

    assert first == second == {"moved": 2}
    assert len(list_tasks(client, token)) == 4


def test_rollover_keeps_each_copy_with_its_owner(client, clock, register_user):
    alice, _ = register_user("alice")
    bob, _ = register_user("bob")
    clock.advance(days=-1)
    client.post(TASKS_URL, json={"title": "alice open"}, headers=auth_headers(alice))
    client.post(TASKS_URL, json={"title": "bob open"}, headers=auth_headers(bob))
    clock.advance(days=1)

    response = client.post(ROLLOVER_URL, headers=auth_headers(alice))

    assert response.json() == {"moved": 2}
    assert [t["title"] for t in list_tasks(client, alice)] == ["alice open"]
    assert [t["title"] for t in list_tasks(client, bob)] == ["bob open"]


def test_failed_rollover_persists_nothing(client, yesterdays_tasks, monkeypatch):
    token = yesterdays_tasks
    original_copy_of = RolloverService._copy_of
    calls = []

    def broken_copy_of(task, target_page_id):
        copy = original_copy_of(task, target_page_id)
        calls.append(copy)
        if len(calls) == 2:
            copy["title"] = None  # violates NOT NULL at commit
        return copy

    monkeypatch.setattr(RolloverService, "_copy_of", staticmethod(broken_copy_of))

    response = client.post(ROLLOVER_URL, headers=auth_headers(token))

    assert response.status_code == 500
    assert response.json() == {"detail": "Rollover failed"}
    assert list_tasks(client, token) == []
    assert len(list_tasks(client, token, YESTERDAY)) == 3
