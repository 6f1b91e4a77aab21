from datetime import date

import pytest

from domain.models import EventCategory
from services import coaching, playlists, schedule
from services.repository import Repository


@pytest.fixture
def repo(tmp_path):
    return Repository(tmp_path)


# -- schedules -----------------------------------------------------------

def test_event_requires_title(repo):
    with pytest.raises(ValueError, match="title"):
        schedule.add_event(repo, "ana", {"title": "  ", "event_date": "2024-05-06"})
    with pytest.raises(ValueError, match="title"):
        schedule.add_event(repo, "", {"title": "Call", "event_date": "2024-05-06"})


def test_event_end_not_before_start(repo):
    with pytest.raises(ValueError, match="End time"):
        schedule.add_event(repo, "ana", {"title": "Call", "start_time": "10:00", "end_time": "09:30"})


def test_events_listed_per_staff_by_date_and_time(repo):
    schedule.add_event(repo, "ana", {"title": "Late", "event_date": "2024-05-06", "start_time": "15:00"})
    schedule.add_event(repo, "ana", {"title": "Early", "event_date": "2024-05-06", "start_time": "09:00"})
    schedule.add_event(repo, "ana", {"title": "Before", "event_date": "2024-05-01"})
    schedule.add_event(repo, "ben", {"title": "Other", "event_date": "2024-05-06"})
    events = schedule.list_events(repo, "ana")
    assert [e.title for e in events] == ["Before", "Early", "Late"]
    assert events[0].category == EventCategory.WORK
    assert events[0].description is None and events[0].start_time is None


def test_ongoing_events_repeat(repo):
    monday = date(2024, 5, 6)
    one_off = schedule.add_event(repo, "ana", {"title": "Match", "event_date": "2024-05-07"})
    weekly = schedule.add_event(repo, "ana", {"title": "Training", "event_date": "2024-05-01", "is_ongoing": True, "day_of_week": 1})
    daily = schedule.add_event(repo, "ana", {"title": "Stand-up", "event_date": "2024-05-01", "is_ongoing": True})
    events = schedule.list_events(repo, "ana")
    assert {e.id for e in schedule.events_for_day(events, monday)} == {weekly.id, daily.id}
    assert {e.id for e in schedule.events_for_day(events, date(2024, 5, 7))} == {one_off.id, daily.id}
    # Weekday is only kept for repeating events
    plain = schedule.add_event(repo, "ana", {"title": "Once", "event_date": "2024-05-08", "day_of_week": 3})
    assert plain.day_of_week is None


def test_weekday_numbering_starts_on_sunday():
    assert schedule.js_weekday(date(2024, 5, 5)) == 0
    assert schedule.js_weekday(date(2024, 5, 11)) == 6


def test_week_days():
    days = schedule.week_days(date(2024, 5, 8), offset=1)
    assert days[0] == date(2024, 5, 13) and days[-1] == date(2024, 5, 19)


def test_delete_event(repo):
    ev = schedule.add_event(repo, "ana", {"title": "Call"})
    schedule.delete_event(repo, ev.id)
    assert schedule.list_events(repo, "ana") == []


# -- coaching library ----------------------------------------------------

def test_coaching_item_fields_depend_on_kind(repo):
    drill = coaching.save_item(repo, "coaching_drills", {
        "title": "Rondo 4v2", "players_required": "6", "tags": "midfielder, passing", "category": "",
    })
    assert drill.players_required == 6
    assert drill.tags == ["midfielder", "passing"]
    assert drill.category is None
    with pytest.raises(ValueError, match="sets"):
        coaching.save_item(repo, "coaching_drills", {"title": "Squats", "sets": 3})
    with pytest.raises(ValueError, match="Unknown"):
        coaching.save_item(repo, "recipes", {"title": "Pasta"})


def test_coaching_item_requires_title_and_update_keeps_other_columns(repo):
    with pytest.raises(ValueError, match="title"):
        coaching.save_item(repo, "coaching_sessions", {"title": ""})
    s = coaching.save_item(repo, "coaching_sessions", {"title": "Pressing", "duration": "60 min", "category": "tactical"})
    updated = coaching.save_item(repo, "coaching_sessions", {"description": "High press triggers"}, s.id)
    assert updated.duration == "60 min" and updated.category == "tactical"
    assert updated.description == "High press triggers"


def test_coaching_filters_search_and_paging(repo):
    for i in range(25):
        coaching.save_item(repo, "coaching_exercises", {
            "title": f"Exercise {i}", "category": "strength" if i % 2 else "mobility",
            "tags": ["legs"] if i < 5 else ["core"],
        })
    page1, total = coaching.list_items(repo, "coaching_exercises")
    assert total == 25 and len(page1) == coaching.PAGE_SIZE
    page2, _ = coaching.list_items(repo, "coaching_exercises", page=2)
    assert len(page2) == 5
    assert not {i.id for i in page1} & {i.id for i in page2}
    assert coaching.page_count(total) == 2

    _, n_strength = coaching.list_items(repo, "coaching_exercises", category="strength")
    assert n_strength == 12
    legs, n_legs = coaching.list_items(repo, "coaching_exercises", tag="legs")
    assert n_legs == 5 and all("legs" in i.tags for i in legs)
    found, _ = coaching.list_items(repo, "coaching_exercises", search="exercise 2")
    assert {i.title for i in found} == {"Exercise 2", "Exercise 20", "Exercise 21", "Exercise 22", "Exercise 23", "Exercise 24"}

    categories, tags = coaching.filter_options(repo, "coaching_exercises")
    assert categories == ["mobility", "strength"]
    assert tags == ["core", "legs"]


def test_coaching_kinds_are_separate_tables(repo):
    item = coaching.save_item(repo, "coaching_analysis", {"title": "Opponent review", "analysis_type": "opposition"})
    assert coaching.list_items(repo, "coaching_sessions") == ([], 0)
    coaching.delete_item(repo, "coaching_analysis", item.id)
    assert coaching.list_items(repo, "coaching_analysis") == ([], 0)


# -- playlists -----------------------------------------------------------

def test_playlist_requires_name(repo):
    with pytest.raises(ValueError, match="name"):
        playlists.create_playlist(repo, "p1", "  ")


def test_playlist_clip_order_stays_contiguous(repo):
    pl = playlists.create_playlist(repo, "p1", " Goals ")
    assert pl.name == "Goals" and pl.clips == []
    pl = playlists.add_clips(repo, pl.id, [{"name": "a", "video_url": "https://v/a.mp4"}, {"name": "b"}])
    pl = playlists.add_clips(repo, pl.id, [{"name": "b"}, {"name": "c"}])
    assert [(c.name, c.order) for c in pl.clips] == [("a", 1), ("b", 2), ("c", 3)]

    pl = playlists.move_clip(repo, pl.id, 2, -1)
    assert [c.name for c in pl.clips] == ["a", "c", "b"]
    # Moving past either end changes nothing
    assert [c.name for c in playlists.move_clip(repo, pl.id, 0, -1).clips] == ["a", "c", "b"]
    assert [c.name for c in playlists.move_clip(repo, pl.id, 2, 1).clips] == ["a", "c", "b"]

    pl = playlists.remove_clip(repo, pl.id, "a")
    assert [(c.name, c.order) for c in pl.clips] == [("c", 1), ("b", 2)]


def test_playlists_listed_per_player(repo):
    first = playlists.create_playlist(repo, "p1", "One")
    playlists.create_playlist(repo, "p2", "Other")
    assert [p.id for p in playlists.list_playlists(repo, "p1")] == [first.id]
    playlists.delete_playlist(repo, first.id)
    assert playlists.list_playlists(repo, "p1") == []
