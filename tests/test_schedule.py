import random
from datetime import datetime, timedelta

import pytest

from companion.plugins.prayer.schedule import Countdown, countdown, instant_on, resolve_next

DAY = datetime(2025, 3, 10)
MAPPING = {"Fajr": "05:12", "Dhuhr": "12:30", "Asr": "15:45", "Maghrib": "18:18", "Isha": "19:45"}


def at(hh_mm: str, day: datetime = DAY) -> datetime:
    hour, minute = map(int, hh_mm.split(":"))
    return day.replace(hour=hour, minute=minute)


def test_evening_resolves_isha_with_countdown():
    now = at("19:00")
    nxt = resolve_next(MAPPING, now)

    assert (nxt.name, nxt.time) == ("Isha", "19:45")
    assert nxt.at == at("19:45")
    assert str(countdown(nxt.at, now)) == "0h 45m 0s"


def test_after_isha_rolls_over_to_tomorrows_fajr():
    nxt = resolve_next(MAPPING, at("20:00"))

    assert (nxt.name, nxt.time) == ("Fajr", "05:12")
    assert nxt.at == at("05:12", DAY + timedelta(days=1))


def test_time_equal_to_now_is_still_today():
    nxt = resolve_next(MAPPING, at("12:30"))

    assert nxt.name == "Dhuhr"
    assert nxt.at == at("12:30")


def test_midnight_entry_after_isha():
    times = dict(MAPPING, Midnight="00:14")

    nxt = resolve_next(times, at("23:59"))

    assert nxt.name == "Midnight"
    assert str(countdown(nxt.at, at("23:59"))) == "0h 15m 0s"


@pytest.mark.parametrize("times", [None, {}])
def test_no_times_means_no_next_prayer(times):
    assert resolve_next(times, at("10:00")) is None


def test_unparseable_entries_are_skipped():
    times = {"Fajr": "soon", "Dhuhr": "12:30", "Asr": "25:00"}

    assert resolve_next(times, at("10:00")).name == "Dhuhr"
    assert resolve_next({"Fajr": "--:--"}, at("10:00")) is None


def test_provider_timezone_suffix_is_ignored():
    nxt = resolve_next({"Fajr": "05:12 (+06)"}, at("04:00"))

    assert nxt.time == "05:12 (+06)"
    assert nxt.at == at("05:12")


def test_identical_instants_keep_first_in_iteration_order():
    assert resolve_next({"Sunset": "18:18", "Maghrib": "18:18"}, at("17:00")).name == "Sunset"
    assert resolve_next({"Maghrib": "18:18", "Sunset": "18:18"}, at("17:00")).name == "Maghrib"


def test_resolved_entry_is_minimum_after_rollover():
    rng = random.Random(1447)
    for _ in range(200):
        names = rng.sample(["Fajr", "Sunrise", "Dhuhr", "Asr", "Maghrib", "Isha", "Imsak", "Midnight"], rng.randint(1, 8))
        times = {n: f"{rng.randint(0, 23):02d}:{rng.randint(0, 59):02d}" for n in names}
        now = DAY + timedelta(seconds=rng.randint(0, 86399))

        nxt = resolve_next(times, now)

        candidates = []
        for value in times.values():
            instant = instant_on(now, value)
            candidates.append(instant if instant >= now else instant + timedelta(days=1))
        assert nxt.at == min(candidates)
        assert nxt.at >= now
        assert nxt.at - now < timedelta(days=1)
        assert times[nxt.name] == nxt.time


def test_countdown_floors_partial_seconds():
    now = datetime(2025, 3, 10, 19, 0, 0, 999999)

    assert countdown(at("19:45"), now) == Countdown(0, 44, 59)


def test_countdown_over_hours():
    assert str(countdown(at("05:12", DAY + timedelta(days=1)), at("20:00"))) == "9h 12m 0s"


def test_countdown_never_negative():
    assert countdown(at("05:00"), at("05:01")) == Countdown(0, 0, 0)
