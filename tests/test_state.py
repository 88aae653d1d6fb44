from rides.filters import FilterCriteria
from rides.state import DashboardState


class FakeHandle:
    def __init__(self):
        self.released = 0

    def release(self):
        self.released += 1


class DestroyOnly:
    def __init__(self):
        self.destroyed = False

    def destroy(self):
        self.destroyed = True


def test_replacing_a_slot_releases_previous_handle(rides_dataset):
    state = DashboardState(dataset=rides_dataset)
    first, second = FakeHandle(), FakeHandle()
    state.replace_chart("line", first)
    state.replace_chart("line", second)
    assert first.released == 1
    assert second.released == 0
    assert state.charts == {"line": second}


def test_replacing_with_same_handle_keeps_it(rides_dataset):
    state = DashboardState(dataset=rides_dataset)
    handle = FakeHandle()
    state.replace_chart("bar", handle)
    state.replace_chart("bar", handle)
    assert handle.released == 0


def test_release_all(rides_dataset):
    state = DashboardState(dataset=rides_dataset)
    a, b = FakeHandle(), DestroyOnly()
    state.replace_chart("line", a)
    state.replace_chart("pie", b)
    state.replace_chart("plain", object())
    state.release_all()
    assert a.released == 1
    assert b.destroyed
    assert state.charts == {}


def test_apply_and_reset(rides_dataset):
    state = DashboardState(dataset=rides_dataset)
    payload = state.apply({"category": "Rohini", "date_from": "2024-01-02"})
    assert state.criteria == FilterCriteria(date_from="2024-01-02", category="Rohini")
    assert payload["row_counts"]["filtered"] == 1

    payload = state.reset()
    assert state.criteria == FilterCriteria()
    assert payload["row_counts"]["filtered"] == 6


def test_repeated_apply_is_idempotent(rides_dataset):
    state = DashboardState(dataset=rides_dataset)
    first = state.apply({"category": "Saket"})
    second = state.apply({"category": "Saket"})
    assert first["kpis"] == second["kpis"]
    assert first["series"] == second["series"]


def test_categories(rides_dataset):
    assert DashboardState(dataset=rides_dataset).categories == ["Rohini", "Saket", "Vaishali"]


class Placeholder:
    def __init__(self):
        self.cleared = False

    def empty(self):
        self.cleared = True


def test_placeholder_handles_are_cleared_on_replace(rides_dataset):
    state = DashboardState(dataset=rides_dataset)
    old, new = Placeholder(), Placeholder()
    state.replace_chart("hours", old)
    state.replace_chart("hours", new)
    assert old.cleared
    assert not new.cleared


def test_forget_charts_does_not_release(rides_dataset):
    state = DashboardState(dataset=rides_dataset)
    handle = FakeHandle()
    state.replace_chart("line", handle)
    state.forget_charts()
    assert state.charts == {}
    assert handle.released == 0
