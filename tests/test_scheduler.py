"""
Tests for the rotation timer and notification scheduling.
"""

import pytest

from core.scheduler import NOTIFICATION_ID


@pytest.fixture
def delivered():
    return []


@pytest.fixture
def make_scheduled(make_loop, delivered):
    def _make(hour=12):
        return make_loop(
            with_scheduler=True,
            hour=hour,
            deliver=lambda request, options: delivered.append(request.title),
        )
    return _make


def _pending(scheduler):
    return scheduler.center.pending_requests()


class TestScheduleNotification:
    @pytest.mark.parametrize("hour", [0, 7, 23])
    def test_noop_outside_daytime(self, make_scheduled, hour):
        loop, scheduler = make_scheduled(hour=hour)
        loop.set_auto_change(True)
        assert _pending(scheduler) == []

    @pytest.mark.parametrize("hour", [8, 15, 22])
    def test_one_request_inside_daytime(self, make_scheduled, hour):
        loop, scheduler = make_scheduled(hour=hour)
        loop.set_auto_change(True)
        assert len(_pending(scheduler)) == 1

    def test_noop_when_auto_change_disabled(self, make_scheduled):
        loop, scheduler = make_scheduled()
        scheduler.schedule_notification()
        assert _pending(scheduler) == []

    def test_noop_with_empty_loop_cancels_pending(self, make_scheduled):
        loop, scheduler = make_scheduled()
        loop.set_auto_change(True)
        loop.daily_words = []
        scheduler.schedule_notification()
        assert _pending(scheduler) == []

    def test_repeated_calls_keep_one_request(self, make_scheduled):
        loop, scheduler = make_scheduled()
        loop.set_auto_change(True)
        for delay in (None, 5, 1):
            scheduler.schedule_notification(delay)
        assert len(_pending(scheduler)) == 1

    def test_request_content(self, make_scheduled):
        loop, scheduler = make_scheduled()
        loop.set_auto_change(True)
        (request,) = _pending(scheduler)
        word = loop.current_word
        assert request.identifier == NOTIFICATION_ID
        assert request.title == word.text
        assert request.body == f"/{word.text}/ - meaning of {word.text}"
        assert request.trigger.repeats is False

    def test_delay_defaults_to_interval_and_floors_at_one_second(self, make_scheduled):
        loop, scheduler = make_scheduled()
        loop.set_auto_change(True)
        scheduler.schedule_notification()
        assert _pending(scheduler)[0].trigger.seconds == 1800.0
        scheduler.schedule_notification(0.2)
        assert _pending(scheduler)[0].trigger.seconds == 1.0

    def test_loop_changes_reschedule_for_new_word(self, make_scheduled):
        loop, scheduler = make_scheduled()
        loop.set_auto_change(True)
        loop.mark_learned()
        (request,) = _pending(scheduler)
        assert request.title == loop.current_word.text
        assert request.trigger.seconds == 1.0

    def test_manual_advance_without_auto_change_schedules_nothing(self, make_scheduled):
        loop, scheduler = make_scheduled()
        loop.advance()
        assert _pending(scheduler) == []


class TestRepeatTimer:
    def test_timer_advances_and_notifies(self, make_scheduled, dispatcher, delivered):
        loop, scheduler = make_scheduled()
        first, second = loop.daily_words[0].text, loop.daily_words[1].text
        loop.set_interval(10)
        loop.set_auto_change(True)

        dispatcher.advance(10)
        assert loop.current_index == 1
        dispatcher.advance(1)
        assert delivered == [first, second]

    def test_timer_keeps_repeating(self, make_scheduled, dispatcher):
        loop, scheduler = make_scheduled()
        loop.set_interval(10)
        loop.set_auto_change(True)
        dispatcher.advance(30)
        assert loop.current_index == 3

    def test_disabling_stops_everything(self, make_scheduled, dispatcher):
        loop, scheduler = make_scheduled()
        loop.set_interval(10)
        loop.set_auto_change(True)
        loop.set_auto_change(False)

        assert not scheduler.running
        assert _pending(scheduler) == []
        dispatcher.advance(100)
        assert loop.current_index == 0

    def test_not_started_while_disabled(self, make_scheduled):
        loop, scheduler = make_scheduled()
        loop.set_interval(10)
        assert not scheduler.running

    def test_interval_change_restarts_timer(self, make_scheduled, dispatcher):
        loop, scheduler = make_scheduled()
        loop.set_auto_change(True)
        dispatcher.advance(1000)
        loop.set_interval(900)
        dispatcher.advance(899)
        assert loop.current_index == 0
        dispatcher.advance(1)
        assert loop.current_index == 1

    def test_start_on_launch_when_enabled(self, make_scheduled):
        loop, _ = make_scheduled()
        loop.set_auto_change(True)

        _, scheduler = make_scheduled()
        assert scheduler.running
        assert len(_pending(scheduler)) == 1
