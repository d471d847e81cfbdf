"""Tests for the event bus."""

from tddbuilder.events import AnswerAccepted, EventBus, QuestionSkipped


class TestEventBus:
    def test_subscribers_receive_their_type_only(self):
        bus = EventBus()
        accepted = []
        bus.subscribe(AnswerAccepted, accepted.append)
        bus.emit(AnswerAccepted("a", ("x",)))
        bus.emit(QuestionSkipped("b", ("x",), "blank"))
        assert [e.question_id for e in accepted] == ["a"]

    def test_global_listeners_run_first(self):
        bus = EventBus()
        order = []
        bus.subscribe(AnswerAccepted, lambda e: order.append("typed"))
        bus.on_all(lambda e: order.append("global"))
        bus.emit(AnswerAccepted("a", ()))
        assert order == ["global", "typed"]

    def test_failing_listener_does_not_stop_others(self, caplog):
        bus = EventBus()
        seen = []

        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe(AnswerAccepted, broken)
        bus.subscribe(AnswerAccepted, seen.append)
        bus.emit(AnswerAccepted("a", ()))
        assert len(seen) == 1
        assert "AnswerAccepted" in caplog.text

    def test_emit_without_listeners(self):
        EventBus().emit(AnswerAccepted("a", ()))
