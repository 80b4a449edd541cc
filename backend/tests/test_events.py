from app.services import events
from app.services.matchmaking.types import SessionUpdated
from tests.helpers import at, session


def test_publish_reaches_every_subscriber_once():
    seen = []

    def handler(event):
        seen.append(event.session.id)

    events.subscribe(handler)
    events.subscribe(handler)
    events.publish_all([session("g1", at(10), at(12), ["u1", "u2"], sid="s1")], at(8))

    assert seen == ["s1"]


def test_failing_handler_does_not_stop_others(caplog):
    seen = []

    def broken(event):
        raise RuntimeError("boom")

    events.subscribe(broken)
    events.subscribe(lambda e: seen.append(e.session.id))

    events.publish(SessionUpdated(session=session("g1", at(10), at(12), ["u1"], sid="s1"), now=at(8)))

    assert seen == ["s1"]
    assert "handler failed" in caplog.text
