from gemcascade.events.bus import EventBus


def test_event_bus_emit_subscribe():
    bus = EventBus()
    received = {}

    def handler(sender, **kwargs):
        received.update(kwargs)

    bus.subscribe("test", handler)
    bus.emit("test", value=42, msg="hello")

    assert received["value"] == 42
    assert received["msg"] == "hello"


def test_emit_without_subscribers_is_noop():
    bus = EventBus()
    bus.emit("nobody_listens", value=1)


def test_lambda_subscribers_are_kept_alive():
    bus = EventBus()
    seen = []
    bus.subscribe("ping", lambda sender, **kwargs: seen.append(kwargs.get("n")))
    bus.emit("ping", n=1)
    bus.emit("ping", n=2)
    assert seen == [1, 2]
