from locsync.backend.events import EventChannel


def test_publish_runs_listeners_in_order() -> None:
    channel: EventChannel[str] = EventChannel("test")
    calls: list[str] = []
    channel.subscribe(lambda value: calls.append(f"a:{value}"))
    channel.subscribe(lambda value: calls.append(f"b:{value}"))

    channel.publish("en")

    assert calls == ["a:en", "b:en"]


def test_failing_listener_does_not_stop_others(caplog) -> None:
    channel: EventChannel[str] = EventChannel("test")
    calls: list[str] = []

    def broken(value: str) -> None:
        raise RuntimeError("listener bug")

    channel.subscribe(broken)
    channel.subscribe(calls.append)

    channel.publish("es")

    assert calls == ["es"]
    assert "listener bug" in caplog.text


def test_unsubscribe_removes_listener() -> None:
    channel: EventChannel[int] = EventChannel("test")
    calls: list[int] = []
    unsubscribe = channel.subscribe(calls.append)

    unsubscribe()
    unsubscribe()
    channel.publish(1)

    assert calls == []
    assert len(channel) == 0
