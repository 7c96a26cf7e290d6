from maze_race.systems.events import EventChannel, FlavorMessage, PositionChanged, RaceWon, Side


def test_subscribe_all_and_by_type():
    channel = EventChannel()
    everything, wins = [], []
    channel.subscribe(everything.append)
    channel.subscribe(wins.append, RaceWon)

    channel.publish(PositionChanged(0, Side.HUMAN, (1, 0)))
    channel.publish(RaceWon(0, Side.AI, 4.2))

    assert len(everything) == 2
    assert wins == [RaceWon(0, Side.AI, 4.2)]


def test_unsubscribe_and_clear():
    channel = EventChannel()
    seen = []
    cb = channel.subscribe(seen.append)
    channel.unsubscribe(cb)
    channel.publish(FlavorMessage(0, "hi"))
    assert seen == []

    channel.subscribe(seen.append)
    channel.clear()
    channel.publish(FlavorMessage(0, "hi"))
    assert seen == []


def test_listener_may_unsubscribe_during_publish():
    channel = EventChannel()
    seen = []

    def once(event):
        seen.append(event)
        channel.unsubscribe(once)

    channel.subscribe(once)
    channel.publish(FlavorMessage(1, "a"))
    channel.publish(FlavorMessage(1, "b"))
    assert [e.text for e in seen] == ["a"]
