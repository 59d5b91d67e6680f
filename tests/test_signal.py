import threading

import pytest

from springkit.gs.signal import ReadySignal

WORKERS = 3


def _start(targets):
    threads = [threading.Thread(target=target) for target in targets]
    for t in threads:
        t.start()
    return threads


def _join_all(threads):
    for t in threads:
        t.join(2)
    return [t.is_alive() for t in threads]


def test_intercept():
    signal = ReadySignal()
    targets = []
    for num in range(WORKERS):
        signal.add()
        if num == 0:
            targets.append(signal.intercept)
        else:
            targets.append(lambda: signal.trigger_and_wait().wait(2))
    threads = _start(targets)
    signal.wait()
    intercepted = signal.intercepted()
    signal.close()
    alive = _join_all(threads)
    assert intercepted is True
    assert alive == [False] * WORKERS


def test_success():
    signal = ReadySignal()
    released = []
    lock = threading.Lock()

    def worker():
        event = signal.trigger_and_wait()
        event.wait(2)
        with lock:
            released.append(event.is_set())

    for _ in range(WORKERS):
        signal.add()
    threads = _start([worker] * WORKERS)

    signal.wait()
    intercepted = signal.intercepted()
    before_close = list(released)

    signal.close()
    alive = _join_all(threads)

    assert intercepted is False
    assert before_close == []
    assert alive == [False] * WORKERS
    assert released == [True] * WORKERS


def test_trigger_without_add_raises():
    signal = ReadySignal()
    with pytest.raises(ValueError):
        signal.trigger_and_wait()


def test_wait_returns_when_nothing_added():
    signal = ReadySignal()
    signal.wait()
    assert signal.intercepted() is False