import threading

from signalr_hub.callbacks import CallbackManager
from signalr_hub.value import InvokeResult, SignalRValue, ValueType


def test_ids_are_unique_and_registered():
    manager = CallbackManager()
    ids = [manager.register_callback(lambda r: None) for _ in range(5)]
    assert len(set(ids)) == 5
    assert len(manager) == 5
    assert all(callback_id in manager for callback_id in ids)


def test_first_id_is_zero():
    manager = CallbackManager()
    assert manager.register_callback(None) == "0"


def test_invoke_passes_result_and_removes():
    manager = CallbackManager()
    received = []
    callback_id = manager.register_callback(received.append)

    assert manager.invoke_callback(callback_id, SignalRValue.of("done"), True) is True
    assert len(received) == 1
    assert received[0].has_error() is False
    assert received[0].to_python() == "done"
    assert callback_id not in manager
    assert manager.invoke_callback(callback_id, SignalRValue.of("again"), True) is False
    assert len(received) == 1


def test_invoke_without_remove_keeps_callback():
    manager = CallbackManager()
    received = []
    callback_id = manager.register_callback(received.append)

    assert manager.invoke_callback(callback_id, SignalRValue.of(1), False)
    assert manager.invoke_callback(callback_id, SignalRValue.of(2), False)
    assert [r.to_python() for r in received] == [1.0, 2.0]
    assert callback_id in manager


def test_invoke_unknown_id_returns_false():
    manager = CallbackManager()
    assert manager.invoke_callback("missing", SignalRValue(), True) is False


def test_invoke_unbound_callback_succeeds():
    manager = CallbackManager()
    callback_id = manager.register_callback(None)
    assert manager.invoke_callback(callback_id, SignalRValue(), True) is True
    assert len(manager) == 0


def test_remove_callback():
    manager = CallbackManager()
    called = []
    callback_id = manager.register_callback(called.append)
    assert manager.remove_callback(callback_id) is True
    assert manager.remove_callback(callback_id) is False
    assert manager.invoke_callback(callback_id, SignalRValue(), True) is False
    assert called == []


def test_clear_fails_every_pending_callback():
    manager = CallbackManager()
    received = []
    manager.register_callback(received.append)
    manager.register_callback(received.append)
    manager.register_callback(None)

    manager.clear("stopped")

    assert len(manager) == 0
    assert len(received) == 2
    assert all(r.has_error() for r in received)
    assert {r.error_message for r in received} == {"stopped"}
    assert all(r.type is ValueType.NULL for r in received)


def test_invoke_result_passed_through_unchanged():
    manager = CallbackManager()
    received = []
    callback_id = manager.register_callback(received.append)
    failure = InvokeResult.error("boom")
    manager.invoke_callback(callback_id, failure, True)
    assert received == [failure]


def test_callback_may_register_during_invoke():
    manager = CallbackManager()
    new_ids = []
    callback_id = manager.register_callback(
        lambda r: new_ids.append(manager.register_callback(None))
    )
    assert manager.invoke_callback(callback_id, SignalRValue(), True)
    assert new_ids[0] in manager
    assert len(manager) == 1


def test_concurrent_registration_gives_unique_ids():
    manager = CallbackManager()
    ids = []
    lock = threading.Lock()

    def worker():
        for _ in range(100):
            callback_id = manager.register_callback(None)
            with lock:
                ids.append(callback_id)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(ids) == len(set(ids)) == len(manager) == 800