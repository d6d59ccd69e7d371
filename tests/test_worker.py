import threading

from boblight.worker import Worker


class _Looper(Worker):
    def __init__(self):
        super().__init__()
        self.started = threading.Event()
        self.loops = 0

    def process(self):
        self.started.set()
        while not self.stop_requested:
            self.loops += 1
            self.stop_event.wait(0.01)


def test_default_process_finishes():
    worker = Worker()
    worker.start_thread()
    worker.join_thread()
    assert worker.is_running() is False


def test_stop_thread_ends_loop():
    worker = _Looper()
    Worker.start_thread(worker)
    assert worker.started.wait(2.0) is True
    assert Worker.is_running(worker) is True
    Worker.stop_thread(worker)
    assert Worker.is_running(worker) is False
    assert worker.loops >= 1


def test_async_stop_then_join():
    worker = _Looper()
    Worker.start_thread(worker)
    worker.started.wait(2.0)
    Worker.async_stop_thread(worker)
    assert worker.stop_requested is True
    Worker.join_thread(worker)
    assert Worker.is_running(worker) is False


def test_restart_clears_stop_flag():
    worker = _Looper()
    Worker.start_thread(worker)
    worker.started.wait(2.0)
    Worker.stop_thread(worker)
    worker.started.clear()
    Worker.start_thread(worker)
    assert worker.started.wait(2.0) is True
    assert worker.stop_requested is False
    Worker.stop_thread(worker)
    assert Worker.is_running(worker) is False


def test_join_without_start_is_harmless():
    worker = Worker()
    worker.join_thread()
    assert worker.is_running() is False