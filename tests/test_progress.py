import threading


def test_progress_defaults():
    from playlist.progress import Progress, ProgressStatus

    p = Progress()

    assert p.status is ProgressStatus.NOT_STARTED
    assert p.total == 0
    assert p.done == 0
    assert p.percent == 0.0


def test_progress_never_exceeds_total():
    from playlist.progress import Progress

    p = Progress()
    p.start(2)
    for _ in range(5):
        p.advance()

    assert p.done == 2
    assert p.percent == 100.0


def test_progress_concurrent_advance():
    from playlist.progress import Progress

    p = Progress()
    p.start(8 * 500)

    def worker():
        for _ in range(500):
            p.advance()

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert p.done == p.total
