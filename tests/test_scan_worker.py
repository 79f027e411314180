from services.exceptions import ScanError
from workers.scan_worker import ScanWorker


def run_worker(worker):
    seen = {"progress": [], "status": [], "completed": [], "error": []}
    worker.progress.connect(lambda done, total: seen["progress"].append((done, total)))
    worker.status.connect(seen["status"].append)
    worker.completed.connect(seen["completed"].append)
    worker.error.connect(seen["error"].append)
    # run() on the calling thread keeps the test deterministic
    worker.run()
    return seen


def test_scan_emits_catalog(qapp, simple_dir):
    seen = run_worker(ScanWorker([str(simple_dir)]))
    assert seen["error"] == []
    assert len(seen["completed"]) == 1
    sctx = seen["completed"][0]
    assert len(sctx.games) == 8
    assert seen["progress"][-1] == (4, 4)
    assert seen["status"][-1] == "Found 3 collection(s) and 8 game(s)."


def test_no_directories_is_a_config_error(qapp):
    seen = run_worker(ScanWorker([]))
    assert seen["completed"] == []
    assert seen["error"] == ["Configuration error:\nNo game directories configured."]


def test_scan_failure_is_reported(qapp, monkeypatch, simple_dir):
    def fail(*args, **kwargs):
        raise ScanError("Scanning failed: disk on fire")

    monkeypatch.setattr("services.catalog_service.find_in_dirs", fail)
    seen = run_worker(ScanWorker([str(simple_dir)]))
    assert seen["completed"] == []
    assert seen["error"] == ["Scan failed:\nScanning failed: disk on fire"]


def test_unexpected_exception_is_reported(qapp, monkeypatch, simple_dir):
    def fail(*args, **kwargs):
        raise KeyError("boom")

    monkeypatch.setattr("services.catalog_service.find_in_dirs", fail)
    seen = run_worker(ScanWorker([str(simple_dir)]))
    assert seen["error"] == ["Unexpected error:\nKeyError: 'boom'"]
