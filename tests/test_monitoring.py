import logging

from services import monitoring


def test_get_logger_is_child_of_agency():
    assert monitoring.get_logger("services.portal").name == "agency.services.portal"


def test_init_without_dsn_disables_sentry(monkeypatch):
    monkeypatch.delenv("AGENCY_SENTRY_DSN", raising=False)
    monkeypatch.setenv("AGENCY_LOG_LEVEL", "debug")
    monkeypatch.setattr(monitoring, "_sentry_initialized", False)
    assert monitoring.init_monitoring() is False
    assert monitoring.logger.level == logging.DEBUG


def test_timed_logs_slow_calls(caplog):
    @monitoring.timed(threshold_ms=-1)
    def work(x):
        return x * 2

    with caplog.at_level(logging.WARNING, logger="agency"):
        assert work(21) == 42
    assert any("Slow operation: work" in r.getMessage() for r in caplog.records)


def test_capture_exception_logs_without_sentry(caplog, monkeypatch):
    monkeypatch.setattr(monitoring, "_sentry_initialized", False)
    with caplog.at_level(logging.ERROR, logger="agency"):
        monitoring.capture_exception(RuntimeError("boom"), {"page": "test"})
    assert any("boom" in r.getMessage() for r in caplog.records)


def test_init_with_dsn_starts_sentry(monkeypatch):
    monkeypatch.setenv("AGENCY_SENTRY_DSN", "https://k@o0.ingest.sentry.io/0")
    monkeypatch.setenv("AGENCY_ENV", "test")
    monkeypatch.setattr(monitoring, "_sentry_initialized", False)
    try:
        assert monitoring.init_monitoring() is True
        assert monitoring._sentry_initialized is True
        assert monitoring.sentry_sdk.get_client().is_active()
        # Second call is a no-op
        assert monitoring.init_monitoring() is True
    finally:
        monitoring.sentry_sdk.get_client().close()


def test_capture_exception_forwards_with_context(monkeypatch):
    sent = []
    monkeypatch.setattr(monitoring, "_sentry_initialized", True)
    monkeypatch.setattr(monitoring.sentry_sdk, "capture_exception", lambda e: sent.append(e))
    err = ValueError("bad row")
    monitoring.capture_exception(err, {"table": "jobs"})
    assert sent == [err]


def test_unknown_log_level_falls_back_to_info(monkeypatch, caplog):
    monkeypatch.delenv("AGENCY_SENTRY_DSN", raising=False)
    monkeypatch.setenv("AGENCY_LOG_LEVEL", "chatty")
    monkeypatch.setattr(monitoring, "_sentry_initialized", False)
    with caplog.at_level(logging.WARNING, logger="agency"):
        assert monitoring.init_monitoring() is False
        assert monitoring.logger.level == logging.INFO
    assert any("Unknown log level" in r.getMessage() for r in caplog.records)
