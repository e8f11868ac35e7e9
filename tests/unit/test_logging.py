from __future__ import annotations


def test_configure_structlog_warns_on_invalid_log_level(monkeypatch, capfd) -> None:
    from trade_journal.logging import configure_structlog

    monkeypatch.setenv("TRADE_JOURNAL_LOG_LEVEL", "not-a-level")
    configure_structlog()

    captured = capfd.readouterr()
    assert "Invalid TRADE_JOURNAL_LOG_LEVEL" in captured.err


def test_configure_structlog_accepts_valid_log_level(monkeypatch, capfd) -> None:
    from trade_journal.logging import configure_structlog

    monkeypatch.setenv("TRADE_JOURNAL_LOG_LEVEL", "debug")
    configure_structlog()

    captured = capfd.readouterr()
    assert "Invalid TRADE_JOURNAL_LOG_LEVEL" not in captured.err

    monkeypatch.delenv("TRADE_JOURNAL_LOG_LEVEL")
    configure_structlog()


def test_configure_structlog_returns_applied_level(monkeypatch) -> None:
    import logging

    from trade_journal.logging import configure_structlog

    monkeypatch.setenv("TRADE_JOURNAL_LOG_LEVEL", "error")
    assert configure_structlog() == logging.ERROR

    # An explicit level wins over the environment.
    assert configure_structlog("info") == logging.INFO

    monkeypatch.delenv("TRADE_JOURNAL_LOG_LEVEL")
    assert configure_structlog() == logging.WARNING


def test_resolve_log_level_accepts_names_and_numbers() -> None:
    import logging

    from trade_journal.logging import resolve_log_level

    assert resolve_log_level(None) == logging.WARNING
    assert resolve_log_level("  ") == logging.WARNING
    assert resolve_log_level(" Debug ") == logging.DEBUG
    assert resolve_log_level("15") == 15
