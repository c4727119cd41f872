import importlib
import logging

import pytest

from footy import config


@pytest.mark.parametrize(
    "raw,expected",
    [(None, None), ("", None), ("  ", None), ("12", 12.0), (" 2.5 ", 2.5)],
)
def test_parse_timeout(raw, expected):
    assert config.parse_timeout(raw) == expected


@pytest.mark.parametrize("raw", ["soon", "12s", "0", "-3", "nan", "inf"])
def test_bad_timeout_is_ignored_with_a_warning(raw, caplog):
    with caplog.at_level(logging.WARNING, logger="footy.config"):
        assert config.parse_timeout(raw) is None
    assert "FOOTY_UPSTREAM_TIMEOUT" in caplog.text


def test_bad_timeout_env_does_not_break_import(monkeypatch):
    monkeypatch.setenv("FOOTY_UPSTREAM_TIMEOUT", "ten seconds")
    try:
        reloaded = importlib.reload(config)
        assert reloaded.UPSTREAM_TIMEOUT is None
    finally:
        monkeypatch.delenv("FOOTY_UPSTREAM_TIMEOUT")
        importlib.reload(config)
