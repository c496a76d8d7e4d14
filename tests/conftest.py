from __future__ import annotations

import logging

import pytest

from device_aggregator.common.config import AppSettings, ReporterSettings, WatcherSettings


@pytest.fixture
def fast_settings() -> AppSettings:
    return AppSettings(
        channel_capacity=16,
        watcher=WatcherSettings(interval_s=0.05),
        reporter=ReporterSettings(interval_s=0.05),
    )


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("DEVAGG_SETTINGS", "DEVAGG_DEVICES_FILE", "DEVAGG_LOG_LEVEL", "DEVAGG_LOG_FORMAT"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger("device_aggregator")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
