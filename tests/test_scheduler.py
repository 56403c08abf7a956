"""Tests du scheduler périodique"""

from jmx_agent.core.config import AgentConfig
from jmx_agent.core.logger import AgentLogger
from jmx_agent.core.scheduler import QueryScheduler


def _scheduler(tmp_path, period, callback):
    config = AgentConfig(str(tmp_path / "absent.ini"))
    config.set("agent", "run_period_seconds", str(period))
    config.set("logging", "log_file", str(tmp_path / "agent.log"))
    return QueryScheduler(config, AgentLogger(config), callback)


def test_status(tmp_path):
    scheduler = _scheduler(tmp_path, 30, lambda: None)
    status = scheduler.get_status()
    assert status["period_seconds"] == 30
    assert status["scheduled_jobs_count"] == 1
    assert status["is_running"] is False


def test_invalid_period_falls_back(tmp_path):
    assert _scheduler(tmp_path, 0, lambda: None).period == 60


def test_callback_errors_are_contained(tmp_path):
    def boom():
        raise RuntimeError("query failed")
    _scheduler(tmp_path, 5, boom)._scheduled_run()


def test_start_and_stop(tmp_path):
    scheduler = _scheduler(tmp_path, 5, lambda: None)
    scheduler.start()
    assert scheduler.is_running
    scheduler.stop()
    assert not scheduler.is_running
