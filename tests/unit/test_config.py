"""Tests for configuration, errors and the run logger."""

import logging

import pytest


class TestParseBool:
    """Tests for parse_bool."""

    @pytest.mark.parametrize("value", ["true", "TRUE", "1", "yes", "on"])
    def test_truthy(self, value):
        """Common truthy spellings parse as True."""
        from tanya.config import parse_bool

        assert parse_bool(value)

    @pytest.mark.parametrize("value", ["false", "0", "no", "off", ""])
    def test_falsy(self, value):
        """Anything else parses as False."""
        from tanya.config import parse_bool

        assert not parse_bool(value)


class TestEngineConfig:
    """Tests for EngineConfig."""

    def test_defaults(self):
        """Defaults match the documented tunables."""
        from tanya.config import EngineConfig

        config = EngineConfig()
        assert config.top_n == 5
        assert config.large_corpus_threshold == 20_000
        assert config.training.hidden_layers == (24, 16, 8)
        assert config.training.learning_rate == 0.1

    def test_threshold_for(self):
        """Queries longer than five words use the long-query threshold."""
        from tanya.config import EngineConfig

        config = EngineConfig()
        assert config.threshold_for(5) == 0.22
        assert config.threshold_for(6) == 0.18

    def test_with_overrides(self):
        """Overrides return a new config and leave the original untouched."""
        from tanya.config import EngineConfig

        config = EngineConfig()
        changed = config.with_overrides(top_n=3)
        assert changed.top_n == 3
        assert config.top_n == 5

    def test_from_env(self, monkeypatch, tmp_path):
        """TANYA_* variables override defaults."""
        from tanya.config import EngineConfig

        monkeypatch.setenv("TANYA_MAX_ITERATIONS", "42")
        monkeypatch.setenv("TANYA_SEED", "9")
        monkeypatch.setenv("TANYA_CACHE_ENABLED", "false")
        monkeypatch.setenv("TANYA_LARGE_CORPUS_THRESHOLD", "100")
        monkeypatch.setenv("TANYA_DATASET_PATH", str(tmp_path / "d.json"))

        config = EngineConfig.from_env()
        assert config.training.max_iterations == 42
        assert config.training.seed == 9
        assert config.cache_enabled is False
        assert config.large_corpus_threshold == 100
        assert config.dataset_path == tmp_path / "d.json"

    def test_from_env_defaults(self, monkeypatch):
        """Unset variables keep the defaults."""
        from tanya.config import EngineConfig

        for name in ("TANYA_MAX_ITERATIONS", "TANYA_SEED", "TANYA_CACHE_ENABLED", "TANYA_DATASET_PATH"):
            monkeypatch.delenv(name, raising=False)
        config = EngineConfig.from_env()
        assert config.training.max_iterations == 5000
        assert config.training.seed is None
        assert config.cache_enabled is True


class TestErrors:
    """Tests for the error hierarchy."""

    def test_hierarchy(self):
        """Every library error derives from TanyaError."""
        from tanya.errors import DataError, ModelFormatError, ScoringError, TanyaError, TrainingError

        assert issubclass(ModelFormatError, DataError)
        for error in (DataError, ModelFormatError, ScoringError, TrainingError):
            assert issubclass(error, TanyaError)

    def test_scoring_error_index(self):
        """ScoringError carries the failing entry index."""
        from tanya.errors import ScoringError

        assert ScoringError("boom", entry_index=4).entry_index == 4


class TestRunLogger:
    """Tests for RunLogger."""

    def test_file_sink(self, tmp_path):
        """All levels reach the log file regardless of console level."""
        from tanya.shared.logger import RunLogger

        path = tmp_path / "run.log"
        with RunLogger(log_file=path, console=False, min_level="ERROR") as log:
            log.debug("debug line")
            log.info("info line")
        text = path.read_text(encoding="utf-8")
        assert "debug line" in text
        assert "info line" in text

    def test_metrics_and_timers(self, tmp_path):
        """Metrics are recorded in order and timers measure elapsed time."""
        from tanya.shared.logger import RunLogger

        log = RunLogger(console=False)
        log.metric("final_error", 0.5)
        log.metric("final_error", 0.25)
        with log.timer("train") as timer:
            pass
        assert log.metrics("final_error") == [0.5, 0.25]
        assert timer.elapsed >= 0.0

    def test_console_level(self, capsys):
        """Console output respects the minimum level."""
        from tanya.shared.logger import RunLogger

        log = RunLogger(min_level="WARN")
        log.info("quiet")
        log.warn("loud")
        out = capsys.readouterr().out
        assert "quiet" not in out
        assert "loud" in out

    def test_stdlib_bridge(self, tmp_path):
        """Library log records are routed into the run log."""
        from tanya.shared.logger import RunLogger

        path = tmp_path / "run.log"
        log = RunLogger(log_file=path, console=False)
        log.install_stdlib_bridge(root_logger="tanya.bridge_test")
        logging.getLogger("tanya.bridge_test.child").warning("[Component] something happened")
        log.close()
        assert "[Component] something happened" in path.read_text(encoding="utf-8")
