"""Tests for configuration and logging utilities."""

import logging

import pytest
import yaml
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from handpose.exceptions import ConfigError, HandPoseError
from handpose.utils.config import (
    Config,
    load_config,
    save_config,
    merge_configs,
    config_to_dict,
)
from handpose.utils.logging_utils import setup_logging, ProgressLogger

DEFAULT_CONFIG = Path(__file__).parent.parent / "configs" / "default.yaml"


class TestConfig:
    """Tests for YAML configuration loading."""

    def test_default_file_matches_defaults(self):
        config = load_config(str(DEFAULT_CONFIG))

        assert config.hand.close_threshold == 0.31
        assert config.hand.apart_threshold == 0.75
        assert config.hand.extent_ratio == 2.0
        assert config.hand.mirror_handedness is True
        assert config.pipeline.max_queue_size == 0
        assert config.logging.log_file is None
        assert config_to_dict(config) == config_to_dict(Config())

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "missing.yaml"))

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        config = load_config(str(path))

        assert config.hand.close_threshold == 0.31

    def test_save_and_load(self, tmp_path):
        config = Config()
        config.hand.apart_threshold = 0.8
        config.pipeline.max_queue_size = 4
        path = tmp_path / "saved.yaml"

        save_config(config, str(path))
        loaded = load_config(str(path))

        assert loaded.hand.apart_threshold == 0.8
        assert loaded.pipeline.max_queue_size == 4

    @pytest.mark.parametrize("override", [
        {'hand': {'thresholds': {'close': 0.9, 'apart': 0.5}}},
        {'hand': {'thresholds': {'close': 0.0}}},
        {'hand': {'num_landmarks': 20}},
        {'hand': {'max_hands': 3}},
        {'hand': {'extent_ratio': -1.0}},
        {'pipeline': {'max_queue_size': -2}},
    ])
    def test_invalid_values_rejected(self, override):
        with pytest.raises(ConfigError):
            Config.from_dict(override)

    def test_config_error_is_package_error(self):
        assert issubclass(ConfigError, HandPoseError)

    def test_merge_configs(self):
        base = yaml.safe_load(DEFAULT_CONFIG.read_text())
        merged = merge_configs(base, {'hand': {'thresholds': {'close': 0.2}}})

        config = Config.from_dict(merged)

        assert config.hand.close_threshold == 0.2
        assert config.hand.apart_threshold == 0.75
        assert base['hand']['thresholds']['close'] == 0.31


class TestLogging:
    """Tests for logging helpers."""

    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        level = root.level
        yield
        # Drop console/file handlers installed by setup_logging
        for handler in root.handlers[:]:
            if type(handler) in (logging.StreamHandler, logging.FileHandler):
                root.removeHandler(handler)
                handler.close()
        root.setLevel(level)

    def test_setup_logging_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"

        setup_logging(level="debug", log_file=str(log_file))
        logging.getLogger("handpose.test").debug("hello")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2
        for handler in root.handlers:
            handler.flush()
        assert "hello" in log_file.read_text()

    def test_unknown_level_falls_back_to_info(self):
        setup_logging(level="chatty")

        assert logging.getLogger().level == logging.INFO

    def test_progress_logger(self, caplog):
        progress = ProgressLogger("handpose.progress", total=3, log_interval=2)

        with caplog.at_level(logging.INFO, logger="handpose.progress"):
            progress.start()
            progress.update()
            progress.update(dropped=1)
            progress.update()
            progress.finish()

        messages = [record.message for record in caplog.records]
        assert messages[0] == "Starting processing of 3 frames"
        assert sum(m.startswith("Progress:") for m in messages) == 2
        assert "1 dropped" in messages[1]
        assert messages[-1].startswith("Completed 3 frames (1 dropped)")
        assert progress.dropped == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
