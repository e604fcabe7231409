"""Tests for YAML configuration loading and logging setup."""

import logging

import pytest
import yaml

from leverage_optimizer.models.allocation import AllocationParameters
from leverage_optimizer.utils.config import DEFAULT_CONFIG_PATH, load_config, merge_config
from leverage_optimizer.utils.error_handling import ConfigurationError
from leverage_optimizer.utils.logging_config import configure_logging, get_logger, setup_logging


@pytest.fixture
def restore_logger():
    """Undo setup_logging side effects on the package logger."""
    logger = logging.getLogger("leverage_optimizer")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


class TestLoadConfig:
    """Test suite for load_config."""

    def test_packaged_defaults(self):
        assert DEFAULT_CONFIG_PATH.exists()

        config = load_config()

        assert config['allocation']['total_equity'] == 10000
        assert config['allocation']['target_leverage'] == 1.75
        assert config['market']['symbol'] == 'AAPL'
        assert config['market']['pricing_model'] == 'simple'
        assert config['output']['top_n'] == 10
        assert config['logging']['level'] == 'WARNING'
        assert config['logging']['file'] is None

    def test_defaults_build_parameters(self):
        params = AllocationParameters.from_dict(load_config()['allocation'])

        assert params == AllocationParameters()

    def test_user_overrides_merge(self, tmp_path):
        path = tmp_path / 'user.yaml'
        path.write_text(yaml.safe_dump({
            'allocation': {'target_leverage': 2.5},
            'market': {'symbol': 'NVDA'},
        }))

        config = load_config(path)

        assert config['allocation']['target_leverage'] == 2.5
        assert config['allocation']['total_equity'] == 10000
        assert config['market']['symbol'] == 'NVDA'
        assert config['market']['pricing_model'] == 'simple'

    def test_empty_user_file(self, tmp_path):
        path = tmp_path / 'empty.yaml'
        path.write_text('')

        assert load_config(path) == load_config()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match='not found'):
            load_config(tmp_path / 'nope.yaml')

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / 'broken.yaml'
        path.write_text('allocation: [1, 2\n')

        with pytest.raises(ConfigurationError, match='Invalid YAML'):
            load_config(path)

    def test_non_mapping_root(self, tmp_path):
        path = tmp_path / 'list.yaml'
        path.write_text('- 1\n- 2\n')

        with pytest.raises(ConfigurationError, match='mapping'):
            load_config(path)


class TestMergeConfig:
    """Test suite for merge_config."""

    def test_nested_merge_does_not_mutate_base(self):
        base = {'a': {'x': 1, 'y': 2}, 'b': 3}

        merged = merge_config(base, {'a': {'y': 20}, 'c': 4})

        assert merged == {'a': {'x': 1, 'y': 20}, 'b': 3, 'c': 4}
        assert base == {'a': {'x': 1, 'y': 2}, 'b': 3}

    def test_scalar_replaces_mapping(self):
        assert merge_config({'a': {'x': 1}}, {'a': None}) == {'a': None}


class TestLogging:
    """Test suite for logging configuration."""

    def test_setup_logging(self, restore_logger):
        logger = setup_logging(log_level="DEBUG")

        assert logger.name == "leverage_optimizer"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_setup_logging_is_idempotent(self, restore_logger):
        setup_logging()
        logger = setup_logging()

        assert len(logger.handlers) == 1

    def test_log_file(self, restore_logger, tmp_path):
        log_file = tmp_path / 'logs' / 'optimizer.log'
        logger = setup_logging(log_level="INFO", log_file=str(log_file))

        get_logger("optimizer").info("Computed %d allocations", 3)
        for handler in logger.handlers:
            handler.flush()

        assert len(logger.handlers) == 2
        assert "Computed 3 allocations" in log_file.read_text()

    def test_unknown_level(self, restore_logger):
        with pytest.raises(ValueError):
            setup_logging(log_level="CHATTY")

    def test_get_logger_names(self):
        assert get_logger().name == "leverage_optimizer"
        assert get_logger("allocator").name == "leverage_optimizer.allocator"

    def test_console_handler_writes_to_stderr(self, restore_logger, capsys):
        setup_logging(log_level="INFO")

        get_logger("optimizer").info("Computed %d allocations", 3)

        captured = capsys.readouterr()
        assert "Computed 3 allocations" in captured.err
        assert captured.out == ""

    def test_configure_from_config_section(self, restore_logger, tmp_path):
        log_file = tmp_path / 'optimizer.log'
        config = {'logging': {'level': 'DEBUG', 'file': str(log_file)}}

        logger = configure_logging(config)

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2
        assert log_file.exists()

    def test_command_line_level_wins(self, restore_logger):
        logger = configure_logging(load_config(), level_override="ERROR")

        assert logger.level == logging.ERROR

    def test_missing_logging_section(self, restore_logger):
        logger = configure_logging({})

        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
