"""
Tests for channel-aware logging configuration.
"""

from drapekit.core.logging import (
    LogChannel,
    LogLevel,
    configure_logging,
    get_current_config,
    get_logger,
    get_pass_logger,
)


class TestLoggingConfig:

    def teardown_method(self):
        configure_logging(level="info", channels=[c.value for c in LogChannel], force=True)

    def test_configure_level_and_channels(self):
        configure_logging(level="debug", format="json", channels=["decode", "bogus"], force=True)

        config = get_current_config()
        assert config["level"] == "DEBUG"
        assert config["format"] == "json"
        assert config["channels"] == ["DECODE"]

    def test_unknown_level_is_info(self):
        assert LogLevel.from_string("loud") is LogLevel.INFO

    def test_pass_logger_channels(self):
        assert get_pass_logger("p00_normalize").channel is LogChannel.PIPELINE
        assert get_pass_logger("p10_decode").channel is LogChannel.DECODE
        assert get_pass_logger("p20_validate").channel is LogChannel.VALIDATE
        assert get_pass_logger("p30_diversify").channel is LogChannel.CLASSIFY
        assert get_pass_logger("p99_other").channel is LogChannel.PIPELINE

    def test_channel_filter(self):
        configure_logging(level="debug", channels=["classify"], force=True)

        assert get_logger(LogChannel.CLASSIFY)._should_log(LogLevel.DEBUG)
        assert not get_logger(LogChannel.DECODE)._should_log(LogLevel.INFO)

    def test_silent(self):
        configure_logging(level="silent", force=True)

        assert not get_logger("system")._should_log(LogLevel.INFO)
