"""Tests for outcome observers."""

from __future__ import annotations

import logging

from command_bridge.engine.observers import LogKeywordObserver, NullObserver


LOGGER_NAME = "tests.observers.console"


class TestLogKeywordObserver:
    """Tests for log keyword scraping."""

    def test_captures_first_matching_line(self) -> None:
        console = logging.getLogger(LOGGER_NAME)
        observation = LogKeywordObserver([LOGGER_NAME]).start()

        console.warning("Teleported Steve")
        console.warning("Unknown command. Type /help for help.")
        console.warning("Player not found")

        assert observation.stop() == "Unknown command. Type /help for help."

    def test_nothing_captured(self) -> None:
        console = logging.getLogger(LOGGER_NAME)
        observation = LogKeywordObserver([LOGGER_NAME]).start()

        console.warning("Set the time to 1000")

        assert observation.stop() is None

    def test_matching_is_case_insensitive(self) -> None:
        console = logging.getLogger(LOGGER_NAME)
        observation = LogKeywordObserver([LOGGER_NAME]).start()

        console.error("INVALID ARGUMENT for tp")

        assert observation.stop() == "INVALID ARGUMENT for tp"

    def test_detail_truncated(self) -> None:
        console = logging.getLogger(LOGGER_NAME)
        observation = LogKeywordObserver([LOGGER_NAME], max_length=20).start()

        console.warning("error: " + "x" * 100)

        captured = observation.stop()
        assert captured is not None
        assert len(captured) == 20

    def test_handler_detached_after_stop(self) -> None:
        console = logging.getLogger(LOGGER_NAME)
        handlers_before = list(console.handlers)
        observation = LogKeywordObserver([LOGGER_NAME]).start()

        observation.stop()
        console.warning("Unknown command")

        assert console.handlers == handlers_before

    def test_custom_keywords(self) -> None:
        console = logging.getLogger(LOGGER_NAME)
        observation = LogKeywordObserver([LOGGER_NAME], keywords=["kaboom"]).start()

        console.warning("Unknown command")
        console.warning("KABOOM happened")

        assert observation.stop() == "KABOOM happened"


class TestNullObserver:
    """Tests for NullObserver."""

    def test_never_captures(self) -> None:
        observation = NullObserver().start()

        logging.getLogger(LOGGER_NAME).error("Unknown command")

        assert observation.stop() is None
