"""Tests for the learned command feedback ledger."""

from __future__ import annotations

import threading

from command_bridge.engine.ledger import CommandFeedbackLedger, base_command


class TestBaseCommand:
    """Tests for base_command."""

    def test_first_word_lowercased(self) -> None:
        assert base_command("Give Steve diamond 1") == "give"

    def test_blank(self) -> None:
        assert base_command("   ") is None


class TestCommandFeedbackLedger:
    """Tests for CommandFeedbackLedger."""

    def test_success_and_failure_counts(self) -> None:
        ledger = CommandFeedbackLedger()

        ledger.record_success("give Steve diamond 1")
        ledger.record_success("give Alex stone 5")
        ledger.record_failure("give Steve {bad}", "Unknown item")

        feedback = ledger.get("give")
        assert feedback is not None
        assert feedback.success_count == 2
        assert feedback.fail_count == 1
        assert feedback.last_full_command == "give Alex stone 5"
        assert feedback.last_error == "Unknown item"
        assert feedback.net_positive

    def test_blank_command_ignored(self) -> None:
        ledger = CommandFeedbackLedger()

        assert ledger.record_success("") is None
        assert len(ledger) == 0

    def test_render_empty(self) -> None:
        assert CommandFeedbackLedger().render() == "=== LEARNED ===\nNo commands recorded."

    def test_render_buckets(self) -> None:
        ledger = CommandFeedbackLedger()
        ledger.record_success("time set day")
        ledger.record_failure("fly Steve", "Unknown command")
        ledger.record_failure("fly Steve", "Unknown command")
        ledger.record_success("heal Steve")
        ledger.record_failure("heal Steve", "oops")

        rendered = ledger.render()

        assert rendered.startswith("=== LEARNED ===\nCommands that work:")
        assert "/time (1x success) e.g. /time set day" in rendered
        assert "/fly (2x failed) - Unknown command" in rendered
        works, problems = rendered.split("Commands with problems:")
        assert "/fly" not in works
        assert "/time" not in problems
        assert "/heal" not in rendered

    def test_concurrent_updates_not_lost(self) -> None:
        ledger = CommandFeedbackLedger(stripes=4)

        def worker() -> None:
            for _ in range(500):
                ledger.record_success("heal Steve")
                ledger.record_failure("fly Steve", "Unknown command")

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert ledger.get("heal").success_count == 4000
        assert ledger.get("fly").fail_count == 4000

    def test_clear(self) -> None:
        ledger = CommandFeedbackLedger()
        ledger.record_success("heal")

        ledger.clear()

        assert ledger.snapshot() == {}
