# Copyright (c) 2026 Huynh Huy. All rights reserved.

"""
Tests for the Diagnostics Channel
=================================
"""

import logging


class TestDiagnosticChannel:
    """Tests for DiagnosticChannel."""

    def test_subscribe_and_emit(self):
        from allerscan.utils import DiagnosticChannel

        channel = DiagnosticChannel()
        events = []
        channel.subscribe(events.append)

        channel.info("hello", tick=1)

        assert len(events) == 1
        assert events[0].message == "hello"
        assert events[0].level_name == "INFO"
        assert events[0].context == {"tick": 1}

    def test_unsubscribe(self):
        from allerscan.utils import DiagnosticChannel

        channel = DiagnosticChannel()
        events = []
        unsubscribe = channel.subscribe(events.append)
        unsubscribe()
        unsubscribe()

        channel.debug("ignored")

        assert events == []

    def test_recent_is_bounded(self):
        from allerscan.utils import DiagnosticChannel

        channel = DiagnosticChannel(maxlen=3)
        for i in range(5):
            channel.debug(f"msg {i}")

        assert [e.message for e in channel.recent()] == ["msg 2", "msg 3", "msg 4"]

    def test_broken_subscriber_is_isolated(self):
        from allerscan.utils import DiagnosticChannel

        channel = DiagnosticChannel()
        events = []

        def broken(event):
            raise RuntimeError("sink failed")

        channel.subscribe(broken)
        channel.subscribe(events.append)

        channel.error("boom")

        assert [e.message for e in events] == ["boom"]

    def test_forwards_to_logger(self, caplog):
        from allerscan.utils import DiagnosticChannel

        channel = DiagnosticChannel()
        with caplog.at_level(logging.WARNING, logger="allerscan.diagnostics"):
            channel.emit(logging.WARNING, "check this")

        assert "check this" in caplog.text
