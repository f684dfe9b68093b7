# -*- coding: utf-8 -*-
import logging

from recipe_profile.installer.messenger import (
    CollectingMessageSink,
    FilteredMessageSink,
    LoggingMessageSink,
)


def test_filtered_sink_hides_matching_messages():
    inner = CollectingMessageSink()
    sink = FilteredMessageSink(inner, [r"^Extension .+ has been enabled\.$"])

    sink.add("Extension blog_module has been enabled.")
    sink.add("Site configured.")

    assert inner.messages == [("status", "Site configured.")]
    assert sink.suppressed == 1


def test_filtered_sink_never_hides_errors():
    inner = CollectingMessageSink()
    sink = FilteredMessageSink(inner, [r"enabled"])

    sink.add("Extension x could not be enabled", "error")

    assert inner.by_level("error") == ["Extension x could not be enabled"]
    assert sink.suppressed == 0


def test_logging_sink_maps_levels(caplog):
    sink = LoggingMessageSink(logging.getLogger("test.messages"))

    with caplog.at_level(logging.INFO, logger="test.messages"):
        sink.add("All good")
        sink.add("Careful", "warning")

    assert [(r.levelno, r.getMessage()) for r in caplog.records] == [
        (logging.INFO, "All good"),
        (logging.WARNING, "Careful"),
    ]
