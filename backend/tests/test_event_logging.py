import json
import logging

from core.logger import log_event
from neuropath.scoring.models import DifficultyDirection


def test_log_event_emits_json_and_redacts_free_text(caplog):
    with caplog.at_level(logging.INFO, logger="neuropath.events"):
        log_event(
            "progress",
            "difficulty_advised",
            "owner-1",
            direction=DifficultyDirection.INCREASE,
            confidence=0.123456,
            message="Great work today",
        )

    record = json.loads(caplog.records[-1].getMessage())
    assert record["component"] == "progress"
    assert record["owner_id"] == "owner-1"
    assert record["direction"] == "increase"
    assert record["confidence"] == 0.1235
    assert record["message"] == {"redacted": True, "length": 16}
