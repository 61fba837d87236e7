from __future__ import annotations

import logging

from logging_config import ContextualFormatter
from models.records import PollutionLevel


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="services.analysis",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Zone analysed",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_known_extra_fields() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    rendered = formatter.format(
        _record(zone_id="z1", overall_level=PollutionLevel.no_data, area_km2=3.14159, sensor_id=None)
    )

    assert rendered == "Zone analysed | zone_id=z1 overall_level=no-data area_km2=3.142"


def test_formatter_leaves_plain_messages_untouched() -> None:
    formatter = ContextualFormatter(fmt="%(message)s", extra_keys=["zone_id"])

    assert formatter.format(_record(sensor_id="s1")) == "Zone analysed"
