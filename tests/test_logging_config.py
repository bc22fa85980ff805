# tests/test_logging_config.py
from __future__ import annotations

import json
import logging
import uuid

from runi.core.logging_config import JsonFormatter, get_logging_config


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="runi.crud.staff",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="staff logged in",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_emits_extra_fields():
    staff_id = uuid.uuid4()
    line = JsonFormatter().format(make_record(staff_id=str(staff_id), attempts=3))

    entry = json.loads(line)
    assert entry["level"] == "INFO"
    assert entry["logger"] == "runi.crud.staff"
    assert entry["message"] == "staff logged in"
    assert entry["extra"] == {"staff_id": str(staff_id), "attempts": 3}


def test_json_formatter_stringifies_unserializable_extras():
    staff_id = uuid.uuid4()
    entry = json.loads(JsonFormatter().format(make_record(staff_id=staff_id)))

    assert entry["extra"]["staff_id"] == str(staff_id)


def test_console_config_by_default():
    config = get_logging_config(log_level="debug", log_format="console")

    assert config["handlers"]["console"]["formatter"] == "verbose"
    assert config["loggers"]["runi"]["level"] == "DEBUG"


def test_json_config_uses_json_formatter():
    config = get_logging_config(log_level="INFO", log_format="json")

    assert config["formatters"]["json"]["()"] == "runi.core.logging_config.JsonFormatter"
    assert config["handlers"]["console"]["formatter"] == "json"
