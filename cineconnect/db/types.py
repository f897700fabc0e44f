"""Column types."""

from __future__ import annotations

import json
import logging

from sqlalchemy import Text
from sqlalchemy.types import TypeDecorator

logger = logging.getLogger(__name__)


class JSONList(TypeDecorator):
    """A list stored as JSON text.

    Values that cannot be decoded into a list read back as an empty list,
    with a warning logged.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return json.dumps(list(value))

    def process_result_value(self, value, dialect):
        return parse_json_list(value)


def parse_json_list(value) -> list:
    if value is None or value == "":
        return []
    if isinstance(value, list):
        return value
    try:
        parsed = json.loads(value)
    except (TypeError, ValueError):
        logger.warning("Unparsable JSON list column value: %r", value)
        return []
    if not isinstance(parsed, list):
        logger.warning("JSON column value is not a list: %r", value)
        return []
    return parsed
