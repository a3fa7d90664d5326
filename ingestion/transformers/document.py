"""
Transform source rows into Firestore-safe documents
"""

import base64
from datetime import date, datetime, timezone, tzinfo
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo
from google.api_core.datetime_helpers import DatetimeWithNanoseconds

# Firestore integers are signed 64-bit
FIRESTORE_INT_MIN = -(2 ** 63)
FIRESTORE_INT_MAX = 2 ** 63 - 1


class DocumentTransformer:
    """
    Convert a row into a document field by field.

    Handles:
    - date/datetime -> Firestore timestamp
    - integers outside the 64-bit range -> decimal string
    - binary -> base64 string

    Every other value is copied as is. No field is dropped or renamed and
    the conversion never raises.

    Naive DATETIME and DATE values are read in ``source_timezone`` (an IANA
    name such as ``"UTC"``), or in the local zone of this process when it is
    not given.
    """

    def __init__(self, source_timezone: Optional[str] = None):
        self.source_timezone = source_timezone
        self._zone: Optional[tzinfo] = ZoneInfo(source_timezone) if source_timezone else None

    def transform(self, row: Dict[str, Any]) -> Dict[str, Any]:
        return {key: self.convert_value(value) for key, value in row.items()}

    def transform_chunk(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [self.transform(row) for row in rows]

    def convert_value(self, value: Any) -> Any:
        if isinstance(value, datetime):
            return self._to_timestamp(value)
        if isinstance(value, date):
            return self._to_timestamp(datetime(value.year, value.month, value.day))
        if isinstance(value, int) and not isinstance(value, bool):
            if FIRESTORE_INT_MIN <= value <= FIRESTORE_INT_MAX:
                return value
            return str(value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return base64.b64encode(bytes(value)).decode("ascii")
        return value

    def _to_timestamp(self, value: datetime) -> DatetimeWithNanoseconds:
        if value.tzinfo is None and self._zone is not None:
            value = value.replace(tzinfo=self._zone)
        # astimezone reads a naive value as local time
        value = value.astimezone(timezone.utc)
        return DatetimeWithNanoseconds(
            value.year,
            value.month,
            value.day,
            value.hour,
            value.minute,
            value.second,
            value.microsecond,
            tzinfo=timezone.utc,
        )
