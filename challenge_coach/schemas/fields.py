from datetime import date, datetime
from marshmallow import fields


class FlexibleDate(fields.Date):
    """Date field that also accepts full ISO timestamps, keeping only the date part.

    Mobile clients serialize JS ``Date`` objects as ``2024-05-01T00:00:00.000Z``.
    """

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str) and "T" in value:
            value = value.split("T", 1)[0]
        return super()._deserialize(value, attr, data, **kwargs)
