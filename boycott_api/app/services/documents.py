"""
Helpers shared by the services for schema-less documents.

Each table has a few real columns and an ``extra`` column holding the
remaining client-supplied keys as JSON.  ``split_fields`` separates a
request payload into those two parts; ``load_extra`` reads the JSON
column back.

Text columns only ever hold strings.  Documents are schema-less, so a
client may send any JSON value for a known field (``productName: 123``);
such values are kept in ``extra`` under their own key and the column is
left NULL.  Readers fall back from the column to ``extra``.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Tuple


# Keys owned by the store; values sent by clients are dropped.
RESERVED_FIELDS = frozenset({"_id", "id", "createdAt", "updatedAt"})


def utc_now() -> str:
    """Current time as stored in ``createdAt``/``updatedAt``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def split_fields(
    payload: Mapping[str, Any],
    text_columns: Mapping[str, str],
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Split ``payload`` into ``(column_values, extra)``.

    ``text_columns`` maps document keys to column names.  A known key
    with a non-string value sets its column to NULL and is stored in
    ``extra``.  Reserved keys are discarded.
    """
    column_values: Dict[str, Any] = {}
    extra: Dict[str, Any] = {}
    for key, value in payload.items():
        if key in RESERVED_FIELDS:
            continue
        if key in text_columns:
            if value is None or isinstance(value, str):
                column_values[text_columns[key]] = value
            else:
                column_values[text_columns[key]] = None
                extra[key] = value
        else:
            extra[key] = value
    return column_values, extra


def field_value(row: Mapping[str, Any], column: str, extra: Mapping[str, Any], key: str) -> Any:
    """Value of document field ``key``: the column if set, else ``extra``."""
    if row[column] is not None:
        return row[column]
    return extra.get(key)


def load_extra(raw: str | None) -> Dict[str, Any]:
    if not raw:
        return {}
    return json.loads(raw)


def dump_extra(extra: Mapping[str, Any]) -> str | None:
    return json.dumps(dict(extra)) if extra else None
