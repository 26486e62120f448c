"""SnapBridge Fields — await the first value of a document field.

Usage::

    from snapbridge.fields import on_field_updated

    url = await on_field_updated(upload_document, "download_url", timeout=30)
"""

from snapbridge.fields.wait import (
    field_values,
    on_field_updated,
    on_field_updated_or_null,
    wait_for_field,
    wait_for_value,
)

__all__ = [
    "field_values",
    "on_field_updated",
    "on_field_updated_or_null",
    "wait_for_field",
    "wait_for_value",
]
