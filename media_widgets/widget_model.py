"""In-memory mirror of one widget instance, used by the editing controls."""
from __future__ import annotations

import logging
from typing import Any

from django.dispatch import Signal

from .sanitizers import parse_id_list
from .schema import FieldSchema

logger = logging.getLogger(__name__)


class WidgetModel:
    # Control-only attributes; never persisted with the instance.
    transient_fields: dict[str, Any] = {"id": "", "error": False}

    def __init__(self, schema: FieldSchema, attributes: dict | None = None):
        self.schema = schema
        self.changed = Signal()
        self._values = schema.defaults()
        self._transient = dict(self.transient_fields)
        if attributes:
            self._assign(attributes)

    def __repr__(self):
        return f"<{type(self).__name__} {self._values!r}>"

    def get(self, name: str) -> Any:
        if name in self._values:
            return self._values[name]
        if name in self._transient:
            return self._transient[name]
        raise KeyError(name)

    def set(self, field_or_map: str | dict, value: Any = None) -> dict:
        """Coerce and store values, sending ``changed`` once if anything differs.

        Returns the changed fields as ``{name: (old, new)}``.
        """
        if isinstance(field_or_map, dict):
            attributes = field_or_map
        else:
            attributes = {field_or_map: value}
        changes = self._assign(attributes)
        if changes:
            self.changed.send(sender=self, changes=changes)
        return changes

    def _assign(self, attributes: dict) -> dict:
        changes = {}
        for name, raw in attributes.items():
            if name in self.schema:
                store = self._values
                new = self.schema.coerce(name, raw)
            elif name in self._transient:
                store = self._transient
                new = raw
            else:
                logger.debug("Ignoring unknown model attribute %r", name)
                continue
            old = store[name]
            if old != new or type(old) is not type(new):
                store[name] = new
                changes[name] = (old, new)
        return changes

    def to_instance(self) -> dict:
        """Schema fields only, as they would be submitted for saving."""
        return dict(self._values)

    def to_json(self) -> dict:
        return {**self._values, **self._transient}


class GalleryWidgetModel(WidgetModel):
    transient_fields = {**WidgetModel.transient_fields, "attachments": ()}

    def attachment_ids(self) -> list[int]:
        return parse_id_list(self.get("ids"))

    def remove_attachment_id(self, attachment_id: int) -> None:
        ids = [pk for pk in self.attachment_ids() if pk != int(attachment_id)]
        attachments = tuple(
            a for a in self.get("attachments") if a.get("id") != int(attachment_id)
        )
        self.set({"ids": ",".join(str(pk) for pk in ids), "attachments": attachments})
