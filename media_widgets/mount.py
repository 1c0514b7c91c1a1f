"""Mount point for a widget control.

The admin form for a media widget is a set of hidden inputs (one per schema
field) plus a title input. ``ControlMount`` holds that state so a control can
be driven without a browser: inputs announce value changes through their own
``changed`` signal, the way the save pipeline listens for input events.
"""
from __future__ import annotations

import json
from html.parser import HTMLParser
from typing import Any

from django.dispatch import Signal

PROPERTY_INPUT_CLASS = "media-widget-instance-property"


class HiddenInput:
    def __init__(self, name: str, value: str = ""):
        self.name = name
        self.value = value
        self.changed = Signal()

    def __repr__(self):
        return f"<HiddenInput {self.name}={self.value!r}>"

    def set_value(self, value: str) -> None:
        self.value = value
        self.changed.send(sender=self, value=value)

    def decoded(self) -> Any:
        try:
            return json.loads(self.value)
        except ValueError:
            return self.value


class ControlMount:
    def __init__(self, widget_id: str, id_base: str, inputs: dict[str, HiddenInput] | None = None):
        self.widget_id = widget_id
        self.id_base = id_base
        self.inputs: dict[str, HiddenInput] = dict(inputs or {})
        self.title = ""
        # Name of the field holding keyboard focus, if any.
        self.focused: str | None = None
        self.classes: set[str] = set()
        self.fragment: str | None = None
        self.preview = ""
        self.notice = ""

    def __repr__(self):
        return f"<ControlMount {self.widget_id}>"

    @classmethod
    def from_form_html(cls, html: str, widget_id: str = "", id_base: str = "") -> "ControlMount":
        parser = _PropertyInputParser()
        parser.feed(html)
        parser.close()
        mount = cls(
            widget_id or parser.widget_id,
            id_base or parser.id_base,
            {name: HiddenInput(name, value) for name, value in parser.values.items()},
        )
        if "title" in mount.inputs:
            title = mount.inputs["title"].decoded()
            mount.title = title if isinstance(title, str) else ""
        return mount

    def input_values(self) -> dict:
        return {name: field.decoded() for name, field in self.inputs.items()}


class _PropertyInputParser(HTMLParser):
    """Collect media widget property inputs from a rendered widget form."""

    def __init__(self):
        super().__init__()
        self.values: dict[str, str] = {}
        self.widget_id = ""
        self.id_base = ""

    def handle_starttag(self, tag, attrs):
        attr_map = {k.lower(): v or "" for k, v in attrs}
        if "data-widget-id" in attr_map and not self.widget_id:
            self.widget_id = attr_map["data-widget-id"]
            self.id_base = attr_map.get("data-id-base", "")
        if tag.lower() != "input":
            return
        classes = attr_map.get("class", "").split()
        name = attr_map.get("data-property")
        if PROPERTY_INPUT_CLASS in classes and name:
            self.values[name] = attr_map.get("value", "")
