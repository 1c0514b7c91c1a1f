from __future__ import annotations

import json
import logging

from django.template.loader import render_to_string
from django.utils.safestring import mark_safe

from core.plugins import BaseWidget

from .renderers import get_renderer
from .widget_types import MediaWidgetType

logger = logging.getLogger(__name__)


class MediaWidget(BaseWidget):
    """Media widget engine, configured by a ``MediaWidgetType``."""

    template_name = "media_widgets/widget.html"
    form_template_name = "media_widgets/form.html"

    def __init__(self, widget_type: MediaWidgetType):
        self.widget_type = widget_type
        self.id_base = widget_type.id_base
        self.name = widget_type.name
        self.widget_options = widget_type.widget_options

    def __repr__(self):
        return f"<MediaWidget {self.id_base}>"

    @property
    def schema(self):
        return self.widget_type.schema

    def default_instance(self) -> dict:
        return self.schema.defaults()

    def update(self, new_instance: dict, old_instance: dict) -> dict:
        return self.schema.update(new_instance, old_instance)

    def render_media(self, instance: dict, widget_id: str = "") -> str:
        renderer = get_renderer(self.widget_type.kind)
        return renderer(self.schema.with_defaults(instance), widget_id=widget_id)

    def render(self, instance: dict, request=None, widget_id: str = "") -> str:
        instance = self.schema.with_defaults(instance)
        media = self.render_media(instance, widget_id=widget_id)
        if not media:
            logger.debug("Nothing to render for %s", widget_id or self.id_base)
            return ""
        return render_to_string(
            self.template_name,
            {
                "widget_id": widget_id,
                "classname": self.widget_options["classname"],
                "title": instance.get("title", ""),
                "media": mark_safe(media),
            },
            request=request,
        )

    def form(self, instance: dict, widget_id: str = "") -> str:
        instance = self.schema.with_defaults(instance)
        fields = [
            {"name": name, "value": json.dumps(instance[name])}
            for name in self.schema.names()
        ]
        return render_to_string(
            self.form_template_name,
            {
                "widget_id": widget_id,
                "id_base": self.id_base,
                "fields": fields,
                "control_template_id": self.widget_type.control_template_id,
            },
        )

    def export_schema(self) -> dict:
        return self.schema.export()
