from __future__ import annotations

import os
from typing import Optional

from django.db import models
from django.urls import reverse


class Attachment(models.Model):
    file = models.FileField(upload_to="uploads/%Y/%m/", blank=True)
    title = models.CharField(max_length=255, blank=True)
    caption = models.TextField(blank=True)
    alt_text = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    mime_type = models.CharField(max_length=100)
    width = models.PositiveIntegerField(default=0)
    height = models.PositiveIntegerField(default=0)
    # Generated renditions: {"thumbnail": {"url": ..., "width": ..., "height": ...}}
    sizes = models.JSONField(default=dict, blank=True)
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-uploaded_at", "-pk"]

    def __str__(self):
        return self.title or self.filename or f"Attachment {self.pk}"

    @property
    def url(self) -> str:
        return self.file.url if self.file else ""

    @property
    def filename(self) -> str:
        return os.path.basename(self.file.name) if self.file else ""

    @property
    def media_type(self) -> str:
        return self.mime_type.split("/", 1)[0]

    @property
    def subtype(self) -> str:
        return self.mime_type.split("/", 1)[1] if "/" in self.mime_type else ""

    def get_absolute_url(self):
        return reverse("media_widgets:attachment_detail", kwargs={"pk": self.pk})

    def image_src(self, size: str = "full") -> tuple[str, int, int]:
        """URL and dimensions for a named rendition, falling back to the original."""
        rendition = (self.sizes or {}).get(size) if size != "full" else None
        if isinstance(rendition, dict) and rendition.get("url"):
            return (
                rendition["url"],
                int(rendition.get("width") or 0),
                int(rendition.get("height") or 0),
            )
        return self.url, self.width, self.height

    def to_json(self) -> dict:
        """Attachment details in the shape the media picker works with."""
        sizes = {"full": {"url": self.url, "width": self.width, "height": self.height}}
        for name, rendition in (self.sizes or {}).items():
            if isinstance(rendition, dict) and rendition.get("url"):
                sizes[name] = {
                    "url": rendition["url"],
                    "width": int(rendition.get("width") or 0),
                    "height": int(rendition.get("height") or 0),
                }
        return {
            "id": self.pk,
            "title": self.title,
            "filename": self.filename,
            "url": self.url,
            "link": self.get_absolute_url(),
            "alt": self.alt_text,
            "caption": self.caption,
            "description": self.description,
            "mime": self.mime_type,
            "type": self.media_type,
            "subtype": self.subtype,
            "width": self.width,
            "height": self.height,
            "sizes": sizes,
        }


def resolve_attachment(attachment_id, mime_type: str = "") -> Optional[Attachment]:
    """Look up an attachment, optionally requiring a media type ("image", "audio", ...)."""
    try:
        pk = int(attachment_id or 0)
    except (TypeError, ValueError):
        return None
    if pk <= 0:
        return None
    attachment = Attachment.objects.filter(pk=pk).first()
    if attachment is None:
        return None
    if mime_type and attachment.media_type != mime_type and attachment.mime_type != mime_type:
        return None
    return attachment


class WidgetInstance(models.Model):
    widget_type = models.CharField(max_length=64)
    area = models.CharField(max_length=64)
    order = models.PositiveIntegerField(default=0)
    config = models.JSONField(default=dict, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["area", "order", "pk"]

    def __str__(self):
        return f"{self.widget_type} in {self.area} (order={self.order})"

    @property
    def widget_id(self) -> str:
        return f"{self.widget_type}-{self.pk}"

    @property
    def widget(self):
        from core.plugins import registry

        return registry.get_widget(self.widget_type)

    def apply_update(self, submission: dict) -> dict:
        """Validate a submission against the widget's schema and persist the result."""
        widget = self.widget
        if widget is None:
            raise LookupError(f"No widget registered for '{self.widget_type}'.")
        self.config = widget.update(submission, self.config or {})
        self.save(update_fields=["config"])
        return self.config

    def render(self, request=None) -> str:
        widget = self.widget
        if widget is None:
            return ""
        return widget.render(self.config or {}, request=request, widget_id=self.widget_id)
