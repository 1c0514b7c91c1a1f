"""Boundary types for the media picker and the attachment fetch.

The picker is whatever UI lets an editor browse the media library. Controls
only talk to it through ``MediaPicker.open``: they describe what they want in
a ``PickerRequest`` and receive ``PickerEvent`` objects back, using the
picker's own prop vocabulary (``id``, ``link``, ``linkUrl``, ``customWidth``,
...). Translating that vocabulary is the control's job.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Protocol

from .models import Attachment, resolve_attachment

PICKER_EVENTS = ("select", "update", "replace", "close")


@dataclass(frozen=True)
class PickerRequest:
    # "select" browses the library, "edit" opens the details frame.
    action: str
    mime_type: str
    props: dict = field(default_factory=dict)
    attachment: dict | None = None
    attachments: tuple = ()
    multiple: bool = False
    show_display_settings: bool = True
    button_text: str = ""
    title: str = ""


@dataclass(frozen=True)
class PickerEvent:
    name: str
    attachment: dict | None = None
    display_settings: dict = field(default_factory=dict)
    attachments: tuple = ()

    def __post_init__(self):
        if self.name not in PICKER_EVENTS:
            raise ValueError(f"Unknown picker event '{self.name}'.")


class MediaPicker(Protocol):
    def open(self, request: PickerRequest, on_event: Callable[[PickerEvent], None]) -> None:
        ...


class AttachmentFetcher(Protocol):
    """Loads attachment JSON and answers through a callback, possibly later."""

    def fetch(self, attachment_id: int, callback: Callable[[dict | None], None]) -> None:
        ...

    def fetch_many(self, attachment_ids: list[int], callback: Callable[[list[dict]], None]) -> None:
        ...


class OrmAttachmentFetcher:
    """Answers straight from the database, before ``fetch`` returns."""

    def fetch(self, attachment_id, callback):
        attachment = resolve_attachment(attachment_id)
        callback(attachment.to_json() if attachment is not None else None)

    def fetch_many(self, attachment_ids, callback):
        by_id = Attachment.objects.in_bulk(list(attachment_ids))
        callback([by_id[pk].to_json() for pk in attachment_ids if pk in by_id])
