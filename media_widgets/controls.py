"""Editing controls for media widgets.

A control owns one ``WidgetModel`` and one ``ControlMount``. It keeps the
mount's hidden inputs in step with the model, loads the referenced
attachment before drawing a preview, and translates between the media
picker's vocabulary and the model's field names.

Lifecycle::

    uninitialized --render()--> empty | pending --fetch done--> ready

A change to the attachment reference while rendered goes back through
``pending`` (or ``empty`` when the reference is cleared).
"""
from __future__ import annotations

import json
import logging
from enum import Enum
from django.template.loader import get_template

from . import oembed
from .kinds import AUDIO_EXTENSIONS, VIDEO_EXTENSIONS
from .mount import ControlMount
from .picker import (
    AttachmentFetcher,
    MediaPicker,
    OrmAttachmentFetcher,
    PickerEvent,
    PickerRequest,
)
from .widget_model import WidgetModel

logger = logging.getLogger(__name__)


class ControlState(str, Enum):
    UNINITIALIZED = "uninitialized"
    EMPTY = "empty"
    PENDING = "pending"
    READY = "ready"


class MediaWidgetControl:
    # Fields whose change means a different piece of media was chosen.
    reference_fields = ("attachment_id", "url")
    show_display_settings = True

    def __init__(
        self,
        widget_type,
        model: WidgetModel,
        mount: ControlMount,
        picker: MediaPicker | None = None,
        fetcher: AttachmentFetcher | None = None,
    ):
        self.widget_type = widget_type
        self.model = model
        self.mount = mount
        self.picker = picker
        self.fetcher = fetcher or OrmAttachmentFetcher()
        self.state = ControlState.UNINITIALIZED
        self.selected_attachment: dict | None = None
        self._pending_reference = None
        self._destroyed = False
        self.model.changed.connect(self._handle_model_change, weak=False)

    def __repr__(self):
        return f"<{type(self).__name__} {self.mount.widget_id} state={self.state.value}>"

    @property
    def l10n(self) -> dict:
        return self.widget_type.l10n

    # Rendering

    def render(self) -> None:
        if self.mount.fragment is None:
            template = get_template(f"media_widgets/{self.widget_type.control_template_id}.html")
            self.mount.fragment = template.render(
                {
                    "widget_id": self.mount.widget_id,
                    "widget_type": self.widget_type,
                    "l10n": self.l10n,
                    "model": self.model.to_json(),
                }
            )
        if self.mount.focused != "title":
            self.mount.title = self.model.get("title")
        self._toggle_selected()
        self._load_selection()

    def render_preview(self) -> None:
        raise NotImplementedError("Media widget controls must implement render_preview().")

    def _render_preview_template(self, **context) -> None:
        template = get_template(f"media_widgets/{self.widget_type.preview_template_id}.html")
        error = self.model.get("error")
        self.mount.notice = self.l10n.get(error, "") if error else ""
        self.mount.preview = template.render(
            {
                "widget_id": self.mount.widget_id,
                "model": self.model.to_json(),
                "attachment": self.selected_attachment,
                "error": error,
                "notice": self.mount.notice,
                "l10n": self.l10n,
                **context,
            }
        )

    def is_selected(self) -> bool:
        return bool(self.model.get("attachment_id") or self.model.get("url"))

    def _toggle_selected(self) -> None:
        if self.is_selected():
            self.mount.classes.add("selected")
        else:
            self.mount.classes.discard("selected")

    # Attachment loading

    def _selection_reference(self):
        return self.model.get("attachment_id") or None

    def _load_selection(self) -> None:
        reference = self._selection_reference()
        if reference:
            self.state = ControlState.PENDING
            self._pending_reference = reference
            self._fetch(reference)
            return

        self._pending_reference = None
        self.selected_attachment = None
        self.state = ControlState.READY if self.is_selected() else ControlState.EMPTY
        self.render_preview()

    def _fetch(self, reference) -> None:
        self.fetcher.fetch(
            reference, lambda attachment: self._attachment_loaded(reference, attachment)
        )

    def _attachment_loaded(self, reference, attachment: dict | None) -> None:
        if self._destroyed or reference != self._pending_reference:
            logger.debug("Dropping stale attachment fetch for %s", self.mount.widget_id)
            return
        if attachment is None:
            self.selected_attachment = None
            self.model.set("error", "missing_attachment")
        elif attachment.get("type") != self.widget_type.mime_type:
            self.selected_attachment = None
            self.model.set("error", "unsupported_file_type")
        else:
            self.selected_attachment = attachment
            self.model.set("error", False)
        self._pending_reference = None
        self.state = ControlState.READY
        self.render_preview()

    # Model to inputs

    def sync_model_to_inputs(self) -> None:
        for field in self.widget_type.schema:
            field_input = self.mount.inputs.get(field.name)
            if field_input is None:
                continue
            value = json.dumps(self.model.get(field.name))
            if field_input.value != value:
                field_input.set_value(value)

    def handle_title_input(self, value: str) -> None:
        self.mount.title = value
        self.model.set("title", value)

    def _handle_model_change(self, sender, changes, **kwargs) -> None:
        self.sync_model_to_inputs()
        if self.state is ControlState.UNINITIALIZED or self._destroyed:
            return
        if "title" in changes and self.mount.focused != "title":
            self.mount.title = self.model.get("title")
        if any(name in changes for name in self.reference_fields):
            self._toggle_selected()
            self._load_selection()
            return
        if self.state is ControlState.PENDING:
            return
        schema = self.widget_type.schema
        if any(
            name == "error" or (name in schema and schema[name].should_preview_update)
            for name in changes
        ):
            self.render_preview()

    # Picker vocabulary

    def map_model_to_media_frame_props(self, model_props: dict) -> dict:
        props = {}
        for field in self.widget_type.schema:
            if field.name in model_props:
                props[field.media_prop or field.name] = model_props[field.name]
        if "attachment_id" in model_props:
            props["attachment_id"] = model_props["attachment_id"]
        return props

    def map_media_to_model_props(self, media_props: dict) -> dict:
        schema = self.widget_type.schema
        prop_to_field = {f.name: f.name for f in schema if not f.media_prop}
        prop_to_field.update({f.media_prop: f.name for f in schema if f.media_prop})

        model_props = {}
        for prop, value in media_props.items():
            name = prop_to_field.get(prop)
            # The widget title is never taken from the media item.
            if name is None or name == "title":
                continue
            model_props[name] = value

        if "link_url" in schema:
            if media_props.get("link") == "post":
                model_props["link_url"] = media_props.get("postUrl") or media_props.get("linkUrl", "")
            elif media_props.get("link") == "file":
                model_props["link_url"] = media_props.get("url", "")
        if "attachment_id" in schema and not media_props.get("attachment_id") and media_props.get("id"):
            model_props["attachment_id"] = media_props["id"]

        url = media_props.get("url")
        if url:
            extension = url.split("#", 1)[0].split("?", 1)[0].rsplit(".", 1)[-1].lower()
            if extension in AUDIO_EXTENSIONS + VIDEO_EXTENSIONS and extension in schema:
                model_props[extension] = url
        return model_props

    def get_reset_props(self, new_props: dict) -> dict:
        """Defaults for media-bound fields the new selection does not supply."""
        return {
            field.name: field.default
            for field in self.widget_type.schema
            if field.reset_on_media_change and field.name not in new_props
        }

    # Picker

    def select_media(self) -> None:
        raise NotImplementedError("Media widget controls must implement select_media().")

    def edit_media(self) -> None:
        raise NotImplementedError("Media widget controls must implement edit_media().")

    def _open_picker(self, action: str, props: dict, **options) -> None:
        if self.picker is None:
            raise RuntimeError(f"No media picker attached to {self.mount.widget_id}.")
        request = PickerRequest(
            action=action,
            mime_type=self.widget_type.mime_type,
            props=props,
            attachment=self.selected_attachment,
            show_display_settings=self.show_display_settings,
            button_text=self.l10n.get("add_to_widget", ""),
            title=self.l10n.get("edit_media" if action == "edit" else "select_media", ""),
            **options,
        )
        self.picker.open(request, self.handle_picker_event)

    def handle_picker_event(self, event: PickerEvent) -> None:
        if self._destroyed:
            return
        if event.name == "close":
            logger.debug("Media picker closed for %s", self.mount.widget_id)
            return
        attachment = event.attachment or {}
        if attachment.get("type") and attachment["type"] != self.widget_type.mime_type:
            self.model.set("error", "unsupported_file_type")
            return
        self.apply_media_props(self.picker_event_props(event), replace=event.name != "update")

    def picker_event_props(self, event: PickerEvent) -> dict:
        # An attachment's "link" is its permalink, not a link type.
        attachment = {k: v for k, v in (event.attachment or {}).items() if k != "link"}
        return {**attachment, **event.display_settings}

    def apply_media_props(self, media_props: dict, replace: bool = True) -> None:
        model_props = self.map_media_to_model_props(media_props)
        if replace:
            model_props = {**self.get_reset_props(model_props), **model_props}
        self.model.set({**model_props, "error": False})

    def destroy(self) -> None:
        self._destroyed = True
        self._pending_reference = None
        self.model.changed.disconnect(self._handle_model_change)
        self.mount.fragment = None
        self.mount.preview = ""


class ImageWidgetControl(MediaWidgetControl):
    # Model field -> image details frame prop.
    EDIT_FRAME_PROPS = {
        "attachment_id": "attachment_id",
        "alt": "alt",
        "align": "align",
        "caption": "caption",
        "image_classes": "extraClasses",
        "image_title": "title",
        "link_classes": "linkClassName",
        "link_rel": "linkRel",
        "link_target_blank": "linkTargetBlank",
        "link_type": "link",
        "link_url": "linkUrl",
        "size": "size",
        "url": "url",
    }

    def render_preview(self) -> None:
        src = self.model.get("url")
        if self.selected_attachment:
            sizes = self.selected_attachment.get("sizes") or {}
            size = sizes.get(self.model.get("size")) or sizes.get("full") or {}
            src = size.get("url") or self.selected_attachment.get("url") or src
        self._render_preview_template(src=src)

    def map_model_to_media_frame_props(self, model_props: dict) -> dict:
        props = {
            prop: model_props[name]
            for name, prop in self.EDIT_FRAME_PROPS.items()
            if name in model_props
        }
        props["customWidth"] = model_props.get("width", 0)
        props["customHeight"] = model_props.get("height", 0)
        return props

    def map_media_to_model_props(self, media_props: dict) -> dict:
        model_props = {
            name: media_props[prop]
            for name, prop in self.EDIT_FRAME_PROPS.items()
            if prop in media_props
        }
        if not media_props.get("attachment_id") and media_props.get("id"):
            model_props["attachment_id"] = media_props["id"]
        if media_props.get("size") == "custom":
            model_props["width"] = media_props.get("customWidth", 0)
            model_props["height"] = media_props.get("customHeight", 0)
        else:
            model_props["width"] = media_props.get("width", 0)
            model_props["height"] = media_props.get("height", 0)
        return model_props

    def picker_event_props(self, event: PickerEvent) -> dict:
        if event.name == "update":
            return dict(event.display_settings)
        attachment = event.attachment or {}
        display = event.display_settings
        size = display.get("size") or "full"
        rendition = (attachment.get("sizes") or {}).get(size) or {}
        link = display.get("link") or "none"
        if link == "file":
            link_url = attachment.get("url", "")
        elif link == "post":
            link_url = attachment.get("link", "")
        else:
            link_url = display.get("linkUrl", "")
        return {
            "id": attachment.get("id", 0),
            "type": attachment.get("type", ""),
            "alt": attachment.get("alt", ""),
            "caption": attachment.get("caption", ""),
            "align": display.get("align") or "none",
            "size": size,
            "url": rendition.get("url") or attachment.get("url", ""),
            "link": link,
            "linkUrl": link_url,
            "extraClasses": "",
            "title": "",
            "linkClassName": "",
            "linkRel": "",
            "linkTargetBlank": False,
            # Explicit dimensions only make sense for a custom size.
            "width": 0,
            "height": 0,
        }

    def select_media(self) -> None:
        self._open_picker(
            "select", self.map_model_to_media_frame_props(self.model.to_json())
        )

    def edit_media(self) -> None:
        self._open_picker("edit", self.map_model_to_media_frame_props(self.model.to_json()))


class AudioWidgetControl(MediaWidgetControl):
    show_display_settings = False

    def map_model_to_media_frame_props(self, model_props: dict) -> dict:
        props = super().map_model_to_media_frame_props(model_props)
        props["link"] = "embed"
        return props

    def render_preview(self) -> None:
        src = self.model.get("url")
        if self.selected_attachment:
            src = self.selected_attachment.get("url") or src
        self._render_preview_template(src=src)

    def select_media(self) -> None:
        self._open_picker("select", self.map_model_to_media_frame_props(self.model.to_json()))

    def edit_media(self) -> None:
        self._open_picker("edit", self.map_model_to_media_frame_props(self.model.to_json()))


class VideoWidgetControl(AudioWidgetControl):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._thumbnails: dict[str, str] = {}

    def render_preview(self) -> None:
        attachment_id = self.model.get("attachment_id")
        url = self.model.get("url")
        if not attachment_id and not url:
            self._render_preview_template(src="", poster="")
            return
        src = url
        if self.selected_attachment:
            src = self.selected_attachment.get("url") or src
        poster = self.model.get("poster")
        if not poster and not attachment_id and url:
            poster = self.external_thumbnail(url)
        self._render_preview_template(src=src, poster=poster)

    def external_thumbnail(self, url: str) -> str:
        if url not in self._thumbnails:
            self._thumbnails[url] = oembed.fetch_thumbnail_url(url)
        return self._thumbnails[url]


class GalleryWidgetControl(MediaWidgetControl):
    reference_fields = ("ids",)

    def is_selected(self) -> bool:
        return bool(self.model.attachment_ids())

    def _selection_reference(self):
        return tuple(self.model.attachment_ids()) or None

    def _fetch(self, reference) -> None:
        self.fetcher.fetch_many(
            list(reference), lambda attachments: self._attachments_loaded(reference, attachments)
        )

    def _attachments_loaded(self, reference, attachments: list[dict]) -> None:
        if self._destroyed or reference != self._pending_reference:
            logger.debug("Dropping stale gallery fetch for %s", self.mount.widget_id)
            return
        images = tuple(a for a in attachments if a.get("type") == "image")
        self.model.set(
            {"attachments": images, "error": False if images else "missing_attachment"}
        )
        self._pending_reference = None
        self.state = ControlState.READY
        self.render_preview()

    def render_preview(self) -> None:
        self._render_preview_template(attachments=self.model.get("attachments"))

    def picker_event_props(self, event: PickerEvent) -> dict:
        ids = ",".join(str(a["id"]) for a in event.attachments if a.get("id"))
        return {**event.display_settings, "ids": ids}

    def handle_picker_event(self, event: PickerEvent) -> None:
        if self._destroyed or event.name == "close":
            return
        images = tuple(a for a in event.attachments if a.get("type") == "image")
        event = PickerEvent(event.name, None, event.display_settings, images)
        model_props = self.map_media_to_model_props(self.picker_event_props(event))
        # Already loaded by the picker; no need to fetch them again.
        self._pending_reference = None
        self.model.set({**model_props, "attachments": images, "error": False})

    def _load_selection(self) -> None:
        loaded = tuple(a.get("id") for a in self.model.get("attachments"))
        if loaded and loaded == self._selection_reference():
            self._pending_reference = None
            self.state = ControlState.READY
            self.render_preview()
            return
        super()._load_selection()

    def select_media(self) -> None:
        self._open_picker(
            "select",
            self.map_model_to_media_frame_props(self.model.to_json()),
            attachments=self.model.get("attachments"),
            multiple=True,
        )

    def edit_media(self) -> None:
        self._open_picker(
            "edit",
            self.map_model_to_media_frame_props(self.model.to_json()),
            attachments=self.model.get("attachments"),
            multiple=True,
        )
