"""Capability descriptions for each media widget.

A single generic widget engine (see ``widget.py``) is parameterized by one of
these records instead of a subclass per media type.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

from .conf import image_size_names
from .controls import (
    AudioWidgetControl,
    GalleryWidgetControl,
    ImageWidgetControl,
    MediaWidgetControl,
    VideoWidgetControl,
)
from .kinds import AUDIO_EXTENSIONS, VIDEO_EXTENSIONS, MediaKind
from .sanitizers import sanitize_html, sanitize_id_list
from .schema import BOOLEAN, INTEGER, STRING, URI, Field, FieldSchema
from .widget_model import GalleryWidgetModel, WidgetModel

BASE_L10N = {
    "add_to_widget": "Add to Widget",
    "no_media_selected": "No media selected",
    "select_media": "Select Media",
    "change_media": "Change Media",
    "edit_media": "Edit Media",
    "missing_attachment": "We can't find that file. Check your media library and make sure it wasn't deleted.",
    "unsupported_file_type": "Looks like this isn't the correct kind of file.",
}


class UnknownWidgetType(LookupError):
    pass


@dataclass(frozen=True, eq=False)
class MediaWidgetType:
    kind: MediaKind
    id_base: str
    name: str
    description: str
    schema: FieldSchema
    control_class: type[MediaWidgetControl]
    model_class: type[WidgetModel] = WidgetModel
    l10n: dict = field(default_factory=dict)

    @property
    def mime_type(self) -> str:
        return self.kind.mime_type

    @property
    def control_template_id(self) -> str:
        return f"widget-media-{self.id_base}-control"

    @property
    def preview_template_id(self) -> str:
        return f"{self.id_base}-preview"

    @property
    def prop_map(self) -> dict[str, str]:
        """Model field name -> media picker prop name."""
        return {f.name: f.media_prop or f.name for f in self.schema}

    @property
    def widget_options(self) -> dict:
        return {
            "description": self.description,
            "mime_type": self.mime_type,
            "classname": f"widget_media widget_{self.id_base}",
            "customize_selective_refresh": True,
        }

    def create_model(self, attributes: Optional[dict] = None) -> WidgetModel:
        return self.model_class(self.schema, attributes)


def base_fields() -> list[Field]:
    return [
        Field(
            "title",
            STRING,
            "",
            description="Title for the widget",
            should_preview_update=False,
        ),
        Field(
            "attachment_id",
            INTEGER,
            0,
            minimum=0,
            media_prop="id",
            description="Attachment post ID",
        ),
        Field(
            "url",
            STRING,
            "",
            format=URI,
            description="URL to the media file",
        ),
    ]


def image_schema() -> FieldSchema:
    sizes = tuple(image_size_names()) + ("full", "custom")
    return FieldSchema(base_fields()).extend(
        [
            Field("size", STRING, "medium", enum=sizes, description="Size"),
            Field("width", INTEGER, 0, minimum=0, description="Width"),
            Field("height", INTEGER, 0, minimum=0, description="Height"),
            Field(
                "caption",
                STRING,
                "",
                sanitize=sanitize_html,
                should_preview_update=False,
                description="Caption",
            ),
            Field("alt", STRING, "", description="Alternative Text"),
            Field(
                "link_type",
                STRING,
                "none",
                enum=("none", "post", "file", "custom"),
                media_prop="link",
                should_preview_update=False,
                description="Link To",
            ),
            Field(
                "link_url",
                STRING,
                "",
                format=URI,
                media_prop="linkUrl",
                should_preview_update=False,
                description="URL",
            ),
            Field(
                "image_classes",
                STRING,
                "",
                media_prop="extraClasses",
                should_preview_update=False,
                description="Image CSS Class",
            ),
            Field(
                "link_classes",
                STRING,
                "",
                media_prop="linkClassName",
                should_preview_update=False,
                description="Link CSS Class",
            ),
            Field(
                "link_rel",
                STRING,
                "",
                media_prop="linkRel",
                should_preview_update=False,
                description="Link Rel",
            ),
            Field(
                "link_target_blank",
                BOOLEAN,
                False,
                media_prop="linkTargetBlank",
                should_preview_update=False,
                description="Open link in a new tab",
            ),
            Field(
                "image_title",
                STRING,
                "",
                media_prop="title",
                should_preview_update=False,
                description="Image Title Attribute",
            ),
            Field(
                "align",
                STRING,
                "none",
                enum=("none", "left", "right", "center"),
                should_preview_update=False,
                description="Alignment",
            ),
        ]
    )


def _player_fields(extensions: tuple[str, ...], kind: str) -> list[Field]:
    fields = [
        Field("autoplay", BOOLEAN, False, should_preview_update=False, description="Autoplay"),
        Field(
            "preload",
            STRING,
            "none",
            enum=("none", "auto", "metadata"),
            should_preview_update=False,
            description="Preload",
        ),
        Field("loop", BOOLEAN, False, should_preview_update=False, description="Loop"),
        Field(
            "link_type",
            STRING,
            "none",
            enum=("none", "embed", "file", "post"),
            media_prop="link",
            should_preview_update=False,
            description="Link To",
        ),
    ]
    for extension in extensions:
        fields.append(
            Field(
                extension,
                STRING,
                "",
                format=URI,
                description=f"URL to the {extension} {kind} source file",
            )
        )
    return fields


def audio_schema() -> FieldSchema:
    return FieldSchema(base_fields()).extend(_player_fields(AUDIO_EXTENSIONS, "audio"))


def video_schema() -> FieldSchema:
    return FieldSchema(base_fields()).extend(
        _player_fields(VIDEO_EXTENSIONS, "video")
        + [
            Field(
                "poster",
                STRING,
                "",
                format=URI,
                reset_on_media_change=True,
                description="URL to the poster frame",
            ),
            Field("width", INTEGER, 640, minimum=0, description="Video width"),
            Field("height", INTEGER, 360, minimum=0, description="Video height"),
            Field(
                "content",
                STRING,
                "",
                sanitize=sanitize_html,
                should_preview_update=False,
                description="Tracks (subtitles, captions, descriptions, chapters, or metadata)",
            ),
        ]
    )


def gallery_schema() -> FieldSchema:
    sizes = tuple(image_size_names()) + ("full",)
    return FieldSchema(
        [
            Field(
                "title",
                STRING,
                "",
                description="Title for the widget",
                should_preview_update=False,
            ),
            Field("ids", STRING, "", sanitize=sanitize_id_list, description="Attachment IDs"),
            Field("columns", INTEGER, 3, minimum=1, maximum=9, description="Columns"),
            Field("size", STRING, "thumbnail", enum=sizes, description="Size"),
            Field(
                "link_type",
                STRING,
                "none",
                enum=("none", "file", "post"),
                media_prop="link",
                should_preview_update=False,
                description="Link To",
            ),
            Field(
                "orderby_random",
                BOOLEAN,
                False,
                media_prop="_orderbyRandom",
                should_preview_update=False,
                description="Random Order",
            ),
        ]
    )


@lru_cache(maxsize=None)
def builtin_widget_types() -> tuple[MediaWidgetType, ...]:
    return (
        MediaWidgetType(
            kind=MediaKind.IMAGE,
            id_base="media_image",
            name="Image",
            description="Displays an image.",
            schema=image_schema(),
            control_class=ImageWidgetControl,
            l10n={
                **BASE_L10N,
                "no_media_selected": "No image selected",
                "select_media": "Select Image",
                "change_media": "Change Image",
                "edit_media": "Edit Image",
                "missing_attachment": "We can't find that image. Check your media library and make sure it wasn't deleted.",
            },
        ),
        MediaWidgetType(
            kind=MediaKind.AUDIO,
            id_base="media_audio",
            name="Audio",
            description="Displays an audio player.",
            schema=audio_schema(),
            control_class=AudioWidgetControl,
            l10n={
                **BASE_L10N,
                "no_media_selected": "No audio selected",
                "select_media": "Select Audio",
                "change_media": "Change Audio",
                "edit_media": "Edit Audio",
                "missing_attachment": "We can't find that audio file. Check your media library and make sure it wasn't deleted.",
            },
        ),
        MediaWidgetType(
            kind=MediaKind.VIDEO,
            id_base="media_video",
            name="Video",
            description="Displays a video from the media library or from YouTube, Vimeo, or another provider.",
            schema=video_schema(),
            control_class=VideoWidgetControl,
            l10n={
                **BASE_L10N,
                "no_media_selected": "No video selected",
                "select_media": "Select Video",
                "change_media": "Change Video",
                "edit_media": "Edit Video",
                "missing_attachment": "We can't find that video. Check your media library and make sure it wasn't deleted.",
            },
        ),
        MediaWidgetType(
            kind=MediaKind.GALLERY,
            id_base="media_gallery",
            name="Gallery",
            description="Displays an image gallery.",
            schema=gallery_schema(),
            control_class=GalleryWidgetControl,
            model_class=GalleryWidgetModel,
            l10n={
                **BASE_L10N,
                "no_media_selected": "No images selected",
                "select_media": "Select Images",
                "change_media": "Add Image",
                "edit_media": "Edit Gallery",
                "missing_attachment": "We can't find that gallery. Check your media library and make sure it wasn't deleted.",
            },
        ),
    )


def get_widget_type(id_base: str) -> MediaWidgetType:
    for widget_type in builtin_widget_types():
        if widget_type.id_base == id_base:
            return widget_type
    raise UnknownWidgetType(f"No media widget registered for '{id_base}'.")
