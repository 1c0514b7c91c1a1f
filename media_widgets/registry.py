"""Live controls for the widget placements currently on an editing screen."""
from __future__ import annotations

import logging

from .controls import MediaWidgetControl
from .mount import ControlMount
from .picker import AttachmentFetcher, MediaPicker
from .widget_types import UnknownWidgetType, get_widget_type

logger = logging.getLogger(__name__)


class WidgetControlRegistry:
    """Maps a placement's widget id to its control.

    Owned by whatever boots the editing screen; controls are added when their
    widget form appears and dropped when it goes away.
    """

    def __init__(self, picker: MediaPicker | None = None, fetcher: AttachmentFetcher | None = None):
        self.picker = picker
        self.fetcher = fetcher
        self._controls: dict[str, MediaWidgetControl] = {}

    def __contains__(self, widget_id: str) -> bool:
        return widget_id in self._controls

    def __len__(self) -> int:
        return len(self._controls)

    def get(self, widget_id: str) -> MediaWidgetControl | None:
        return self._controls.get(widget_id)

    def handle_widget_added(self, mount: ControlMount) -> MediaWidgetControl | None:
        existing = self._controls.get(mount.widget_id)
        if existing is not None:
            return existing

        try:
            widget_type = get_widget_type(mount.id_base)
        except UnknownWidgetType:
            logger.debug("Skipping non-media widget %s", mount.widget_id)
            return None

        model = widget_type.create_model(mount.input_values())
        control = widget_type.control_class(
            widget_type, model, mount, picker=self.picker, fetcher=self.fetcher
        )
        self._controls[mount.widget_id] = control
        control.render()
        logger.info("Added media widget control %s", mount.widget_id)
        return control

    def handle_widget_updated(self, widget_id: str) -> MediaWidgetControl | None:
        """Re-read the hidden inputs after the host saved the form."""
        control = self._controls.get(widget_id)
        if control is None:
            return None
        control.model.set(control.mount.input_values())
        return control

    def handle_widget_removed(self, widget_id: str) -> None:
        control = self._controls.pop(widget_id, None)
        if control is None:
            return
        control.destroy()
        logger.info("Removed media widget control %s", widget_id)
