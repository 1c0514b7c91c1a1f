from core.plugins import BasePlugin


class MediaWidgetsPlugin(BasePlugin):
    name = "media_widgets"
    label = "Media Widgets"
    description = "Image, audio, video and gallery widgets backed by the media library."

    def get_widgets(self):
        from .widget import MediaWidget
        from .widget_types import builtin_widget_types
        return [MediaWidget(widget_type) for widget_type in builtin_widget_types()]
