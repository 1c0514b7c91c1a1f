from django.test import SimpleTestCase

from core.plugins import BasePlugin, BaseWidget, PluginRegistry, registry


class EchoWidget(BaseWidget):
    id_base = "echo"
    name = "Echo"

    def render(self, instance, request=None, widget_id=""):
        return instance.get("text", "")

    def update(self, new_instance, old_instance):
        return {**old_instance, **new_instance}


class EchoPlugin(BasePlugin):
    name = "echo"
    label = "Echo"

    def get_widgets(self):
        return [EchoWidget()]


class PluginRegistryTests(SimpleTestCase):
    def setUp(self):
        self.registry = PluginRegistry()
        self.registry.register(EchoPlugin())

    def test_lookup(self):
        self.assertIsInstance(self.registry.get_plugin("echo"), EchoPlugin)
        self.assertIsNone(self.registry.get_plugin("missing"))
        self.assertEqual(self.registry.get_widget("echo").render({"text": "hi"}), "hi")
        self.assertIsNone(self.registry.get_widget("missing"))

    def test_widget_choices(self):
        self.assertEqual(self.registry.widget_choices(), [("echo", "Echo")])

    def test_base_widget_form_is_empty(self):
        self.assertEqual(EchoWidget().form({}), "")

    def test_media_widgets_register_on_startup(self):
        id_bases = {widget.id_base for widget in registry.get_all_widgets()}
        self.assertTrue({"media_image", "media_audio", "media_video", "media_gallery"} <= id_bases)
        self.assertEqual(registry.get_widget("media_video").widget_options["mime_type"], "video")
