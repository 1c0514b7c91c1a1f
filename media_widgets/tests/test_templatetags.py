from unittest import mock

from django.template import Context, Template
from django.test import TestCase

from media_widgets.models import WidgetInstance
from media_widgets.test_utils import make_attachment


class RenderWidgetTagTests(TestCase):
    def setUp(self):
        self.attachment = make_attachment()
        self.image = WidgetInstance.objects.create(
            widget_type="media_image",
            area="sidebar",
            order=1,
            config={"attachment_id": self.attachment.pk, "title": "Photo"},
        )
        self.gallery = WidgetInstance.objects.create(
            widget_type="media_gallery",
            area="sidebar",
            order=0,
            config={"ids": str(self.attachment.pk), "title": "Gallery"},
        )
        WidgetInstance.objects.create(
            widget_type="media_image",
            area="sidebar",
            order=2,
            is_active=False,
            config={"attachment_id": self.attachment.pk, "title": "Hidden"},
        )

    def render(self, source, **context):
        return Template("{% load media_widgets %}" + source).render(Context(context))

    def test_render_single_placement(self):
        html = self.render("{% render_widget_instance placement %}", placement=self.image)
        self.assertIn("Photo", html)
        self.assertIn(f"wp-image-{self.attachment.pk}", html)

    def test_render_area_in_order(self):
        html = self.render('{% render_widget_area "sidebar" %}')
        self.assertLess(html.index("Gallery"), html.index("Photo"))
        self.assertNotIn("Hidden", html)

    def test_failing_widget_is_skipped(self):
        with mock.patch(
            "media_widgets.models.WidgetInstance.render", side_effect=[RuntimeError("boom"), "<p>ok</p>"]
        ):
            with self.assertLogs("media_widgets.templatetags.media_widgets", level="ERROR"):
                html = self.render('{% render_widget_area "sidebar" %}')
        self.assertEqual(html, "<p>ok</p>")
