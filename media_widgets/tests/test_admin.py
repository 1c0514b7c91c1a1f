from django.contrib.admin.sites import AdminSite
from django.test import TestCase

from media_widgets.admin import WidgetInstanceAdmin, WidgetInstanceForm
from media_widgets.models import WidgetInstance


class WidgetInstanceAdminTests(TestCase):
    def test_widget_type_choices_come_from_registry(self):
        choices = dict(WidgetInstanceForm().fields["widget_type"].choices)
        self.assertEqual(choices["media_image"], "Image")
        self.assertIn("media_gallery", choices)

    def test_unregistered_widget_type_is_invalid(self):
        form = WidgetInstanceForm(data={"widget_type": "text", "area": "sidebar", "order": 0, "config": "{}"})
        self.assertFalse(form.is_valid())
        self.assertIn("widget_type", form.errors)

    def test_save_runs_config_through_schema(self):
        model_admin = WidgetInstanceAdmin(WidgetInstance, AdminSite())
        form = WidgetInstanceForm(
            data={
                "widget_type": "media_video",
                "area": "sidebar",
                "order": 0,
                "is_active": "on",
                "config": '{"title": "<b>Clip</b>", "width": "wide"}',
            }
        )
        self.assertTrue(form.is_valid(), form.errors)
        placement = form.save(commit=False)

        model_admin.save_model(None, placement, form, change=False)

        placement.refresh_from_db()
        self.assertEqual(placement.config["title"], "Clip")
        self.assertNotIn("width", placement.config)
