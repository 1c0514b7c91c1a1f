"""Tests for the media_widget_types management command."""
import json
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import SimpleTestCase


class MediaWidgetTypesCommandTests(SimpleTestCase):
    def test_json_output_lists_builtin_types(self):
        out = StringIO()
        call_command("media_widget_types", "--json", stdout=out)
        rows = json.loads(out.getvalue())

        self.assertEqual(
            [row["id_base"] for row in rows],
            ["media_audio", "media_gallery", "media_image", "media_video"],
        )
        gallery = next(row for row in rows if row["id_base"] == "media_gallery")
        self.assertEqual(gallery["mime_type"], "image")
        self.assertIn("orderby_random", gallery["fields"])
        self.assertEqual(gallery["schema"]["columns"]["maximum"], 9)

    def test_single_type(self):
        out = StringIO()
        call_command("media_widget_types", "--id-base", "media_video", "--json", stdout=out)
        rows = json.loads(out.getvalue())
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["schema"]["width"]["default"], 640)

    def test_unknown_type(self):
        with self.assertRaises(CommandError):
            call_command("media_widget_types", "--id-base", "media_hologram")

    def test_table_output(self):
        out = StringIO()
        call_command("media_widget_types", stdout=out)
        lines = out.getvalue().splitlines()
        self.assertTrue(lines[0].startswith("ID_BASE"))
        self.assertIn("media_image", out.getvalue())
        self.assertIn("link_target_blank", out.getvalue())
