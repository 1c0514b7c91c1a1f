"""Tests for media_widgets/schema.py: validation, partial updates and coercion."""
from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase

from media_widgets.schema import BOOLEAN, INTEGER, STRING, URI, Field, FieldSchema
from media_widgets.widget_types import get_widget_type


class FieldDefinitionTests(SimpleTestCase):
    def test_unknown_type_is_rejected(self):
        with self.assertRaises(ImproperlyConfigured):
            Field("count", "number", 0)

    def test_default_must_match_type(self):
        with self.assertRaises(ImproperlyConfigured):
            Field("count", INTEGER, "5")

    def test_boolean_default_is_not_an_integer(self):
        with self.assertRaises(ImproperlyConfigured):
            Field("count", INTEGER, True)

    def test_unknown_format_is_rejected(self):
        with self.assertRaises(ImproperlyConfigured):
            Field("link", STRING, "", format="email")

    def test_duplicate_names_are_rejected(self):
        with self.assertRaises(ImproperlyConfigured):
            FieldSchema([Field("a", STRING, ""), Field("a", STRING, "")])

    def test_extend_replaces_same_named_field(self):
        schema = FieldSchema([Field("a", STRING, ""), Field("b", INTEGER, 1)])
        extended = schema.extend([Field("b", INTEGER, 2), Field("c", BOOLEAN, False)])
        self.assertEqual(extended.names(), ["a", "b", "c"])
        self.assertEqual(extended["b"].default, 2)
        self.assertEqual(schema["b"].default, 1)


class SchemaUpdateTests(SimpleTestCase):
    def setUp(self):
        self.schema = get_widget_type("media_image").schema

    def test_invalid_enum_keeps_previous_value(self):
        result = self.schema.update({"align": "diagonal"}, {"align": "none"})
        self.assertEqual(result, {"align": "none"})

    def test_numeric_string_becomes_integer(self):
        result = self.schema.update({"width": "300"}, {})
        self.assertEqual(result["width"], 300)

    def test_unknown_keys_are_dropped(self):
        result = self.schema.update({"bogus": "x", "alt": "A cat"}, {})
        self.assertEqual(result, {"alt": "A cat"})

    def test_omitted_fields_keep_previous_values(self):
        previous = {"title": "Hello", "alt": "Old", "width": 10}
        result = self.schema.update({"alt": "New"}, previous)
        self.assertEqual(result, {"title": "Hello", "alt": "New", "width": 10})

    def test_absent_fields_are_not_filled_with_defaults(self):
        result = self.schema.update({"alt": "New"}, {})
        self.assertNotIn("size", result)

    def test_only_valid_submitted_fields_change(self):
        previous = self.schema.defaults()
        submitted = {
            "title": "Sunset",
            "width": "abc",
            "size": "large",
            "align": "sideways",
            "link_target_blank": "maybe",
            "nonsense": 1,
        }
        result = self.schema.update(submitted, previous)
        changed = {name for name in result if result[name] != previous[name]}
        self.assertEqual(changed, {"title", "size"})
        self.assertEqual(set(result), set(previous))

    def test_negative_attachment_id_is_rejected(self):
        result = self.schema.update({"attachment_id": -3}, {"attachment_id": 5})
        self.assertEqual(result["attachment_id"], 5)

    def test_boolean_true_equivalents(self):
        for value in (True, 1, "1", "true", "TRUE"):
            with self.subTest(value=value):
                result = self.schema.update({"link_target_blank": value}, {})
                self.assertIs(result["link_target_blank"], True)

    def test_boolean_false_equivalents(self):
        for value in (False, 0, "", "0", "false"):
            with self.subTest(value=value):
                result = self.schema.update({"link_target_blank": value}, {"link_target_blank": True})
                self.assertIs(result["link_target_blank"], False)

    def test_non_boolean_value_keeps_previous(self):
        result = self.schema.update({"link_target_blank": "yes"}, {"link_target_blank": True})
        self.assertIs(result["link_target_blank"], True)

    def test_boolean_string_on_text_field_is_left_alone(self):
        result = self.schema.update({"alt": "false"}, {})
        self.assertEqual(result["alt"], "false")

    def test_text_fields_strip_markup(self):
        result = self.schema.update({"title": '"><i onload="alert(1)">Hi there'}, {})
        self.assertEqual(result["title"], '">Hi there')

    def test_caption_keeps_allowed_markup(self):
        result = self.schema.update({"caption": 'Hi <a href="#">x</a><script>bad()</script>'}, {})
        self.assertIn('<a href="#">x</a>', result["caption"])
        self.assertNotIn("<script", result["caption"])

    def test_url_without_scheme_gets_one(self):
        result = self.schema.update({"url": "example.com/cat.jpg"}, {})
        self.assertEqual(result["url"], "http://example.com/cat.jpg")

    def test_url_with_disallowed_scheme_keeps_previous(self):
        previous = {"url": "https://example.com/cat.jpg"}
        result = self.schema.update({"url": "javascript:alert(1)"}, previous)
        self.assertEqual(result, previous)

    def test_url_must_be_a_string(self):
        result = self.schema.update({"url": ["https://example.com"]}, {"url": ""})
        self.assertEqual(result["url"], "")


class SchemaCoercionTests(SimpleTestCase):
    def setUp(self):
        self.schema = FieldSchema(
            [
                Field("count", INTEGER, 3),
                Field("flag", BOOLEAN, False),
                Field("label", STRING, ""),
                Field("link", STRING, "", format=URI),
            ]
        )

    def test_integer_coercion(self):
        self.assertEqual(self.schema.coerce("count", "300"), 300)
        self.assertEqual(self.schema.coerce("count", "12px"), 12)
        self.assertEqual(self.schema.coerce("count", 4.0), 4)

    def test_unparseable_integer_falls_back_to_default(self):
        self.assertEqual(self.schema.coerce("count", "abc"), 3)
        self.assertEqual(self.schema.coerce("count", None), 3)

    def test_boolean_coercion(self):
        self.assertIs(self.schema.coerce("flag", "1"), True)
        self.assertIs(self.schema.coerce("flag", True), True)
        for value in (False, "", "0", "false", None, 0):
            with self.subTest(value=value):
                self.assertIs(self.schema.coerce("flag", value), False)

    def test_string_coercion(self):
        self.assertEqual(self.schema.coerce("label", 5), "5")
        self.assertEqual(self.schema.coerce("label", None), "")

    def test_export(self):
        exported = get_widget_type("media_image").schema.export()
        self.assertEqual(exported["align"]["enum"], ["none", "left", "right", "center"])
        self.assertEqual(exported["attachment_id"]["media_prop"], "id")
        self.assertEqual(exported["url"]["format"], "uri")
        self.assertFalse(exported["title"]["should_preview_update"])
        self.assertTrue(get_widget_type("media_video").schema.export()["poster"]["reset_on_media_change"])
