import json

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from media_widgets.models import WidgetInstance
from media_widgets.test_utils import make_attachment


class MediaWidgetViewTests(TestCase):
    def setUp(self):
        super().setUp()
        self.user = get_user_model().objects.create_user(
            username="reader",
            email="reader@example.com",
            password="password",
        )
        self.staff = get_user_model().objects.create_user(
            username="editor",
            email="editor@example.com",
            password="password",
            is_staff=True,
        )
        self.attachment = make_attachment(caption="Evening")

    def test_attachment_json_requires_staff(self):
        url = reverse("media_widgets:attachment_json", kwargs={"pk": self.attachment.pk})

        response = self.client.get(url)
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json(), {"error": "forbidden"})

        self.client.force_login(self.user)
        self.assertEqual(self.client.get(url).status_code, 403)

        self.client.force_login(self.staff)
        response = self.client.get(url)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["caption"], "Evening")

    def test_attachment_json_missing(self):
        self.client.force_login(self.staff)
        response = self.client.get(reverse("media_widgets:attachment_json", kwargs={"pk": 999999}))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "missing_attachment"})

    def test_preview_renders_submitted_instance(self):
        self.client.force_login(self.staff)
        response = self.client.post(
            reverse("media_widgets:preview", kwargs={"id_base": "media_image"}),
            data=json.dumps({"attachment_id": self.attachment.pk, "title": "Tonight", "align": "nowhere"}),
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200)
        rendered = response.json()["rendered"]
        self.assertIn(f"wp-image-{self.attachment.pk}", rendered)
        self.assertIn("Tonight", rendered)

    def test_preview_rejects_bad_json(self):
        self.client.force_login(self.staff)
        response = self.client.post(
            reverse("media_widgets:preview", kwargs={"id_base": "media_image"}),
            data="{not json",
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 400)

    def test_preview_unknown_widget(self):
        self.client.force_login(self.staff)
        response = self.client.post(
            reverse("media_widgets:preview", kwargs={"id_base": "media_hologram"}),
            data="{}",
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 404)

    def test_preview_requires_post(self):
        self.client.force_login(self.staff)
        response = self.client.get(reverse("media_widgets:preview", kwargs={"id_base": "media_image"}))
        self.assertEqual(response.status_code, 405)

    def test_update_instance_from_json(self):
        placement = WidgetInstance.objects.create(
            widget_type="media_image", area="sidebar", config={"title": "Old", "size": "large"}
        )
        self.client.force_login(self.staff)
        response = self.client.post(
            reverse("media_widgets:update_instance", kwargs={"pk": placement.pk}),
            data=json.dumps({"title": "New", "width": "300", "size": "gigantic"}),
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["instance"], {"title": "New", "size": "large", "width": 300})
        placement.refresh_from_db()
        self.assertEqual(placement.config["width"], 300)

    def test_update_instance_from_hidden_inputs(self):
        placement = WidgetInstance.objects.create(widget_type="media_image", area="sidebar")
        self.client.force_login(self.staff)
        response = self.client.post(
            reverse("media_widgets:update_instance", kwargs={"pk": placement.pk}),
            data={"title": '"Form title"', "link_target_blank": "true", "attachment_id": "7", "alt": "plain"},
        )
        self.assertEqual(response.status_code, 200)
        placement.refresh_from_db()
        self.assertEqual(
            placement.config,
            {"title": "Form title", "link_target_blank": True, "attachment_id": 7, "alt": "plain"},
        )

    def test_update_instance_missing(self):
        self.client.force_login(self.staff)
        response = self.client.post(
            reverse("media_widgets:update_instance", kwargs={"pk": 999999}),
            data="{}",
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 404)

    def test_update_instance_requires_staff(self):
        placement = WidgetInstance.objects.create(widget_type="media_image", area="sidebar")
        self.client.force_login(self.user)
        response = self.client.post(
            reverse("media_widgets:update_instance", kwargs={"pk": placement.pk}),
            data="{}",
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 403)

    def test_attachment_detail_is_public(self):
        response = self.client.get(self.attachment.get_absolute_url())
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, self.attachment.url)
        self.assertContains(response, "Evening")

        response = self.client.get(reverse("media_widgets:attachment_detail", kwargs={"pk": 999999}))
        self.assertEqual(response.status_code, 404)
