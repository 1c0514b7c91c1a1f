from django.urls import path

from . import views

app_name = "media_widgets"

urlpatterns = [
    path("attachments/<int:pk>.json", views.attachment_json, name="attachment_json"),
    path("preview/<slug:id_base>/", views.preview, name="preview"),
    path("instances/<int:pk>/", views.update_instance, name="update_instance"),
    path("attachment/<int:pk>/", views.attachment_detail, name="attachment_detail"),
]
