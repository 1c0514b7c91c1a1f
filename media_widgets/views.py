from __future__ import annotations

import json
import logging
from functools import wraps

from django.http import JsonResponse
from django.shortcuts import get_object_or_404, render
from django.views.decorators.http import require_GET, require_POST

from core.plugins import registry

from .models import Attachment, WidgetInstance

logger = logging.getLogger(__name__)


def staff_required_json(view_func):
    @wraps(view_func)
    def wrapped(request, *args, **kwargs):
        user = request.user
        if not (user.is_authenticated and user.is_staff):
            return JsonResponse({"error": "forbidden"}, status=403)
        return view_func(request, *args, **kwargs)

    return wrapped


def _submitted_instance(request) -> dict | None:
    """Instance values from a JSON body, or from a form of JSON-encoded inputs."""
    if request.content_type == "application/json":
        try:
            payload = json.loads(request.body or b"{}")
        except ValueError:
            return None
        return payload if isinstance(payload, dict) else None

    submitted = {}
    for name, value in request.POST.items():
        try:
            submitted[name] = json.loads(value)
        except ValueError:
            submitted[name] = value
    return submitted


@require_GET
@staff_required_json
def attachment_json(request, pk):
    attachment = Attachment.objects.filter(pk=pk).first()
    if attachment is None:
        return JsonResponse({"error": "missing_attachment"}, status=404)
    return JsonResponse(attachment.to_json())


@require_POST
@staff_required_json
def preview(request, id_base):
    widget = registry.get_widget(id_base)
    if widget is None:
        return JsonResponse({"error": "unknown_widget"}, status=404)
    submitted = _submitted_instance(request)
    if submitted is None:
        return JsonResponse({"error": "invalid_request"}, status=400)
    # Unsaved edits are validated the same way a save would be.
    instance = widget.update(submitted, widget.default_instance())
    return JsonResponse(
        {"rendered": widget.render(instance, request=request, widget_id=f"{id_base}-preview")}
    )


@require_POST
@staff_required_json
def update_instance(request, pk):
    placement = WidgetInstance.objects.filter(pk=pk).first()
    if placement is None:
        return JsonResponse({"error": "not_found"}, status=404)
    submitted = _submitted_instance(request)
    if submitted is None:
        return JsonResponse({"error": "invalid_request"}, status=400)
    try:
        config = placement.apply_update(submitted)
    except LookupError:
        logger.warning("Placement %s uses unregistered widget %s", pk, placement.widget_type)
        return JsonResponse({"error": "unknown_widget"}, status=404)
    return JsonResponse({"id": placement.pk, "widget_id": placement.widget_id, "instance": config})


def attachment_detail(request, pk):
    attachment = get_object_or_404(Attachment, pk=pk)
    return render(request, "media_widgets/attachment_detail.html", {"attachment": attachment})
