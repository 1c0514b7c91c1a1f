import logging

from django import template
from django.utils.safestring import mark_safe

register = template.Library()
logger = logging.getLogger(__name__)


@register.simple_tag(takes_context=True)
def render_widget_instance(context, placement) -> str:
    request = context.get("request")
    try:
        return mark_safe(placement.render(request=request))
    except Exception:
        logger.exception(
            "Widget %s pk=%s failed to render", placement.widget_type, placement.pk
        )
        return ""


@register.simple_tag(takes_context=True)
def render_widget_area(context, area_slug: str) -> str:
    from media_widgets.models import WidgetInstance

    instances = WidgetInstance.objects.filter(area=area_slug, is_active=True).order_by("order", "pk")
    parts = [render_widget_instance(context, inst) for inst in instances]
    return mark_safe("".join(parts))
