from django import forms
from django.contrib import admin

from core.plugins import registry

from .models import Attachment, WidgetInstance


class WidgetInstanceForm(forms.ModelForm):
    widget_type = forms.ChoiceField(label="Widget type", choices=[])

    class Meta:
        model = WidgetInstance
        fields = ("widget_type", "area", "order", "is_active", "config")

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["widget_type"].choices = registry.widget_choices()


@admin.register(Attachment)
class AttachmentAdmin(admin.ModelAdmin):
    list_display = ("__str__", "mime_type", "width", "height", "uploaded_at")
    list_filter = ("mime_type",)
    search_fields = ("title", "caption", "alt_text")


@admin.register(WidgetInstance)
class WidgetInstanceAdmin(admin.ModelAdmin):
    form = WidgetInstanceForm
    list_display = ("widget_type", "area", "order", "is_active")
    list_filter = ("widget_type", "area", "is_active")
    list_editable = ("order", "is_active")

    def save_model(self, request, obj, form, change):
        # Stored config only ever goes through the widget's schema.
        previous = {}
        if change:
            previous = WidgetInstance.objects.get(pk=obj.pk).config or {}
        widget = obj.widget
        if widget is not None:
            obj.config = widget.update(obj.config or {}, previous)
        super().save_model(request, obj, form, change)
