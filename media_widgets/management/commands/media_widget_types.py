import json
from typing import Any

from django.core.management.base import BaseCommand, CommandError

from core.plugins import registry
from media_widgets.widget import MediaWidget


class Command(BaseCommand):
    help = "List registered media widget types and their instance fields."

    def add_arguments(self, parser):
        parser.add_argument("--id-base", help="Limit output to a single widget id base.")
        parser.add_argument("--json", action="store_true", help="Emit JSON output.")

    def handle(self, *args, **options):
        id_base = options.get("id_base")
        as_json = options.get("json", False)

        widgets = [w for w in registry.get_all_widgets() if isinstance(w, MediaWidget)]
        if id_base:
            widgets = [w for w in widgets if w.id_base == id_base]
            if not widgets:
                raise CommandError(f"No media widget registered for '{id_base}'.")

        rows = [self._serialize_widget(widget) for widget in sorted(widgets, key=lambda w: w.id_base)]

        if as_json:
            self.stdout.write(json.dumps(rows))
            return

        if not rows:
            self.stdout.write("No media widgets registered.")
            return

        headers = ["ID_BASE", "NAME", "MIME_TYPE", "FIELDS"]
        widths = {header: len(header) for header in headers}
        for row in rows:
            widths["ID_BASE"] = max(widths["ID_BASE"], len(row["id_base"]))
            widths["NAME"] = max(widths["NAME"], len(row["name"]))
            widths["MIME_TYPE"] = max(widths["MIME_TYPE"], len(row["mime_type"]))

        format_str = "  ".join(f"{{{header}:<{widths[header]}}}" for header in headers)
        self.stdout.write(format_str.format(**{header: header for header in headers}))
        for row in rows:
            self.stdout.write(
                format_str.format(
                    ID_BASE=row["id_base"],
                    NAME=row["name"],
                    MIME_TYPE=row["mime_type"],
                    FIELDS=", ".join(row["fields"]),
                )
            )

    def _serialize_widget(self, widget: MediaWidget) -> dict[str, Any]:
        return {
            "id_base": widget.id_base,
            "name": widget.name,
            "mime_type": widget.widget_type.mime_type,
            "description": widget.widget_type.description,
            "fields": widget.schema.names(),
            "schema": widget.export_schema(),
        }
