from __future__ import annotations

from abc import ABC, abstractmethod


class BaseWidget(ABC):
    id_base: str = ""
    name: str = ""
    widget_options: dict = {}

    @abstractmethod
    def render(self, instance: dict, request=None, widget_id: str = "") -> str: ...

    @abstractmethod
    def update(self, new_instance: dict, old_instance: dict) -> dict: ...

    def form(self, instance: dict, widget_id: str = "") -> str:
        return ""


class BasePlugin:
    name: str = ""
    label: str = ""
    version: str = "1.0.0"
    description: str = ""

    def get_widgets(self) -> list[BaseWidget]:
        return []


class PluginRegistry:
    def __init__(self):
        self._plugins: dict[str, BasePlugin] = {}

    def register(self, plugin: BasePlugin) -> None:
        self._plugins[plugin.name] = plugin

    def all_plugins(self) -> list[BasePlugin]:
        return list(self._plugins.values())

    def get_plugin(self, name: str) -> BasePlugin | None:
        return self._plugins.get(name)

    def get_all_widgets(self) -> list[BaseWidget]:
        widgets = []
        for plugin in self._plugins.values():
            widgets.extend(plugin.get_widgets())
        return widgets

    def get_widget(self, id_base: str) -> BaseWidget | None:
        for widget in self.get_all_widgets():
            if widget.id_base == id_base:
                return widget
        return None

    def widget_choices(self) -> list[tuple[str, str]]:
        return [(widget.id_base, widget.name) for widget in self.get_all_widgets()]


registry = PluginRegistry()
