"""Project collector: core, module, language and config inventories."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..logging import get_logger
from ..models import EntityFamily, ExtensionInfo, LanguageInfo
from ..repository import ContentRepository

KEY_EXTENSIONS: Dict[str, Dict[str, str]] = {
    "gin": {"label": "Gin", "type": "theme"},
    "admin_toolbar": {"label": "Admin Toolbar", "type": "module"},
    "pathauto": {"label": "Pathauto", "type": "module"},
    "token": {"label": "Token", "type": "module"},
    "views_data_export": {"label": "Views Data Export", "type": "module"},
}

TOOLBAR_MODULES = (
    "toolbar",
    "navigation",
    "admin_toolbar",
    "admin_toolbar_tools",
    "admin_toolbar_links_access_filter",
    "gin_toolbar",
)
ADMIN_THEME_CANDIDATES = ("gin", "claro", "seven")
GIN_SETTING_KEYS = ("navigation", "toolbar_variant", "show_user_toolbar")


def classify_module(path: str) -> str:
    """Return "core", "custom" or "contrib" from a module's relative path."""
    if path.startswith("core/modules"):
        return "core"
    if "modules/custom" in path:
        return "custom"
    return "contrib"


class ProjectCollector:
    """Gathers site-wide inventories used by the project and environment reports."""

    def __init__(self, repository: ContentRepository) -> None:
        self._repository = repository
        self._logger = get_logger("collectors.project")

    def project_overview(self) -> Dict[str, Any]:
        return {
            "drupal": self.core_info(),
            "modules": self.module_stats(),
            "languages": self.languages_info(),
            "config_collections": self.config_collections_summary(),
            "content_model": self.content_model_summary(),
        }

    def core_info(self) -> Dict[str, Any]:
        site = self._repository.site_info()
        database = site.get("database") if isinstance(site.get("database"), Mapping) else {}
        return {
            "core_version": _text(site.get("core_version")),
            "php_version": _text(site.get("php_version")),
            "site_name": _text(site.get("name")),
            "site_mail": _text(site.get("mail")),
            "default_theme": _text(site.get("default_theme")),
            "admin_theme": _text(site.get("admin_theme")),
            "database": {
                "driver": _text(database.get("driver")),
                "database": _text(database.get("database")),
            },
        }

    def module_stats(self) -> Dict[str, Any]:
        modules: Dict[str, Dict[str, Any]] = {}
        enabled = disabled = custom_enabled = contrib_enabled = 0

        for extension in self._modules():
            module_type = classify_module(extension.path)
            if extension.status:
                enabled += 1
                if module_type == "custom":
                    custom_enabled += 1
                else:
                    contrib_enabled += 1
            else:
                disabled += 1
            modules[extension.name] = {
                "name": extension.name,
                "status": extension.status,
                "type": module_type,
                "relative_path": extension.path,
                "package": extension.package,
                "version": extension.version or "",
            }

        ordered = {name: modules[name] for name in sorted(modules)}
        return {
            "enabled": enabled,
            "disabled": disabled,
            "custom_enabled": custom_enabled,
            "contrib_enabled": contrib_enabled,
            "enabled_module_names": [name for name, info in ordered.items() if info["status"]],
            "modules": ordered,
        }

    def languages_info(self) -> Dict[str, Dict[str, Any]]:
        return {
            language.id: {
                "id": language.id,
                "name": language.name,
                "default": language.default,
                "direction": language.direction,
            }
            for language in self._repository.list_languages()
        }

    def config_collections_summary(self) -> Dict[str, Dict[str, Any]]:
        counts = self._repository.config_collections()
        summary = {"base": {"name": "base", "item_count": int(counts.get("base", 0))}}
        for name, item_count in counts.items():
            if name == "base":
                continue
            summary[name] = {"name": name, "item_count": int(item_count)}
        return summary

    def content_model_summary(self) -> Dict[str, int]:
        views = self._repository.list_views()
        display_count = 0
        for view in views:
            displays = view.get("display")
            if isinstance(displays, Mapping):
                display_count += len(displays)
        return {
            "content_types": len(list(self._repository.list_bundle_metadata(EntityFamily.PRIMARY))),
            "taxonomy_vocabularies": len(self._repository.list_config_entities("taxonomy_vocabulary")),
            "media_types": len(self._repository.list_config_entities("media_type")),
            "views": len(views),
            "view_displays": display_count,
        }

    def environment(self) -> Dict[str, Any]:
        """Runtime, language and module summary for the environment report."""
        site = self._repository.site_info()
        database = site.get("database") if isinstance(site.get("database"), Mapping) else {}

        languages = self._repository.list_languages()
        all_languages = {language.id: _format_language(language) for language in languages}
        default_language = next((language for language in languages if language.default), None)
        if default_language is None and languages:
            self._logger.debug("No default language flagged; using %s", languages[0].id)
            default_language = languages[0]
        default_id = default_language.id if default_language else None

        modules = self._modules()
        total = len(modules)
        enabled = sum(1 for module in modules if module.status)

        return {
            "drupal": {"version": _text(site.get("core_version"))},
            "php": {"version": _text(site.get("php_version"))},
            "database": {
                "driver": _text(database.get("driver")),
                "version": _optional_text(database.get("version")),
            },
            "languages": {
                "default": _format_language(default_language) if default_language else None,
                "additional": [
                    info for langcode, info in all_languages.items() if langcode != default_id
                ],
                "all": all_languages,
            },
            "modules": {
                "counts": {
                    "total": total,
                    "enabled": enabled,
                    "disabled": max(0, total - enabled),
                },
                "key_extensions": self.key_extensions(),
            },
        }

    def key_extensions(self) -> Dict[str, Dict[str, Any]]:
        by_type: Dict[str, Dict[str, ExtensionInfo]] = {}
        for extension in self._repository.list_extensions():
            by_type.setdefault(extension.type, {})[extension.name] = extension

        result: Dict[str, Dict[str, Any]] = {}
        for machine_name, info in KEY_EXTENSIONS.items():
            extension = by_type.get(info["type"], {}).get(machine_name)
            result[machine_name] = {
                "label": info["label"],
                "type": info["type"],
                "present": extension is not None,
                "enabled": bool(extension and extension.status),
                "version": extension.version if extension else None,
            }
        return result

    def admin_toolbar(self) -> Dict[str, Any]:
        """Toolbar and navigation modules, installed themes and Gin settings."""
        site = self._repository.site_info()
        admin_theme = _optional_text(site.get("admin_theme"))
        default_theme = _optional_text(site.get("default_theme"))
        extensions = self._repository.list_extensions()

        modules_by_name = {extension.name: extension for extension in self._modules()}
        names = list(TOOLBAR_MODULES)
        names.extend(
            sorted(
                name
                for name in modules_by_name
                if name.startswith("admin_toolbar") and name not in TOOLBAR_MODULES
            )
        )
        modules: Dict[str, Dict[str, Any]] = {}
        for name in names:
            module = modules_by_name.get(name)
            modules[name] = {
                "present": module is not None,
                "enabled": bool(module and module.status),
                "version": module.version if module else None,
            }

        # Installed themes only; disabled ones cannot serve as admin theme.
        themes: Dict[str, Dict[str, Any]] = {}
        for extension in extensions:
            if extension.type != "theme" or not extension.status:
                continue
            themes[extension.name] = {
                "is_admin_theme": extension.name == admin_theme,
                "is_default_theme": extension.name == default_theme,
                "is_admin_candidate": extension.name in ADMIN_THEME_CANDIDATES,
                "version": extension.version,
            }

        gin_enabled = any(extension.name == "gin" and extension.status for extension in extensions)
        gin_settings: Dict[str, Any] = {}
        raw_settings = site.get("gin_settings")
        if gin_enabled and isinstance(raw_settings, Mapping):
            gin_settings = {key: raw_settings[key] for key in GIN_SETTING_KEYS if key in raw_settings}

        return {
            "admin_theme": admin_theme,
            "default_theme": default_theme,
            "gin_enabled": gin_enabled,
            "modules": modules,
            "themes": themes,
            "gin_settings": gin_settings,
        }

    def _modules(self) -> List[ExtensionInfo]:
        return [
            extension
            for extension in self._repository.list_extensions()
            if extension.type == "module"
        ]


def _format_language(language: LanguageInfo) -> Dict[str, Any]:
    return {
        "id": language.id,
        "name": language.name,
        "direction": language.direction,
        "weight": language.weight,
    }


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _optional_text(value: Any) -> Optional[str]:
    return None if value in (None, "") else str(value)


__all__ = [
    "ADMIN_THEME_CANDIDATES",
    "GIN_SETTING_KEYS",
    "KEY_EXTENSIONS",
    "ProjectCollector",
    "TOOLBAR_MODULES",
    "classify_module",
]
