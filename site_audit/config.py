"""Configuration loading for site-audit (.site_audit.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".site_audit.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class RepositoryConfig:
    """Where the content repository snapshot lives."""

    snapshot: Optional[Path] = None


@dataclass
class ReportsConfig:
    """Report enablement overrides and report-specific options."""

    enabled: List[str] = field(default_factory=list)
    disabled: List[str] = field(default_factory=list)
    selected_bundles: Dict[str, str] = field(default_factory=dict)

    def overrides(self) -> Dict[str, bool]:
        """Return report id -> forced enabled flag; disabling wins on conflict."""
        result: Dict[str, bool] = {name: True for name in self.enabled}
        for name in self.disabled:
            result[name] = False
        return result


@dataclass
class ServiceConfig:
    """HTTP service bind settings."""

    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class SiteAuditConfig:
    """Represents the high-level settings defined in .site_audit.yml."""

    root: Path
    repository: RepositoryConfig = field(default_factory=RepositoryConfig)
    reports: ReportsConfig = field(default_factory=ReportsConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)
    log_file: Optional[Path] = None


def load_config(config_path: Path) -> SiteAuditConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return SiteAuditConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    repository_data = _as_dict(data.get("repository"))
    repository = RepositoryConfig()
    snapshot = _as_str(repository_data.get("snapshot"))
    if snapshot:
        repository.snapshot = root / snapshot

    reports_data = _as_dict(data.get("reports"))
    reports = ReportsConfig()
    if reports_data:
        reports.enabled = _as_str_list(reports_data.get("enabled"))
        reports.disabled = _as_str_list(reports_data.get("disabled"))
        reports.selected_bundles = _as_label_map(reports_data.get("selected_bundles"))

    service_data = _as_dict(data.get("service"))
    service = ServiceConfig()
    if service_data:
        service.host = _as_str(service_data.get("host")) or service.host
        port = _as_int(service_data.get("port"))
        if port is not None:
            service.port = port

    logging_data = _as_dict(data.get("logging"))
    log_file_str = _as_str(logging_data.get("file")) if logging_data else None
    log_file = root / log_file_str if log_file_str else None

    return SiteAuditConfig(
        root=root,
        repository=repository,
        reports=reports,
        service=service,
        log_file=log_file,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


def _as_label_map(value: Any) -> Dict[str, str]:
    """Accept either `{machine: label}` or a plain list of machine names."""
    if isinstance(value, dict):
        result: Dict[str, str] = {}
        for key, label in value.items():
            name = str(key)
            result[name] = _as_str(label) or name
        return result
    return {name: name for name in _as_str_list(value)}


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ReportsConfig",
    "RepositoryConfig",
    "ServiceConfig",
    "SiteAuditConfig",
    "load_config",
]
