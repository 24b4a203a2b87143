from __future__ import annotations

"""Loader for route measurement settings and budgets."""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urljoin

import yaml

from apiPerfBudget.perf.measure import MeasureOptions
from apiPerfBudget.utils.budget import BudgetConfigError, parse_budget

CONFIG_ENV = "API_PERF_BUDGET_CONFIG"
BASE_URL_ENV = "API_PERF_BUDGET_BASE_URL"
DEFAULT_CONFIG = Path("perf_budgets.yml")
DEFAULT_BASE_URL = "http://localhost:3000"


class ConfigError(ValueError):
    """Raised when the configuration file is missing or malformed."""


@dataclass(slots=True)
class RouteConfig:
    """Per-route overrides on top of :class:`RunConfig` defaults."""

    budget: Dict[str, float] = field(default_factory=dict)
    url: Optional[str] = None
    method: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None
    requests: Optional[int] = None
    concurrency: Optional[int] = None


@dataclass(slots=True)
class RunConfig:
    base_url: str = DEFAULT_BASE_URL
    requests: int = 100
    concurrency: int = 10
    method: str = "GET"
    timeout_s: Optional[float] = 30.0
    headers: Dict[str, str] = field(default_factory=dict)
    routes: Dict[str, RouteConfig] = field(default_factory=dict)

    def url_for(self, route: str) -> str:
        cfg = self.routes.get(route)
        if cfg is not None and cfg.url:
            return cfg.url
        return urljoin(self.base_url.rstrip("/") + "/", route.lstrip("/"))

    def options_for(self, route: str) -> MeasureOptions:
        cfg = self.routes.get(route) or RouteConfig()
        headers = {**self.headers, **cfg.headers}
        return MeasureOptions(
            requests=cfg.requests if cfg.requests is not None else self.requests,
            concurrency=cfg.concurrency if cfg.concurrency is not None else self.concurrency,
            method=(cfg.method or self.method).upper(),
            headers=headers or None,
            body=cfg.body,
            timeout_s=self.timeout_s,
        )

    def budgets(self) -> Dict[str, Dict[str, float]]:
        return {route: dict(cfg.budget) for route, cfg in self.routes.items()}


def _coerce_int(value: Any, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"expected an integer, got {value!r}") from None


def _coerce_float(value: Any, default: Optional[float]) -> Optional[float]:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"expected a number, got {value!r}") from None


def _load_headers(data: Any) -> Dict[str, str]:
    if not data:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigError("headers must be a mapping")
    return {str(k): str(v) for k, v in data.items()}


def _load_route(route: str, data: Mapping[str, Any] | None) -> RouteConfig:
    if not data:
        return RouteConfig()
    if not isinstance(data, Mapping):
        raise ConfigError(f"{route}: route entry must be a mapping")
    try:
        budget = parse_budget(route, data.get("budget"))
    except BudgetConfigError as exc:
        raise ConfigError(str(exc)) from exc
    body = data.get("body")
    if body is not None and not isinstance(body, str):
        body = json.dumps(body)
    return RouteConfig(
        budget=budget,
        url=data.get("url"),
        method=data.get("method"),
        headers=_load_headers(data.get("headers")),
        body=body,
        requests=_coerce_int(data.get("requests"), None) if "requests" in data else None,
        concurrency=(
            _coerce_int(data.get("concurrency"), None) if "concurrency" in data else None
        ),
    )


def parse_config(raw: Mapping[str, Any]) -> RunConfig:
    defaults = raw.get("defaults") or {}
    routes = raw.get("routes") or {}
    if not isinstance(defaults, Mapping) or not isinstance(routes, Mapping):
        raise ConfigError("'defaults' and 'routes' must be mappings")
    base_url = os.getenv(BASE_URL_ENV) or raw.get("base_url") or DEFAULT_BASE_URL
    return RunConfig(
        base_url=str(base_url),
        requests=_coerce_int(defaults.get("requests"), 100),
        concurrency=_coerce_int(defaults.get("concurrency"), 10),
        method=str(defaults.get("method", "GET")).upper(),
        timeout_s=_coerce_float(defaults.get("timeout_s"), 30.0),
        headers=_load_headers(defaults.get("headers")),
        routes={str(route): _load_route(str(route), entry) for route, entry in routes.items()},
    )


def config_path(path: Path | None = None) -> Path:
    if path is not None:
        return Path(path)
    env = os.getenv(CONFIG_ENV)
    if env:
        return Path(env)
    return DEFAULT_CONFIG


def load_config(path: Path | None = None) -> RunConfig:
    """Load run settings from YAML or JSON."""

    path = config_path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    text = path.read_text(encoding="utf-8")
    try:
        raw = yaml.safe_load(text) if path.suffix in {".yml", ".yaml"} else json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ConfigError(f"{path}: top level must be a mapping")
    return parse_config(raw)


__all__ = [
    "BASE_URL_ENV",
    "CONFIG_ENV",
    "ConfigError",
    "RouteConfig",
    "RunConfig",
    "config_path",
    "load_config",
    "parse_config",
]
