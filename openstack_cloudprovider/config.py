"""Frozen dataclasses for configuration and gcfg-style INI loader with env-var interpolation."""

from __future__ import annotations

import configparser
import os
import re
import typing
from dataclasses import dataclass, field, fields
from datetime import timedelta
from pathlib import Path
from typing import Any, TextIO

from .exceptions import ConfigError

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")

_DURATION_PATTERN = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
# unit -> seconds
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_BOOLEAN_STATES = {
    "1": True, "yes": True, "true": True, "on": True,
    "0": False, "no": False, "false": False, "off": False,
}


def _interpolate_env(value: str) -> str:
    """Replace ${ENV_VAR} placeholders with environment variable values."""

    def _replace(match: re.Match) -> str:
        env_key = match.group(1)
        env_val = os.environ.get(env_key)
        if env_val is None:
            raise ConfigError(f"Environment variable '{env_key}' is not set")
        return env_val

    return _ENV_PATTERN.sub(_replace, value)


def parse_duration(text: str) -> timedelta:
    """Parse a duration string such as "5s", "1m30s" or "250ms".

    Accepts an optional sign and a sequence of decimal numbers, each with a
    unit suffix (ns, us, ms, s, m, h). A bare "0" is also accepted.
    """
    body = text.strip()
    sign = 1
    if body[:1] in ("-", "+"):
        sign = -1 if body[0] == "-" else 1
        body = body[1:]

    if body == "0":
        return timedelta(0)
    if not body:
        raise ConfigError(f"Invalid duration: '{text}'")

    seconds = 0.0
    pos = 0
    while pos < len(body):
        match = _DURATION_PATTERN.match(body, pos)
        if match is None:
            raise ConfigError(f"Invalid duration: '{text}'")
        number, unit = match.groups()
        seconds += float(number) * _DURATION_UNITS[unit]
        pos = match.end()
    try:
        return timedelta(seconds=sign * seconds)
    except OverflowError as exc:
        raise ConfigError(f"Invalid duration: '{text}'") from exc


@dataclass(frozen=True)
class GlobalOpts:
    auth_url: str = ""
    username: str = ""
    user_id: str = ""
    password: str = ""
    api_key: str = ""
    tenant_id: str = ""
    tenant_name: str = ""
    domain_id: str = ""
    domain_name: str = ""
    region: str = ""


@dataclass(frozen=True)
class LoadBalancerOpts:
    subnet_id: str = ""
    floating_network_id: str = ""
    lb_method: str = ""
    create_monitor: bool = False
    monitor_delay: timedelta = timedelta(0)
    monitor_timeout: timedelta = timedelta(0)
    monitor_max_retries: int = 0


@dataclass(frozen=True)
class RouteOpts:
    router_id: str = ""
    hostname_override: bool = False


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    format: str = "json"  # "json" or "text"


@dataclass(frozen=True)
class Config:
    global_opts: GlobalOpts = field(default_factory=GlobalOpts)
    load_balancer: LoadBalancerOpts = field(default_factory=LoadBalancerOpts)
    route: RouteOpts = field(default_factory=RouteOpts)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_auth_options(self) -> dict[str, str]:
        """Keystone password-auth arguments built from the [Global] section.

        Empty values are left out so keystoneauth can pick the right identity
        version. The API key stands in for the password when none is given.
        """
        g = self.global_opts
        options = {
            "auth_url": g.auth_url,
            "username": g.username,
            "user_id": g.user_id,
            "password": g.password or g.api_key,
            "project_id": g.tenant_id,
            "project_name": g.tenant_name,
            "user_domain_id": g.domain_id,
            "project_domain_id": g.domain_id,
            "user_domain_name": g.domain_name,
            "project_domain_name": g.domain_name,
        }
        return {k: v for k, v in options.items() if v}


# INI section name (lowercased) -> Config field
_SECTIONS = {
    "global": "global_opts",
    "loadbalancer": "load_balancer",
    "route": "route",
    "logging": "logging",
}


def _coerce(value: str | None, ft: Any, section: str, key: str) -> Any:
    """Convert a raw INI value to the dataclass field type."""
    if ft is bool:
        # gcfg treats a bare key as true
        if value is None:
            return True
        state = _BOOLEAN_STATES.get(value.strip().lower())
        if state is None:
            raise ConfigError(f"[{section}] {key}: invalid boolean '{value}'")
        return state

    value = value or ""
    if ft is timedelta:
        try:
            return parse_duration(value)
        except ConfigError as exc:
            raise ConfigError(f"[{section}] {key}: {exc}") from exc
    if ft is int:
        try:
            number = int(value)
        except ValueError:
            raise ConfigError(f"[{section}] {key}: invalid integer '{value}'") from None
        if number < 0:
            raise ConfigError(f"[{section}] {key}: must be >= 0")
        return number
    return value


def _unquote(value: str | None) -> str | None:
    if value is not None and len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def _build_section(cls: type, section: str, items: list[tuple[str, str | None]]) -> Any:
    """Construct a frozen dataclass from the (key, value) pairs of one section."""
    field_types = typing.get_type_hints(cls)
    names = {f.name for f in fields(cls)}
    kwargs: dict[str, Any] = {}
    for key, raw in items:
        name = key.strip().lower().replace("-", "_")
        if name not in names:
            continue
        value = _unquote(raw)
        if value is not None:
            value = _interpolate_env(value)
        kwargs[name] = _coerce(value, field_types[name], section, key)
    return cls(**kwargs)


def read_config(stream: TextIO | None) -> Config:
    """Parse a gcfg-style configuration stream into a Config.

    Unknown sections and keys are ignored. Required keys are not enforced
    here; see validate_config().
    """
    if stream is None:
        raise ConfigError("no OpenStack cloud provider config file given")

    parser = configparser.ConfigParser(
        allow_no_value=True,
        strict=False,
        interpolation=None,
        comment_prefixes=("#", ";"),
        inline_comment_prefixes=("#", ";"),
        default_section="\x00defaults",
    )
    try:
        parser.read_file(stream)
    except configparser.Error as exc:
        raise ConfigError(f"Malformed configuration: {exc}") from exc

    hints = typing.get_type_hints(Config)
    kwargs: dict[str, Any] = {}
    for section in parser.sections():
        attr = _SECTIONS.get(section.strip().lower())
        if attr is None:
            continue
        kwargs[attr] = _build_section(hints[attr], section, parser.items(section, raw=True))
    return Config(**kwargs)


def load_config(path: str | Path) -> Config:
    """Load configuration from a file on disk."""
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")

    with open(path) as f:
        return read_config(f)


def validate_config(config: Config) -> None:
    """Validate the keys a caller needs before building a provider."""
    if not config.global_opts.auth_url:
        raise ConfigError("Global.auth-url is required")

    if config.logging.format not in ("json", "text"):
        raise ConfigError("Logging.format must be 'json' or 'text'")

    if config.logging.level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ConfigError(f"Logging.level '{config.logging.level}' is not a valid level")
