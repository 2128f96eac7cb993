"""
Configuration for the span builder.

Settings live in a :class:`ConfigProvider`, a process-wide nested mapping of
``{namespace: {key: value}}``. The builder reads its own namespace on every
call so that updates made by the owning application are always picked up.
"""
import copy
import os
import threading
from typing import Any, Dict, Mapping, Optional

import attrs

from querytrace.exceptions import ConfigurationError
from querytrace.tracer.base import BaseTracer
from querytrace.utils.logging import get_logger

logger = get_logger("querytrace.config")

NAMESPACE = "querytrace"
DEFAULT_SERVICE = "database"

_REQUIRED_KEYS = ("owning_application", "tracer")


@attrs.frozen
class TraceConfig:
    """Validated builder settings."""

    owning_application: str = attrs.field(validator=attrs.validators.instance_of(str))
    tracer: BaseTracer = attrs.field(validator=attrs.validators.instance_of(BaseTracer))
    service: str = attrs.field(default=DEFAULT_SERVICE, converter=str)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], owner: str = "SpanBuilder") -> "TraceConfig":
        """
        Build a config from raw settings.

        Args:
            mapping: Settings of the builder namespace
            owner: Name used in error messages

        Raises:
            ConfigurationError: If a required option is missing or invalid
        """
        for key in _REQUIRED_KEYS:
            if not mapping.get(key):
                raise ConfigurationError(f"{key} is a required option for {owner}")

        service = mapping.get("service") or DEFAULT_SERVICE
        try:
            return cls(
                owning_application=mapping["owning_application"],
                tracer=mapping["tracer"],
                service=service,
            )
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration for {owner}", e) from e


class ConfigProvider:
    """
    Thread-safe store of per-namespace settings.

    Example::

        provider = ConfigProvider({
            "querytrace": {"owning_application": "shop", "tracer": tracer},
            "shop": {"opentelemetry": {"disabled": False}},
        })
    """

    def __init__(self, settings: Optional[Dict[str, Dict[str, Any]]] = None):
        self._lock = threading.RLock()
        self._settings: Dict[str, Dict[str, Any]] = {
            namespace: dict(values) for namespace, values in (settings or {}).items()
        }

    def get(self, namespace: str) -> Dict[str, Any]:
        """Return a shallow copy of a namespace's settings (empty if unknown)."""
        with self._lock:
            return dict(self._settings.get(namespace, {}))

    def put(self, namespace: str, key: str, value: Any) -> None:
        """Set a single key in a namespace."""
        with self._lock:
            self._settings.setdefault(namespace, {})[key] = value

    def delete(self, namespace: str, key: str) -> None:
        """Remove a key from a namespace if present."""
        with self._lock:
            self._settings.get(namespace, {}).pop(key, None)

    def is_disabled(self, application: str, tracer: BaseTracer) -> bool:
        """
        Whether tracing through ``tracer`` is switched off for an application.

        Reads ``settings[application][tracer.name]["disabled"]``.
        """
        with self._lock:
            tracer_settings = self._settings.get(application, {}).get(tracer.name) or {}
            if not isinstance(tracer_settings, Mapping):
                raise ConfigurationError(
                    f"{application}.{tracer.name} must be a mapping of tracer options, "
                    f"got {type(tracer_settings).__name__}"
                )
            return bool(tracer_settings.get("disabled", False))

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        """Deep copy of all settings."""
        with self._lock:
            return copy.deepcopy(self._settings)


# Global provider instance with thread safety
_config_provider: Optional[ConfigProvider] = None
_config_provider_lock = threading.RLock()


def get_config_provider() -> ConfigProvider:
    """Get the process-wide config provider, creating an empty one on first use."""
    global _config_provider

    with _config_provider_lock:
        if _config_provider is None:
            _config_provider = ConfigProvider()
        return _config_provider


def set_config_provider(provider: Optional[ConfigProvider]) -> None:
    """Replace the process-wide config provider (None resets it)."""
    global _config_provider

    with _config_provider_lock:
        _config_provider = provider


def configure_from_environment(
    tracer: BaseTracer,
    provider: Optional[ConfigProvider] = None
) -> ConfigProvider:
    """
    Populate a provider from environment variables.

    Environment variables:
    - QUERYTRACE_OWNING_APPLICATION: Name of the application owning the tracer
    - QUERYTRACE_SERVICE: Service name reported on query spans
    - QUERYTRACE_DISABLED: Disable query spans for the application (true/false)

    Args:
        tracer: Tracer the builder should drive
        provider: Provider to populate (the global one if None)

    Returns:
        The populated provider
    """
    provider = provider or get_config_provider()

    application = os.getenv("QUERYTRACE_OWNING_APPLICATION")
    service = os.getenv("QUERYTRACE_SERVICE")
    disabled = os.getenv("QUERYTRACE_DISABLED", "false").lower() == "true"

    provider.put(NAMESPACE, "tracer", tracer)
    if application:
        provider.put(NAMESPACE, "owning_application", application)
        provider.put(application, tracer.name, {"disabled": disabled})
    else:
        logger.warning("QUERYTRACE_OWNING_APPLICATION is not set; query spans will fail to build")
    if service:
        provider.put(NAMESPACE, "service", service)

    return provider
