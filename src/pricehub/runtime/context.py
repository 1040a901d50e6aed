from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, replace
from pathlib import Path

from loguru import logger
from pydantic import BaseModel

from src.pricehub.runtime.config.config_data import ConfigData
from src.pricehub.runtime.config.config_template import load_templated_yaml
from src.pricehub.runtime.config.settings import EnvironmentVariables


@dataclass
class AppContext:
    """Application context containing configuration and other app-wide state."""

    config: ConfigData


def _load_default_config() -> ConfigData:
    env = EnvironmentVariables()
    path = Path(env.config_file)
    if not path.exists():
        logger.warning("Config file {} not found; using built-in defaults", path)
        return ConfigData()
    return load_templated_yaml(path, env_mode=env.environment)


_default_context = AppContext(config=_load_default_config())

_app_context: ContextVar[AppContext] = ContextVar(
    "app_context", default=_default_context
)


def get_context() -> AppContext:
    """Get the current application context."""
    return _app_context.get()


def set_context(context: AppContext) -> Token[AppContext]:
    """Set the current application context."""
    return _app_context.set(context)


def _explicitly_set(model: BaseModel) -> dict:
    """Dump only the fields of ``model`` that were explicitly set.

    A nested model is included whole when any of its own fields were set,
    so the merge below can override at the deepest level.
    """
    result = {}
    for field_name in model.__class__.model_fields:
        value = getattr(model, field_name)
        if isinstance(value, BaseModel):
            nested = _explicitly_set(value)
            if nested or field_name in model.model_fields_set:
                result[field_name] = nested if nested else value.model_dump()
        elif field_name in model.model_fields_set:
            result[field_name] = value
    return result


def _deep_merge(base: dict, override: dict) -> dict:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _merge_configs(base_config: ConfigData, override_config: ConfigData) -> ConfigData:
    """Merge ``override_config`` into ``base_config``; explicit overrides win."""
    merged = _deep_merge(base_config.model_dump(), _explicitly_set(override_config))
    return ConfigData.model_validate(merged)


@contextmanager
def with_context(config_override: ConfigData | None = None):
    """Temporarily override the application configuration.

    Only fields explicitly set on ``config_override`` (at any depth) replace
    the current values; everything else is inherited.

    Example:
        override = ConfigData()
        override.jwt.clock_skew = 0
        with with_context(override):
            assert get_config().jwt.clock_skew == 0
    """
    if config_override is None:
        yield
        return

    if not isinstance(config_override, ConfigData):
        raise ValueError(
            f"config_override must be ConfigData, or None, got {type(config_override)}"
        )

    merged_config = _merge_configs(get_context().config, config_override)
    token = set_context(replace(get_context(), config=merged_config))
    try:
        yield
    finally:
        _app_context.reset(token)


def set_config(config: ConfigData) -> None:
    """Replace the entire current configuration."""
    set_context(replace(get_context(), config=config))


def get_config() -> ConfigData:
    """Convenience function to get the current configuration."""
    return get_context().config
