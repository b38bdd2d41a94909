"""Dependency injection for API routes.

The runtime is built once from settings and reused across requests.
Tests override ``get_runtime`` or call ``reset_dependencies()``.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from emissary.a2a.controller import A2AController
from emissary.config.loader import load_config
from emissary.config.settings import Settings, set_toml_config
from emissary.observability.logging import get_logger
from emissary.runtime.container import Runtime, build_runtime
from emissary.runtime.engine import MessagePipeline
from emissary.webhooks.queue import WebhookRetryQueue

logger = get_logger(__name__)

_runtime: Runtime | None = None


@lru_cache
def get_settings() -> Settings:
    """Get application settings.

    Loads configuration from TOML files and environment variables.
    Cached to avoid reloading on every request.
    """
    try:
        set_toml_config(load_config())
    except FileNotFoundError:
        logger.warning("config_file_not_found", msg="Using default configuration")
        set_toml_config({})

    return Settings()


def get_runtime() -> Runtime:
    """Get the shared runtime, building it on first access."""
    global _runtime
    if _runtime is None:
        _runtime = build_runtime(get_settings())
        logger.info("runtime_initialized", processors=sorted(_runtime.processors))
    return _runtime


def get_pipeline(runtime: Annotated[Runtime, Depends(get_runtime)]) -> MessagePipeline:
    return runtime.pipeline


def get_a2a_controller(runtime: Annotated[Runtime, Depends(get_runtime)]) -> A2AController:
    return runtime.a2a


def get_retry_queue(runtime: Annotated[Runtime, Depends(get_runtime)]) -> WebhookRetryQueue:
    return runtime.retry_queue


async def reset_dependencies() -> None:
    """Reset all dependency singletons.

    Closes the provider gateway and clears the settings cache.
    """
    global _runtime
    if _runtime is not None:
        await _runtime.close()
    _runtime = None
    get_settings.cache_clear()


SettingsDep = Annotated[Settings, Depends(get_settings)]
RuntimeDep = Annotated[Runtime, Depends(get_runtime)]
PipelineDep = Annotated[MessagePipeline, Depends(get_pipeline)]
A2ADep = Annotated[A2AController, Depends(get_a2a_controller)]
RetryQueueDep = Annotated[WebhookRetryQueue, Depends(get_retry_queue)]
