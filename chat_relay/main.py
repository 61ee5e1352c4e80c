from __future__ import annotations

import asyncio
import logging
import sys

from chat_relay.app_context import AppContext
from chat_relay.config.env import mask_secret, read_bool_env
from chat_relay.config.settings import BotConfig, SettingsService
from chat_relay.core.errors import ConfigurationError
from chat_relay.core.logging import setup_logging
from chat_relay.core.text import MAX_MESSAGE_LENGTH
from chat_relay.handlers import Dispatcher
from chat_relay.infra import CompletionClient, GroqCompletionClient, VkTransport
from chat_relay.repositories import PreferencesRepo
from chat_relay.services import (
    CompletionService,
    DeliveryService,
    ReplyService,
    SettingsRuntimeService,
    StyleService,
)
from chat_relay.state import RuntimeState


def _build_completion_client(config: BotConfig):
    if config.provider.name == "groq":
        return GroqCompletionClient(api_key=config.api_key, timeout_seconds=config.api_timeout_seconds)
    return CompletionClient(
        base_url=config.base_url,
        api_key=config.api_key,
        timeout_seconds=config.api_timeout_seconds,
    )


def _build_repositories(config: BotConfig) -> dict[str, object]:
    if config.mode == "styles":
        return {"preferences": PreferencesRepo(config.db_path)}
    return {}


def _build_services(
    settings_service: SettingsService,
    settings,
    config: BotConfig,
    state: RuntimeState,
    repos: dict[str, object],
    transport,
    completion_client,
) -> dict[str, object]:
    completion = CompletionService(
        completion_client,
        model=config.model,
        temperature=config.provider.temperature,
        max_tokens=config.provider.max_tokens,
        timeout_seconds=config.api_timeout_seconds,
        provider_name=config.provider.name,
    )
    styles = StyleService(repos.get("preferences"))
    delivery = DeliveryService(
        transport,
        max_length=MAX_MESSAGE_LENGTH,
        chunk_delay_seconds=config.chunk_delay_seconds,
    )
    reply = ReplyService(
        transport=transport,
        completion=completion,
        styles=styles,
        delivery=delivery,
        state=state,
    )
    return {
        "settings": SettingsRuntimeService(settings_service, settings),
        "completion_client": completion_client,
        "completion": completion,
        "styles": styles,
        "delivery": delivery,
        "reply": reply,
    }


def create_app(*, transport=None, completion_client=None) -> AppContext:
    settings_service = SettingsService()
    settings = settings_service.load_from_env()
    config = settings_service.build_config()
    state = RuntimeState()
    repos = _build_repositories(config)
    transport = transport if transport is not None else VkTransport.from_token(config.vk_token)
    completion_client = completion_client if completion_client is not None else _build_completion_client(config)
    services = _build_services(settings_service, settings, config, state, repos, transport, completion_client)
    return AppContext(
        settings=settings,
        state=state,
        config=config,
        repos=repos,
        services=services,
        transport=transport,
    )


async def serve(ctx: AppContext) -> None:
    for repo in ctx.repos.values():
        await repo.init()
    client = ctx.services["completion_client"]
    await client.start()
    dispatcher = Dispatcher(ctx)
    try:
        await ctx.services["completion"].ping()
        await dispatcher.run(ctx.transport.receive_updates())
    finally:
        await dispatcher.drain()
        await client.stop()


def run() -> None:
    debug = read_bool_env("DEBUG")
    log = setup_logging(logging.DEBUG if debug else logging.INFO)
    log.info("Starting chat relay bot...")
    try:
        ctx = create_app()
    except ConfigurationError as e:
        log.critical("Configuration error: %s", e)
        sys.exit(1)

    config = ctx.config
    log.info(
        "Config provider=%s model=%s mode=%s debug=%s api_key=%s",
        config.provider.name,
        config.model,
        config.mode,
        debug,
        mask_secret(config.api_key),
    )
    try:
        asyncio.run(serve(ctx))
    except KeyboardInterrupt:
        log.info("Bot stopped")
