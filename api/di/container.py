"""Centralized dependency injection container."""
from dependency_injector import containers, providers

from core.settings import SETTINGS
from infra.resources import DatabaseResource


class InfrastructureContainer(containers.DeclarativeContainer):
    """Infrastructure layer dependencies."""

    # Database
    database = providers.Resource(
        DatabaseResource,
        database_url=str(SETTINGS.DATABASE.DATABASE_URL),
    )


class ServiceContainer(containers.DeclarativeContainer):
    """Application services - depends on infrastructure."""

    infrastructure = providers.DependenciesContainer()

    # One upstream client (and HTTP pool) per process
    completion_client = providers.Singleton(
        "api.features.chat.clients.openai_client.OpenAICompletionClient",
        api_key=SETTINGS.OPENAI.OPENAI_API_KEY.get_secret_value(),
        model=SETTINGS.OPENAI.OPENAI_MODEL,
        max_tokens=SETTINGS.OPENAI.OPENAI_MAX_TOKENS,
        temperature=SETTINGS.OPENAI.OPENAI_TEMPERATURE,
        timeout=SETTINGS.OPENAI.OPENAI_REQUEST_TIMEOUT_SECONDS,
    )


class ControllerContainer(containers.DeclarativeContainer):
    """Controller-specific dependencies."""

    services = providers.DependenciesContainer()

    chat_controller = providers.Factory(
        "api.features.chat.controller.ChatController",
        completion_client=services.completion_client,
        history_limit=SETTINGS.CHAT.HISTORY_LIMIT,
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Main application container composing all sub-containers."""

    wiring_config = containers.WiringConfiguration(
        modules=[
            "api.shared.db",
            "api.features.chat.router",
        ]
    )

    infrastructure = providers.Container(InfrastructureContainer)
    services = providers.Container(ServiceContainer, infrastructure=infrastructure)
    controllers = providers.Container(ControllerContainer, services=services)
