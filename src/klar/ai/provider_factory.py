"""
Builds the configured AI provider.

Gateways are looked up in :data:`klar.config.providers.PROVIDER_REGISTRY`.
"""

from typing import Optional

from klar.ai.openai_provider import OpenAIProvider
from klar.config.settings import Settings, get_settings
from klar.config.providers import get_provider_config
from klar.core.exceptions import ConfigurationError


def create_ai_provider(
    provider_type: str = None,
    model: str = None,
    mock_mode: Optional[bool] = None,
    settings: Optional[Settings] = None,
) -> OpenAIProvider:
    """
    Build a provider from settings.

    Args:
        provider_type: Provider name (default: from settings)
        model: Override model name
        mock_mode: Return canned responses (default: settings.mock_ai)
        settings: Settings to read (default: cached settings)

    Returns:
        Provider instance

    Raises:
        ConfigurationError: Unknown provider, or no key or model outside mock mode
    """
    settings = settings or get_settings()
    provider_type = (provider_type or settings.ai_provider).lower()
    if mock_mode is None:
        mock_mode = settings.mock_ai

    try:
        config = get_provider_config(provider_type, settings)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    if model:
        config.model = model

    if not config.api_key and not mock_mode:
        raise ConfigurationError(f"API key required for {provider_type}. Set KLAR_{provider_type.upper()}_API_KEY")

    if not config.model and not mock_mode:
        raise ConfigurationError("Model required. Set KLAR_MODEL")

    return OpenAIProvider(
        api_key=config.api_key,
        base_url=config.base_url,
        model=config.model,
        name=f"{provider_type}:{config.model or 'mock'}",
        mock_mode=mock_mode,
        extra_headers=config.extra_headers or None,
    )
