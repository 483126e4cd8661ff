"""
Known AI gateways.

Both speak the OpenAI chat completions protocol; they differ in URL,
credential and identifying headers.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class ProviderSpec:
    """Static description of a gateway."""
    key_setting: str
    base_url: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class ProviderConfig:
    """Resolved configuration for creating a provider."""
    api_key: str = ""
    base_url: Optional[str] = None
    model: Optional[str] = None
    extra_headers: Dict[str, str] = field(default_factory=dict)


PROVIDER_REGISTRY: Dict[str, ProviderSpec] = {
    "openai": ProviderSpec(key_setting="openai_api_key"),
    "openrouter": ProviderSpec(
        key_setting="openrouter_api_key",
        base_url="https://openrouter.ai/api/v1",
        headers={"X-Title": "Klar"},
    ),
}


def get_provider_config(provider_name: str, settings) -> ProviderConfig:
    """
    Resolve a gateway against the current settings.

    Raises:
        ValueError: Unknown gateway name
    """
    gateway = PROVIDER_REGISTRY.get(provider_name)
    if gateway is None:
        raise ValueError(f"Unknown provider: {provider_name}. Available: {', '.join(PROVIDER_REGISTRY)}")

    return ProviderConfig(
        api_key=getattr(settings, gateway.key_setting),
        base_url=gateway.base_url,
        model=settings.model,
        extra_headers=dict(gateway.headers),
    )
