# Model provider operations on an in-memory CodexConfig
import copy
import dataclasses
import re

from codexcfg.models import CodexConfig, Provider

# ABOUTME: Models Codex ships with; switching keeps one of these if already selected
CODEX_MODELS = ("gpt-5", "gpt-5-codex")
DEFAULT_CODEX_MODEL = "gpt-5-codex"


def sanitize_provider_id(name: str) -> str:
    """Derive a provider id from a free-text display name.

    ABOUTME: Lowercase, '.' and whitespace become '-', other punctuation dropped
    ABOUTME: Different names can map to the same id; the later add wins

    Examples:
        >>> sanitize_provider_id("  My Proxy.AI (EU) ")
        'my-proxy-ai-eu'
    """
    cleaned = name.strip().lower()
    if not cleaned:
        return ""
    cleaned = re.sub(r"\s+", "-", cleaned.replace(".", "-"))
    return re.sub(r"[^a-z0-9-]", "", cleaned)


def default_env_key(provider_id: str) -> str:
    """Env var name used for a provider's API key, e.g. MY_PROXY_API_KEY."""
    return f"{provider_id.upper().replace('-', '_')}_API_KEY"


def _require_provider(config: CodexConfig, provider_id: str) -> Provider:
    provider = config.get_provider(provider_id)
    if provider is None:
        raise ValueError(f"Provider '{provider_id}' not found")
    return provider


def add_provider(config: CodexConfig, provider: Provider, make_default: bool = False) -> Provider:
    """Add a provider, replacing any provider with the same id in place.

    ABOUTME: Replacement keeps the original position in the provider list
    ABOUTME: make_default also switches model_provider to the new provider
    """
    if not provider.id:
        raise ValueError("Provider id must not be empty")

    for index, existing in enumerate(config.providers):
        if existing.id == provider.id:
            config.providers[index] = provider
            break
    else:
        config.providers.append(provider)

    if make_default:
        switch_provider(config, provider.id)
    return provider


def edit_provider(config: CodexConfig, provider_id: str, **changes: object) -> Provider:
    """Update fields of an existing provider.

    ABOUTME: Renaming changes name only, the id (table key) is immutable
    """
    provider = _require_provider(config, provider_id)
    if "id" in changes:
        raise ValueError("Provider id cannot be changed, copy the provider instead")

    field_names = {f.name for f in dataclasses.fields(Provider)}
    for key, value in changes.items():
        if key not in field_names:
            raise ValueError(f"Unknown provider field '{key}'")
        setattr(provider, key, value)
    return provider


def copy_provider(
    config: CodexConfig, source_id: str, new_name: str, **changes: object
) -> Provider:
    """Duplicate a provider under a new display name.

    ABOUTME: The copy's id is derived from new_name and must not exist yet
    """
    source = _require_provider(config, source_id)
    new_id = sanitize_provider_id(new_name)
    if not new_id:
        raise ValueError(f"Cannot derive a provider id from '{new_name}'")
    if config.get_provider(new_id) is not None:
        raise ValueError(f"Provider '{new_id}' already exists")

    duplicate = dataclasses.replace(
        copy.deepcopy(source), id=new_id, name=new_name.strip(), **changes
    )
    return add_provider(config, duplicate)


def delete_providers(config: CodexConfig, provider_ids: list[str]) -> list[str]:
    """Delete providers by id.

    ABOUTME: Unknown ids are ignored; returns the ids actually removed
    ABOUTME: Refuses to remove every provider
    ABOUTME: A deleted default falls back to the first remaining provider
    """
    targets = set(provider_ids)
    removed = [p.id for p in config.providers if p.id in targets]
    if not removed:
        return []
    if len(removed) == len(config.providers):
        raise ValueError("Cannot delete all providers, at least one must remain")

    config.providers = [p for p in config.providers if p.id not in targets]
    if config.model_provider in removed:
        config.model_provider = config.providers[0].id
    return removed


def switch_provider(config: CodexConfig, provider_id: str) -> Provider:
    """Make provider_id the active default provider.

    ABOUTME: Un-comments model_provider
    ABOUTME: Model: the provider's own model, else keep gpt-5/gpt-5-codex,
    ABOUTME: else fall back to DEFAULT_CODEX_MODEL
    """
    provider = _require_provider(config, provider_id)

    if provider.model:
        config.model = provider.model
    elif config.model not in CODEX_MODELS:
        config.model = DEFAULT_CODEX_MODEL

    config.model_provider = provider.id
    config.model_provider_commented = False
    return provider


def switch_to_official_login(config: CodexConfig) -> bool:
    """Comment out model_provider so Codex uses its official login.

    ABOUTME: Providers stay configured; returns False if no directive exists
    """
    if not config.model_provider:
        return False
    config.model_provider_commented = True
    return True
