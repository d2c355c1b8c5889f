"""Capability registry exports."""

from .registry import (
    DEFAULT_CAPABILITIES,
    CapabilityRegistry,
    ProviderCapability,
    get_capability_registry,
)

__all__ = [
    "CapabilityRegistry",
    "DEFAULT_CAPABILITIES",
    "ProviderCapability",
    "get_capability_registry",
]
