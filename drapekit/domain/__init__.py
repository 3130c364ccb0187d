"""
Domain Module

Provides the domain configuration system for DrapeKit.

A domain contains:
- Placeholders and design-name limits
- Conversational-fragment patterns
- Default materials and tools
- Icon / area keyword rules and fallback cycles
"""

from drapekit.domain.schema import (
    ClassifierTable,
    Domain,
    DomainInfo,
    KeywordRule,
    MaterialDefault,
    NameLimits,
    Placeholders,
    ToolDefault,
)
from drapekit.domain.loader import clear_domain_cache, get_domain, list_domains, load_domain

__all__ = [
    # Schema
    "ClassifierTable",
    "Domain",
    "DomainInfo",
    "KeywordRule",
    "MaterialDefault",
    "NameLimits",
    "Placeholders",
    "ToolDefault",
    # Loader
    "clear_domain_cache",
    "get_domain",
    "list_domains",
    "load_domain",
]
