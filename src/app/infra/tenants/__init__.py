"""Resolução de tenants."""

from .static_directory import StaticTenantDirectory

__all__ = ["StaticTenantDirectory"]
