"""Resolver clients used by the key resolution engine."""

from trustee_pin.resolver.attester import AttesterResolver, cert_path_for
from trustee_pin.resolver.base import KeyResolver
from trustee_pin.resolver.scripted import ResolverCall, ScriptedResolver

__all__ = [
    "AttesterResolver",
    "KeyResolver",
    "ResolverCall",
    "ScriptedResolver",
    "cert_path_for",
]
