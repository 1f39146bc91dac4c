"""Relay de webhooks de saída."""

from .http_relay import HttpRelay, build_relay_body, sign_payload

__all__ = ["HttpRelay", "build_relay_body", "sign_payload"]
