"""
Inference boundary modules.

Exports: InferenceClient, WebhookInferenceClient
"""

from .webhook_client import InferenceClient, WebhookInferenceClient

__all__ = ["InferenceClient", "WebhookInferenceClient"]
