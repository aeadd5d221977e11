"""Webhook notification system."""

from src.storage.database.webhook_models import WebhookEvent
from src.webhooks.dispatcher import DeliveryOutcome, DeliveryResult, WebhookDispatcher

__all__ = ["DeliveryOutcome", "DeliveryResult", "WebhookDispatcher", "WebhookEvent"]
