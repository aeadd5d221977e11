"""Webhook event dispatcher."""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import httpx
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.config import get_settings
from src.core.exceptions import ValidationException, WebhookDeliveryException
from src.core.logging import bind_event_context, get_logger
from src.storage.database.base import AsyncSessionLocal
from src.storage.database.repository import require_wedding_id
from src.storage.database.webhook_models import WebhookEndpoint, WebhookEvent
from src.storage.database.webhook_repository import (
    TokenRepository,
    WebhookEndpointRepository,
    WebhookLogRepository,
)
from src.webhooks.payload import build_headers, build_webhook_body, dumps

logger = get_logger(__name__)
settings = get_settings()

TRANSPORT_ERROR_STATUS = 503


class DeliveryOutcome(str, Enum):
    """Terminal state of one delivery attempt."""

    SENT_OK = "sent_ok"
    SENT_FAILED = "sent_failed"
    TRANSPORT_ERROR = "transport_error"


@dataclass
class DeliveryResult:
    """Outcome of one HTTP call to one endpoint for one event."""

    endpoint_id: int
    url: str
    outcome: DeliveryOutcome
    response_status: int
    response_body: str
    logged: bool = False

    @property
    def success(self) -> bool:
        return self.outcome is DeliveryOutcome.SENT_OK


class WebhookDispatcher:
    """Fans wedding events out to subscribed webhook endpoints.

    Delivery is a side effect of business writes: ``notify`` schedules the
    work on the running event loop and returns immediately, and nothing that
    happens during delivery is raised back to the caller.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] = AsyncSessionLocal,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialize webhook dispatcher.

        Args:
            session_factory: Factory for the dispatcher's own sessions
            transport: Optional httpx transport (used to stub endpoints)
            timeout: Deadline in seconds for one whole request, body included
        """
        self.session_factory = session_factory
        self.transport = transport
        self.timeout = settings.webhook_timeout if timeout is None else timeout
        self._pending: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of deliveries still in flight."""
        return len(self._pending)

    def notify(
        self,
        wedding_id: str,
        event: WebhookEvent | str,
        payload: dict[str, Any],
    ) -> asyncio.Task:
        """Schedule delivery of an event without waiting for it.

        Must be called from inside a running event loop.

        Args:
            wedding_id: Tenant the event belongs to
            event: Event type (enum member or its value)
            payload: Event-specific fields, JSON serializable

        Returns:
            The detached delivery task

        Raises:
            ValidationException: On an empty tenant id, an unknown event type
                or a payload that cannot be serialized
        """
        require_wedding_id(wedding_id)
        try:
            event = WebhookEvent(event)
        except ValueError as e:
            raise ValidationException(f"Unknown event type: {event}") from e
        try:
            dumps(payload)
        except (TypeError, ValueError) as e:
            raise ValidationException("Webhook payload is not JSON serializable") from e

        task = asyncio.get_running_loop().create_task(
            self.dispatch(wedding_id, event, payload),
            name=f"webhook:{event.value}:{wedding_id}",
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait until every scheduled delivery has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def dispatch(
        self,
        wedding_id: str,
        event: WebhookEvent,
        payload: dict[str, Any],
    ) -> list[DeliveryResult]:
        """Deliver an event to every qualifying endpoint and log each attempt.

        Never raises: missing configuration is a no-op and every failure is
        logged to the operator console.

        Args:
            wedding_id: Tenant the event belongs to
            event: Event type
            payload: Event-specific fields

        Returns:
            One result per delivery attempt
        """
        with bind_event_context(wedding_id, event.value):
            return await self._dispatch(wedding_id, event, payload)

    async def _dispatch(
        self,
        wedding_id: str,
        event: WebhookEvent,
        payload: dict[str, Any],
    ) -> list[DeliveryResult]:
        try:
            async with self.session_factory() as session:
                endpoints = await WebhookEndpointRepository(session).list_active_endpoints_for_event(
                    wedding_id, event
                )
                if not endpoints:
                    logger.debug("no_webhook_endpoints_for_event")
                    return []

                token = await TokenRepository(session).get_active_token(wedding_id)

            if token is None:
                logger.warning("webhook_auth_token_missing")
                return []

            content = dumps(build_webhook_body(wedding_id, event, payload))
            payload_log = dumps(payload)
            headers = build_headers(token, settings.webhook_user_agent)

            logger.info(
                "dispatching_webhook_event",
                endpoints_count=len(endpoints),
            )

            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                results = await asyncio.gather(
                    *(
                        self._deliver(client, endpoint, event, content, headers, payload_log)
                        for endpoint in endpoints
                    ),
                    return_exceptions=True,
                )

        except Exception as e:
            logger.error(
                "webhook_dispatch_failed",
                error=str(e),
                exc_info=True,
            )
            return []

        delivered = []
        for endpoint, result in zip(endpoints, results):
            if isinstance(result, BaseException):
                logger.error(
                    "webhook_delivery_crashed",
                    endpoint_id=endpoint.id,
                    error=str(result),
                )
                continue
            delivered.append(result)
        return delivered

    async def _deliver(
        self,
        client: httpx.AsyncClient,
        endpoint: WebhookEndpoint,
        event: WebhookEvent,
        content: str,
        headers: dict[str, str],
        payload_log: str,
    ) -> DeliveryResult:
        """Attempt one delivery and record it. Single attempt, no retries."""
        try:
            status_code, body = await self._post(client, endpoint.url, content, headers)
        except WebhookDeliveryException as e:
            result = DeliveryResult(
                endpoint_id=endpoint.id,
                url=endpoint.url,
                outcome=DeliveryOutcome.TRANSPORT_ERROR,
                response_status=TRANSPORT_ERROR_STATUS,
                response_body=e.message,
            )
        else:
            result = DeliveryResult(
                endpoint_id=endpoint.id,
                url=endpoint.url,
                outcome=DeliveryOutcome.SENT_OK if 200 <= status_code < 300 else DeliveryOutcome.SENT_FAILED,
                response_status=status_code,
                response_body=body,
            )
            if result.success:
                logger.info(
                    "webhook_delivered_successfully",
                    endpoint_id=endpoint.id,
                    status_code=status_code,
                )
            else:
                logger.warning(
                    "webhook_rejected_by_endpoint",
                    endpoint_id=endpoint.id,
                    status_code=status_code,
                )

        result.logged = await self._write_log(endpoint, event, payload_log, result)
        return result

    async def _post(
        self,
        client: httpx.AsyncClient,
        url: str,
        content: str,
        headers: dict[str, str],
    ) -> tuple[int, str]:
        """POST the body within an overall deadline covering connect, send and read.

        Returns:
            Response status code and at most the configured number of body characters

        Raises:
            WebhookDeliveryException: On any transport failure or deadline expiry
        """
        try:
            async with asyncio.timeout(self.timeout):
                async with client.stream(
                    "POST", url, content=content.encode("utf-8"), headers=headers
                ) as response:
                    return response.status_code, await self._read_body(response)
        except TimeoutError as e:
            message = f"Request exceeded {self.timeout:g}s deadline"
            logger.warning("webhook_transport_error", url=url, error=message)
            raise WebhookDeliveryException(message, url=url) from e
        except httpx.HTTPError as e:
            logger.warning("webhook_transport_error", url=url, error=str(e) or type(e).__name__)
            raise WebhookDeliveryException(str(e) or type(e).__name__, url=url) from e
        except Exception as e:
            logger.error("webhook_unexpected_error", url=url, error=str(e), exc_info=True)
            raise WebhookDeliveryException(str(e) or type(e).__name__, url=url) from e

    @staticmethod
    async def _read_body(response: httpx.Response) -> str:
        """Read the response text only up to the stored body limit."""
        limit = settings.webhook_response_body_limit
        chunks: list[str] = []
        size = 0
        async for chunk in response.aiter_text():
            chunks.append(chunk)
            size += len(chunk)
            if size >= limit:
                break
        return "".join(chunks)[:limit]

    async def _write_log(
        self,
        endpoint: WebhookEndpoint,
        event: WebhookEvent,
        payload_log: str,
        result: DeliveryResult,
    ) -> bool:
        """Persist the attempt in a fresh session. Failures stay on the console."""
        try:
            async with self.session_factory() as session:
                await WebhookLogRepository(session).add(
                    endpoint_id=endpoint.id,
                    event_type=event.value,
                    payload=payload_log,
                    response_status=result.response_status,
                    response_body=result.response_body,
                    success=result.success,
                )
                await session.commit()
        except Exception as e:
            logger.error(
                "webhook_log_write_failed",
                endpoint_id=endpoint.id,
                error=str(e),
                exc_info=True,
            )
            return False
        return True
