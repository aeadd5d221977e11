"""Repositories for access tokens, webhook endpoints and delivery logs."""

from typing import Any, Optional

from pydantic import HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import get_settings
from src.core.exceptions import DatabaseException, ValidationException
from src.core.logging import get_logger
from src.storage.database.repository import require_wedding_id
from src.storage.database.webhook_models import ApiToken, WebhookEndpoint, WebhookEvent, WebhookLog

logger = get_logger(__name__)
settings = get_settings()

_url_adapter = TypeAdapter(HttpUrl)


def validate_endpoint_url(url: str) -> str:
    """Ensure the URL is a well-formed absolute http(s) URL.

    Args:
        url: Candidate endpoint URL

    Returns:
        The URL as given

    Raises:
        ValidationException: If the URL is not absolute or not http(s)
    """
    try:
        _url_adapter.validate_python(url)
    except PydanticValidationError as e:
        raise ValidationException("Endpoint URL must be an absolute http(s) URL", {"url": url}) from e
    return url


def _normalize_events(events: Optional[dict]) -> dict[str, bool]:
    """Key an opt-in map by event value, rejecting unknown event types."""
    normalized = {}
    for key, enabled in (events or {}).items():
        try:
            normalized[WebhookEvent(key).value] = bool(enabled)
        except ValueError as e:
            raise ValidationException(f"Unknown event type: {key}") from e
    return normalized


def _require_name(name: Optional[str], what: str) -> str:
    if not name or not name.strip():
        raise ValidationException(f"{what} name is required")
    return name.strip()


class TokenRepository:
    """Issues and looks up the bearer tokens used for outbound webhook calls."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session."""
        self.session = session

    async def issue_token(self, wedding_id: str, name: str) -> ApiToken:
        """Create and persist a new token.

        The plaintext is available on the returned object; list views only
        expose the masked form afterwards.

        Args:
            wedding_id: Owning wedding
            name: Human-readable label

        Returns:
            Persisted ApiToken

        Raises:
            ValidationException: If the name is empty
            DatabaseException: If the token could not be stored
        """
        api_token = ApiToken(
            wedding_id=require_wedding_id(wedding_id),
            name=_require_name(name, "Token"),
            token=ApiToken.generate_token(),
        )
        try:
            self.session.add(api_token)
            await self.session.flush()
            await self.session.refresh(api_token)
        except SQLAlchemyError as e:
            logger.error("api_token_issue_failed", wedding_id=wedding_id, error=str(e))
            raise DatabaseException("Could not generate the token", {"wedding_id": wedding_id}) from e

        logger.info("api_token_issued", wedding_id=wedding_id, token_id=api_token.id)
        return api_token

    async def get_active_token(self, wedding_id: str) -> Optional[str]:
        """Return the most recently created token for a wedding, if any."""
        result = await self.session.execute(
            select(ApiToken.token)
            .where(ApiToken.wedding_id == require_wedding_id(wedding_id))
            .order_by(ApiToken.created_at.desc(), ApiToken.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def list_tokens(self, wedding_id: str) -> list[ApiToken]:
        """List tokens, newest first."""
        result = await self.session.execute(
            select(ApiToken)
            .where(ApiToken.wedding_id == require_wedding_id(wedding_id))
            .order_by(ApiToken.created_at.desc(), ApiToken.id.desc())
        )
        return list(result.scalars().all())

    async def delete_token(self, wedding_id: str, token_id: int) -> bool:
        """Delete a token. Returns False if it does not belong to the wedding."""
        result = await self.session.execute(
            select(ApiToken).where(
                (ApiToken.id == token_id) & (ApiToken.wedding_id == require_wedding_id(wedding_id))
            )
        )
        api_token = result.scalar_one_or_none()
        if api_token is None:
            return False

        await self.session.delete(api_token)
        await self.session.flush()
        logger.info("api_token_deleted", wedding_id=wedding_id, token_id=token_id)
        return True


class WebhookEndpointRepository:
    """CRUD over webhook endpoints. Holds no delivery logic."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session."""
        self.session = session

    async def create(
        self,
        wedding_id: str,
        name: str,
        url: str,
        events: Optional[dict] = None,
        is_active: bool = True,
    ) -> WebhookEndpoint:
        """Create new endpoint."""
        endpoint = WebhookEndpoint(
            wedding_id=require_wedding_id(wedding_id),
            name=_require_name(name, "Endpoint"),
            url=validate_endpoint_url(url),
            is_active=is_active,
            events=WebhookEvent.subscription_map(_normalize_events(events)),
        )
        self.session.add(endpoint)
        await self.session.flush()
        await self.session.refresh(endpoint)
        logger.info(
            "webhook_endpoint_created",
            wedding_id=wedding_id,
            endpoint_id=endpoint.id,
            events=[key for key, enabled in endpoint.events.items() if enabled],
        )
        return endpoint

    async def get_by_id(self, wedding_id: str, endpoint_id: int) -> Optional[WebhookEndpoint]:
        """Get endpoint by ID within a wedding."""
        result = await self.session.execute(
            select(WebhookEndpoint).where(
                (WebhookEndpoint.id == endpoint_id)
                & (WebhookEndpoint.wedding_id == require_wedding_id(wedding_id))
            )
        )
        return result.scalar_one_or_none()

    async def list_endpoints(self, wedding_id: str) -> list[WebhookEndpoint]:
        """List all endpoints of a wedding, newest first."""
        result = await self.session.execute(
            select(WebhookEndpoint)
            .where(WebhookEndpoint.wedding_id == require_wedding_id(wedding_id))
            .order_by(WebhookEndpoint.created_at.desc(), WebhookEndpoint.id.desc())
        )
        return list(result.scalars().all())

    async def list_active_endpoints_for_event(
        self, wedding_id: str, event: WebhookEvent
    ) -> list[WebhookEndpoint]:
        """Endpoints that are active and opted in to the event."""
        result = await self.session.execute(
            select(WebhookEndpoint).where(
                WebhookEndpoint.wedding_id == require_wedding_id(wedding_id),
                WebhookEndpoint.is_active.is_(True),
            )
        )
        return [endpoint for endpoint in result.scalars().all() if endpoint.is_subscribed(event)]

    async def update(self, endpoint: WebhookEndpoint, **kwargs: Any) -> WebhookEndpoint:
        """Update endpoint fields. A partial events map is merged into the current one."""
        if "name" in kwargs:
            kwargs["name"] = _require_name(kwargs["name"], "Endpoint")
        if "url" in kwargs:
            kwargs["url"] = validate_endpoint_url(kwargs["url"])
        if "events" in kwargs:
            kwargs["events"] = WebhookEvent.subscription_map(
                {**(endpoint.events or {}), **_normalize_events(kwargs["events"])}
            )

        for key, value in kwargs.items():
            setattr(endpoint, key, value)
        await self.session.flush()
        await self.session.refresh(endpoint)
        logger.info("webhook_endpoint_updated", endpoint_id=endpoint.id, fields=sorted(kwargs))
        return endpoint

    async def toggle_active(self, endpoint: WebhookEndpoint) -> WebhookEndpoint:
        """Flip the endpoint's active flag."""
        return await self.update(endpoint, is_active=not endpoint.is_active)

    async def delete(self, endpoint: WebhookEndpoint) -> None:
        """Delete endpoint together with its delivery logs."""
        await self.session.execute(delete(WebhookLog).where(WebhookLog.endpoint_id == endpoint.id))
        await self.session.delete(endpoint)
        await self.session.flush()
        logger.info("webhook_endpoint_deleted", endpoint_id=endpoint.id, wedding_id=endpoint.wedding_id)


class WebhookLogRepository:
    """Append-only store of delivery attempts."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session."""
        self.session = session

    async def add(
        self,
        endpoint_id: int,
        event_type: str,
        payload: str,
        response_status: int,
        response_body: str,
        success: bool,
        body_limit: Optional[int] = None,
    ) -> WebhookLog:
        """Record one delivery attempt. The response body is truncated before storing."""
        limit = settings.webhook_response_body_limit if body_limit is None else body_limit
        log = WebhookLog(
            endpoint_id=endpoint_id,
            event_type=event_type,
            payload=payload,
            response_status=response_status,
            response_body=(response_body or "")[:limit],
            success=success,
        )
        self.session.add(log)
        await self.session.flush()
        await self.session.refresh(log)
        return log

    async def list_logs(
        self,
        wedding_id: str,
        endpoint_id: int,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[WebhookLog]:
        """List delivery logs of one endpoint, newest first."""
        query = (
            select(WebhookLog)
            .join(WebhookEndpoint, WebhookLog.endpoint_id == WebhookEndpoint.id)
            .where(
                WebhookEndpoint.wedding_id == require_wedding_id(wedding_id),
                WebhookLog.endpoint_id == endpoint_id,
            )
            .order_by(WebhookLog.timestamp.desc(), WebhookLog.id.desc())
            .offset(offset)
        )
        if limit is not None:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())
