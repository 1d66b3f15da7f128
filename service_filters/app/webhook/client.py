"""
Webhook client for remote filter conditions.
"""

from typing import Any, Dict, Optional
import httpx

from shared.config import FilterConfig, get_config
from shared.logging import get_logger
from shared.errors import WebhookError, WebhookRetryableError
from shared.retry import RetryConfig, RetryError, retry_on_exception

from ..filters.conditions import ConditionEvaluator
from ..filters.models import FilterCondition, VariablesContext

# Statuses worth another attempt; anything else non-2xx fails immediately.
RETRYABLE_STATUS_CODES = frozenset({408, 413, 429, 500, 502, 503, 504, 521, 522, 524})


class WebhookClient:
    """Fetches webhook responses and evaluates webhook conditions against them.

    Every failure is logged and resolves to "no response"; nothing raised
    while talking to the endpoint reaches the caller.
    """

    def __init__(self,
                 config: Optional[FilterConfig] = None,
                 condition_evaluator: Optional[ConditionEvaluator] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config or get_config()
        self.condition_evaluator = condition_evaluator or ConditionEvaluator()
        self.transport = transport
        self.logger = get_logger("filters.webhook_client")

        self.retry_config = RetryConfig(
            max_attempts=self.config.webhook_max_attempts,
            base_delay=self.config.webhook_retry_base_delay,
            max_delay=self.config.webhook_retry_max_delay,
            exponential_base=2.0,
            jitter=self.config.webhook_retry_jitter
        )
        self._post_with_retry = retry_on_exception(
            (WebhookRetryableError,), config=self.retry_config
        )(self._post)

    async def evaluate_condition(self, condition: FilterCondition, variables: VariablesContext) -> bool:
        """Evaluate a webhook condition against the endpoint's response."""
        response = await self.fetch_response(condition, variables)
        return self.condition_evaluator.evaluate(
            VariablesContext.for_webhook_response(response), condition
        )

    async def fetch_response(self, condition: FilterCondition,
                             variables: VariablesContext) -> Optional[Dict[str, Any]]:
        """POST the variables context to the condition's webhook URL."""
        if not condition.webhook_url:
            return None

        try:
            return await self._post_with_retry(condition.webhook_url, variables.to_request_body())
        except RetryError as e:
            self.logger.error(
                "Webhook request failed after retries",
                url=condition.webhook_url,
                attempts=e.attempts,
                error=e.last_exception.to_response().model_dump()
                if isinstance(e.last_exception, WebhookError) else str(e.last_exception)
            )
        except WebhookError as e:
            self.logger.error(
                "Exception while performing webhook request",
                url=condition.webhook_url,
                error=e.to_response().model_dump()
            )
        except Exception as e:
            self.logger.error(
                "Unexpected webhook error",
                url=condition.webhook_url,
                error=str(e)
            )
        return None

    async def _post(self, url: str, body: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Single POST attempt, raising WebhookRetryableError for transient failures."""
        try:
            async with httpx.AsyncClient(
                timeout=self.config.webhook_timeout_seconds,
                follow_redirects=True,
                transport=self.transport
            ) as client:
                response = await client.post(url, json=body)
        except httpx.TransportError as e:
            raise WebhookRetryableError(
                f"Transport error: {e.__class__.__name__}",
                details={"url": url, "error": str(e)}
            )

        if response.status_code in RETRYABLE_STATUS_CODES:
            raise WebhookRetryableError(
                f"Webhook returned {response.status_code}",
                details={"url": url, "status_code": response.status_code, "body": response.text}
            )

        if not response.is_success:
            raise WebhookError(
                f"Webhook returned {response.status_code}",
                details={"url": url, "status_code": response.status_code, "body": response.text}
            )

        try:
            data = response.json()
        except ValueError as e:
            raise WebhookError(
                "Webhook response is not valid JSON",
                details={"url": url, "error": str(e), "body": response.text}
            )

        if not isinstance(data, dict):
            raise WebhookError(
                "Webhook response is not a JSON object",
                details={"url": url, "response_type": type(data).__name__}
            )

        return data
