"""
Filter evaluation engine deciding whether a workflow step is enabled.
"""

import asyncio
import time
from typing import Any, Mapping, Optional, Union

from shared.config import FilterConfig, get_config
from shared.logging import get_logger, reset_step_context, set_step_context
from .conditions import ConditionEvaluator
from .models import (
    FilterCondition, FilterGroup, FilterNode, GroupCombinator,
    NotificationStep, StepFilterResult, VariablesContext
)
from ..webhook.client import WebhookClient

StepInput = Union[NotificationStep, Mapping[str, Any], None]
VariablesInput = Union[VariablesContext, Mapping[str, Any]]


class FilterEngine:
    """Evaluates a step's filter groups against runtime variables.

    Missing filter configuration enables the step; evaluation problems
    (unknown combinators or operators, webhook failures) never do.
    """

    def __init__(self,
                 config: Optional[FilterConfig] = None,
                 condition_evaluator: Optional[ConditionEvaluator] = None,
                 webhook_client: Optional[WebhookClient] = None):
        self.config = config or get_config()
        self.logger = get_logger("filters.engine")
        self.condition_evaluator = condition_evaluator or ConditionEvaluator()
        self.webhook_client = webhook_client or WebhookClient(
            config=self.config,
            condition_evaluator=self.condition_evaluator
        )

    async def is_step_enabled(self, step: StepInput, variables: VariablesInput) -> bool:
        """Whether the step should execute for these variables."""
        result = await self.evaluate_step(step, variables)
        return result.enabled

    async def evaluate_step(self, step: StepInput, variables: VariablesInput) -> StepFilterResult:
        """Evaluate all filter groups of a step; the first matching group enables it."""
        start_time = time.time()
        step = _as_step(step)
        variables = _as_variables(variables)

        if step is None or not isinstance(step.filters, (list, tuple)):
            return StepFilterResult(
                enabled=True,
                reason="No filters configured",
                evaluation_time_ms=(time.time() - start_time) * 1000
            )

        if not step.filters:
            return StepFilterResult(
                enabled=True,
                reason="Empty filter list",
                evaluation_time_ms=(time.time() - start_time) * 1000
            )

        token = set_step_context(step.step_id)
        try:
            for index, group in enumerate(step.filters):
                if await self._evaluate_group_safely(FilterGroup.from_dict(group), variables):
                    self.logger.debug(
                        "Step filter evaluation result",
                        enabled=True,
                        matched_filter=index
                    )
                    return StepFilterResult(
                        enabled=True,
                        reason=f"Filter {index} matched",
                        matched_filter=index,
                        evaluation_time_ms=(time.time() - start_time) * 1000
                    )

            self.logger.debug("Step filter evaluation result", enabled=False, filters=len(step.filters))
        finally:
            reset_step_context(token)

        return StepFilterResult(
            enabled=False,
            reason="No filter matched",
            evaluation_time_ms=(time.time() - start_time) * 1000
        )

    async def evaluate_group(self, group: FilterGroup, variables: VariablesInput) -> bool:
        """Evaluate one filter group."""
        group = FilterGroup.from_dict(group)
        variables = _as_variables(variables)
        children = group.children

        if not children:
            return True

        if len(children) == 1:
            return await self.evaluate_node(children[0], variables)

        combinator = group.combinator
        if combinator == GroupCombinator.AND:
            return await self._evaluate_and(group, variables)

        if combinator == GroupCombinator.OR:
            return await self._evaluate_or(group, variables)

        self.logger.warning("Unknown filter group combinator", value=group.value)
        return False

    async def evaluate_node(self, node: FilterNode, variables: VariablesContext) -> bool:
        """Evaluate a child node, calling the webhook for remote conditions."""
        if isinstance(node, FilterCondition) and node.is_remote:
            return await self.webhook_client.evaluate_condition(node, variables)
        return self.evaluate_local(node, variables)

    def evaluate_local(self, node: FilterNode, variables: VariablesContext) -> bool:
        """Evaluate a child node without any network call."""
        if isinstance(node, FilterGroup):
            # Only one level of grouping is supported
            self.logger.warning("Nested filter group is not supported", value=node.value)
            return False
        return self.condition_evaluator.evaluate(variables, node)

    async def _evaluate_and(self, group: FilterGroup, variables: VariablesContext) -> bool:
        local, remote = group.split_local_remote()

        if not all(self.evaluate_local(child, variables) for child in local):
            return False

        if not remote:
            return True

        results = await asyncio.gather(
            *(self.webhook_client.evaluate_condition(child, variables) for child in remote)
        )
        return all(results)

    async def _evaluate_or(self, group: FilterGroup, variables: VariablesContext) -> bool:
        local, remote = group.split_local_remote()

        if any(self.evaluate_local(child, variables) for child in local):
            return True

        for child in remote:
            if await self.webhook_client.evaluate_condition(child, variables):
                return True

        return False

    async def _evaluate_group_safely(self, group: FilterGroup, variables: VariablesContext) -> bool:
        try:
            return await self.evaluate_group(group, variables)
        except Exception as e:
            self.logger.error("Filter group evaluation error", error=str(e))
            return False


def _as_step(step: StepInput) -> Optional[NotificationStep]:
    if step is None or isinstance(step, NotificationStep):
        return step
    if isinstance(step, Mapping):
        return NotificationStep.from_dict(step)
    return NotificationStep.from_dict({
        "step_id": getattr(step, "step_id", None),
        "filters": getattr(step, "filters", None),
    })


def _as_variables(variables: VariablesInput) -> VariablesContext:
    if isinstance(variables, VariablesContext):
        return variables
    return VariablesContext.from_dict(variables or {})


async def is_step_enabled(step: StepInput, variables: VariablesInput,
                          config: Optional[FilterConfig] = None) -> bool:
    """Convenience wrapper building a FilterEngine from configuration."""
    return await FilterEngine(config=config).is_step_enabled(step, variables)

