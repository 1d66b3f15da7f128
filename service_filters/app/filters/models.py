"""
Filter data models for step filter evaluation.
"""

from typing import Dict, Any, Optional, Mapping, Sequence, Tuple, Union
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel
from pydantic_core import to_jsonable_python


class ContextDomain(str, Enum):
    """Data domains a condition can read from."""
    PAYLOAD = "payload"
    SUBSCRIBER = "subscriber"
    WEBHOOK = "webhook"

    @classmethod
    def parse(cls, value: Any) -> Optional["ContextDomain"]:
        try:
            return cls(value)
        except ValueError:
            return None


class OperatorKind(str, Enum):
    """Condition operators."""
    EQUAL = "EQUAL"
    NOT_EQUAL = "NOT_EQUAL"
    LARGER = "LARGER"
    SMALLER = "SMALLER"
    LARGER_EQUAL = "LARGER_EQUAL"
    SMALLER_EQUAL = "SMALLER_EQUAL"
    IN = "IN"
    NOT_IN = "NOT_IN"

    @classmethod
    def parse(cls, value: Any) -> Optional["OperatorKind"]:
        try:
            return cls(value)
        except ValueError:
            return None


class GroupCombinator(str, Enum):
    """How the children of a filter group are combined."""
    AND = "AND"
    OR = "OR"


@dataclass(frozen=True)
class FilterCondition:
    """Single comparison between a context field and a configured literal."""
    on: Optional[ContextDomain]
    field: Optional[str]
    operator: Optional[OperatorKind]
    value: Any = None
    webhook_url: Optional[str] = None

    @property
    def is_remote(self) -> bool:
        """Whether resolving this condition needs a webhook call."""
        return self.on == ContextDomain.WEBHOOK

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FilterCondition":
        return cls(
            on=ContextDomain.parse(data.get("on")),
            field=data.get("field"),
            operator=OperatorKind.parse(data.get("operator")),
            value=data.get("value"),
            webhook_url=data.get("webhookUrl", data.get("webhook_url")) or None,
        )


@dataclass(frozen=True)
class FilterGroup:
    """Combinator over child conditions.

    ``value`` keeps the raw configured combinator so that anything other
    than AND/OR survives parsing and can be rejected at evaluation time.
    """
    value: Optional[str] = None
    children: Tuple["FilterNode", ...] = ()

    @property
    def combinator(self) -> Optional[GroupCombinator]:
        try:
            return GroupCombinator(self.value)
        except ValueError:
            return None

    def split_local_remote(self) -> Tuple[Tuple["FilterNode", ...], Tuple["FilterNode", ...]]:
        """Partition children into local and webhook-backed subsets, keeping order."""
        local = tuple(child for child in self.children if not _is_remote(child))
        remote = tuple(child for child in self.children if _is_remote(child))
        return local, remote

    @classmethod
    def from_dict(cls, data: Any) -> "FilterGroup":
        if isinstance(data, FilterGroup):
            return data
        if not isinstance(data, Mapping):
            return cls()

        children = data.get("children")
        if not isinstance(children, Sequence) or isinstance(children, (str, bytes)):
            children = []

        return cls(
            value=data.get("value"),
            children=tuple(parse_filter_node(child) for child in children),
        )


FilterNode = Union[FilterCondition, FilterGroup]


def _is_remote(node: "FilterNode") -> bool:
    return isinstance(node, FilterCondition) and node.is_remote


def parse_filter_node(data: Any) -> FilterNode:
    """Parse a child entry into a leaf condition or a nested group."""
    if isinstance(data, (FilterCondition, FilterGroup)):
        return data
    if not isinstance(data, Mapping):
        return FilterCondition(on=None, field=None, operator=None)
    if "children" in data:
        return FilterGroup.from_dict(data)
    return FilterCondition.from_dict(data)


@dataclass(frozen=True)
class NotificationStep:
    """Workflow step whose execution is gated by filters.

    ``filters`` is None when the step carries no usable filter configuration.
    """
    step_id: Optional[str] = None
    filters: Optional[Tuple[FilterGroup, ...]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NotificationStep":
        raw_filters = data.get("filters")
        filters = None
        if isinstance(raw_filters, (list, tuple)):
            filters = tuple(FilterGroup.from_dict(entry) for entry in raw_filters)

        step_id = data.get("step_id", data.get("_id"))
        return cls(step_id=str(step_id) if step_id is not None else None, filters=filters)


@dataclass(frozen=True)
class VariablesContext:
    """Runtime data a condition is evaluated against."""
    payload: Optional[Mapping[str, Any]] = None
    subscriber: Any = None
    webhook: Optional[Mapping[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "VariablesContext":
        return cls(
            payload=data.get("payload"),
            subscriber=data.get("subscriber"),
            webhook=data.get("webhook"),
        )

    @classmethod
    def for_webhook_response(cls, response: Optional[Mapping[str, Any]]) -> "VariablesContext":
        """Context holding only a fetched webhook response."""
        return cls(payload=None, webhook=response)

    def domain(self, domain: Optional[ContextDomain]) -> Any:
        if domain == ContextDomain.PAYLOAD:
            return self.payload
        if domain == ContextDomain.SUBSCRIBER:
            return self.subscriber
        if domain == ContextDomain.WEBHOOK:
            return self.webhook
        return None

    def lookup(self, domain: Optional[ContextDomain], field_name: Optional[str]) -> Any:
        """Get a field value from one domain of the context, or None when missing."""
        source = self.domain(domain)
        if source is None or field_name is None:
            return None

        found, value = _get_key(source, field_name)
        return value if found else None

    def to_request_body(self) -> Dict[str, Any]:
        """JSON-compatible form of the whole context, absent domains omitted."""
        body: Dict[str, Any] = {}
        for domain in ContextDomain:
            value = self.domain(domain)
            if value is not None:
                body[domain.value] = to_jsonable_python(value, fallback=str)
        return body


def _get_key(source: Any, key: str) -> Tuple[bool, Any]:
    if isinstance(source, Mapping):
        if key in source:
            return True, source[key]
        return False, None
    if isinstance(source, BaseModel) or hasattr(source, "__dataclass_fields__"):
        if hasattr(source, key):
            return True, getattr(source, key)
    return False, None


@dataclass
class StepFilterResult:
    """Result of evaluating a step's filters."""
    enabled: bool
    reason: Optional[str] = None
    matched_filter: Optional[int] = None
    evaluation_time_ms: float = 0.0
