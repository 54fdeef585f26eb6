"""イベントコンテキスト

Webhook ペイロード → ParsedContext → PreparedContext (EventData) の変換。
"""

from .events import (
    COMMENT_EVENTS,
    SUPPORTED_EVENT_NAMES,
    EventData,
    IssueAssignedEvent,
    IssueCommentEvent,
    IssueOpenedEvent,
    PreparedContext,
    PullRequestCommentEvent,
    PullRequestEvent,
    PullRequestReviewCommentEvent,
    PullRequestReviewEvent,
)
from .normalizer import InvalidEventError, prepare_context
from .parser import (
    ParsedContext,
    RepositoryRef,
    load_event_context_from_env,
    parse_event_context,
)

__all__ = [
    "COMMENT_EVENTS",
    "SUPPORTED_EVENT_NAMES",
    "EventData",
    "IssueAssignedEvent",
    "IssueCommentEvent",
    "IssueOpenedEvent",
    "PreparedContext",
    "PullRequestCommentEvent",
    "PullRequestEvent",
    "PullRequestReviewCommentEvent",
    "PullRequestReviewEvent",
    "InvalidEventError",
    "prepare_context",
    "ParsedContext",
    "RepositoryRef",
    "load_event_context_from_env",
    "parse_event_context",
]
