"""プロンプトビルダー

PreparedContext と事前取得データ (FetchDataResult) から、アシスタントに渡す
プロンプト全文を組み立てる。出力は入力のみに依存する（時刻・乱数を含まない）。
"""

from __future__ import annotations

from enum import StrEnum

from ..core.context.events import (
    COMMENT_EVENTS,
    EventData,
    IssueAssignedEvent,
    IssueOpenedEvent,
    PreparedContext,
)
from ..core.gitea.formatter import (
    format_body,
    format_changed_files_with_sha,
    format_comments,
    format_context,
    format_review_comments,
)
from ..core.gitea.models import FetchDataResult
from ..core.gitea.sanitizer import sanitize_content
from . import templates
from .templates import BranchState
from .tools import UPDATE_PR_COMMENT_TOOL, comment_update_tool


class EventType(StrEnum):
    """プロンプト上のイベント分類"""

    REVIEW_COMMENT = "REVIEW_COMMENT"
    PR_REVIEW = "PR_REVIEW"
    GENERAL_COMMENT = "GENERAL_COMMENT"
    ISSUE_CREATED = "ISSUE_CREATED"
    ISSUE_ASSIGNED = "ISSUE_ASSIGNED"
    PULL_REQUEST = "PULL_REQUEST"


def get_event_type_and_context(context: PreparedContext) -> tuple[EventType, str]:
    """イベント分類とトリガー説明文を返す

    Raises:
        ValueError: 想定外のイベントの場合
    """
    event_data = context.event_data
    phrase = context.trigger_phrase

    if event_data.event_name == "pull_request_review_comment":
        return EventType.REVIEW_COMMENT, f"PR review comment with '{phrase}'"
    if event_data.event_name == "pull_request_review":
        return EventType.PR_REVIEW, f"PR review with '{phrase}'"
    if event_data.event_name == "issue_comment":
        return EventType.GENERAL_COMMENT, f"issue comment with '{phrase}'"
    if isinstance(event_data, IssueOpenedEvent):
        return EventType.ISSUE_CREATED, f"new issue with '{phrase}' in body"
    if isinstance(event_data, IssueAssignedEvent):
        return EventType.ISSUE_ASSIGNED, f"issue assigned to '{event_data.assignee_trigger}'"
    if event_data.event_name == "pull_request":
        if event_data.event_action:
            return EventType.PULL_REQUEST, f"pull request {event_data.event_action}"
        return EventType.PULL_REQUEST, "pull request event"

    raise ValueError(f"Unexpected event type: {event_data.event_name}")


def get_branch_state(event_data: EventData) -> BranchState:
    """作業ブランチの有無と PR/Issue からコミット先を決める"""
    if event_data.claude_branch:
        return BranchState.ON_CLAUDE_BRANCH
    if event_data.is_pr:
        return BranchState.PUSH_TO_PR
    return BranchState.CHECK_EXISTING


def _branch_values(context: PreparedContext) -> dict[str, str]:
    event_data = context.event_data
    entity_kind = "PR" if event_data.is_pr else "issue"
    branch_kind = "pr" if event_data.is_pr else "issue"
    return {
        "entity_kind": entity_kind,
        "branch_prefix": f"claude/{branch_kind}-{event_data.entity_number}",
        "base_branch": event_data.base_branch or "",
        "claude_branch": event_data.claude_branch or "",
        "trigger_username": context.trigger_username or "Unknown",
    }


def _data_sections(context: PreparedContext, data: FetchDataResult) -> str:
    is_pr = context.event_data.is_pr
    image_url_map = data.image_url_map

    sections = templates.DATA_SECTIONS.substitute(
        formatted_context=format_context(data.context_data, is_pr),
        formatted_body=(
            format_body(data.context_data.body, image_url_map)
            if data.context_data.body
            else "No description provided"
        ),
        formatted_comments=format_comments(data.comments, image_url_map) or "No comments",
        formatted_review_comments=(
            format_review_comments(data.review_data, image_url_map) if is_pr else ""
        )
        or "No review comments",
        formatted_changed_files=(
            format_changed_files_with_sha(data.changed_files_with_sha) if is_pr else ""
        )
        or "No files changed",
    )
    if image_url_map:
        sections += templates.IMAGES_INFO
    return sections


def _metadata(context: PreparedContext, event_type: EventType, trigger_context: str) -> str:
    event_data = context.event_data
    if event_data.is_pr:
        entity_tag = f"<pr_number>{event_data.pr_number}</pr_number>"
    else:
        entity_tag = f"<issue_number>{event_data.issue_number}</issue_number>"

    blocks = [
        templates.METADATA.substitute(
            event_type=event_type,
            is_pr="true" if event_data.is_pr else "false",
            trigger_context=trigger_context,
            repository=context.repository,
            entity_tag=entity_tag,
            claude_comment_id=context.claude_comment_id,
            trigger_username=context.trigger_username or "Unknown",
            trigger_phrase=context.trigger_phrase,
        )
    ]
    if isinstance(event_data, COMMENT_EVENTS):
        blocks.append(
            templates.TRIGGER_COMMENT.substitute(
                comment_body=sanitize_content(event_data.comment_body)
            )
        )
    if context.direct_prompt:
        blocks.append(
            templates.DIRECT_PROMPT.substitute(direct_prompt=sanitize_content(context.direct_prompt))
        )
    return "\n".join(blocks)


def _comment_tool_info(context: PreparedContext, comment_tool: str) -> str:
    if comment_tool == UPDATE_PR_COMMENT_TOOL:
        scope, target = "this inline PR review comment", "this specific review comment"
    else:
        scope, target = "this event type", "comments"
    return templates.COMMENT_TOOL_INFO.substitute(
        scope=scope,
        target=target,
        comment_tool=comment_tool,
        comment_id=context.claude_comment_id,
    )


def _request_source(context: PreparedContext) -> str:
    if context.direct_prompt:
        return "the <direct_prompt> tag above"
    if isinstance(context.event_data, COMMENT_EVENTS):
        return "the <trigger_comment> tag above"
    return f"the comment/issue that contains '{context.trigger_phrase}'"


def _steps(context: PreparedContext, comment_tool: str, branch_state: BranchState) -> str:
    event_data = context.event_data
    values = _branch_values(context)

    extra_sources = ""
    if isinstance(event_data, COMMENT_EVENTS):
        extra_sources += templates.TRIGGER_COMMENT_SOURCE
    if context.direct_prompt:
        extra_sources += templates.DIRECT_PROMPT_SOURCE

    steps = [
        templates.STEP_TODO_LIST.substitute(comment_tool=comment_tool),
        templates.STEP_GATHER_CONTEXT.substitute(
            extra_sources=extra_sources, trigger_phrase=context.trigger_phrase
        ),
        templates.STEP_UNDERSTAND.substitute(request_source=_request_source(context)),
    ]

    if branch_state is BranchState.CHECK_EXISTING:
        steps.append(
            templates.STEP_CHECK_EXISTING_BRANCH.substitute(values, step=len(steps) + 1)
        )

    steps.append(
        templates.STEP_EXECUTE.substitute(
            step=len(steps) + 1,
            pr_post_review=(
                templates.PR_POST_REVIEW.substitute(comment_tool=comment_tool)
                if event_data.is_pr
                else ""
            ),
            feedback_note=(
                templates.PR_FEEDBACK_NOTE if event_data.is_pr else templates.ISSUE_FEEDBACK_NOTE
            ),
            branch_instructions=templates.BRANCH_INSTRUCTIONS[branch_state].substitute(values),
        )
    )
    steps.append(
        templates.STEP_FINAL_UPDATE.substitute(
            step=len(steps) + 1,
            create_pr_note=(
                templates.CREATE_PR_NOTE if branch_state is BranchState.CHECK_EXISTING else ""
            ),
        )
    )
    return "Follow these steps:\n\n" + "\n\n".join(steps)


def _important_notes(context: PreparedContext, comment_tool: str, branch_state: BranchState) -> str:
    is_pr = context.event_data.is_pr
    return templates.IMPORTANT_NOTES.substitute(
        comment_tool=comment_tool,
        claude_comment_id=context.claude_comment_id,
        pr_critical_note=(
            templates.PR_CRITICAL_NOTE.substitute(comment_tool=comment_tool) if is_pr else ""
        ),
        branch_note=templates.BRANCH_NOTES[branch_state].substitute(_branch_values(context)),
    )


def generate_prompt(context: PreparedContext, data: FetchDataResult) -> str:
    """プロンプト全文を生成する

    Args:
        context: 準備済みコンテキスト
        data: 事前取得データ

    Returns:
        プロンプト文字列（カスタム指示は末尾に原文のまま付与）

    Raises:
        ValueError: 想定外のイベントの場合
    """
    event_type, trigger_context = get_event_type_and_context(context)
    comment_tool = comment_update_tool(context.event_data)
    branch_state = get_branch_state(context.event_data)

    prompt = "\n\n".join(
        [
            templates.INTRO,
            _data_sections(context, data),
            _metadata(context, event_type, trigger_context),
            _comment_tool_info(context, comment_tool),
            templates.CLARIFICATIONS.substitute(
                pr_review_note=(
                    templates.PR_REVIEW_CLARIFICATION if context.event_data.is_pr else ""
                )
            ),
            _steps(context, comment_tool, branch_state),
            _important_notes(context, comment_tool, branch_state),
            templates.CAPABILITIES,
            templates.ANALYSIS,
        ]
    )

    if context.custom_instructions:
        prompt += templates.CUSTOM_INSTRUCTIONS + context.custom_instructions

    return prompt
