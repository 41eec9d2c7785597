"""
Thread reconstruction from a flat, creation-ordered message log.

Everything here is pure: no I/O, no shared state. Missing references
(deleted root, deleted answer, replies to deleted messages) degrade to
explicit values instead of raising.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Union

from app.schemas.thread import (
    DanglingReply,
    MessageGroup,
    MessageGroupView,
    NoReply,
    PostSummary,
    PostThreadView,
    ResolvedReply,
    ThreadMessage,
    ThreadMessageView,
)


def group_messages_by_author(
    messages: Sequence[ThreadMessage],
    answer_id: Optional[str] = None,
) -> List[MessageGroup]:
    """
    Batch consecutive messages from the same author.

    A new group starts only when the author changes; time gaps never split a
    group. ``is_answer_group`` marks the group containing ``answer_id``.
    """
    groups: List[MessageGroup] = []
    for message in messages:
        current = groups[-1] if groups else None
        if current is None or current.author_id != message.author.id:
            current = MessageGroup(author_id=message.author.id)
            groups.append(current)
        current.messages.append(message)
        if answer_id is not None and message.id == answer_id:
            current.is_answer_group = True
    return groups


def build_candidate_set(
    messages: Iterable[ThreadMessage],
    root_message: Optional[ThreadMessage] = None,
) -> dict[str, ThreadMessage]:
    """Index replies plus the separately loaded root message by id."""
    candidates = {m.id: m for m in messages}
    if root_message is not None:
        candidates.setdefault(root_message.id, root_message)
    return candidates


def resolve_reply(
    message: ThreadMessage,
    candidates: Union[Iterable[ThreadMessage], dict[str, ThreadMessage]],
) -> Union[NoReply, ResolvedReply, DanglingReply]:
    target_id = message.reply_to_message_id
    if target_id is None:
        return NoReply()

    if isinstance(candidates, dict):
        target = candidates.get(target_id)
    else:
        target = next((c for c in candidates if c.id == target_id), None)

    if target is None:
        return DanglingReply(target_id=target_id)
    return ResolvedReply(
        target_id=target.id,
        author=target.author,
        content=target.content,
        attachments=list(target.attachments),
    )


def find_answer_message(
    answer_id: Optional[str],
    messages: Iterable[ThreadMessage],
) -> Optional[ThreadMessage]:
    if answer_id is None:
        return None
    return next((m for m in messages if m.id == answer_id), None)


def has_accepted_answer(
    answer_id: Optional[str],
    messages: Iterable[ThreadMessage],
) -> bool:
    """True only if the answer id is set and that message is still loaded."""
    return find_answer_message(answer_id, messages) is not None


def assemble_thread(
    post: PostSummary,
    root_message: Optional[ThreadMessage],
    messages: Sequence[ThreadMessage],
) -> PostThreadView:
    """
    Build the display-ready view for one post.

    ``messages`` are the replies (root excluded) in creation order. The
    answer is looked up among replies only; the root message cannot be its
    own thread's answer.
    """
    candidates = build_candidate_set(messages, root_message)
    answer_message = find_answer_message(post.answer_id, messages)
    op_author_id = root_message.author.id if root_message is not None else None

    group_views: List[MessageGroupView] = []
    for group in group_messages_by_author(messages, post.answer_id):
        views: List[ThreadMessageView] = []
        for index, message in enumerate(group.messages):
            reply = resolve_reply(message, candidates)
            views.append(
                ThreadMessageView(
                    message=message,
                    reply=reply,
                    is_first_row=index == 0 or not isinstance(reply, NoReply),
                    is_op=op_author_id is not None
                    and message.author.id == op_author_id,
                )
            )
        group_views.append(
            MessageGroupView(
                author_id=group.author_id,
                is_answer_group=group.is_answer_group,
                messages=views,
            )
        )

    return PostThreadView(
        post=post,
        root_message=root_message,
        has_answer=answer_message is not None,
        answer_message=answer_message,
        suggested_answer=messages[0] if answer_message is None and messages else None,
        reply_count=len(messages),
        groups=group_views,
    )
