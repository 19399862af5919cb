"""
Threaded comments on tasks.

Comments are stored flat; each row points at its parent through
``parent_comment_id``. The nested view handed to clients is rebuilt on every
read by ``build_comment_tree`` and is never written back.

Deletion is leaves-first: a comment that still has a direct reply cannot be
removed by anyone. The same rule holds under concurrency because the
``parent_comment_id`` foreign key rejects both a parent delete that races a
new reply and a reply insert that races its parent's delete.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

from app import models
from app.core.exceptions import (
    HasReplies,
    NotFoundOrDenied,
    ParentNotFound,
    ReferencedRecord,
)
from app.core.time_utils import days_ago, start_of_today
from app.repositories import CommentFilter, Repository
from app.services.access import AccessControlEvaluator
from app.services.actor import Actor

RECENT_WINDOW_DAYS = 7


@dataclass
class CommentNode:
    comment: models.Comment
    replies: list["CommentNode"] = field(default_factory=list)
    # Direct children only, never a recursive sum
    reply_count: int = 0


def _oldest_first(comment: models.Comment):
    return (comment.created_at, comment.id)


def build_comment_tree(comments: Iterable[models.Comment]) -> list[CommentNode]:
    """Rebuild the reply tree of one task from its flat comment rows.

    Top-level comments come newest first; replies at every depth come oldest
    first. A comment whose parent is missing from ``comments`` (for example
    filtered out upstream) is dropped together with its subtree.
    """
    comments = list(comments)
    children: dict[int, list[models.Comment]] = {}
    roots: list[models.Comment] = []
    for comment in comments:
        if comment.parent_comment_id is None:
            roots.append(comment)
        else:
            children.setdefault(comment.parent_comment_id, []).append(comment)

    roots.sort(key=_oldest_first, reverse=True)
    tree = [CommentNode(comment=root) for root in roots]

    stack = list(tree)
    while stack:
        node = stack.pop()
        direct = sorted(children.get(node.comment.id, []), key=_oldest_first)
        node.replies = [CommentNode(comment=reply) for reply in direct]
        node.reply_count = len(direct)
        stack.extend(node.replies)
    return tree


class CommentThreadManager:
    def __init__(self, repository: Repository, access: AccessControlEvaluator):
        self.repository = repository
        self.access = access

    def _visible_task(self, actor: Actor, task_id: int) -> models.Task:
        task = self.repository.get_task(task_id)
        if task is None or not self.access.can_view(actor, self.repository.get_project(task.project_id)):
            raise NotFoundOrDenied("Task", task_id)
        return task

    def _visible_comment(self, actor: Actor, comment_id: int) -> tuple[models.Comment, models.Project]:
        comment = self.repository.get_comment(comment_id)
        if comment is None:
            raise NotFoundOrDenied("Comment", comment_id)
        task = self.repository.get_task(comment.task_id)
        project = self.repository.get_project(task.project_id) if task is not None else None
        if not self.access.can_view(actor, project):
            raise NotFoundOrDenied("Comment", comment_id)
        return comment, project

    def _mutable_comment(self, actor: Actor, comment_id: int) -> models.Comment:
        comment, project = self._visible_comment(actor, comment_id)
        if not self.access.can_mutate_comment(actor, comment, project):
            raise NotFoundOrDenied("Comment", comment_id)
        return comment

    def create(
        self,
        actor: Actor,
        task_id: int,
        content: str,
        parent_comment_id: Optional[int] = None,
    ) -> models.Comment:
        task = self._visible_task(actor, task_id)

        if parent_comment_id is not None:
            parent = self.repository.get_comment(parent_comment_id)
            if parent is None or parent.task_id != task.id:
                raise ParentNotFound(details={"parent_comment_id": parent_comment_id})

        comment = models.Comment(
            content=content,
            task_id=task.id,
            user_id=actor.id,
            parent_comment_id=parent_comment_id,
        )
        try:
            return self.repository.add_comment(comment)
        except ReferencedRecord:
            # The parent (or the task) vanished between the check and the insert
            if parent_comment_id is not None:
                raise ParentNotFound(details={"parent_comment_id": parent_comment_id})
            raise NotFoundOrDenied("Task", task_id)

    def get(self, actor: Actor, comment_id: int) -> CommentNode:
        comment, _ = self._visible_comment(actor, comment_id)
        replies = [
            CommentNode(comment=reply, reply_count=self.repository.count_replies(reply.id))
            for reply in self.repository.list_replies(comment.id)
        ]
        return CommentNode(comment=comment, replies=replies, reply_count=len(replies))

    def update(self, actor: Actor, comment_id: int, content: str) -> models.Comment:
        comment = self._mutable_comment(actor, comment_id)
        if content == comment.content:
            return comment
        comment.content = content
        comment.is_edited = True
        return self.repository.save(comment)

    def delete(self, actor: Actor, comment_id: int) -> None:
        comment = self._mutable_comment(actor, comment_id)
        if self.repository.count_replies(comment.id) > 0:
            raise HasReplies(details={"comment_id": comment_id})
        try:
            self.repository.delete_comment(comment)
        except ReferencedRecord:
            # A reply landed after the count above
            raise HasReplies(details={"comment_id": comment_id})

    def list_for_task(self, actor: Actor, task_id: int) -> list[CommentNode]:
        task = self._visible_task(actor, task_id)
        return build_comment_tree(self.repository.list_task_comments(task.id))

    def list_recent(self, actor: Actor, limit: int = 10) -> list[models.Comment]:
        return self.repository.list_recent_comments(self.access.visibility_scope(actor), limit)

    def get_statistics(
        self,
        actor: Actor,
        task_id: Optional[int] = None,
        project_id: Optional[int] = None,
    ) -> dict[str, int]:
        scope = CommentFilter(
            viewer_id=self.access.visibility_scope(actor),
            task_id=task_id,
            project_id=project_id,
        )
        return {
            "total": self.repository.count_comments(scope),
            "my_comments": self.repository.count_comments(replace(scope, user_id=actor.id)),
            "recent": self.repository.count_comments(
                replace(scope, created_since=days_ago(RECENT_WINDOW_DAYS))
            ),
            "today": self.repository.count_comments(replace(scope, created_since=start_of_today())),
        }
