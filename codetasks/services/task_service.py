import logging
import math
import uuid

from codetasks.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from codetasks.models.task_model import (
    AuditStatus,
    Comment,
    CommentDeleted,
    Page,
    Task,
    TaskDeleted,
    TaskFile,
    TestCase,
)
from codetasks.services.policies import can_delete_task, is_comment_author
from codetasks.utils.clock import shifted_iso, utc_now

logger = logging.getLogger(__name__)

COMMENT_NOT_FOUND = "COMMENT_NOT_FOUND"


class TaskService:
    """Applies every change to a task and its embedded comments.

    Each mutation is one atomic update on the task document; there is no
    locking. Two concurrent creates with the same title can both pass the
    title lookup, in which case the store's unique index rejects the second.
    """

    def __init__(self, store, file_store, clock=utc_now, offset_hours=7):
        self.store = store
        self.file_store = file_store
        self._clock = clock
        self._offset_hours = offset_hours

    def _timestamp(self):
        return shifted_iso(self._clock(), self._offset_hours)

    def _load(self, task_id):
        doc = self.store.find_by_id(task_id)
        if doc is None:
            raise NotFoundError()
        return Task.from_document(doc)

    @staticmethod
    def _updated(doc, code=None):
        # The document can vanish between the lookup and the update
        if doc is None:
            raise NotFoundError(code)
        return Task.from_document(doc)

    # ---- tasks ----

    def create_task(self, data, user):
        if self.store.find_by_title(data["title"]) is not None:
            raise ConflictError()

        task = Task(
            title=data["title"],
            description=data["description"],
            level=data["level"],
            tags=list(data["tags"]),
            hint=data.get("hint"),
            testcases=[TestCase.from_document(t) for t in data["testcases"]],
            solution_code=data["solution_code"],
            files=[TaskFile.from_document(f) for f in data.get("files") or []],
            author=user.snapshot(),
            status=AuditStatus.PENDING,
        )
        created = Task.from_document(self.store.insert(task.to_document()))
        logger.info("Task created id=%s title=%r author=%s", created.id, created.title, user.id)
        return created

    def list_tasks(self, page=1, limit=25):
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive")
        docs = self.store.find_page((page - 1) * limit, limit)
        total = self.store.count()
        return Page(
            current_page=page,
            total_pages=math.ceil(total / limit),
            data=[Task.from_document(d) for d in docs],
        )

    def get_task_by_id(self, task_id):
        return self._load(task_id)

    def update_task(self, task_id, fields):
        task = self._load(task_id)
        if not fields:
            return task
        return self._updated(self.store.update_fields(task_id, fields))

    def audit_task(self, task_id, fields):
        task = self._load(task_id)
        if not fields:
            return task
        updated = self._updated(self.store.update_fields(task_id, fields))
        logger.info("Task audited id=%s status=%s", task_id, updated.status.value)
        return updated

    def delete_task(self, task_id, user):
        """Delete a task and its attachments.

        Missing tasks and callers without permission both get ``NotFoundError``
        so the response does not reveal whether the task exists. Attachments
        are removed first; if that fails the task document is kept.
        """
        doc = self.store.find_by_id(task_id)
        task = Task.from_document(doc) if doc is not None else None
        if task is None or not can_delete_task(user, task):
            if task is not None:
                logger.warning("Delete denied task=%s user=%s role=%s", task_id, user.id, user.role.value)
            raise NotFoundError()

        if task.files:
            self.file_store.delete_files([{"key": f.key} for f in task.files])
        if not self.store.delete(task_id):
            raise NotFoundError()
        logger.info("Task deleted id=%s by=%s files=%d", task_id, user.id, len(task.files))
        return TaskDeleted(id=task.id)

    # ---- comments ----

    def create_comment(self, task_id, user, message):
        self._load(task_id)
        now = self._timestamp()
        comment = Comment(
            id=str(uuid.uuid4()),
            message=message,
            author=user.snapshot(),
            created_at=now,
            updated_at=now,
        )
        updated = self._updated(self.store.push_comment(task_id, comment.to_document()))
        logger.info("Comment added task=%s comment=%s", task_id, comment.id)
        return updated

    def _own_comment(self, task_id, user, comment_id):
        task = self._load(task_id)
        comment = task.find_comment(comment_id)
        if comment is None:
            raise NotFoundError(COMMENT_NOT_FOUND)
        if not is_comment_author(user, comment):
            raise UnauthorizedError()
        return comment

    def delete_comment(self, task_id, user, comment_id):
        self._own_comment(task_id, user, comment_id)
        self._updated(self.store.pull_comment(task_id, comment_id), COMMENT_NOT_FOUND)
        logger.info("Comment deleted task=%s comment=%s", task_id, comment_id)
        return CommentDeleted(task_id=task_id, comment_id=comment_id)

    def update_comment(self, task_id, user, comment_id, message):
        self._own_comment(task_id, user, comment_id)
        fields = {"message": message, "updatedAt": self._timestamp()}
        return self._updated(self.store.update_comment(task_id, comment_id, fields), COMMENT_NOT_FOUND)
