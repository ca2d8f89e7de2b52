from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Role(str, Enum):
    USER = "user"
    STAFF = "staff"
    AUDITOR = "auditor"


class AuditStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass
class CurrentUser:
    """Authenticated caller, built from the JWT identity and claims."""

    id: str
    username: str
    role: Role = Role.USER

    def snapshot(self) -> "Author":
        return Author(id=self.id, username=self.username)


@dataclass
class Author:
    id: str
    username: str

    def to_document(self) -> dict:
        return {"id": self.id, "username": self.username}

    @classmethod
    def from_document(cls, doc: dict) -> "Author":
        return cls(id=str(doc.get("id")), username=doc.get("username") or "")


@dataclass
class TestCase:
    __test__ = False

    input: str
    output: str
    published: bool = False

    def to_document(self) -> dict:
        return {"input": self.input, "output": self.output, "published": self.published}

    @classmethod
    def from_document(cls, doc: dict) -> "TestCase":
        return cls(
            input=doc.get("input", ""),
            output=doc.get("output", ""),
            published=bool(doc.get("published", False)),
        )


@dataclass
class TaskFile:
    key: str
    url: str

    def to_document(self) -> dict:
        return {"key": self.key, "url": self.url}

    @classmethod
    def from_document(cls, doc: dict) -> "TaskFile":
        return cls(key=doc.get("key", ""), url=doc.get("url", ""))


@dataclass
class Comment:
    id: str
    message: str
    author: Author
    # ISO-8601 strings with the configured hour offset already applied
    created_at: str
    updated_at: str

    def to_document(self) -> dict:
        return {
            "id": self.id,
            "message": self.message,
            "author": self.author.to_document(),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_document(cls, doc: dict) -> "Comment":
        return cls(
            id=str(doc.get("id")),
            message=doc.get("message", ""),
            author=Author.from_document(doc.get("author") or {}),
            created_at=doc.get("createdAt"),
            updated_at=doc.get("updatedAt"),
        )


@dataclass
class Task:
    title: str
    description: str
    level: int
    tags: List[str]
    testcases: List[TestCase]
    solution_code: str
    author: Author
    hint: Optional[str] = None
    files: List[TaskFile] = field(default_factory=list)
    status: AuditStatus = AuditStatus.PENDING
    feedback: Optional[str] = None
    comments: List[Comment] = field(default_factory=list)
    id: Optional[str] = None

    def find_comment(self, comment_id: str) -> Optional[Comment]:
        for comment in self.comments:
            if comment.id == comment_id:
                return comment
        return None

    def to_document(self) -> dict:
        """Shape persisted in Mongo. The ``_id`` is left to the store."""
        return {
            "title": self.title,
            "description": self.description,
            "level": self.level,
            "tags": list(self.tags),
            "hint": self.hint,
            "testcases": [t.to_document() for t in self.testcases],
            "solution_code": self.solution_code,
            "files": [f.to_document() for f in self.files],
            "author": self.author.to_document(),
            "status": self.status.value,
            "feedback": self.feedback,
            "comments": [c.to_document() for c in self.comments],
        }

    def to_dict(self) -> dict:
        doc = self.to_document()
        doc["id"] = self.id
        return doc

    @classmethod
    def from_document(cls, doc: dict) -> "Task":
        raw_id = doc.get("_id", doc.get("id"))
        return cls(
            id=str(raw_id) if raw_id is not None else None,
            title=doc.get("title", ""),
            description=doc.get("description", ""),
            level=doc.get("level"),
            tags=list(doc.get("tags") or []),
            hint=doc.get("hint"),
            testcases=[TestCase.from_document(t) for t in doc.get("testcases") or []],
            solution_code=doc.get("solution_code", ""),
            files=[TaskFile.from_document(f) for f in doc.get("files") or []],
            author=Author.from_document(doc.get("author") or {}),
            status=AuditStatus(doc.get("status") or AuditStatus.PENDING.value),
            feedback=doc.get("feedback"),
            comments=[Comment.from_document(c) for c in doc.get("comments") or []],
        )


@dataclass
class Page:
    current_page: int
    total_pages: int
    data: List[Task]

    def to_dict(self) -> dict:
        return {
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "data": [t.to_dict() for t in self.data],
        }


@dataclass
class TaskDeleted:
    id: str


@dataclass
class CommentDeleted:
    task_id: str
    comment_id: str
