# tests/fakes.py

from __future__ import annotations

import copy
import itertools

from codetasks.errors import ConflictError, FileStoreError


class FakeTaskStore:
    """
    In-memory stand-in for TaskStore.

    Mirrors the store's contract (string ids, documents returned with ``id``,
    None for missing tasks) so the service can be tested without Mongo.
    Returned documents are copies; mutating them never touches the store.
    """

    def __init__(self) -> None:
        self.docs: dict[str, dict] = {}
        self._ids = itertools.count(1)
        self.unique_titles = True

    def _out(self, task_id):
        doc = self.docs.get(task_id)
        if doc is None:
            return None
        out = copy.deepcopy(doc)
        out["id"] = task_id
        return out

    def find_by_id(self, task_id):
        return self._out(task_id)

    def find_by_title(self, title):
        for task_id, doc in self.docs.items():
            if doc["title"] == title:
                return self._out(task_id)
        return None

    def find_page(self, skip, limit):
        ids = list(self.docs)[skip : skip + limit]
        return [self._out(i) for i in ids]

    def count(self):
        return len(self.docs)

    def insert(self, document):
        if self.unique_titles and any(d["title"] == document["title"] for d in self.docs.values()):
            raise ConflictError()
        task_id = f"{next(self._ids):024x}"
        self.docs[task_id] = copy.deepcopy(document)
        return self._out(task_id)

    def update_fields(self, task_id, fields):
        doc = self.docs.get(task_id)
        if doc is None:
            return None
        doc.update(copy.deepcopy(fields))
        return self._out(task_id)

    def delete(self, task_id):
        return self.docs.pop(task_id, None) is not None

    def push_comment(self, task_id, comment):
        doc = self.docs.get(task_id)
        if doc is None:
            return None
        doc["comments"].append(copy.deepcopy(comment))
        return self._out(task_id)

    def pull_comment(self, task_id, comment_id):
        doc = self.docs.get(task_id)
        if doc is None:
            return None
        doc["comments"] = [c for c in doc["comments"] if c["id"] != comment_id]
        return self._out(task_id)

    def update_comment(self, task_id, comment_id, fields):
        doc = self.docs.get(task_id)
        if doc is None:
            return None
        for comment in doc["comments"]:
            if comment["id"] == comment_id:
                comment.update(fields)
        return self._out(task_id)


class FakeFileStore:
    """Records every delete_files call; optionally fails."""

    def __init__(self, fail: bool = False) -> None:
        self.calls: list[list[dict]] = []
        self.fail = fail

    def delete_files(self, files):
        self.calls.append(list(files))
        if self.fail:
            raise FileStoreError()

    @property
    def deleted_keys(self) -> list[str]:
        return [f["key"] for call in self.calls for f in call]


class StepClock:
    """Clock returning a later instant on every call."""

    def __init__(self, start, step) -> None:
        self.current = start
        self.step = step

    def __call__(self):
        now = self.current
        self.current = self.current + self.step
        return now
