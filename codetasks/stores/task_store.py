import logging

from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from codetasks.errors import ConflictError
from codetasks.utils.db import serialize_doc, to_object_id

logger = logging.getLogger(__name__)


class TaskStore:
    """
    Mongo-backed store for task documents.

    Comments are embedded in their task, so every comment change is a single
    atomic update on the task document. Ids are taken as strings; anything
    that is not a valid ObjectId behaves like a missing document.

    Documents are returned through ``serialize_doc`` (``_id`` -> ``id``).
    """

    def __init__(self, collection):
        self._collection = collection

    def ensure_indexes(self):
        self._collection.create_index([("title", ASCENDING)], unique=True, name="title_unique")

    # ---- reads ----

    def find_by_id(self, task_id):
        oid = to_object_id(task_id)
        if oid is None:
            return None
        return serialize_doc(self._collection.find_one({"_id": oid}))

    def find_by_title(self, title):
        return serialize_doc(self._collection.find_one({"title": title}))

    def find_page(self, skip, limit):
        cursor = self._collection.find({}).sort("_id", ASCENDING).skip(skip).limit(limit)
        return [serialize_doc(d) for d in cursor]

    def count(self):
        return self._collection.count_documents({})

    # ---- writes ----

    def insert(self, document):
        try:
            res = self._collection.insert_one(dict(document))
        except DuplicateKeyError:
            logger.warning("Duplicate title rejected by index title=%r", document.get("title"))
            raise ConflictError() from None
        return serialize_doc(self._collection.find_one({"_id": res.inserted_id}))

    def update_fields(self, task_id, fields):
        return self._find_and_update(task_id, {"$set": dict(fields)})

    def delete(self, task_id):
        oid = to_object_id(task_id)
        if oid is None:
            return False
        return self._collection.delete_one({"_id": oid}).deleted_count == 1

    def push_comment(self, task_id, comment):
        return self._find_and_update(task_id, {"$push": {"comments": dict(comment)}})

    def pull_comment(self, task_id, comment_id):
        return self._find_and_update(task_id, {"$pull": {"comments": {"id": comment_id}}})

    def update_comment(self, task_id, comment_id, fields):
        updates = {f"comments.$[comment].{name}": value for name, value in fields.items()}
        return self._find_and_update(
            task_id,
            {"$set": updates},
            array_filters=[{"comment.id": comment_id}],
        )

    def _find_and_update(self, task_id, update, **kwargs):
        oid = to_object_id(task_id)
        if oid is None:
            return None
        try:
            doc = self._collection.find_one_and_update(
                {"_id": oid},
                update,
                return_document=ReturnDocument.AFTER,
                **kwargs,
            )
        except DuplicateKeyError:
            # title edits still hit the unique index
            raise ConflictError() from None
        return serialize_doc(doc)
