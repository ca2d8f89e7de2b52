from bson import ObjectId
from bson.errors import InvalidId
from flask import current_app, g
from pymongo import MongoClient


def init_app(app):
    # One client per app; pymongo pools connections and connects lazily
    app.extensions["mongo_client"] = MongoClient(
        app.config["MONGO_URI"],
        serverSelectionTimeoutMS=2000,
        connect=False,
    )
    app.teardown_appcontext(close_db)


def get_db():
    if "db" not in g:
        client = current_app.extensions["mongo_client"]
        g.db = client[current_app.config["MONGO_DB_NAME"]]
    return g.db


def close_db(_=None):
    g.pop("db", None)


def to_object_id(value):
    """Return an ObjectId for ``value`` or None when it is not a valid id."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def serialize_doc(doc):
    if doc is None:
        return None
    out = dict(doc)
    if "_id" in out:
        out["id"] = str(out.pop("_id"))
    return out
