"""Task and comment endpoints, mounted at ``/api/tasks``.

Every route needs a JWT. The caller's id is the token subject; ``username``
and ``role`` come from additional claims.

Note for API consumers: ``DELETE /api/tasks/<id>`` answers 404 both when the
task does not exist and when the caller may not delete it.
"""

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from codetasks.models.validators import (
    parse_audit_task,
    parse_comment,
    parse_create_task,
    parse_pagination,
    parse_update_task,
)
from codetasks.services.policies import (
    AUDIT_TASK_ROLES,
    CREATE_TASK_ROLES,
    UPDATE_TASK_ROLES,
    current_user,
    roles_required,
)
from codetasks.services.task_service import TaskService
from codetasks.stores.task_store import TaskStore
from codetasks.utils.db import get_db


tasks_bp = Blueprint("tasks", __name__)


def get_task_service():
    service = current_app.extensions.get("task_service")
    if service is not None:
        return service
    return TaskService(
        TaskStore(get_db().tasks),
        current_app.extensions["file_store"],
        offset_hours=current_app.config["TIMESTAMP_OFFSET_HOURS"],
    )


@tasks_bp.get("/")
@jwt_required()
def list_tasks():
    page, limit = parse_pagination(
        request.args,
        default_limit=current_app.config["TASKS_PAGE_LIMIT"],
        max_limit=current_app.config["TASKS_MAX_PAGE_LIMIT"],
    )
    result = get_task_service().list_tasks(page=page, limit=limit)
    return jsonify(result.to_dict()), 200


@tasks_bp.get("/<task_id>")
@jwt_required()
def get_task(task_id):
    task = get_task_service().get_task_by_id(task_id)
    return jsonify(item=task.to_dict()), 200


@tasks_bp.post("/")
@jwt_required()
@roles_required(*CREATE_TASK_ROLES)
def create_task():
    data = parse_create_task(request.get_json(silent=True))
    task = get_task_service().create_task(data, current_user())
    return jsonify(item=task.to_dict()), 201


@tasks_bp.put("/<task_id>")
@jwt_required()
@roles_required(*UPDATE_TASK_ROLES)
def update_task(task_id):
    updates = parse_update_task(request.get_json(silent=True))
    task = get_task_service().update_task(task_id, updates)
    return jsonify(item=task.to_dict()), 200


@tasks_bp.put("/<task_id>/audit")
@jwt_required()
@roles_required(*AUDIT_TASK_ROLES)
def audit_task(task_id):
    updates = parse_audit_task(request.get_json(silent=True))
    task = get_task_service().audit_task(task_id, updates)
    return jsonify(item=task.to_dict()), 200


@tasks_bp.delete("/<task_id>")
@jwt_required()
def delete_task(task_id):
    result = get_task_service().delete_task(task_id, current_user())
    return jsonify(status="deleted", id=result.id), 200


@tasks_bp.post("/<task_id>/comments")
@jwt_required()
def create_comment(task_id):
    message = parse_comment(request.get_json(silent=True))
    task = get_task_service().create_comment(task_id, current_user(), message)
    return jsonify(item=task.to_dict()), 201


@tasks_bp.put("/<task_id>/comments/<comment_id>")
@jwt_required()
def update_comment(task_id, comment_id):
    message = parse_comment(request.get_json(silent=True))
    task = get_task_service().update_comment(task_id, current_user(), comment_id, message)
    return jsonify(item=task.to_dict()), 200


@tasks_bp.delete("/<task_id>/comments/<comment_id>")
@jwt_required()
def delete_comment(task_id, comment_id):
    result = get_task_service().delete_comment(task_id, current_user(), comment_id)
    return jsonify(status="deleted", id=result.comment_id), 200
