"""Request body parsing for the task endpoints.

Each ``parse_*`` function takes the decoded JSON payload and returns a dict
holding only the recognised fields, raising ``ValidationError`` on the first
problem found.
"""

from codetasks.errors import ValidationError
from codetasks.models.task_model import AuditStatus

TASK_FIELDS = ("title", "description", "level", "tags", "hint", "testcases", "solution_code", "files")
AUDIT_FIELDS = ("status", "feedback")


def _require_string(payload, name, optional=False):
    value = payload.get(name)
    if value is None:
        if optional:
            return None
        raise ValidationError(f"{name} is required", field=name)
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string", field=name)
    if not optional and not value.strip():
        raise ValidationError(f"{name} must not be empty", field=name)
    return value


def _parse_level(value):
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError("level must be a number", field="level")
    # range first: int() fails on inf and nan
    if not 1 <= value <= 5 or value != int(value):
        raise ValidationError("level must be an integer between 1 and 5", field="level")
    return int(value)


def _parse_tags(value):
    if not isinstance(value, list) or not value:
        raise ValidationError("tags must be a non-empty list", field="tags")
    if not all(isinstance(tag, str) for tag in value):
        raise ValidationError("tags must be strings", field="tags")
    return list(value)


def _parse_testcases(value):
    if not isinstance(value, list) or not value:
        raise ValidationError("testcases must be a non-empty list", field="testcases")
    testcases = []
    for item in value:
        if not isinstance(item, dict):
            raise ValidationError("each testcase must be an object", field="testcases")
        case_input = item.get("input")
        case_output = item.get("output")
        if not isinstance(case_input, str) or not isinstance(case_output, str):
            raise ValidationError("testcase input and output must be strings", field="testcases")
        published = item.get("published", False)
        if not isinstance(published, bool):
            raise ValidationError("testcase published must be a boolean", field="testcases")
        testcases.append({"input": case_input, "output": case_output, "published": published})
    return testcases


def _parse_files(value):
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError("files must be a list", field="files")
    files = []
    for item in value:
        if not isinstance(item, dict) or not isinstance(item.get("key"), str) or not item["key"]:
            raise ValidationError("each file needs a key", field="files")
        url = item.get("url", "")
        if not isinstance(url, str):
            raise ValidationError("file url must be a string", field="files")
        files.append({"key": item["key"], "url": url})
    return files


_FIELD_PARSERS = {
    "title": lambda p: _require_string(p, "title"),
    "description": lambda p: _require_string(p, "description"),
    "level": lambda p: _parse_level(p.get("level")),
    "tags": lambda p: _parse_tags(p.get("tags")),
    "hint": lambda p: _require_string(p, "hint", optional=True),
    "testcases": lambda p: _parse_testcases(p.get("testcases")),
    "solution_code": lambda p: _require_string(p, "solution_code"),
    "files": lambda p: _parse_files(p.get("files")),
}


def _ensure_object(payload):
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def parse_create_task(payload):
    payload = _ensure_object(payload)
    if "level" not in payload:
        raise ValidationError("level is required", field="level")
    return {name: _FIELD_PARSERS[name](payload) for name in TASK_FIELDS}


def parse_update_task(payload):
    """Partial variant of ``parse_create_task``: only present fields are kept."""
    payload = _ensure_object(payload)
    updates = {}
    for name in TASK_FIELDS:
        if name in payload:
            updates[name] = _FIELD_PARSERS[name](payload)
    if not updates:
        raise ValidationError("No valid fields to update")
    return updates


def parse_audit_task(payload):
    payload = _ensure_object(payload)
    updates = {}
    if "status" in payload:
        try:
            updates["status"] = AuditStatus(payload["status"]).value
        except ValueError:
            allowed = ", ".join(s.value for s in AuditStatus)
            raise ValidationError(f"status must be one of: {allowed}", field="status") from None
    if "feedback" in payload:
        updates["feedback"] = _require_string(payload, "feedback", optional=True)
    if not updates:
        raise ValidationError("No valid fields to update")
    return updates


def parse_comment(payload):
    payload = _ensure_object(payload)
    return _require_string(payload, "message")


def parse_pagination(args, default_limit=25, max_limit=100):
    """Read ``page`` and ``limit`` from query-string args."""
    try:
        page = int(args.get("page", 1))
        limit = int(args.get("limit", default_limit))
    except (TypeError, ValueError):
        raise ValidationError("page and limit must be integers") from None
    if page < 1:
        raise ValidationError("page must be at least 1", field="page")
    if not 1 <= limit <= max_limit:
        raise ValidationError(f"limit must be between 1 and {max_limit}", field="limit")
    return page, limit
