# tests/test_policies.py

from __future__ import annotations

import pytest
from flask_jwt_extended import create_access_token, verify_jwt_in_request

from codetasks.errors import ForbiddenError, UnauthorizedError
from codetasks.models.task_model import Author, Comment, CurrentUser, Role, Task, TestCase
from codetasks.services.policies import (
    can_delete_task,
    current_user,
    has_role,
    is_comment_author,
    roles_required,
)


def _task(author_id: str) -> Task:
    return Task(
        title="t",
        description="d",
        level=1,
        tags=["x"],
        testcases=[TestCase(input="1", output="1")],
        solution_code="pass",
        author=Author(id=author_id, username="someone"),
    )


@pytest.mark.parametrize(
    "role,user_id,allowed",
    [
        (Role.AUDITOR, "anyone", True),
        (Role.AUDITOR, "owner", True),
        (Role.STAFF, "owner", True),
        (Role.STAFF, "other", False),
        (Role.USER, "owner", False),
        (Role.USER, "other", False),
    ],
)
def test_can_delete_task(role, user_id, allowed) -> None:
    user = CurrentUser(id=user_id, username="x", role=role)
    assert can_delete_task(user, _task("owner")) is allowed


def test_is_comment_author_compares_ids_only() -> None:
    comment = Comment(id="c1", message="m", author=Author(id="u1", username="old-name"), created_at="", updated_at="")
    assert is_comment_author(CurrentUser(id="u1", username="renamed"), comment)
    assert not is_comment_author(CurrentUser(id="u2", username="old-name"), comment)


def test_has_role() -> None:
    assert has_role(CurrentUser(id="1", username="a", role=Role.STAFF), (Role.STAFF, Role.AUDITOR))
    assert not has_role(CurrentUser(id="1", username="a", role=Role.USER), (Role.STAFF,))


def _authed(app, token):
    return app.test_request_context(headers={"Authorization": f"Bearer {token}"})


def test_current_user_reads_identity_and_claims(app) -> None:
    with app.app_context():
        token = create_access_token(identity="u9", additional_claims={"username": "zoe", "role": "auditor"})
    with _authed(app, token):
        verify_jwt_in_request()
        user = current_user()
    assert user == CurrentUser(id="u9", username="zoe", role=Role.AUDITOR)


def test_current_user_rejects_unknown_role(app) -> None:
    with app.app_context():
        token = create_access_token(identity="u9", additional_claims={"username": "zoe", "role": "root"})
    with _authed(app, token):
        verify_jwt_in_request()
        with pytest.raises(UnauthorizedError):
            current_user()


def test_roles_required_blocks_other_roles(app) -> None:
    @roles_required(Role.AUDITOR)
    def audit_only():
        return "ok"

    with app.app_context():
        staff_token = create_access_token(identity="u1", additional_claims={"username": "a", "role": "staff"})
        auditor_token = create_access_token(identity="a1", additional_claims={"username": "c", "role": "auditor"})

    with _authed(app, staff_token):
        verify_jwt_in_request()
        with pytest.raises(ForbiddenError):
            audit_only()

    with _authed(app, auditor_token):
        verify_jwt_in_request()
        assert audit_only() == "ok"
