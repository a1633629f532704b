"""Table-driven tests for the pure authorization engine (synthetic actors, no store)."""

import pytest

from authorization import (
    ALLOWED,
    AuthContext,
    Denied,
    DenialKind,
    Operation,
    authorize,
    role_gate,
    task_list_filter,
    task_update_operation,
)
from models.user import Actor, Role

ADMIN = Actor(id=1, role=Role.ADMIN)
MANAGER = Actor(id=2, role=Role.PROJECT_MANAGER)
LEAD = Actor(id=3, role=Role.TEAM_LEAD)
OTHER_LEAD = Actor(id=4, role=Role.TEAM_LEAD)
DEV = Actor(id=5, role=Role.DEVELOPER)
OTHER_DEV = Actor(id=6, role=Role.DEVELOPER)
NOBODY = Actor(id=7, role=Role.UNASSIGNED)

ALL_ACTORS = [ADMIN, MANAGER, LEAD, DEV, NOBODY]

PROJECT = {"id": 10, "assigned_to": LEAD.id, "created_by": MANAGER.id}
TASK = {"id": 20, "project_id": 10, "assigned_to": DEV.id, "created_by": LEAD.id}

ROLE_GATED = {
    Operation.ASSIGN_ROLE: Role.ADMIN,
    Operation.PROJECT_CREATE: Role.PROJECT_MANAGER,
    Operation.PROJECT_UPDATE: Role.PROJECT_MANAGER,
    Operation.PROJECT_DELETE: Role.PROJECT_MANAGER,
    Operation.TASK_CREATE: Role.TEAM_LEAD,
    Operation.TASK_UPDATE: Role.TEAM_LEAD,
    Operation.TASK_UPDATE_STATUS: Role.DEVELOPER,
    Operation.TASK_DELETE: Role.TEAM_LEAD,
}

FULL_CONTEXT = AuthContext(project=PROJECT, task=TASK, fields=frozenset({"status"}))


@pytest.mark.parametrize("operation,required", list(ROLE_GATED.items()))
@pytest.mark.parametrize("actor", ALL_ACTORS, ids=lambda a: a.role.value)
def test_role_gate_matches_rule_table(operation, required, actor):
    decision = role_gate(actor, operation)
    if actor.role is required:
        assert decision == ALLOWED
    else:
        assert isinstance(decision, Denied)
        assert decision.kind is DenialKind.ROLE


@pytest.mark.parametrize("operation", list(Operation))
def test_unassigned_user_is_denied_every_role_gated_operation(operation):
    decision = authorize(NOBODY, operation, FULL_CONTEXT)
    if operation in (Operation.PROJECT_READ, Operation.TASK_READ):
        assert decision.allowed
    else:
        assert not decision.allowed
        assert decision.kind is DenialKind.ROLE


@pytest.mark.parametrize("actor", ALL_ACTORS, ids=lambda a: a.role.value)
@pytest.mark.parametrize("operation", [Operation.PROJECT_READ, Operation.TASK_READ])
def test_reads_open_to_any_authenticated_actor(actor, operation):
    assert authorize(actor, operation) == ALLOWED


def test_task_create_requires_own_project():
    assert authorize(LEAD, Operation.TASK_CREATE, AuthContext(project=PROJECT)) == ALLOWED

    decision = authorize(OTHER_LEAD, Operation.TASK_CREATE, AuthContext(project=PROJECT))
    assert decision == Denied(DenialKind.OWNERSHIP, "You can only assign tasks in your own projects.")


def test_task_create_role_is_checked_before_project():
    # role mismatch never looks at the (missing) project
    decision = authorize(DEV, Operation.TASK_CREATE)
    assert decision.kind is DenialKind.ROLE


def test_task_create_without_project_context_is_a_programming_error():
    with pytest.raises(ValueError):
        authorize(LEAD, Operation.TASK_CREATE)


def test_task_update_by_creating_team_lead_only():
    context = AuthContext(task=TASK, fields=frozenset({"title", "status"}))
    assert authorize(LEAD, Operation.TASK_UPDATE, context) == ALLOWED
    assert authorize(OTHER_LEAD, Operation.TASK_UPDATE, context).kind is DenialKind.OWNERSHIP


def test_developer_status_update_requires_assignment():
    context = AuthContext(task=TASK, fields=frozenset({"status"}))
    assert authorize(DEV, Operation.TASK_UPDATE_STATUS, context) == ALLOWED
    assert authorize(OTHER_DEV, Operation.TASK_UPDATE_STATUS, context).kind is DenialKind.OWNERSHIP


def test_developer_cannot_touch_other_fields():
    context = AuthContext(task=TASK, fields=frozenset({"status", "title"}))
    decision = authorize(DEV, Operation.TASK_UPDATE_STATUS, context)
    assert decision.kind is DenialKind.FIELD
    assert "title" in decision.reason


def test_ownership_is_checked_before_fields():
    context = AuthContext(task=TASK, fields=frozenset({"title"}))
    assert authorize(OTHER_DEV, Operation.TASK_UPDATE_STATUS, context).kind is DenialKind.OWNERSHIP


def test_task_delete_only_by_creator():
    context = AuthContext(task=TASK)
    assert authorize(LEAD, Operation.TASK_DELETE, context) == ALLOWED
    assert authorize(OTHER_LEAD, Operation.TASK_DELETE, context).kind is DenialKind.OWNERSHIP
    assert authorize(DEV, Operation.TASK_DELETE, context).kind is DenialKind.ROLE


def test_task_update_operation_branches_by_role():
    assert task_update_operation(DEV) is Operation.TASK_UPDATE_STATUS
    assert task_update_operation(LEAD) is Operation.TASK_UPDATE
    assert task_update_operation(MANAGER) is Operation.TASK_UPDATE
    assert not authorize(MANAGER, Operation.TASK_UPDATE, AuthContext(task=TASK)).allowed


def test_task_list_scope_per_role():
    assert task_list_filter(DEV) == {"assigned_to": DEV.id}
    assert task_list_filter(LEAD) == {"created_by": LEAD.id}
    for actor in (ADMIN, MANAGER, NOBODY):
        assert isinstance(task_list_filter(actor), Denied)


def test_authorize_has_no_side_effects_on_context():
    task = dict(TASK)
    context = AuthContext(task=task, fields=frozenset({"status"}))
    authorize(DEV, Operation.TASK_UPDATE_STATUS, context)
    authorize(OTHER_DEV, Operation.TASK_UPDATE_STATUS, context)
    assert task == TASK
