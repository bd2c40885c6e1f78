"""Правила доступа к задачам и командам.

Чистые функции без побочных эффектов. Вызывающий код передает сюда
сущность, загруженную в том же запросе непосредственно перед изменением.
Администратор получает расширенные права на задачи и на просмотр команд,
но не на управление составом команды и не на ее удаление: это право
только лидера.
"""
from typing import Optional

from taskboard.database import Task, Team, User
from taskboard.errors import AlreadyMember, InvalidOperation, NotFound


def can_edit_task(actor, task: Task) -> bool:
    return (
        actor.is_admin
        or actor.user_id == task.assigned_by_id
        or actor.user_id == task.assigned_to_id
    )


def can_delete_task(actor, task: Task) -> bool:
    # Исполнитель может менять задачу, но удалить ее может только автор
    return actor.is_admin or actor.user_id == task.assigned_by_id


def can_view_team(actor, team: Team) -> bool:
    return actor.is_admin or actor.user_id in team.member_ids


def can_manage_team_membership(actor, team: Team) -> bool:
    return actor.user_id == team.leader_id


def can_delete_team(actor, team: Team) -> bool:
    return actor.user_id == team.leader_id


def check_member_addition(team: Team, user: Optional[User]) -> None:
    if user is None:
        raise NotFound("User to add not found")
    if user.id in team.member_ids:
        raise AlreadyMember()


def check_member_removal(team: Team, member_id: str) -> None:
    # Лидер покидает команду только вместе с ее удалением
    if member_id == team.leader_id:
        raise InvalidOperation("The team leader cannot be removed from the team")
    if member_id not in team.member_ids:
        raise NotFound("Team member not found")
