"""Загрузка тестовых данных.

    python -m taskboard.seed -i data/   # импорт users.json, teams.json, tasks.json
    python -m taskboard.seed -d         # удалить все данные

В teams.json лидер и участники указываются по email, в tasks.json
assignedTo/assignedBy - по email, team - по имени команды. Записи с
ненайденными ссылками пропускаются с предупреждением.
"""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from taskboard.auth.models import UserRole
from taskboard.config import Settings
from taskboard.database import Task, Team, TeamMember, User, build_session_factory, create_db_engine, transaction
from taskboard.main import configure_logging
from taskboard.store import Stores
from taskboard.tasks.models import TaskPriority, TaskStatus

logger = logging.getLogger(__name__)


def _read(data_dir: Path, name: str) -> List[dict]:
    path = data_dir / name
    if not path.exists():
        logger.warning("%s not found, skipping", path)
        return []
    with path.open(encoding="utf-8") as handle:
        return json.load(handle)


def delete_data(stores: Stores) -> None:
    with transaction(stores.db) as db:
        db.query(Task).delete()
        db.query(TeamMember).delete()
        db.query(Team).delete()
        db.query(User).delete()
    logger.info("All data deleted")


def import_data(stores: Stores, data_dir: Path) -> Dict[str, int]:
    delete_data(stores)

    users_by_email: Dict[str, User] = {}
    for entry in _read(data_dir, "users.json"):
        role = entry.get("role", UserRole.MEMBER.value)
        user = stores.users.create({
            "username": entry["username"].strip(),
            "email": entry["email"].strip().lower(),
            "password": entry["password"],
            "role": UserRole(role).value,
        })
        users_by_email[user.email] = user
    logger.info("Imported %d users", len(users_by_email))

    def find_user(email: Optional[str]) -> Optional[User]:
        return users_by_email.get((email or "").strip().lower())

    teams_by_name: Dict[str, Team] = {}
    for entry in _read(data_dir, "teams.json"):
        leader = find_user(entry.get("leader"))
        if leader is None:
            logger.warning("Leader %r not found for team %r, team skipped", entry.get("leader"), entry.get("name"))
            continue

        member_ids = []
        for email in entry.get("members", []):
            member = find_user(email)
            if member is None:
                logger.warning("Member %r not found for team %r, member skipped", email, entry["name"])
                continue
            member_ids.append(member.id)

        team = stores.teams.create(
            {"name": entry["name"], "description": entry.get("description", ""), "leader_id": leader.id},
            member_ids=member_ids,
        )
        teams_by_name[team.name] = team
    logger.info("Imported %d teams", len(teams_by_name))

    task_count = 0
    for entry in _read(data_dir, "tasks.json"):
        assigned_to = find_user(entry.get("assignedTo"))
        assigned_by = find_user(entry.get("assignedBy"))
        if assigned_to is None or assigned_by is None:
            logger.warning("User not found for task %r, task skipped", entry.get("title"))
            continue

        team = teams_by_name.get(entry.get("team") or "")
        values = {
            "title": entry["title"],
            "description": entry.get("description", ""),
            "assigned_to_id": assigned_to.id,
            "assigned_by_id": assigned_by.id,
            "team_id": team.id if team else None,
        }
        for field, choices in (("status", TaskStatus), ("priority", TaskPriority)):
            if entry.get(field):
                values[field] = choices(entry[field]).value
        stores.tasks.create(values)
        task_count += 1
    logger.info("Imported %d tasks", task_count)

    return {"users": len(users_by_email), "teams": len(teams_by_name), "tasks": task_count}


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="taskboard.seed", description="Seed or wipe the Taskboard database")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("-i", "--import", dest="data_dir", type=Path, help="directory with users/teams/tasks JSON")
    group.add_argument("-d", "--destroy", action="store_true", help="delete all data")
    args = parser.parse_args(argv)

    settings = Settings()
    configure_logging(settings)
    session_factory = build_session_factory(create_db_engine(settings.database_url))

    db = session_factory()
    try:
        stores = Stores(db, password_rounds=settings.password_rounds)
        if args.destroy:
            delete_data(stores)
        else:
            counts = import_data(stores, args.data_dir)
            logger.info("Seed complete: %s", counts)
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
