import logging
from typing import Any, Dict, Mapping

from taskboard import permissions
from taskboard.database import Task
from taskboard.dependencies import Actor
from taskboard.errors import Forbidden, NotFound, ValidationError
from taskboard.query import build_list_query, page_summary
from taskboard.store import Stores
from taskboard.tasks.models import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(self, stores: Stores, default_page_size: int = 10, max_page_size: int = 100):
        self.stores = stores
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    def _load(self, task_id: str) -> Task:
        task = self.stores.tasks.find_by_id(task_id)
        if task is None:
            raise NotFound("Task not found")
        return task

    def _check_references(self, values: Mapping[str, Any]) -> None:
        """Исполнитель и команда должны существовать на момент записи"""
        if "assigned_to_id" in values and self.stores.users.find_by_id(values["assigned_to_id"]) is None:
            raise ValidationError("Assigned user does not exist", field="assignedTo")
        if values.get("team_id") is not None and self.stores.teams.find_by_id(values["team_id"]) is None:
            raise ValidationError("Team does not exist", field="team")

    def create_task(self, actor: Actor, task_data: TaskCreate) -> Task:
        """Создание задачи; автор становится assignedBy"""
        values = {
            "title": task_data.title,
            "description": task_data.description,
            "status": task_data.status.value,
            "priority": task_data.priority.value,
            "assigned_to_id": task_data.assigned_to,
            "assigned_by_id": actor.user_id,
            "team_id": task_data.team,
        }
        self._check_references(values)

        task = self.stores.tasks.create(values)
        logger.info("Task %s created by %s for %s", task.id, actor.user_id, task.assigned_to_id)
        return task

    def list_tasks(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        query = build_list_query(params, default_limit=self.default_page_size, max_limit=self.max_page_size)
        tasks, total = self.stores.tasks.find_by_filter(
            query.filters, query.sort, skip=query.skip, limit=query.limit
        )
        result = page_summary(query, len(tasks), total, total_key="totalTasks")
        result["tasks"] = [task.to_dict() for task in tasks]
        return result

    def update_task(self, actor: Actor, task_id: str, task_data: TaskUpdate) -> Task:
        task = self._load(task_id)
        if not permissions.can_edit_task(actor, task):
            logger.warning("%r denied editing task %s", actor, task.id)
            raise Forbidden("You are not allowed to modify this task")

        update_data = task_data.model_dump(exclude_unset=True)
        changes = {}
        for field, value in update_data.items():
            if field == "assigned_to":
                changes["assigned_to_id"] = value
            elif field == "team":
                changes["team_id"] = value
            elif field in ("status", "priority"):
                changes[field] = value.value
            else:
                changes[field] = value
        self._check_references(changes)

        return self.stores.tasks.update(task, changes)

    def delete_task(self, actor: Actor, task_id: str) -> Dict[str, str]:
        task = self._load(task_id)
        if not permissions.can_delete_task(actor, task):
            logger.warning("%r denied deleting task %s", actor, task.id)
            raise Forbidden("You are not allowed to delete this task")

        self.stores.tasks.delete(task)
        logger.info("Task %s deleted by %s", task_id, actor.user_id)
        return {"id": task_id, "message": "Task deleted successfully"}
