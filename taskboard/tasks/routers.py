from fastapi import APIRouter, Depends, Request, status

from taskboard.config import Settings
from taskboard.dependencies import Actor, get_current_user, get_settings, get_stores
from taskboard.store import Stores
from taskboard.tasks.models import TaskCreate, TaskDeleted, TaskListResponse, TaskResponse, TaskUpdate
from taskboard.tasks.services import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"], dependencies=[Depends(get_current_user)])


def get_task_service(
        stores: Stores = Depends(get_stores),
        settings: Settings = Depends(get_settings)
) -> TaskService:
    return TaskService(
        stores,
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    )


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
        task_data: TaskCreate,
        current_user: Actor = Depends(get_current_user),
        task_service: TaskService = Depends(get_task_service)
):
    """Создание задачи"""
    task = task_service.create_task(current_user, task_data)
    return task.to_dict()


@router.get("", response_model=TaskListResponse)
def get_tasks(
        request: Request,
        task_service: TaskService = Depends(get_task_service)
):
    """Список задач: ?status=done&priority=high&assignedTo=...&sort=-createdAt&page=1&limit=10"""
    return task_service.list_tasks(request.query_params)


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
        task_id: str,
        task_data: TaskUpdate,
        current_user: Actor = Depends(get_current_user),
        task_service: TaskService = Depends(get_task_service)
):
    """Обновление задачи: админ, автор или исполнитель"""
    task = task_service.update_task(current_user, task_id, task_data)
    return task.to_dict()


@router.delete("/{task_id}", response_model=TaskDeleted)
def delete_task(
        task_id: str,
        current_user: Actor = Depends(get_current_user),
        task_service: TaskService = Depends(get_task_service)
):
    """Удаление задачи: админ или автор"""
    return task_service.delete_task(current_user, task_id)
