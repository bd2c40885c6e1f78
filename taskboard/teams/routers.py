from typing import List

from fastapi import APIRouter, Depends, status

from taskboard.dependencies import Actor, get_current_user, get_stores
from taskboard.store import Stores
from taskboard.teams.models import MemberAdd, TeamCreate, TeamDeleted, TeamResponse
from taskboard.teams.services import TeamService

router = APIRouter(prefix="/teams", tags=["teams"], dependencies=[Depends(get_current_user)])


def get_team_service(stores: Stores = Depends(get_stores)) -> TeamService:
    return TeamService(stores)


# 🏢 Управление командами
@router.post("", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
def create_team(
        team_data: TeamCreate,
        current_user: Actor = Depends(get_current_user),
        team_service: TeamService = Depends(get_team_service)
):
    """Создание новой команды"""
    team = team_service.create_team(current_user, team_data)
    return team.to_dict()


@router.get("", response_model=List[TeamResponse])
def get_my_teams(
        current_user: Actor = Depends(get_current_user),
        team_service: TeamService = Depends(get_team_service)
):
    """Получение всех команд пользователя"""
    teams = team_service.get_user_teams(current_user)
    return [team.to_dict() for team in teams]


@router.get("/{team_id}", response_model=TeamResponse)
def get_team(
        team_id: str,
        current_user: Actor = Depends(get_current_user),
        team_service: TeamService = Depends(get_team_service)
):
    """Получение информации о команде"""
    team = team_service.get_team(current_user, team_id)
    return team.to_dict()


@router.delete("/{team_id}", response_model=TeamDeleted)
def delete_team(
        team_id: str,
        current_user: Actor = Depends(get_current_user),
        team_service: TeamService = Depends(get_team_service)
):
    """Удаление команды"""
    return team_service.delete_team(current_user, team_id)


# 👥 Управление участниками
@router.post("/{team_id}/members", response_model=TeamResponse)
def add_member(
        team_id: str,
        member_data: MemberAdd,
        current_user: Actor = Depends(get_current_user),
        team_service: TeamService = Depends(get_team_service)
):
    """Добавление участника (только лидер)"""
    team = team_service.add_member(current_user, team_id, member_data)
    return team.to_dict()


@router.delete("/{team_id}/members/{member_id}", response_model=TeamResponse)
def remove_member(
        team_id: str,
        member_id: str,
        current_user: Actor = Depends(get_current_user),
        team_service: TeamService = Depends(get_team_service)
):
    """Удаление участника из команды (только лидер)"""
    team = team_service.remove_member(current_user, team_id, member_id)
    return team.to_dict()
