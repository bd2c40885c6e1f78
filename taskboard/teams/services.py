import logging
from typing import Dict, List

from taskboard import permissions
from taskboard.database import Team
from taskboard.dependencies import Actor
from taskboard.errors import Forbidden, NotFound
from taskboard.store import Stores
from taskboard.teams.models import MemberAdd, TeamCreate

logger = logging.getLogger(__name__)


class TeamService:
    def __init__(self, stores: Stores):
        self.stores = stores

    def _load(self, team_id: str) -> Team:
        team = self.stores.teams.find_by_id(team_id)
        if team is None:
            raise NotFound("Team not found")
        return team

    def _load_managed(self, actor: Actor, team_id: str) -> Team:
        """Команда, составом которой управляет лидер"""
        team = self._load(team_id)
        if not permissions.can_manage_team_membership(actor, team):
            logger.warning("%r denied managing members of team %s", actor, team.id)
            raise Forbidden("Only the team leader can manage team members")
        return team

    def create_team(self, actor: Actor, team_data: TeamCreate) -> Team:
        """Создание команды: автор становится лидером и первым участником"""
        team = self.stores.teams.create(
            {
                "name": team_data.name,
                "description": team_data.description,
                "leader_id": actor.user_id,
            },
            member_ids=[actor.user_id],
        )
        logger.info("Team %s (%s) created by %s", team.name, team.id, actor.user_id)
        return team

    def get_user_teams(self, actor: Actor) -> List[Team]:
        """Все команды, где пользователь - участник"""
        return self.stores.teams.find_for_member(actor.user_id)

    def get_team(self, actor: Actor, team_id: str) -> Team:
        """Получение команды с проверкой доступа"""
        team = self._load(team_id)
        if not permissions.can_view_team(actor, team):
            raise Forbidden("Access denied. You are not a member of this team")
        return team

    def add_member(self, actor: Actor, team_id: str, member_data: MemberAdd) -> Team:
        team = self._load_managed(actor, team_id)

        user = self.stores.users.find_by_id(member_data.user_id)
        permissions.check_member_addition(team, user)

        team = self.stores.teams.add_member(team, user.id)
        logger.info("User %s added to team %s by %s", user.id, team.id, actor.user_id)
        return team

    def remove_member(self, actor: Actor, team_id: str, member_id: str) -> Team:
        team = self._load_managed(actor, team_id)
        permissions.check_member_removal(team, member_id)

        team = self.stores.teams.remove_member(team, member_id)
        logger.info("User %s removed from team %s by %s", member_id, team.id, actor.user_id)
        return team

    def delete_team(self, actor: Actor, team_id: str) -> Dict[str, str]:
        """Удаление команды; задачи команды остаются"""
        team = self._load(team_id)
        if not permissions.can_delete_team(actor, team):
            logger.warning("%r denied deleting team %s", actor, team.id)
            raise Forbidden("Only the team leader can delete the team")

        self.stores.teams.delete(team)
        logger.info("Team %s deleted by %s", team_id, actor.user_id)
        return {"id": team_id, "message": "Team deleted successfully"}
