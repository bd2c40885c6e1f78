"""Хранилища сущностей поверх сессии SQLAlchemy.

Каждое хранилище работает с одной моделью: create / find_by_id /
find_by_filter / update / delete. Перед каждой записью хранилище явно
вызывает свои pre-save хуки (хеширование пароля, возврат лидера в состав
команды), поэтому инварианты держатся на границе записи, а не только при
создании.
"""
import logging
from functools import partial
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from taskboard.auth.security import hash_password
from taskboard.database import Task, Team, TeamMember, User, transaction
from taskboard.errors import ValidationError

logger = logging.getLogger(__name__)


def is_modified(entity, attribute: str) -> bool:
    """Менялся ли атрибут с момента загрузки (для новых объектов - был ли задан)"""
    return inspect(entity).attrs[attribute].history.has_changes()


def hash_password_hook(user: User, rounds: int = 10) -> None:
    if user.password and is_modified(user, "password"):
        user.password = hash_password(user.password, rounds)


def ensure_leader_is_member(team: Team) -> None:
    if team.leader_id and team.leader_id not in team.member_ids:
        logger.info("Re-adding leader %s to team %s", team.leader_id, team.name)
        team.memberships.append(TeamMember(user_id=team.leader_id))


class EntityStore:
    model = None
    # Публичное имя поля -> атрибут модели
    fields: Mapping[str, str] = {}
    unique_fields: Sequence[str] = ()
    default_order: Tuple[str, bool] = ("createdAt", True)

    def __init__(self, db: Session, pre_save_hooks: Iterable[Callable] = ()):
        self.db = db
        self.pre_save_hooks = tuple(pre_save_hooks)

    # Чтение

    def find_by_id(self, entity_id: str):
        """None означает, что сущность не найдена"""
        if not entity_id:
            return None
        return self.db.get(self.model, entity_id)

    def find_one(self, **criteria):
        return self.db.query(self.model).filter_by(**criteria).first()

    def find_by_filter(
        self,
        filters: Mapping[str, Any],
        sort: Sequence[Tuple[str, bool]] = (),
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> Tuple[List, int]:
        query = self.db.query(self.model)
        for name, value in filters.items():
            column = self._column(name)
            if column is None:
                logger.debug("Ignoring unknown filter field %r on %s", name, self.model.__name__)
                continue
            query = query.filter(column == value)

        total = query.count()

        query = query.order_by(*self._order_by(sort))
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all(), total

    # Запись

    def create(self, values: Mapping[str, Any]):
        self._check_unique(values)
        entity = self.model(**values)
        return self._persist(entity)

    def update(self, entity, changes: Mapping[str, Any]):
        self._check_unique(changes, exclude_id=entity.id)
        for name, value in changes.items():
            setattr(entity, name, value)
        return self._persist(entity)

    def delete(self, entity) -> None:
        with transaction(self.db) as db_transaction:
            db_transaction.delete(entity)

    # Внутреннее

    def _column(self, name: str):
        attribute = self.fields.get(name)
        return getattr(self.model, attribute) if attribute else None

    def _order_by(self, sort: Sequence[Tuple[str, bool]]):
        order = []
        for name, descending in sort:
            column = self._column(name)
            if column is None:
                continue
            order.append(column.desc() if descending else column.asc())
        if not order:
            name, descending = self.default_order
            column = self._column(name)
            order.append(column.desc() if descending else column.asc())
        # Стабильный порядок страниц при равных значениях
        order.append(self.model.id.asc())
        return order

    def _check_unique(self, values: Mapping[str, Any], exclude_id: Optional[str] = None) -> None:
        for name in self.unique_fields:
            if name not in values:
                continue
            query = self.db.query(self.model).filter(getattr(self.model, name) == values[name])
            if exclude_id is not None:
                query = query.filter(self.model.id != exclude_id)
            if query.first() is not None:
                raise ValidationError(f"{self.model.__name__} with this {name} already exists", field=name)

    def _persist(self, entity):
        for hook in self.pre_save_hooks:
            hook(entity)
        try:
            with transaction(self.db) as db_transaction:
                db_transaction.add(entity)
        except IntegrityError as exc:
            # Гонка между проверкой уникальности и записью
            logger.warning("Integrity error while saving %s: %s", self.model.__name__, exc.orig)
            raise ValidationError(f"{self.model.__name__} violates a uniqueness constraint") from exc
        self.db.refresh(entity)
        return entity


class UserStore(EntityStore):
    model = User
    fields = {
        "username": "username",
        "email": "email",
        "role": "role",
        "createdAt": "created_at",
    }
    unique_fields = ("username", "email")

    def __init__(self, db: Session, password_rounds: int = 10):
        super().__init__(db, pre_save_hooks=[partial(hash_password_hook, rounds=password_rounds)])

    def find_by_email(self, email: str) -> Optional[User]:
        return self.find_one(email=email)


class TeamStore(EntityStore):
    model = Team
    fields = {
        "name": "name",
        "leader": "leader_id",
        "createdAt": "created_at",
        "updatedAt": "updated_at",
    }
    unique_fields = ("name",)

    def __init__(self, db: Session):
        super().__init__(db, pre_save_hooks=[ensure_leader_is_member])

    def create(self, values: Mapping[str, Any], member_ids: Iterable[str] = ()):
        self._check_unique(values)
        team = Team(**values)
        for user_id in dict.fromkeys(member_ids):
            team.memberships.append(TeamMember(user_id=user_id))
        return self._persist(team)

    def find_for_member(self, user_id: str) -> List[Team]:
        return (
            self.db.query(Team)
            .join(TeamMember, TeamMember.team_id == Team.id)
            .filter(TeamMember.user_id == user_id)
            .order_by(Team.created_at.desc(), Team.id.asc())
            .all()
        )

    def add_member(self, team: Team, user_id: str) -> Team:
        if user_id not in team.member_ids:
            team.memberships.append(TeamMember(user_id=user_id))
        return self._persist(team)

    def remove_member(self, team: Team, user_id: str) -> Team:
        for membership in list(team.memberships):
            if membership.user_id == user_id:
                team.memberships.remove(membership)
        # Удаление уходит в БД до хуков: иначе повторная вставка лидера
        # столкнется с уникальным ключом (team_id, user_id)
        self.db.flush()
        return self._persist(team)


class TaskStore(EntityStore):
    model = Task
    fields = {
        "title": "title",
        "status": "status",
        "priority": "priority",
        "assignedTo": "assigned_to_id",
        "assignedBy": "assigned_by_id",
        "team": "team_id",
        "createdAt": "created_at",
        "updatedAt": "updated_at",
    }


class Stores:
    """Набор хранилищ, разделяющих одну сессию запроса"""

    def __init__(self, db: Session, password_rounds: int = 10):
        self.db = db
        self.users = UserStore(db, password_rounds=password_rounds)
        self.teams = TeamStore(db)
        self.tasks = TaskStore(db)

    def __repr__(self) -> str:
        return f"<Stores {self.db!r}>"