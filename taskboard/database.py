from sqlalchemy import create_engine, Column, String, DateTime, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import declarative_base, sessionmaker, relationship, Session
from sqlalchemy.pool import StaticPool
from datetime import datetime, timezone
from contextlib import contextmanager
from fastapi import Request
import uuid

from taskboard.auth.models import UserRole
from taskboard.tasks.models import TaskStatus, TaskPriority

# Базовый класс для моделей
Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _new_id() -> str:
    return str(uuid.uuid4())


def _isoformat(value):
    return value.isoformat() if value else None


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    # bcrypt-хеш, никогда не отдается наружу
    password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.MEMBER.value)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def to_ref(self):
        return {"id": self.id, "username": self.username, "email": self.email}

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role": self.role,
            "createdAt": _isoformat(self.created_at),
        }


class Team(Base):
    __tablename__ = "teams"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(50), nullable=False, unique=True)
    description = Column(String(200), nullable=False, default="")
    leader_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    leader = relationship("User", foreign_keys=[leader_id])
    memberships = relationship(
        "TeamMember",
        back_populates="team",
        cascade="all, delete-orphan",
        order_by="TeamMember.joined_at",
    )

    @property
    def member_ids(self):
        return [membership.user_id for membership in self.memberships]

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "leader": self.leader.to_ref(),
            "members": [membership.user.to_ref() for membership in self.memberships],
            "createdAt": _isoformat(self.created_at),
            "updatedAt": _isoformat(self.updated_at),
        }


# Участник команды: состав команды - множество, дубликаты запрещены ограничением
class TeamMember(Base):
    __tablename__ = "team_members"

    id = Column(String(36), primary_key=True, default=_new_id)
    team_id = Column(String(36), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    joined_at = Column(DateTime, default=utcnow)

    # Relationships
    team = relationship("Team", back_populates="memberships")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint("team_id", "user_id", name="unique_team_member"),
        Index("ix_team_members_team_user", "team_id", "user_id"),
    )


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(String(100), nullable=False)
    description = Column(String(500), nullable=False, default="")
    status = Column(String(20), nullable=False, default=TaskStatus.TODO.value, index=True)
    priority = Column(String(20), nullable=False, default=TaskPriority.LOW.value, index=True)
    assigned_to_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    assigned_by_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    # Ссылка на команду без внешнего ключа: удаление команды не трогает задачи
    team_id = Column(String(36), nullable=True, index=True)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    assigned_to = relationship("User", foreign_keys=[assigned_to_id])
    assigned_by = relationship("User", foreign_keys=[assigned_by_id])

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "assignedTo": self.assigned_to.to_ref(),
            "assignedBy": self.assigned_by.to_ref(),
            "team": self.team_id,
            "createdAt": _isoformat(self.created_at),
            "updatedAt": _isoformat(self.updated_at),
        }


def create_db_engine(database_url: str):
    """Создает движок БД (in-memory SQLite - одно соединение на все потоки)"""
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)

    options = {"connect_args": {"check_same_thread": False}}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        options["poolclass"] = StaticPool
    return create_engine(database_url, **options)


def build_session_factory(engine) -> sessionmaker:
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Зависимость для получения сессии БД
def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session):
    """Контекстный менеджер для безопасных транзакций"""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
