import logging
from contextlib import contextmanager
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from portfolio import schemas
from portfolio.database import make_session_factory
from portfolio.models.blog import Blog
from portfolio.models.message import Message
from portfolio.models.project import Project
from portfolio.models.skill import Skill
from portfolio.models.user import User
from portfolio.security import hash_password
from portfolio.storage.base import Storage, StorageError

logger = logging.getLogger(__name__)


class SqlStorage(Storage):
    """Relational store (Postgres in production, SQLite locally and in tests).

    Every call runs in its own short-lived session. Driver errors are rolled
    back and re-raised as StorageError.
    """

    name = "database"

    def __init__(self, engine):
        self.engine = engine
        self._sessions = make_session_factory(engine)

    @contextmanager
    def _session(self):
        db = self._sessions()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Database error: %s", e)
            raise StorageError("Database operation failed") from e
        finally:
            db.close()

    def _get(self, model, record_id, schema):
        with self._session() as db:
            row = db.query(model).filter(model.id == record_id).first()
            return schema.model_validate(row) if row else None

    def _create(self, row, schema):
        with self._session() as db:
            db.add(row)
            db.commit()
            db.refresh(row)
            return schema.model_validate(row)

    def _update(self, model, record_id, changes: dict, schema):
        with self._session() as db:
            row = db.query(model).filter(model.id == record_id).first()
            if not row:
                return None
            for field, value in changes.items():
                setattr(row, field, value)
            db.commit()
            db.refresh(row)
            return schema.model_validate(row)

    def _delete(self, model, record_id) -> bool:
        with self._session() as db:
            row = db.query(model).filter(model.id == record_id).first()
            if not row:
                return False
            db.delete(row)
            db.commit()
            return True

    # --- users ---

    def get_user(self, user_id: int) -> Optional[schemas.User]:
        return self._get(User, user_id, schemas.User)

    def get_user_by_username(self, username: str) -> Optional[schemas.User]:
        with self._session() as db:
            row = db.query(User).filter(User.username == username).first()
            return schemas.User.model_validate(row) if row else None

    def list_users(self) -> List[schemas.User]:
        with self._session() as db:
            return [schemas.User.model_validate(u) for u in db.query(User).order_by(User.id).all()]

    def create_user(self, data: schemas.UserCreate) -> schemas.User:
        row = User(
            username=data.username,
            password_hash=hash_password(data.password),
            is_admin=data.is_admin,
            created_at=schemas.utcnow(),
        )
        return self._create(row, schemas.User)

    # --- messages ---

    def list_messages(self) -> List[schemas.Message]:
        with self._session() as db:
            rows = db.query(Message).order_by(Message.created_at.desc(), Message.id.desc()).all()
            return [schemas.Message.model_validate(m) for m in rows]

    def get_message(self, message_id: int) -> Optional[schemas.Message]:
        return self._get(Message, message_id, schemas.Message)

    def create_message(self, data: schemas.MessageCreate) -> schemas.Message:
        return self._create(Message(created_at=schemas.utcnow(), **data.model_dump()), schemas.Message)

    def delete_message(self, message_id: int) -> bool:
        return self._delete(Message, message_id)

    # --- blogs ---

    def list_blogs(self, published_only: bool = False) -> List[schemas.Blog]:
        with self._session() as db:
            query = db.query(Blog)
            if published_only:
                query = query.filter(Blog.published == True)  # noqa: E712
            rows = query.order_by(Blog.created_at.desc(), Blog.id.desc()).all()
            return [schemas.Blog.model_validate(b) for b in rows]

    def get_blog(self, blog_id: int) -> Optional[schemas.Blog]:
        return self._get(Blog, blog_id, schemas.Blog)

    def get_blog_by_slug(self, slug: str) -> Optional[schemas.Blog]:
        with self._session() as db:
            row = db.query(Blog).filter(Blog.slug == slug).first()
            return schemas.Blog.model_validate(row) if row else None

    def create_blog(self, data: schemas.BlogCreate, created_at: Optional[datetime] = None) -> schemas.Blog:
        created_at = created_at or schemas.utcnow()
        row = Blog(created_at=created_at, updated_at=created_at, **data.model_dump())
        return self._create(row, schemas.Blog)

    def update_blog(self, blog_id: int, data: schemas.BlogUpdate) -> Optional[schemas.Blog]:
        changes = {**data.changes(), "updated_at": schemas.utcnow()}
        return self._update(Blog, blog_id, changes, schemas.Blog)

    def delete_blog(self, blog_id: int) -> bool:
        return self._delete(Blog, blog_id)

    # --- projects ---

    def list_projects(self, featured_only: bool = False) -> List[schemas.Project]:
        with self._session() as db:
            query = db.query(Project)
            if featured_only:
                query = query.filter(Project.featured == True)  # noqa: E712
            rows = query.order_by(Project.order.asc(), Project.id.desc()).all()
            return [schemas.Project.model_validate(p) for p in rows]

    def get_project(self, project_id: int) -> Optional[schemas.Project]:
        return self._get(Project, project_id, schemas.Project)

    def create_project(self, data: schemas.ProjectCreate) -> schemas.Project:
        return self._create(Project(**data.model_dump()), schemas.Project)

    def update_project(self, project_id: int, data: schemas.ProjectUpdate) -> Optional[schemas.Project]:
        return self._update(Project, project_id, data.changes(), schemas.Project)

    def delete_project(self, project_id: int) -> bool:
        return self._delete(Project, project_id)

    # --- skills ---

    def list_skills(self, category: Optional[str] = None) -> List[schemas.Skill]:
        with self._session() as db:
            query = db.query(Skill)
            if category is None:
                query = query.order_by(Skill.category.asc(), Skill.level.desc(), Skill.id.asc())
            else:
                query = query.filter(Skill.category == category).order_by(Skill.level.desc(), Skill.id.asc())
            return [schemas.Skill.model_validate(s) for s in query.all()]

    def get_skill(self, skill_id: int) -> Optional[schemas.Skill]:
        return self._get(Skill, skill_id, schemas.Skill)

    def create_skill(self, data: schemas.SkillCreate) -> schemas.Skill:
        return self._create(Skill(**data.model_dump()), schemas.Skill)

    def update_skill(self, skill_id: int, data: schemas.SkillUpdate) -> Optional[schemas.Skill]:
        return self._update(Skill, skill_id, data.changes(), schemas.Skill)

    def delete_skill(self, skill_id: int) -> bool:
        return self._delete(Skill, skill_id)
