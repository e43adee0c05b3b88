import threading
from datetime import datetime
from itertools import count
from typing import Dict, List, Optional

from portfolio.schemas import (
    Blog, BlogCreate, BlogUpdate,
    Message, MessageCreate,
    Project, ProjectCreate, ProjectUpdate,
    Skill, SkillCreate, SkillUpdate,
    User, UserCreate,
    utcnow,
)
from portfolio.security import hash_password
from portfolio.storage.base import Storage, StorageError


class MemStorage(Storage):
    """Dict-backed store for development, demos and tests.

    State lives on the instance, so every app (or test) gets its own.
    Nothing survives a restart.
    """

    name = "memory"

    def __init__(self):
        # sync routes run in a thread pool
        self._lock = threading.RLock()

        self._users: Dict[int, User] = {}
        self._messages: Dict[int, Message] = {}
        self._blogs: Dict[int, Blog] = {}
        self._projects: Dict[int, Project] = {}
        self._skills: Dict[int, Skill] = {}

        self._user_ids = count(1)
        self._message_ids = count(1)
        self._blog_ids = count(1)
        self._project_ids = count(1)
        self._skill_ids = count(1)

    @staticmethod
    def _copy(record):
        return record.model_copy(deep=True) if record is not None else None

    def _update(self, table: dict, record_id: int, changes: dict):
        with self._lock:
            existing = table.get(record_id)
            if existing is None:
                return None
            updated = existing.model_copy(update=changes, deep=True)
            table[record_id] = updated
            return self._copy(updated)

    def _delete(self, table: dict, record_id: int) -> bool:
        with self._lock:
            return table.pop(record_id, None) is not None

    # --- users ---

    def get_user(self, user_id: int) -> Optional[User]:
        return self._copy(self._users.get(user_id))

    def get_user_by_username(self, username: str) -> Optional[User]:
        for user in list(self._users.values()):
            if user.username == username:
                return self._copy(user)
        return None

    def list_users(self) -> List[User]:
        return [self._copy(u) for u in sorted(self._users.values(), key=lambda u: u.id)]

    def create_user(self, data: UserCreate) -> User:
        with self._lock:
            if any(u.username == data.username for u in self._users.values()):
                raise StorageError(f"Username '{data.username}' is already taken")
            user = User(
                id=next(self._user_ids),
                username=data.username,
                password_hash=hash_password(data.password),
                is_admin=data.is_admin,
                created_at=utcnow(),
            )
            self._users[user.id] = user
        return self._copy(user)

    # --- messages ---

    def list_messages(self) -> List[Message]:
        messages = sorted(self._messages.values(), key=lambda m: (m.created_at, m.id), reverse=True)
        return [self._copy(m) for m in messages]

    def get_message(self, message_id: int) -> Optional[Message]:
        return self._copy(self._messages.get(message_id))

    def create_message(self, data: MessageCreate) -> Message:
        with self._lock:
            message = Message(id=next(self._message_ids), created_at=utcnow(), **data.model_dump())
            self._messages[message.id] = message
        return self._copy(message)

    def delete_message(self, message_id: int) -> bool:
        return self._delete(self._messages, message_id)

    # --- blogs ---

    def _check_slug(self, slug: str, blog_id: Optional[int] = None):
        for blog in self._blogs.values():
            if blog.slug == slug and blog.id != blog_id:
                raise StorageError(f"Slug '{slug}' is already taken")

    def list_blogs(self, published_only: bool = False) -> List[Blog]:
        blogs = [b for b in self._blogs.values() if b.published or not published_only]
        blogs.sort(key=lambda b: (b.created_at, b.id), reverse=True)
        return [self._copy(b) for b in blogs]

    def get_blog(self, blog_id: int) -> Optional[Blog]:
        return self._copy(self._blogs.get(blog_id))

    def get_blog_by_slug(self, slug: str) -> Optional[Blog]:
        for blog in list(self._blogs.values()):
            if blog.slug == slug:
                return self._copy(blog)
        return None

    def create_blog(self, data: BlogCreate, created_at: Optional[datetime] = None) -> Blog:
        created_at = created_at or utcnow()
        with self._lock:
            self._check_slug(data.slug)
            blog = Blog(
                id=next(self._blog_ids),
                created_at=created_at,
                updated_at=created_at,
                **data.model_dump(),
            )
            self._blogs[blog.id] = blog
        return self._copy(blog)

    def update_blog(self, blog_id: int, data: BlogUpdate) -> Optional[Blog]:
        changes = data.changes()
        with self._lock:
            if blog_id in self._blogs and "slug" in changes:
                self._check_slug(changes["slug"], blog_id)
            return self._update(self._blogs, blog_id, {**changes, "updated_at": utcnow()})

    def delete_blog(self, blog_id: int) -> bool:
        return self._delete(self._blogs, blog_id)

    # --- projects ---

    def list_projects(self, featured_only: bool = False) -> List[Project]:
        projects = [p for p in self._projects.values() if p.featured or not featured_only]
        projects.sort(key=lambda p: (p.order, -p.id))
        return [self._copy(p) for p in projects]

    def get_project(self, project_id: int) -> Optional[Project]:
        return self._copy(self._projects.get(project_id))

    def create_project(self, data: ProjectCreate) -> Project:
        with self._lock:
            project = Project(id=next(self._project_ids), **data.model_dump())
            self._projects[project.id] = project
        return self._copy(project)

    def update_project(self, project_id: int, data: ProjectUpdate) -> Optional[Project]:
        return self._update(self._projects, project_id, data.changes())

    def delete_project(self, project_id: int) -> bool:
        return self._delete(self._projects, project_id)

    # --- skills ---

    def list_skills(self, category: Optional[str] = None) -> List[Skill]:
        if category is None:
            skills = sorted(self._skills.values(), key=lambda s: (s.category, -s.level, s.id))
        else:
            skills = sorted(
                (s for s in self._skills.values() if s.category == category),
                key=lambda s: (-s.level, s.id),
            )
        return [self._copy(s) for s in skills]

    def get_skill(self, skill_id: int) -> Optional[Skill]:
        return self._copy(self._skills.get(skill_id))

    def create_skill(self, data: SkillCreate) -> Skill:
        with self._lock:
            skill = Skill(id=next(self._skill_ids), **data.model_dump())
            self._skills[skill.id] = skill
        return self._copy(skill)

    def update_skill(self, skill_id: int, data: SkillUpdate) -> Optional[Skill]:
        return self._update(self._skills, skill_id, data.changes())

    def delete_skill(self, skill_id: int) -> bool:
        return self._delete(self._skills, skill_id)
