from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from portfolio.schemas import (
    Blog, BlogCreate, BlogUpdate,
    Message, MessageCreate,
    Project, ProjectCreate, ProjectUpdate,
    Skill, SkillCreate, SkillUpdate,
    User, UserCreate,
)
from portfolio.security import check_password, dummy_password_hash


class StorageError(Exception):
    """The backing store failed. Carries the driver error as __cause__."""


class Storage(ABC):
    """CRUD over users, messages, blogs, projects and skills.

    ``get``/``update`` return None for an unknown id and ``delete`` returns
    False; none of them raise for a missing record.
    """

    name = "storage"

    # --- users ---

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def list_users(self) -> List[User]: ...

    @abstractmethod
    def create_user(self, data: UserCreate) -> User: ...

    def validate_user(self, username: str, password: str) -> Optional[User]:
        user = self.get_user_by_username(username)
        if user is None:
            # same hashing work as a wrong password
            check_password(dummy_password_hash(), password)
            return None
        if check_password(user.password_hash, password):
            return user
        return None

    # --- messages (newest first) ---

    @abstractmethod
    def list_messages(self) -> List[Message]: ...

    @abstractmethod
    def get_message(self, message_id: int) -> Optional[Message]: ...

    @abstractmethod
    def create_message(self, data: MessageCreate) -> Message: ...

    @abstractmethod
    def delete_message(self, message_id: int) -> bool: ...

    # --- blogs (newest first) ---

    @abstractmethod
    def list_blogs(self, published_only: bool = False) -> List[Blog]: ...

    @abstractmethod
    def get_blog(self, blog_id: int) -> Optional[Blog]: ...

    @abstractmethod
    def get_blog_by_slug(self, slug: str) -> Optional[Blog]: ...

    @abstractmethod
    def create_blog(self, data: BlogCreate, created_at: Optional[datetime] = None) -> Blog: ...

    @abstractmethod
    def update_blog(self, blog_id: int, data: BlogUpdate) -> Optional[Blog]: ...

    @abstractmethod
    def delete_blog(self, blog_id: int) -> bool: ...

    # --- projects (order ascending, newest id first on ties) ---

    @abstractmethod
    def list_projects(self, featured_only: bool = False) -> List[Project]: ...

    @abstractmethod
    def get_project(self, project_id: int) -> Optional[Project]: ...

    @abstractmethod
    def create_project(self, data: ProjectCreate) -> Project: ...

    @abstractmethod
    def update_project(self, project_id: int, data: ProjectUpdate) -> Optional[Project]: ...

    @abstractmethod
    def delete_project(self, project_id: int) -> bool: ...

    # --- skills (by category, then level descending) ---

    @abstractmethod
    def list_skills(self, category: Optional[str] = None) -> List[Skill]: ...

    @abstractmethod
    def get_skill(self, skill_id: int) -> Optional[Skill]: ...

    @abstractmethod
    def create_skill(self, data: SkillCreate) -> Skill: ...

    @abstractmethod
    def update_skill(self, skill_id: int, data: SkillUpdate) -> Optional[Skill]: ...

    @abstractmethod
    def delete_skill(self, skill_id: int) -> bool: ...
