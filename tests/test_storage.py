from datetime import timedelta

import pytest

from portfolio.schemas import (
    BlogCreate, BlogUpdate,
    MessageCreate,
    ProjectCreate, ProjectUpdate,
    SkillCreate, SkillUpdate,
    UserCreate,
    utcnow,
)
from portfolio.storage.base import StorageError


def make_blog(title="Hello World", published=True, **extra):
    return BlogCreate(title=title, content="Body text", excerpt="Short", published=published, **extra)


def test_project_round_trip(any_storage):
    data = ProjectCreate(
        title="Dashboard",
        description="Sales dashboard",
        technologies=["Python", "Pandas"],
        repo_url="https://github.com/example/dashboard",
        featured=True,
        order=3,
    )
    created = any_storage.create_project(data)

    assert created.id is not None
    assert any_storage.get_project(created.id) == created
    assert created.model_dump(exclude={"id"}) == data.model_dump()


def test_message_round_trip_assigns_id_and_timestamp(any_storage):
    before = utcnow()
    message = any_storage.create_message(
        MessageCreate(name="Jane", email="jane@x.com", subject="Hi there", message="Hello there, interested in working together.")
    )

    fetched = any_storage.get_message(message.id)
    assert fetched == message
    assert fetched.email == "jane@x.com"
    assert fetched.created_at >= before - timedelta(seconds=1)


def test_update_changes_only_given_fields(any_storage):
    skill = any_storage.create_skill(SkillCreate(name="SQL", category="Data", level=70, icon_name="database"))

    updated = any_storage.update_skill(skill.id, SkillUpdate(level=85))

    assert updated.level == 85
    assert updated.name == "SQL"
    assert updated.category == "Data"
    assert updated.icon_name == "database"
    assert any_storage.get_skill(skill.id) == updated


def test_update_can_clear_optional_field(any_storage):
    project = any_storage.create_project(
        ProjectCreate(title="App", description="An app", demo_url="https://demo.example.com")
    )

    updated = any_storage.update_project(project.id, ProjectUpdate(demo_url=None))

    assert updated.demo_url is None
    assert updated.title == "App"


def test_update_unknown_id_returns_none(any_storage):
    assert any_storage.update_project(999, ProjectUpdate(title="Nope")) is None
    assert any_storage.update_skill(999, SkillUpdate(level=1)) is None
    assert any_storage.update_blog(999, BlogUpdate(title="Nope")) is None


def test_delete_then_get_is_empty(any_storage):
    blog = any_storage.create_blog(make_blog())

    assert any_storage.delete_blog(blog.id) is True
    assert any_storage.get_blog(blog.id) is None
    assert any_storage.delete_blog(blog.id) is False


def test_delete_unknown_id_returns_false(any_storage):
    assert any_storage.delete_message(42) is False
    assert any_storage.delete_project(42) is False
    assert any_storage.delete_skill(42) is False


def test_blog_update_touches_updated_at_only(any_storage):
    created_at = utcnow() - timedelta(days=2)
    blog = any_storage.create_blog(make_blog(), created_at=created_at)

    updated = any_storage.update_blog(blog.id, BlogUpdate(excerpt="New excerpt"))

    assert updated.excerpt == "New excerpt"
    assert updated.content == blog.content
    assert updated.created_at == blog.created_at
    assert updated.updated_at > blog.updated_at


def test_blogs_newest_first_and_published_filter(any_storage):
    now = utcnow()
    old = any_storage.create_blog(make_blog("Old post"), created_at=now - timedelta(days=5))
    draft = any_storage.create_blog(make_blog("Draft post", published=False), created_at=now - timedelta(days=1))
    new = any_storage.create_blog(make_blog("New post"), created_at=now)

    assert [b.id for b in any_storage.list_blogs()] == [new.id, draft.id, old.id]
    assert [b.id for b in any_storage.list_blogs(published_only=True)] == [new.id, old.id]


def test_blog_lookup_by_slug(any_storage):
    blog = any_storage.create_blog(make_blog("Getting Started!"))

    assert blog.slug == "getting-started"
    assert any_storage.get_blog_by_slug("getting-started") == blog
    assert any_storage.get_blog_by_slug("missing") is None


def test_duplicate_slug_is_rejected(any_storage):
    any_storage.create_blog(make_blog("Same title"))

    with pytest.raises(StorageError):
        any_storage.create_blog(make_blog("Same title"))


def test_projects_sorted_by_order_then_featured_filter(any_storage):
    second = any_storage.create_project(ProjectCreate(title="Second", description="d", order=2))
    first = any_storage.create_project(ProjectCreate(title="First", description="d", order=1, featured=True))

    assert [p.id for p in any_storage.list_projects()] == [first.id, second.id]
    assert [p.id for p in any_storage.list_projects(featured_only=True)] == [first.id]


def test_projects_with_same_order_newest_first(any_storage):
    a = any_storage.create_project(ProjectCreate(title="A", description="d"))
    b = any_storage.create_project(ProjectCreate(title="B", description="d"))

    assert [p.id for p in any_storage.list_projects()] == [b.id, a.id]


def test_skills_ordering_and_category_filter(any_storage):
    py = any_storage.create_skill(SkillCreate(name="Python", category="Languages", level=90))
    sql = any_storage.create_skill(SkillCreate(name="SQL", category="Data", level=60))
    js = any_storage.create_skill(SkillCreate(name="JavaScript", category="Languages", level=95))
    tableau = any_storage.create_skill(SkillCreate(name="Tableau", category="Data", level=75))

    assert [s.id for s in any_storage.list_skills()] == [tableau.id, sql.id, js.id, py.id]
    assert [s.id for s in any_storage.list_skills(category="Languages")] == [js.id, py.id]
    assert any_storage.list_skills(category="Cooking") == []


def test_messages_newest_first(any_storage):
    first = any_storage.create_message(
        MessageCreate(name="Ann", email="ann@example.com", subject="One", message="First message here")
    )
    second = any_storage.create_message(
        MessageCreate(name="Bob", email="bob@example.com", subject="Two", message="Second message here")
    )

    assert [m.id for m in any_storage.list_messages()] == [second.id, first.id]


def test_users_are_hashed_and_validated(any_storage):
    user = any_storage.create_user(UserCreate(username="owner", password="hunter22", is_admin=True))

    assert user.password_hash != "hunter22"
    assert any_storage.validate_user("owner", "hunter22") == user
    assert any_storage.validate_user("owner", "wrong-password") is None
    assert any_storage.validate_user("nobody", "hunter22") is None


def test_usernames_are_unique(any_storage):
    any_storage.create_user(UserCreate(username="owner", password="hunter22"))

    with pytest.raises(StorageError):
        any_storage.create_user(UserCreate(username="owner", password="another1"))


def test_returned_records_are_detached_copies(any_storage):
    project = any_storage.create_project(ProjectCreate(title="App", description="d", technologies=["Go"]))
    project.technologies.append("Rust")

    assert any_storage.get_project(project.id).technologies == ["Go"]


def test_unknown_username_still_checks_a_hash(any_storage, monkeypatch):
    from portfolio.storage import base
    from portfolio.security import dummy_password_hash

    checked = []
    real_check = base.check_password

    def recording_check(password_hash, raw):
        checked.append(password_hash)
        return real_check(password_hash, raw)

    monkeypatch.setattr(base, "check_password", recording_check)

    assert any_storage.validate_user("nobody", "hunter22") is None
    assert checked == [dummy_password_hash()]
