"""
Unit tests for portfolio/store.py repositories against an in-memory database.

Covers listing order for every entity, partial updates (including the
image-retention rule for projects), blog visibility and view counting,
published_at stamping, and the profile upsert.
"""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from portfolio.models import BlogPost, ContactMessage, Project, Skill
from portfolio.store import BlogStore, ContactStore, ProfileStore, ProjectStore, SkillStore


class TestProfileStore:
    def test_empty_until_first_write(self, db):
        assert ProfileStore(db).get_profile() is None

    def test_first_write_creates_singleton(self, db):
        store = ProfileStore(db)
        profile = store.update_profile(name="Ada", title="Engineer")
        assert profile.id == 1
        assert profile.name == "Ada"
        assert profile.created_at
        assert store.get_profile().title == "Engineer"

    def test_partial_update_keeps_other_fields(self, db):
        store = ProfileStore(db)
        store.update_profile(name="Ada", bio="Hello")
        updated = store.update_profile(bio="Updated")
        assert updated.name == "Ada"
        assert updated.bio == "Updated"

    def test_unknown_field_rejected(self, db):
        with pytest.raises(ValueError):
            ProfileStore(db).update_profile(password_hash="x")


class TestProjectStore:
    def test_ordering_by_display_order_then_newest(self, db):
        store = ProjectStore(db)
        store.create_project(Project(title="P1", display_order=2))
        store.create_project(Project(title="P2", display_order=1))
        store.create_project(Project(title="P3", display_order=1))
        assert [p.title for p in store.list_projects()] == ["P3", "P2", "P1"]

    def test_tech_stack_and_flags_roundtrip(self, db):
        store = ProjectStore(db)
        pid = store.create_project(Project(title="Site", tech_stack=["FastAPI", "SQLite"], featured=True))
        project = store.get_project(pid)
        assert project.tech_stack == ["FastAPI", "SQLite"]
        assert project.featured is True
        assert project.image_url is None

    def test_update_without_image_keeps_image(self, db):
        store = ProjectStore(db)
        pid = store.create_project(Project(title="Site", image_url="/uploads/1.png"))
        assert store.update_project(pid, title="Site v2") is True
        project = store.get_project(pid)
        assert project.title == "Site v2"
        assert project.image_url == "/uploads/1.png"

    def test_update_with_image_replaces_it(self, db):
        store = ProjectStore(db)
        pid = store.create_project(Project(title="Site", image_url="/uploads/1.png"))
        store.update_project(pid, image_url="/uploads/2.png")
        assert store.get_project(pid).image_url == "/uploads/2.png"

    def test_update_missing_returns_false(self, db):
        assert ProjectStore(db).update_project(999, title="x") is False

    def test_update_unknown_field_rejected(self, db):
        store = ProjectStore(db)
        pid = store.create_project(Project(title="Site"))
        with pytest.raises(ValueError):
            store.update_project(pid, created_at="2000-01-01")

    def test_delete(self, db):
        store = ProjectStore(db)
        pid = store.create_project(Project(title="Site"))
        assert store.delete_project(pid) is True
        assert store.get_project(pid) is None
        assert store.delete_project(pid) is False


class TestSkillStore:
    def test_ordering_by_category_then_display_order(self, db):
        store = SkillStore(db)
        store.create_skill(Skill(name="Go", category="Languages", display_order=2))
        store.create_skill(Skill(name="Docker", category="DevOps", display_order=1))
        store.create_skill(Skill(name="Python", category="Languages", display_order=1))
        assert [s.name for s in store.list_skills()] == ["Docker", "Python", "Go"]

    def test_update_and_delete(self, db):
        store = SkillStore(db)
        sid = store.create_skill(Skill(name="Go", category="Languages", proficiency=50))
        assert store.update_skill(sid, proficiency=80) is True
        assert store.get_skill(sid).proficiency == 80
        assert store.get_skill(sid).name == "Go"
        assert store.delete_skill(sid) is True
        assert store.update_skill(sid, proficiency=10) is False

    def test_empty_update_reports_existence(self, db):
        store = SkillStore(db)
        sid = store.create_skill(Skill(name="Go", category="Languages"))
        assert store.update_skill(sid) is True
        assert store.update_skill(sid + 100) is False


class TestBlogStore:
    def test_list_only_published(self, db):
        store = BlogStore(db)
        store.create_post(BlogPost(title="Draft", slug="draft"))
        store.create_post(BlogPost(title="Live", slug="live", published=True))
        assert [p.slug for p in store.list_published()] == ["live"]

    def test_view_count_increments_per_read(self, db):
        store = BlogStore(db)
        store.create_post(BlogPost(title="Hello", slug="hello", published=True))
        assert store.read_published("hello").view_count == 1
        assert store.read_published("hello").view_count == 2

    def test_unpublished_read_counts_nothing(self, db):
        store = BlogStore(db)
        pid = store.create_post(BlogPost(title="Draft", slug="draft"))
        assert store.read_published("draft") is None
        assert store.get_post(pid).view_count == 0

    def test_unknown_slug(self, db):
        assert BlogStore(db).read_published("nope") is None

    def test_defaults(self, db):
        store = BlogStore(db)
        post = store.get_post(store.create_post(BlogPost(title="T", slug="t")))
        assert post.read_time == 5
        assert post.published is False
        assert post.published_at is None
        assert post.tags == []

    def test_first_publish_stamps_published_at(self, db):
        store = BlogStore(db)
        pid = store.create_post(BlogPost(title="T", slug="t"))
        store.update_post(pid, published=True)
        stamped = store.get_post(pid).published_at
        assert stamped is not None

        store.update_post(pid, published=False)
        store.update_post(pid, published=True)
        assert store.get_post(pid).published_at == stamped

    def test_duplicate_slug_raises(self, db):
        store = BlogStore(db)
        store.create_post(BlogPost(title="A", slug="same"))
        with pytest.raises(IntegrityError):
            store.create_post(BlogPost(title="B", slug="same"))

    def test_update_to_taken_slug_raises(self, db):
        store = BlogStore(db)
        store.create_post(BlogPost(title="A", slug="a"))
        pid = store.create_post(BlogPost(title="B", slug="b"))
        with pytest.raises(IntegrityError):
            store.update_post(pid, slug="a")

    def test_view_count_not_updatable(self, db):
        store = BlogStore(db)
        pid = store.create_post(BlogPost(title="A", slug="a"))
        with pytest.raises(ValueError):
            store.update_post(pid, view_count=100)

    def test_update_and_delete_missing(self, db):
        store = BlogStore(db)
        assert store.update_post(42, title="x") is False
        assert store.delete_post(42) is False


class TestContactStore:
    def test_newest_first(self, db):
        store = ContactStore(db)
        store.create_message(ContactMessage(name="A", email="a@x.com", message="first"))
        store.create_message(ContactMessage(name="B", email="b@x.com", message="second", subject="Hi"))
        messages = store.list_messages()
        assert [m.message for m in messages] == ["second", "first"]
        assert messages[0].subject == "Hi"
        assert messages[1].subject is None
