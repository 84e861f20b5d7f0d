from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.orm import Session

from portfolio.models import Contact, Gear, MediaReferenceMixin, Post, User

ContentT = TypeVar("ContentT", bound=MediaReferenceMixin)

POST_SORT_FIELDS = frozenset(
    {"created_at", "updated_at", "date", "title", "views", "likes", "category"}
)
DEFAULT_POST_SORT = "-created_at"


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so text matches literally with ``escape="\\"``."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ContentDAO(Generic[ContentT]):
    """Data Access Object for records that reference stored media."""

    model: type[ContentT]

    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, record_id: int) -> ContentT | None:
        return self.db.get(self.model, record_id)

    def create(self, **fields: Any) -> ContentT:
        record = self.model(**fields)
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    def update(self, record_id: int, fields: Mapping[str, Any]) -> ContentT | None:
        record = self.get(record_id)
        if record is None:
            return None
        for name, value in fields.items():
            setattr(record, name, value)
        self.db.commit()
        self.db.refresh(record)
        return record

    def delete(self, record_id: int) -> bool:
        record = self.get(record_id)
        if record is None:
            return False
        self.db.delete(record)
        self.db.commit()
        return True


class PostDAO(ContentDAO[Post]):
    """Data Access Object for Post."""

    model = Post

    def search(
        self,
        category: str | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 12,
        sort: str = DEFAULT_POST_SORT,
    ) -> tuple[Sequence[Post], int]:
        """
        Return one page of posts matching the filters and the total match count.

        ``category`` of ``"all"`` disables the category filter. ``search`` is a
        case-insensitive substring match over title, story, location and tags.
        ``sort`` names a column, prefixed with ``-`` for descending order.
        """
        query = select(Post)
        if category and category != "all":
            query = query.where(Post.category == category)
        if search:
            pattern = f"%{escape_like(search)}%"
            query = query.where(
                or_(
                    Post.title.ilike(pattern, escape="\\"),
                    Post.story.ilike(pattern, escape="\\"),
                    Post.location.ilike(pattern, escape="\\"),
                    cast(Post.tags, String).ilike(pattern, escape="\\"),
                )
            )
        total = self.db.scalar(select(func.count()).select_from(query.subquery())) or 0
        posts = self.db.scalars(
            query.order_by(*self._order_by(sort)).offset((page - 1) * limit).limit(limit)
        ).all()
        return posts, total

    @staticmethod
    def _order_by(sort: str) -> list[Any]:
        descending = sort.startswith("-")
        field = sort.lstrip("-")
        if field not in POST_SORT_FIELDS:
            field, descending = DEFAULT_POST_SORT.lstrip("-"), True
        column = getattr(Post, field)
        # id breaks ties so pagination is stable
        if descending:
            return [column.desc(), Post.id.desc()]
        return [column.asc(), Post.id.asc()]

    def increment_views(self, post_id: int) -> Post | None:
        post = self.get(post_id)
        if post is None:
            return None
        post.views += 1
        self.db.commit()
        self.db.refresh(post)
        return post

    def like(self, post_id: int) -> Post | None:
        post = self.get(post_id)
        if post is None:
            return None
        post.likes += 1
        self.db.commit()
        self.db.refresh(post)
        return post

    def recent(self, limit: int = 5) -> Sequence[Post]:
        return self.db.scalars(
            select(Post).order_by(Post.created_at.desc(), Post.id.desc()).limit(limit)
        ).all()

    def most_viewed(self, limit: int = 5) -> Sequence[Post]:
        return self.db.scalars(
            select(Post).order_by(Post.views.desc(), Post.id.asc()).limit(limit)
        ).all()

    def count(self) -> int:
        return self.db.scalar(select(func.count(Post.id))) or 0

    def total_views(self) -> int:
        return self.db.scalar(select(func.coalesce(func.sum(Post.views), 0))) or 0

    def total_likes(self) -> int:
        return self.db.scalar(select(func.coalesce(func.sum(Post.likes), 0))) or 0

    def count_by_category(self) -> list[tuple[str, int]]:
        rows = self.db.execute(
            select(Post.category, func.count(Post.id))
            .group_by(Post.category)
            .order_by(Post.category)
        ).all()
        return [(category, count) for category, count in rows]


class GearDAO(ContentDAO[Gear]):
    """Data Access Object for Gear."""

    model = Gear

    def list(self, gear_type: str | None = None) -> Sequence[Gear]:
        query = select(Gear)
        if gear_type:
            query = query.where(Gear.type == gear_type)
        return self.db.scalars(query.order_by(Gear.type, Gear.name)).all()


class ContactDAO:
    """Data Access Object for Contact."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def create(self, **fields: Any) -> Contact:
        contact = Contact(**fields)
        self.db.add(contact)
        self.db.commit()
        self.db.refresh(contact)
        return contact

    def list(self) -> Sequence[Contact]:
        return self.db.scalars(
            select(Contact).order_by(Contact.created_at.desc(), Contact.id.desc())
        ).all()

    def update_status(self, contact_id: int, status: str) -> Contact | None:
        contact = self.db.get(Contact, contact_id)
        if contact is None:
            return None
        contact.status = status
        self.db.commit()
        self.db.refresh(contact)
        return contact

    def count(self, status: str | None = None) -> int:
        query = select(func.count(Contact.id))
        if status is not None:
            query = query.where(Contact.status == status)
        return self.db.scalar(query) or 0


class UserDAO:
    """Data Access Object for User."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def get_by_email(self, email: str) -> User | None:
        return self.db.scalar(select(User).where(User.email == email))

    def exists(self, email: str, username: str) -> bool:
        query = select(User.id).where(or_(User.email == email, User.username == username))
        return self.db.scalar(query) is not None

    def count(self) -> int:
        return self.db.scalar(select(func.count(User.id))) or 0

    def create(self, username: str, email: str, password_hash: str, role: str) -> User:
        user = User(username=username, email=email, password_hash=password_hash, role=role)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
