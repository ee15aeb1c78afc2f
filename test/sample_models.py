# test/sample_models.py
"""Models and request builders shared by the test suite."""

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from dtforge.core.request import RequestContext


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(50))
    email: Mapped[str] = mapped_column(String(100))
    city: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    title: Mapped[str] = mapped_column(String(100))


class Member(Base):
    """Attribute names differ from the column names they map."""

    __tablename__ = "members"

    member_id: Mapped[int] = mapped_column("id", primary_key=True)
    full_name: Mapped[str] = mapped_column("name", String(50))


USER_COLUMNS = ["id", "name", "email", "city"]
MEMBER_COLUMNS = ["member_id", "full_name"]


def seed_users(count: int = 20) -> List[User]:
    return [
        User(
            id=i,
            name=f"user{i:02d}",
            email=f"user{i:02d}@example.com",
            city="Lisbon" if i % 2 else "Porto",
        )
        for i in range(1, count + 1)
    ]


def seed_posts() -> List[Post]:
    return [
        Post(id=1, user_id=1, title="Hello grid"),
        Post(id=2, user_id=2, title="Second post"),
        Post(id=3, user_id=2, title="Another grid"),
    ]


def seed_members() -> List[Member]:
    return [
        Member(member_id=1, full_name="Ana Silva"),
        Member(member_id=2, full_name="Bruno Costa"),
        Member(member_id=3, full_name="Mariana Reis"),
    ]


def datatables_params(
    columns: Sequence[str] = (),
    searchable: Optional[Dict[str, str]] = None,
    search: Optional[str] = None,
    start: Any = None,
    length: Any = None,
    order_column: Any = None,
    order_dir: Any = None,
    draw: Any = None,
) -> List[tuple]:
    """Flat `(key, value)` pairs as the DataTables widget sends them."""
    searchable = searchable or {}
    items: List[tuple] = []
    if draw is not None:
        items.append(("draw", str(draw)))
    for index, name in enumerate(columns):
        items.append((f"columns[{index}][data]", name))
        items.append((f"columns[{index}][name]", ""))
        items.append((f"columns[{index}][searchable]", searchable.get(name, "true")))
        items.append((f"columns[{index}][orderable]", "true"))
    if order_column is not None:
        items.append(("order[0][column]", str(order_column)))
    if order_dir is not None:
        items.append(("order[0][dir]", order_dir))
    if start is not None:
        items.append(("start", str(start)))
    if length is not None:
        items.append(("length", str(length)))
    if search is not None:
        items.append(("search[value]", search))
        items.append(("search[regex]", "false"))
    return items


def datatables_request(**kwargs: Any) -> RequestContext:
    return RequestContext.from_query_params(datatables_params(**kwargs))
