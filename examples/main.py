# examples/main.py
"""
dtforge demo: a DataTables endpoint over an in-memory SQLite database.

Serve it with any ASGI server, e.g. `uvicorn examples.main:app`, then point a
DataTables widget with `serverSide: true` at `/dt/customers`.
"""

from fastapi import APIRouter, FastAPI
from sqlalchemy import String, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column
from sqlalchemy.pool import StaticPool

from dtforge import __version__
from dtforge.api import DatatableOps
from dtforge.core.logging import color_palette, log


class Base(DeclarativeBase):
    pass


class Customer(Base):
    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(50))
    country: Mapped[str] = mapped_column(String(50))


engine = create_engine(
    "sqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False}
)


def get_db():
    with Session(engine) as session:
        yield session


# ? Main dtforge demo ---------------------------------------------------------------------------

log.section(f"dtforge demo v{__version__}")

with log.timed("Database initialization"):
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        session.add_all(
            [
                Customer(id=1, name="ana", country="Portugal"),
                Customer(id=2, name="bruno", country="Brazil"),
                Customer(id=3, name="carla", country="Portugal"),
            ]
        )
        session.commit()
    log.info(f"Seeded {color_palette['table']('customers')}")

app = FastAPI(title="dtforge demo", version=__version__)
router = APIRouter(prefix="/dt", tags=["Datatables"])

DatatableOps(
    Customer,
    router,
    get_db,
    configure=lambda datatable: datatable.column(
        "name", lambda value, row, dt: value.title()
    ),
).generate_route()

app.include_router(router)

log.table(headers=["Route", "Source"], rows=[["/dt/customers", "Customer"]])
