from sqlmodel import SQLModel, Session, create_engine

from app.core.config import DATABASE_URL, DB_ECHO

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, echo=DB_ECHO, connect_args=connect_args)


def create_db_and_tables():
    # register every table on the metadata
    from app.models import budget, goal_progress, savings_goal, transaction, user  # noqa: F401
    SQLModel.metadata.create_all(engine)


def get_session():
    with Session(engine) as session:
        yield session
