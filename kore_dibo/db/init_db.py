# kore_dibo/db/init_db.py
from kore_dibo.db.base import Base
from kore_dibo.db.session import engine


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
