# kore_dibo/db/base_class.py
from sqlalchemy.orm import declarative_base

Base = declarative_base()
