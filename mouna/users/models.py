from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String

from mouna.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String(50), unique=True, nullable=False)
    password = Column(String, nullable=False)  # passlib hash
    name = Column(String(100), nullable=False)
    role = Column(String(20), nullable=False, default="user")

    created_at = Column(DateTime, default=datetime.utcnow)
