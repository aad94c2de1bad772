from sqlalchemy import Column, Integer, String, DateTime
from datetime import datetime
from backend.db import Base
from sqlalchemy.orm import relationship


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, nullable=True, onupdate=datetime.utcnow)

    categories = relationship("Category", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    transactions = relationship("Transaction", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    budgets = relationship("Budget", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
