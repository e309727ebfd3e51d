from aspyr.config import Base
from sqlalchemy import Column, Integer, String, JSON, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime


class User(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True, index=True)  # uuid
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    preferences = Column(JSON)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    profile = relationship("Profile", backref="user", uselist=False, cascade="all, delete-orphan")


class Course(Base):
    __tablename__ = "courses"
    id = Column(String, primary_key=True, index=True)  # uuid
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=True)
    icon = Column(String, nullable=True)  # Code|Server|Palette
    color = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    modules = relationship("Module", backref="course", cascade="all, delete-orphan")


class Module(Base):
    __tablename__ = "modules"
    id = Column(String, primary_key=True, index=True)  # uuid
    course_id = Column(String, ForeignKey("courses.id"), index=True, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    order_index = Column(Integer, nullable=False)
    duration = Column(String, nullable=True)  # display label, e.g. "45 min"
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    completions = relationship("Completion", backref="module", cascade="all, delete-orphan")


class Completion(Base):
    __tablename__ = "completions"
    # Composite key: at most one record per (user, module).
    user_id = Column(String, ForeignKey("users.id"), primary_key=True, index=True)
    module_id = Column(String, ForeignKey("modules.id"), primary_key=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Profile(Base):
    __tablename__ = "profiles"
    id = Column(String, ForeignKey("users.id"), primary_key=True, index=True)
    username = Column(String, nullable=False)
    profile_photo = Column(String, nullable=True)
    cover_image = Column(String, nullable=True)
    tagline = Column(String, nullable=False, default="")
    theme = Column(String, nullable=False, default="dark")  # dark|light|neon
    learning_mood = Column(String, nullable=False, default="")
    daily_journal = Column(Text, nullable=True)
    streak_days = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
