import uuid
from sqlalchemy import (
    Column, String, Text, Boolean, Integer, Float, DateTime, Enum, ForeignKey, JSON, TypeDecorator
)
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from .database import Base
from ..models.shopping_models import ShoppingPriority


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GUID(TypeDecorator):
    """
    Platform-independent GUID type.
    Uses PostgreSQL's UUID type, and otherwise uses
    CHAR(32), storing as stringified hex values.
    """
    impl = String(32)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            from sqlalchemy.dialects.postgresql import UUID
            return dialect.type_descriptor(UUID(as_uuid=True))
        else:
            return dialect.type_descriptor(String(32))

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        elif dialect.name == 'postgresql':
            return str(value)
        else:
            if not isinstance(value, uuid.UUID):
                return "%.32x" % uuid.UUID(value).int
            else:
                return "%.32x" % value.int

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        else:
            if not isinstance(value, uuid.UUID):
                value = uuid.UUID(value)
            return value


class User(Base):
    __tablename__ = "users"
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    photo_uri = Column(String, nullable=True)
    is_default = Column(Boolean, default=False, server_default="0")
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
    outfits = relationship("Outfit", back_populates="user")


class Category(Base):
    __tablename__ = "categories"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, unique=True, index=True, nullable=False)
    icon = Column(String, nullable=True)
    color = Column(String, nullable=True)


class ClothingItem(Base):
    __tablename__ = "clothing_items"
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    name = Column(String, index=True, nullable=False)
    category = Column(String, nullable=False, server_default="Other")
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    color = Column(String, nullable=True)
    brand = Column(String, nullable=True)
    price = Column(Float, nullable=True)
    purchase_date = Column(DateTime(timezone=True), nullable=True)
    purchase_link = Column(String, nullable=True)
    image_uri = Column(String, nullable=True)
    tags = Column(JSON, default=list, server_default="[]")
    season = Column(String, nullable=False, default="All", server_default="All")
    material = Column(String, nullable=True)
    size = Column(String, nullable=True)
    location = Column(String, nullable=True)
    is_visible = Column(Boolean, default=True, server_default="1")
    notes = Column(Text, nullable=True)
    last_worn = Column(DateTime(timezone=True), nullable=True)
    wear_count = Column(Integer, default=0, server_default="0", nullable=False)
    activity_score = Column(Integer, default=0, server_default="0", nullable=False)
    rating = Column(Integer, nullable=True)
    analysis = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    category_ref = relationship("Category", lazy="selectin")

    @property
    def category_name(self):
        return self.category_ref.name if self.category_ref else None

    @property
    def category_color(self):
        return self.category_ref.color if self.category_ref else None


class Outfit(Base):
    __tablename__ = "outfits"
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    # Ordered list of clothing item ids (str form)
    clothing_ids = Column(JSON, nullable=False, default=list, server_default="[]")
    date = Column(DateTime(timezone=True), default=utcnow)
    occasion = Column(String, nullable=True)
    weather = Column(String, nullable=True)
    image_uri = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)
    is_favorite = Column(Boolean, default=False, server_default="0")
    is_visible = Column(Boolean, default=True, server_default="1")
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="outfits", lazy="selectin")
    wear_records = relationship("WearRecord", back_populates="outfit", cascade="all, delete-orphan")

    @property
    def user_name(self):
        return self.user.name if self.user else None


class WearRecord(Base):
    __tablename__ = "wear_records"
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    outfit_id = Column(GUID, ForeignKey("outfits.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    worn_at = Column(DateTime(timezone=True), default=utcnow)
    weather = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    outfit = relationship("Outfit", back_populates="wear_records", lazy="selectin")


class ShoppingItem(Base):
    __tablename__ = "shopping_items"
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False)
    priority = Column(Enum(ShoppingPriority), nullable=False, default=ShoppingPriority.MEDIUM)
    estimated_price = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    is_completed = Column(Boolean, default=False, server_default="0")
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
