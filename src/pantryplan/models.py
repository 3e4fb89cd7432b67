"""SQLAlchemy database models."""

from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from pantryplan.database import Base


class PantryItem(Base):
    """Pantry stock row with structured quantity columns."""

    __tablename__ = "pantry_items"

    item_id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    name_lower: Mapped[str | None] = mapped_column(String, nullable=True)
    quantity_text: Mapped[str] = mapped_column(String, nullable=False, default="")
    quantity_number: Mapped[float | None] = mapped_column(Float, nullable=True)
    unit: Mapped[str | None] = mapped_column(String(32), nullable=True)
    store_id: Mapped[str] = mapped_column(String, default="")
    notes: Mapped[str] = mapped_column(Text, default="")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (Index("idx_pantry_items_name_lower", "name_lower", "item_id"),)


# Rows written before the structured quantity upgrade only carry display text.
legacy_metadata = MetaData()

legacy_pantry_items = Table(
    "pantry_items",
    legacy_metadata,
    Column("item_id", String, primary_key=True),
    Column("name", String, nullable=False),
    Column("name_lower", String, nullable=True),
    Column("quantity_text", String, nullable=False, default=""),
    Column("store_id", String, default=""),
    Column("notes", Text, default=""),
    Column("updated_at", DateTime, default=datetime.utcnow),
    Index("idx_legacy_pantry_items_name_lower", "name_lower", "item_id"),
)


class RecipeIngredient(Base):
    """Parsed ingredient line belonging to a recipe."""

    __tablename__ = "recipe_ingredients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipe_id: Mapped[str] = mapped_column(String, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    raw_text: Mapped[str] = mapped_column(Text, nullable=False)
    display_name: Mapped[str] = mapped_column(String, nullable=False)
    normalized_key: Mapped[str] = mapped_column(String, nullable=False)
    quantity_number: Mapped[float | None] = mapped_column(Float, nullable=True)
    quantity_text: Mapped[str] = mapped_column(String, default="")
    unit: Mapped[str] = mapped_column(String(32), default="")
    notes: Mapped[str] = mapped_column(Text, default="")

    __table_args__ = (
        Index("idx_recipe_ingredients_recipe_id", "recipe_id", "position"),
        Index("idx_recipe_ingredients_normalized_key", "normalized_key"),
    )


class PlanMealIngredient(Base):
    """Ledger of pantry deductions made for one planned meal slot."""

    __tablename__ = "plan_meal_ingredients"

    plan_date: Mapped[str] = mapped_column(String(10), primary_key=True)  # YYYY-MM-DD
    slot: Mapped[str] = mapped_column(String(16), primary_key=True)  # Breakfast, Lunch, Dinner
    ingredient_norm: Mapped[str] = mapped_column(String, primary_key=True)
    base_unit: Mapped[str] = mapped_column(String(32), primary_key=True)
    recipe_id: Mapped[str] = mapped_column(String, nullable=False)
    required_base: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    deducted_base: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (
        Index("idx_pmi_plan_date_slot", "plan_date", "slot"),
        Index("idx_pmi_recipe_id", "recipe_id"),
    )
