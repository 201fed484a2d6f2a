"""SQLAlchemy ORM models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ProfileModel(Base):
    """User profile model (id matches the Supabase auth user)."""

    __tablename__ = "profiles"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
    )
    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    first_name: Mapped[str | None] = mapped_column(String(100))
    last_name: Mapped[str | None] = mapped_column(String(100))
    avatar_url: Mapped[str | None] = mapped_column(String(500))
    role: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint("role IN ('user', 'admin')", name="ck_profiles_role"),
        nullable=False,
        default="user",
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    evaluations: Mapped[list["EvaluationModel"]] = relationship(
        "EvaluationModel",
        back_populates="user",
        cascade="all, delete-orphan",
    )


class GameModel(Base):
    """Board game catalog model."""

    __tablename__ = "games"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text)
    min_players: Mapped[int] = mapped_column(Integer, nullable=False)
    max_players: Mapped[int] = mapped_column(Integer, nullable=False)
    playing_time: Mapped[int] = mapped_column(Integer, nullable=False)
    thumbnail_url: Mapped[str | None] = mapped_column(String(500))
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, index=True
    )

    __table_args__ = (
        CheckConstraint("min_players > 0", name="ck_games_min_players"),
        CheckConstraint("max_players >= min_players", name="ck_games_max_players"),
        CheckConstraint("playing_time > 0", name="ck_games_playing_time"),
    )

    # Relationships
    evaluations: Mapped[list["EvaluationModel"]] = relationship(
        "EvaluationModel",
        back_populates="game",
        passive_deletes=True,
    )


class UserGameListModel(Base):
    """One game in one of a user's lists."""

    __tablename__ = "user_game_lists"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    game_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("games.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    list_type: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint(
            "list_type IN ('collection', 'wishlist', 'played')",
            name="ck_user_game_lists_list_type",
        ),
        nullable=False,
    )
    added_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "game_id", "list_type", name="uq_user_game_list"),
    )

    # Relationships
    game: Mapped["GameModel"] = relationship("GameModel")


class EvaluationModel(Base):
    """A user's rating and comment for a game."""

    __tablename__ = "evaluations"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    game_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("games.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    rating: Mapped[int] = mapped_column(
        Integer,
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_evaluations_rating"),
        nullable=False,
    )
    comment: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    __table_args__ = (
        UniqueConstraint("user_id", "game_id", name="uq_evaluation_user_game"),
    )

    # Relationships
    user: Mapped["ProfileModel"] = relationship("ProfileModel", back_populates="evaluations")
    game: Mapped["GameModel"] = relationship("GameModel", back_populates="evaluations")
