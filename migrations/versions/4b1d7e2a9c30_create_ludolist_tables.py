"""create_ludolist_tables

Revision ID: 4b1d7e2a9c30
Revises:
Create Date: 2026-03-10 14:22:41.512093

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b1d7e2a9c30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profiles, games, user_game_lists and evaluations tables."""
    op.create_table('profiles',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column('role', sa.String(length=20), server_default='user', nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint("role IN ('user', 'admin')", name='ck_profiles_role'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
    )

    op.create_table('games',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('min_players', sa.Integer(), nullable=False),
        sa.Column('max_players', sa.Integer(), nullable=False),
        sa.Column('playing_time', sa.Integer(), nullable=False),
        sa.Column('thumbnail_url', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('min_players > 0', name='ck_games_min_players'),
        sa.CheckConstraint('max_players >= min_players', name='ck_games_max_players'),
        sa.CheckConstraint('playing_time > 0', name='ck_games_playing_time'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_games_name', 'games', ['name'], unique=False)
    op.create_index('ix_games_created_at', 'games', ['created_at'], unique=False)

    # One row per (user, game, list)
    op.create_table('user_game_lists',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('game_id', sa.Integer(), nullable=False),
        sa.Column('list_type', sa.String(length=20), nullable=False),
        sa.Column('added_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "list_type IN ('collection', 'wishlist', 'played')",
            name='ck_user_game_lists_list_type',
        ),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['game_id'], ['games.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'game_id', 'list_type', name='uq_user_game_list'),
    )
    op.create_index('ix_user_game_lists_user_id', 'user_game_lists', ['user_id'], unique=False)
    op.create_index('ix_user_game_lists_game_id', 'user_game_lists', ['game_id'], unique=False)

    # One evaluation per (user, game)
    op.create_table('evaluations',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('game_id', sa.Integer(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('rating BETWEEN 1 AND 5', name='ck_evaluations_rating'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['game_id'], ['games.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'game_id', name='uq_evaluation_user_game'),
    )
    op.create_index('ix_evaluations_user_id', 'evaluations', ['user_id'], unique=False)
    op.create_index('ix_evaluations_game_id', 'evaluations', ['game_id'], unique=False)


def downgrade() -> None:
    """Drop all Ludo List tables."""
    op.drop_index('ix_evaluations_game_id', table_name='evaluations')
    op.drop_index('ix_evaluations_user_id', table_name='evaluations')
    op.drop_table('evaluations')
    op.drop_index('ix_user_game_lists_game_id', table_name='user_game_lists')
    op.drop_index('ix_user_game_lists_user_id', table_name='user_game_lists')
    op.drop_table('user_game_lists')
    op.drop_index('ix_games_created_at', table_name='games')
    op.drop_index('ix_games_name', table_name='games')
    op.drop_table('games')
    op.drop_table('profiles')
