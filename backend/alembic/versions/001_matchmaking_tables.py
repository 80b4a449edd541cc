"""Matchmaking schema: games, user preferences, availability windows (+ per-game weights), planned sessions (+ players)."""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "games",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("title", sa.String(256), nullable=False),
        sa.Column("min_players", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("max_players", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("genre", sa.String(64), nullable=True),
        sa.Column("cover_image_url", sa.String(512), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "user_game_preferences",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("game_id", sa.String(36), sa.ForeignKey("games.id", ondelete="CASCADE"), nullable=False),
        sa.Column("weight", sa.Integer(), nullable=False, server_default="5"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "game_id", name="uq_user_game_preferences_user_game"),
    )
    op.create_index("ix_user_game_preferences_user_id", "user_game_preferences", ["user_id"])

    op.create_table(
        "availability_windows",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_availability_windows_user_id", "availability_windows", ["user_id"])
    op.create_index("ix_availability_windows_end_time", "availability_windows", ["end_time"])

    op.create_table(
        "availability_game_weights",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "window_id",
            sa.String(36),
            sa.ForeignKey("availability_windows.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("game_id", sa.String(36), sa.ForeignKey("games.id", ondelete="CASCADE"), nullable=False),
        sa.Column("weight", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("window_id", "game_id", name="uq_availability_game_weights_window_game"),
    )
    op.create_index("ix_availability_game_weights_window_id", "availability_game_weights", ["window_id"])

    # No status column: CONFIRMED/PRELIMINARY is derived on read.
    op.create_table(
        "planned_sessions",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("game_id", sa.String(36), sa.ForeignKey("games.id", ondelete="CASCADE"), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("score", sa.Float(), nullable=False, server_default="0"),
        sa.Column("notification_status", sa.String(24), nullable=False, server_default="NONE"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_planned_sessions_game_id", "planned_sessions", ["game_id"])
    op.create_index("ix_planned_sessions_end_time", "planned_sessions", ["end_time"])

    op.create_table(
        "session_players",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "session_id",
            sa.String(36),
            sa.ForeignKey("planned_sessions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="PENDING"),
        sa.Column("rejection_reason", sa.String(64), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("session_id", "user_id", name="uq_session_players_session_user"),
    )
    op.create_index("ix_session_players_session_id", "session_players", ["session_id"])
    op.create_index("ix_session_players_user_id", "session_players", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_session_players_user_id", table_name="session_players")
    op.drop_index("ix_session_players_session_id", table_name="session_players")
    op.drop_table("session_players")
    op.drop_index("ix_planned_sessions_end_time", table_name="planned_sessions")
    op.drop_index("ix_planned_sessions_game_id", table_name="planned_sessions")
    op.drop_table("planned_sessions")
    op.drop_index("ix_availability_game_weights_window_id", table_name="availability_game_weights")
    op.drop_table("availability_game_weights")
    op.drop_index("ix_availability_windows_end_time", table_name="availability_windows")
    op.drop_index("ix_availability_windows_user_id", table_name="availability_windows")
    op.drop_table("availability_windows")
    op.drop_index("ix_user_game_preferences_user_id", table_name="user_game_preferences")
    op.drop_table("user_game_preferences")
    op.drop_table("games")
