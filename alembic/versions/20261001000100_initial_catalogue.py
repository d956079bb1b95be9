"""initial catalogue schema

Revision ID: 20261001000100
Revises: 
Create Date: 2026-10-01 00:01:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261001000100"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "clubs",
        sa.Column("club_id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("slug", sa.String(), nullable=True),
        sa.Column("name", sa.String(), nullable=False, server_default=""),
        sa.Column("country", sa.String(), nullable=True),
        sa.Column("logo_url", sa.String(), nullable=True),
        sa.Column("primary_color", sa.String(), nullable=True),
        sa.Column("secondary_color", sa.String(), nullable=True),
        sa.Column("popularity_score", sa.Integer(), nullable=True),
        sa.Column("competitions", sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_clubs_club_id", "clubs", ["club_id"], unique=False)
    op.create_index("ix_clubs_slug", "clubs", ["slug"], unique=False)

    op.create_table(
        "leagues",
        sa.Column("league_id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("league_slug", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False, server_default=""),
        sa.Column("country_code", sa.String(), nullable=True),
        sa.Column("number_of_games", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("popularity", sa.Integer(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_leagues_league_id", "leagues", ["league_id"], unique=False)
    op.create_index("ix_leagues_league_slug", "leagues", ["league_slug"], unique=True)

    op.create_table(
        "streaming",
        sa.Column("streamer_id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("slug", sa.String(), nullable=True),
        sa.Column("provider_name", sa.String(), nullable=False, server_default=""),
        sa.Column("logo_url", sa.String(), nullable=True),
        sa.Column("monthly_price", sa.String(), nullable=False, server_default=""),
        sa.Column("yearly_price", sa.String(), nullable=False, server_default=""),
        sa.Column("affiliate_url", sa.String(), nullable=True),
        sa.Column("coverage", sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_streaming_streamer_id", "streaming", ["streamer_id"], unique=False)
    op.create_index("ix_streaming_slug", "streaming", ["slug"], unique=False)

    op.create_table(
        "app_settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("max_combination_size", sa.Integer(), nullable=False, server_default="3"),
        sa.Column("exhaustive_combination_size", sa.Integer(), nullable=False, server_default="2"),
        sa.Column("top_providers_limit", sa.Integer(), nullable=False, server_default="8"),
        sa.Column("max_combinations", sa.Integer(), nullable=False, server_default="5000"),
        sa.Column(
            "default_target_coverages",
            sa.String(),
            nullable=False,
            server_default="100,90,66",
        ),
        sa.Column("savings_rate", sa.Float(), nullable=False, server_default="0.1"),
        sa.Column("max_results", sa.Integer(), nullable=False, server_default="50"),
        sa.Column("updated_at_utc", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("app_settings")
    op.drop_index("ix_streaming_slug", table_name="streaming")
    op.drop_index("ix_streaming_streamer_id", table_name="streaming")
    op.drop_table("streaming")
    op.drop_index("ix_leagues_league_slug", table_name="leagues")
    op.drop_index("ix_leagues_league_id", table_name="leagues")
    op.drop_table("leagues")
    op.drop_index("ix_clubs_slug", table_name="clubs")
    op.drop_index("ix_clubs_club_id", table_name="clubs")
    op.drop_table("clubs")
