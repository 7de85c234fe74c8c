"""Initial schema for tracked players

Revision ID: 001
Revises: 
Create Date: 2026-10-18 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table('players',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('puuid', sa.String(length=78), nullable=False),
        sa.Column('game_name', sa.String(length=16), nullable=False),
        sa.Column('tag_line', sa.String(length=5), nullable=False),
        sa.Column('server', sa.String(length=8), nullable=False),
        sa.Column('summoner_id', sa.String(length=63), nullable=False, server_default=''),
        sa.Column('summoner_level', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('profile_icon_id', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('tier', sa.String(length=20), nullable=False, server_default='UNRANKED'),
        sa.Column('rank', sa.String(length=5), nullable=False, server_default=''),
        sa.Column('league_points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('wins', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('losses', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_index('idx_players_server', 'players', ['server'])
    # A Riot ID is tracked at most once per server, a PUUID at most once overall
    op.create_index('uq_players_riot_id_server', 'players', ['game_name', 'tag_line', 'server'], unique=True)
    op.create_index('uq_players_puuid', 'players', ['puuid'], unique=True)


def downgrade() -> None:
    op.drop_index('uq_players_puuid', table_name='players')
    op.drop_index('uq_players_riot_id_server', table_name='players')
    op.drop_index('idx_players_server', table_name='players')
    op.drop_table('players')
