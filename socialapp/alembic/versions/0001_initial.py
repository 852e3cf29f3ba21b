"""initial

Revision ID: 0001
Revises: 
Create Date: 2026-10-17 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

message_type = sa.Enum('TEXT', 'IMAGE', 'DELETED', name='message_type')

def upgrade():
    op.create_table('users',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('username', sa.String(150), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now())
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table('profiles',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('display_name', sa.String(20), nullable=False),
        sa.Column('bio', sa.String(190), nullable=False, server_default=''),
        sa.Column('default_picture', sa.Boolean(), nullable=False, server_default=sa.true())
    )
    op.create_index('ix_profiles_user_id', 'profiles', ['user_id'], unique=True)
    op.create_index('ix_profiles_display_name', 'profiles', ['display_name'], unique=True)

    op.create_table('friendships',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now())
    )

    op.create_table('friends',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('friendship_id', sa.Integer, sa.ForeignKey('friendships.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.UniqueConstraint('friendship_id', 'user_id', name='uix_friendship_user')
    )
    op.create_index('ix_friends_friendship_id', 'friends', ['friendship_id'])
    op.create_index('ix_friends_user_id', 'friends', ['user_id'])

    op.create_table('friend_requests',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('from_user', sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('to_user', sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now())
    )
    op.create_index('ix_friend_requests_from_user', 'friend_requests', ['from_user'])
    op.create_index('ix_friend_requests_to_user', 'friend_requests', ['to_user'])

    op.create_table('messages',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('from_id', sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('to_id', sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('content', sa.Text(), nullable=False, server_default=''),
        sa.Column('image_key', sa.String(255), nullable=True),
        sa.Column('type', message_type, nullable=False),
        sa.Column('date_sent', sa.DateTime(timezone=True), nullable=False)
    )
    op.create_index('ix_messages_from_id', 'messages', ['from_id'])
    op.create_index('ix_messages_to_id', 'messages', ['to_id'])
    op.create_index('ix_messages_date_sent', 'messages', ['date_sent'])

def downgrade():
    op.drop_table('messages')
    message_type.drop(op.get_bind(), checkfirst=True)
    op.drop_table('friend_requests')
    op.drop_table('friends')
    op.drop_table('friendships')
    op.drop_table('profiles')
    op.drop_table('users')
