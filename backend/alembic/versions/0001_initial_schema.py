"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'searched_addresses',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('address', sa.String(length=500), nullable=False),
        sa.Column('result', sa.String(length=30), nullable=False),
        sa.Column('municipality_name', sa.String(length=100), nullable=True),
        sa.Column('latitude', sa.String(length=32), nullable=True),
        sa.Column('longitude', sa.String(length=32), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_searched_addresses_result', 'searched_addresses', ['result'])
    op.create_index('ix_searched_addresses_created_at', 'searched_addresses', ['created_at'])

    op.create_table(
        'interested_parties',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('address', sa.String(length=500), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('source', sa.String(length=30), nullable=False),
        sa.Column('email_sent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('unsubscribe_token', sa.String(length=64), nullable=True),
        sa.Column('unsubscribed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('unsubscribe_token')
    )
    op.create_index('ix_interested_parties_email', 'interested_parties', ['email'])

    op.create_table(
        'contacts',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('source', sa.String(length=30), nullable=False, server_default='manual'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_contacts_email', 'contacts', ['email'], unique=True)

    op.create_table(
        'community_questions',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('question', sa.Text(), nullable=False),
        sa.Column('category', sa.String(length=30), nullable=False, server_default='general'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('answer', sa.Text(), nullable=True),
        sa.Column('answered_at', sa.DateTime(), nullable=True),
        sa.Column('unsubscribe_token', sa.String(length=64), nullable=True),
        sa.Column('unsubscribed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('unsubscribe_token')
    )

    op.create_table(
        'dynamic_faqs',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('question', sa.Text(), nullable=False),
        sa.Column('answer', sa.Text(), nullable=False),
        sa.Column('category', sa.String(length=30), nullable=False, server_default='general'),
        sa.Column('source_question_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('view_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_new', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['source_question_id'], ['community_questions.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'email_correspondence',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('direction', sa.String(length=10), nullable=False, server_default='outbound'),
        sa.Column('from_email', sa.String(length=255), nullable=False),
        sa.Column('to_email', sa.String(length=255), nullable=False),
        sa.Column('subject', sa.String(length=500), nullable=False),
        sa.Column('body_html', sa.Text(), nullable=True),
        sa.Column('body_text', sa.Text(), nullable=True),
        sa.Column('resend_email_id', sa.String(length=100), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='sent'),
        sa.Column('related_type', sa.String(length=30), nullable=True),
        sa.Column('related_id', sa.String(length=64), nullable=True),
        sa.Column('sent_by', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_email_correspondence_to_email', 'email_correspondence', ['to_email'])

    op.create_table(
        'inbound_emails',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('resend_email_id', sa.String(length=100), nullable=True),
        sa.Column('from_email', sa.String(length=255), nullable=False),
        sa.Column('to_email', sa.String(length=255), nullable=False),
        sa.Column('subject', sa.String(length=500), nullable=True),
        sa.Column('body_text', sa.Text(), nullable=True),
        sa.Column('body_html', sa.Text(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_replied', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('reply_email_id', sa.String(length=100), nullable=True),
        sa.Column('received_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('resend_email_id')
    )

    op.create_table(
        'email_usage',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('month', sa.String(length=7), nullable=False),
        sa.Column('sent_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('received_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_shutoff', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('month')
    )


def downgrade() -> None:
    op.drop_table('email_usage')
    op.drop_table('inbound_emails')
    op.drop_index('ix_email_correspondence_to_email', table_name='email_correspondence')
    op.drop_table('email_correspondence')
    op.drop_table('dynamic_faqs')
    op.drop_table('community_questions')
    op.drop_index('ix_contacts_email', table_name='contacts')
    op.drop_table('contacts')
    op.drop_index('ix_interested_parties_email', table_name='interested_parties')
    op.drop_table('interested_parties')
    op.drop_index('ix_searched_addresses_created_at', table_name='searched_addresses')
    op.drop_index('ix_searched_addresses_result', table_name='searched_addresses')
    op.drop_table('searched_addresses')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
