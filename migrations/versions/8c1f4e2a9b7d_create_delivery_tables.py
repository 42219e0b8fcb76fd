"""Create delivery tables

Revision ID: 8c1f4e2a9b7d
Revises:
Create Date: 2026-10-17 09:12:41.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '8c1f4e2a9b7d'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('firebase_uid', sa.String(length=128), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('display_name', sa.String(length=255), nullable=True),
        sa.Column('role', sa.String(length=20), server_default='partner', nullable=False),
        sa.Column('partner_id', sa.String(length=128), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('firebase_uid'),
    )
    op.create_index('ix_users_partner_id', 'users', ['partner_id'])

    op.create_table(
        'partner_settings',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('partner_id', sa.String(length=128), nullable=False),
        sa.Column('default_max_revision_rounds', sa.Integer(), server_default='2', nullable=False),
        sa.Column('business_name', sa.String(length=255), nullable=True),
        sa.Column('logo_url', sa.String(length=1000), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('partner_id'),
    )

    op.create_table(
        'customers',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('partner_id', sa.String(length=128), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('company', sa.String(length=255), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_customers_partner_id', 'customers', ['partner_id'])

    op.create_table(
        'jobs',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('partner_id', sa.String(length=128), nullable=False),
        sa.Column('job_number', sa.String(length=32), nullable=False),
        sa.Column('customer_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=False),
        sa.Column('status', sa.String(length=20), server_default='booked', nullable=False),
        sa.Column('delivery_token', sa.String(length=128), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('job_number'),
    )
    op.create_index('ix_jobs_partner_id', 'jobs', ['partner_id'])
    op.create_index('ix_jobs_delivery_token', 'jobs', ['delivery_token'], unique=True)

    op.create_table(
        'orders',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('partner_id', sa.String(length=128), nullable=False),
        sa.Column('order_number', sa.String(length=32), nullable=False),
        sa.Column('job_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('status', sa.String(length=20), server_default='pending', nullable=False),
        sa.Column('max_revision_rounds', sa.Integer(), server_default='2', nullable=False),
        sa.Column('used_revision_rounds', sa.Integer(), server_default='0', nullable=False),
        *_timestamps(),
        sa.CheckConstraint('max_revision_rounds >= 0', name='ck_orders_max_rounds_non_negative'),
        sa.CheckConstraint('used_revision_rounds >= 0', name='ck_orders_used_rounds_non_negative'),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('order_number'),
    )
    op.create_index('ix_orders_partner_id', 'orders', ['partner_id'])
    op.create_index('ix_orders_job_id', 'orders', ['job_id'])

    op.create_table(
        'folders',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('job_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('parent_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('order_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('path', sa.String(length=1024), nullable=False),
        sa.Column('depth', sa.Integer(), server_default='1', nullable=False),
        sa.Column('editor_folder_name', sa.String(length=255), nullable=False),
        sa.Column('partner_folder_name', sa.String(length=255), nullable=True),
        sa.Column('is_visible', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('display_order', sa.Integer(), server_default='0', nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['parent_id'], ['folders.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('job_id', 'path', name='uq_folders_job_path'),
    )
    op.create_index('ix_folders_job_id', 'folders', ['job_id'])
    op.create_index('ix_folders_parent_id', 'folders', ['parent_id'])
    # Prefix scans for descendant listings and cascading deletes
    op.create_index(
        'ix_folders_job_path_prefix',
        'folders',
        ['job_id', 'path'],
        postgresql_ops={'path': 'varchar_pattern_ops'},
    )

    op.create_table(
        'deliverable_files',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('job_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('order_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('folder_path', sa.String(length=1024), nullable=True),
        sa.Column('file_name', sa.String(length=500), nullable=False),
        sa.Column('original_name', sa.String(length=500), nullable=False),
        sa.Column('file_size', sa.Integer(), server_default='0', nullable=False),
        sa.Column('mime_type', sa.String(length=100), nullable=False),
        sa.Column('download_url', sa.String(length=2000), nullable=True),
        sa.Column('uploaded_at', sa.DateTime(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id']),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_deliverable_files_job_id', 'deliverable_files', ['job_id'])
    op.create_index('ix_deliverable_files_order_id', 'deliverable_files', ['order_id'])
    op.create_index(
        'ix_deliverable_files_folder_path',
        'deliverable_files',
        ['folder_path'],
        postgresql_ops={'folder_path': 'varchar_pattern_ops'},
    )

    op.create_table(
        'revision_requests',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('order_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('job_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('file_ids', sa.JSON(), nullable=False),
        sa.Column('comments', sa.Text(), nullable=False),
        sa.Column('requested_by', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id']),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_revision_requests_order_id', 'revision_requests', ['order_id'])
    op.create_index('ix_revision_requests_job_id', 'revision_requests', ['job_id'])

    op.create_table(
        'file_comments',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('file_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('job_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('order_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('author_id', sa.String(length=128), nullable=False),
        sa.Column('author_name', sa.String(length=255), nullable=False),
        sa.Column('author_role', sa.String(length=20), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['file_id'], ['deliverable_files.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id']),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_file_comments_file_id', 'file_comments', ['file_id'])
    op.create_index('ix_file_comments_job_id', 'file_comments', ['job_id'])

    op.create_table(
        'job_reviews',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('job_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('review', sa.Text(), nullable=True),
        sa.Column('submitted_by', sa.String(length=255), nullable=True),
        sa.Column('submitted_by_email', sa.String(length=255), nullable=True),
        sa.Column('submitted_at', sa.DateTime(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('rating BETWEEN 1 AND 5', name='ck_job_reviews_rating'),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('job_id'),
    )

    op.create_table(
        'delivery_emails',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('job_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('recipient_email', sa.String(length=255), nullable=False),
        sa.Column('subject', sa.String(length=500), nullable=False),
        sa.Column('sent_by', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('sent_at', sa.DateTime(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id']),
        sa.ForeignKeyConstraint(['sent_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_delivery_emails_job_id', 'delivery_emails', ['job_id'])


def downgrade() -> None:
    op.drop_index('ix_delivery_emails_job_id', table_name='delivery_emails')
    op.drop_table('delivery_emails')
    op.drop_table('job_reviews')
    op.drop_index('ix_file_comments_job_id', table_name='file_comments')
    op.drop_index('ix_file_comments_file_id', table_name='file_comments')
    op.drop_table('file_comments')
    op.drop_index('ix_revision_requests_job_id', table_name='revision_requests')
    op.drop_index('ix_revision_requests_order_id', table_name='revision_requests')
    op.drop_table('revision_requests')
    op.drop_index('ix_deliverable_files_folder_path', table_name='deliverable_files')
    op.drop_index('ix_deliverable_files_order_id', table_name='deliverable_files')
    op.drop_index('ix_deliverable_files_job_id', table_name='deliverable_files')
    op.drop_table('deliverable_files')
    op.drop_index('ix_folders_job_path_prefix', table_name='folders')
    op.drop_index('ix_folders_parent_id', table_name='folders')
    op.drop_index('ix_folders_job_id', table_name='folders')
    op.drop_table('folders')
    op.drop_index('ix_orders_job_id', table_name='orders')
    op.drop_index('ix_orders_partner_id', table_name='orders')
    op.drop_table('orders')
    op.drop_index('ix_jobs_delivery_token', table_name='jobs')
    op.drop_index('ix_jobs_partner_id', table_name='jobs')
    op.drop_table('jobs')
    op.drop_index('ix_customers_partner_id', table_name='customers')
    op.drop_table('customers')
    op.drop_table('partner_settings')
    op.drop_index('ix_users_partner_id', table_name='users')
    op.drop_table('users')
