"""create_stock_pipeline_tables

Revision ID: 5b1d9c0e2a47
Revises:
Create Date: 2026-10-18 10:12:44.210573

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '5b1d9c0e2a47'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('fabric',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('fabric_id', sa.String(length=50), nullable=True),
        sa.Column('fabric_type', sa.String(length=255), nullable=False),
        sa.Column('color', sa.String(length=100), nullable=False),
        sa.Column('quality', sa.String(length=100), nullable=False),
        sa.Column('length', sa.Float(), nullable=False),
        sa.Column('width', sa.Float(), nullable=False),
        sa.Column('quantity', sa.Float(), nullable=False),
        sa.Column('supplier', sa.String(length=255), nullable=False),
        sa.Column('purchase_price', sa.Float(), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('status', sa.String(length=50), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_fabric_id'), 'fabric', ['id'], unique=False)
    op.create_index(op.f('ix_fabric_fabric_id'), 'fabric', ['fabric_id'], unique=True)
    op.create_index(op.f('ix_fabric_fabric_type'), 'fabric', ['fabric_type'], unique=False)

    op.create_table('cutting_record',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('cutting_id', sa.String(length=50), nullable=True),
        sa.Column('fabric_type', sa.String(length=255), nullable=False),
        sa.Column('fabric_color', sa.String(length=100), nullable=False),
        sa.Column('product_name', sa.String(length=255), nullable=False),
        sa.Column('pieces_count', sa.Integer(), nullable=False),
        sa.Column('total_length_used', sa.Float(), nullable=False),
        sa.Column('cutting_master', sa.String(length=255), nullable=False),
        sa.Column('cutting_price_per_piece', sa.Float(), nullable=False),
        sa.Column('date', sa.String(length=20), nullable=False),
        sa.Column('time', sa.String(length=20), nullable=True),
        sa.Column('status', sa.String(length=50), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_cutting_record_id'), 'cutting_record', ['id'], unique=False)
    op.create_index(op.f('ix_cutting_record_cutting_id'), 'cutting_record', ['cutting_id'], unique=True)
    op.create_index(op.f('ix_cutting_record_product_name'), 'cutting_record', ['product_name'], unique=False)

    op.create_table('cutting_size_breakdown',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('cutting_record_id', sa.Uuid(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('size', sa.String(length=20), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['cutting_record_id'], ['cutting_record.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_cutting_size_breakdown_cutting_record_id'), 'cutting_size_breakdown', ['cutting_record_id'], unique=False)

    op.create_table('manufacturing_order',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('manufacturing_id', sa.String(length=50), nullable=False),
        sa.Column('cutting_id', sa.String(length=50), nullable=False),
        sa.Column('fabric_type', sa.String(length=255), nullable=False),
        sa.Column('fabric_color', sa.String(length=100), nullable=False),
        sa.Column('product_name', sa.String(length=255), nullable=False),
        sa.Column('size', sa.String(length=20), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('tailor_name', sa.String(length=255), nullable=False),
        sa.Column('price_per_piece', sa.Float(), nullable=False),
        sa.Column('total_amount', sa.Float(), nullable=False),
        sa.Column('status', sa.String(length=50), nullable=False),
        sa.Column('payment_status', sa.String(length=20), nullable=False),
        sa.Column('qr_generated', sa.Boolean(), nullable=False),
        sa.Column('completion_date', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_manufacturing_order_id'), 'manufacturing_order', ['id'], unique=False)
    op.create_index(op.f('ix_manufacturing_order_manufacturing_id'), 'manufacturing_order', ['manufacturing_id'], unique=False)
    op.create_index(op.f('ix_manufacturing_order_cutting_id'), 'manufacturing_order', ['cutting_id'], unique=False)
    op.create_index(op.f('ix_manufacturing_order_size'), 'manufacturing_order', ['size'], unique=False)
    op.create_index(op.f('ix_manufacturing_order_tailor_name'), 'manufacturing_order', ['tailor_name'], unique=False)
    op.create_index(op.f('ix_manufacturing_order_status'), 'manufacturing_order', ['status'], unique=False)

    op.create_table('qr_product',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('product_id', sa.String(length=50), nullable=False),
        sa.Column('manufacturing_id', sa.String(length=50), nullable=False),
        sa.Column('cutting_id', sa.String(length=50), nullable=True),
        sa.Column('product_name', sa.String(length=255), nullable=False),
        sa.Column('color', sa.String(length=100), nullable=True),
        sa.Column('size', sa.String(length=20), nullable=True),
        sa.Column('fabric_type', sa.String(length=255), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('tailor_name', sa.String(length=255), nullable=True),
        sa.Column('qr_code_data', sa.Text(), nullable=True),
        sa.Column('is_generated', sa.Boolean(), nullable=False),
        sa.Column('generated_date', sa.String(length=20), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_qr_product_id'), 'qr_product', ['id'], unique=False)
    op.create_index(op.f('ix_qr_product_product_id'), 'qr_product', ['product_id'], unique=True)
    op.create_index(op.f('ix_qr_product_manufacturing_id'), 'qr_product', ['manufacturing_id'], unique=False)
    op.create_index(op.f('ix_qr_product_cutting_id'), 'qr_product', ['cutting_id'], unique=False)

    op.create_table('stock_transaction',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('transaction_id', sa.String(length=50), nullable=True),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.Column('item_type', sa.String(length=20), nullable=False),
        sa.Column('item_id', sa.String(length=50), nullable=False),
        sa.Column('item_name', sa.String(length=255), nullable=False),
        sa.Column('action', sa.String(length=20), nullable=False),
        sa.Column('quantity', sa.Float(), nullable=False),
        sa.Column('previous_stock', sa.Float(), nullable=False),
        sa.Column('new_stock', sa.Float(), nullable=False),
        sa.Column('performed_by', sa.String(length=255), nullable=False),
        sa.Column('source', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_stock_transaction_id'), 'stock_transaction', ['id'], unique=False)
    op.create_index(op.f('ix_stock_transaction_transaction_id'), 'stock_transaction', ['transaction_id'], unique=True)
    op.create_index(op.f('ix_stock_transaction_timestamp'), 'stock_transaction', ['timestamp'], unique=False)
    op.create_index(op.f('ix_stock_transaction_item_type'), 'stock_transaction', ['item_type'], unique=False)
    op.create_index(op.f('ix_stock_transaction_item_id'), 'stock_transaction', ['item_id'], unique=False)
    op.create_index(op.f('ix_stock_transaction_action'), 'stock_transaction', ['action'], unique=False)
    op.create_index(op.f('ix_stock_transaction_performed_by'), 'stock_transaction', ['performed_by'], unique=False)


def downgrade() -> None:
    op.drop_table('stock_transaction')
    op.drop_table('qr_product')
    op.drop_table('manufacturing_order')
    op.drop_table('cutting_size_breakdown')
    op.drop_table('cutting_record')
    op.drop_table('fabric')
