"""initial plot booking schema

Revision ID: 1a2b3c4d5e6f
Revises:
Create Date: 2026-10-17 10:12:44.318905

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '1a2b3c4d5e6f'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('updated_by', sa.String(), nullable=True),
    ]


def _soft_delete_columns():
    return [
        sa.Column('is_deleted', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deleted_by', sa.String(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', sa.Enum('ADMIN', 'MANAGER', 'EMPLOYEE', 'ASSOCIATE', 'USER', name='userrole'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)

    op.create_table(
        'audit_log',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('table_name', sa.String(), nullable=False),
        sa.Column('record_id', sa.Integer(), nullable=False),
        sa.Column('changed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('changed_by', sa.String(), nullable=False),
        sa.Column('action', sa.String(), nullable=False),
        sa.Column('old_values', sa.JSON(), nullable=True),
        sa.Column('new_values', sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_audit_log_id'), 'audit_log', ['id'], unique=False)

    op.create_table(
        'document_sequences',
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('next_value', sa.Integer(), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('name'),
    )

    op.create_table(
        'projects',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('legal_details', sa.Text(), nullable=True),
        sa.Column('total_plots', sa.Integer(), nullable=False),
        sa.Column('available_plots', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_audit_columns(),
        *_soft_delete_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_projects_id'), 'projects', ['id'], unique=False)
    op.create_index(op.f('ix_projects_is_deleted'), 'projects', ['is_deleted'], unique=False)

    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('customer_no', sa.String(), nullable=False),
        sa.Column('applicant_name', sa.String(), nullable=False),
        sa.Column('father_or_husband_name', sa.String(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('aadhaar_no', sa.String(length=12), nullable=True),
        sa.Column('mobile_no', sa.String(length=15), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_audit_columns(),
        *_soft_delete_columns(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('aadhaar_no'),
    )
    op.create_index(op.f('ix_customers_id'), 'customers', ['id'], unique=False)
    op.create_index(op.f('ix_customers_customer_no'), 'customers', ['customer_no'], unique=True)
    op.create_index(op.f('ix_customers_is_deleted'), 'customers', ['is_deleted'], unique=False)

    op.create_table(
        'brokers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('broker_no', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('mobile_no', sa.String(length=15), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('aadhaar_no', sa.String(length=12), nullable=True),
        sa.Column('pan_no', sa.String(length=10), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_audit_columns(),
        *_soft_delete_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_brokers_id'), 'brokers', ['id'], unique=False)
    op.create_index(op.f('ix_brokers_broker_no'), 'brokers', ['broker_no'], unique=True)
    op.create_index(op.f('ix_brokers_is_deleted'), 'brokers', ['is_deleted'], unique=False)

    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('booking_no', sa.String(), nullable=False),
        sa.Column('booking_date', sa.Date(), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('project_id', sa.Integer(), nullable=False),
        sa.Column('plot_no', sa.String(), nullable=False),
        sa.Column('area', sa.Numeric(10, 2), nullable=False),
        sa.Column('plc', sa.Numeric(15, 2), nullable=False),
        sa.Column('rate', sa.Numeric(10, 2), nullable=False),
        sa.Column('associate_rate', sa.Numeric(10, 2), nullable=True),
        sa.Column('discount', sa.Numeric(10, 2), nullable=False),
        sa.Column('effective_rate', sa.Numeric(10, 2), nullable=False),
        sa.Column('legal_details', sa.Text(), nullable=True),
        sa.Column('status', sa.Enum('ACTIVE', 'CANCELLED', name='bookingstatus'), nullable=False),
        sa.Column('registry_completed', sa.Boolean(), nullable=False),
        sa.Column('registry_date', sa.Date(), nullable=True),
        sa.Column('expected_registry_date', sa.Date(), nullable=True),
        sa.Column('loan', sa.Enum('NOT_APPLICABLE', 'YES', 'NO', name='loanstatus'), nullable=False),
        sa.Column('broker_id', sa.Integer(), nullable=True),
        *_audit_columns(),
        *_soft_delete_columns(),
        sa.ForeignKeyConstraint(['broker_id'], ['brokers.id']),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id']),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_bookings_id'), 'bookings', ['id'], unique=False)
    op.create_index(op.f('ix_bookings_booking_no'), 'bookings', ['booking_no'], unique=True)
    op.create_index(op.f('ix_bookings_is_deleted'), 'bookings', ['is_deleted'], unique=False)

    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('receipt_no', sa.String(), nullable=False),
        sa.Column('receipt_date', sa.Date(), nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=False),
        sa.Column('payment_amount', sa.Numeric(15, 2), nullable=False),
        sa.Column('payment_mode', sa.Enum('CASH', 'CHEQUE', 'ONLINE_TRANSFER', 'UPI', 'CARD', 'EMI', name='paymentmode'), nullable=False),
        sa.Column('transaction_no', sa.String(), nullable=True),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('payment_type', sa.Enum('BOOKING', 'INSTALLMENT', 'FINAL', 'OTHER', name='paymenttype'), nullable=False),
        sa.Column('is_recurring', sa.Boolean(), nullable=False),
        sa.Column('installment_number', sa.Integer(), nullable=True),
        *_audit_columns(),
        *_soft_delete_columns(),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_payments_id'), 'payments', ['id'], unique=False)
    op.create_index(op.f('ix_payments_receipt_no'), 'payments', ['receipt_no'], unique=True)
    op.create_index(op.f('ix_payments_booking_id'), 'payments', ['booking_id'], unique=False)
    op.create_index(op.f('ix_payments_is_deleted'), 'payments', ['is_deleted'], unique=False)

    op.create_table(
        'broker_payments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('payment_no', sa.String(), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('broker_id', sa.Integer(), nullable=False),
        sa.Column('payment_amount', sa.Numeric(15, 2), nullable=False),
        sa.Column('payment_mode', sa.Enum('CASH', 'CHEQUE', 'ONLINE_TRANSFER', 'NEFT_RTGS', 'UPI', 'OTHER', name='brokerpaymentmode'), nullable=False),
        sa.Column('transaction_no', sa.String(), nullable=True),
        sa.Column('remarks', sa.Text(), nullable=True),
        *_audit_columns(),
        *_soft_delete_columns(),
        sa.ForeignKeyConstraint(['broker_id'], ['brokers.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_broker_payments_id'), 'broker_payments', ['id'], unique=False)
    op.create_index(op.f('ix_broker_payments_payment_no'), 'broker_payments', ['payment_no'], unique=True)
    op.create_index(op.f('ix_broker_payments_broker_id'), 'broker_payments', ['broker_id'], unique=False)
    op.create_index(op.f('ix_broker_payments_is_deleted'), 'broker_payments', ['is_deleted'], unique=False)


def downgrade() -> None:
    op.drop_table('broker_payments')
    op.drop_table('payments')
    op.drop_table('bookings')
    op.drop_table('brokers')
    op.drop_table('customers')
    op.drop_table('projects')
    op.drop_table('document_sequences')
    op.drop_table('audit_log')
    op.drop_table('users')
    for enum_name in ('brokerpaymentmode', 'paymenttype', 'paymentmode', 'loanstatus', 'bookingstatus', 'userrole'):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
