"""Create business, record and tax calculation tables

Revision ID: 0001_initial_tax_schema
Revises:
Create Date: 2026-10-17

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial_tax_schema'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.text('CURRENT_TIMESTAMP')),
    ]


def upgrade():
    op.create_table('businesses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('owner_id', sa.String(length=64), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('registration_date', sa.Date(), nullable=True),
        sa.Column('tax_regime', sa.String(length=20), nullable=False, server_default='simplified'),
        sa.Column('vat_applicable', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('employee_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_businesses_id'), 'businesses', ['id'], unique=False)
    op.create_index(op.f('ix_businesses_owner_id'), 'businesses', ['owner_id'], unique=False)

    op.create_table('tax_rates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('regime', sa.String(length=20), nullable=False),
        sa.Column('rate_type', sa.String(length=20), nullable=False),
        sa.Column('rate_value', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('effective_from', sa.Date(), nullable=False),
        sa.Column('effective_to', sa.Date(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.CheckConstraint('rate_value >= 0 AND rate_value <= 100', name='ck_tax_rates_rate_value_percent'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_tax_rates_id'), 'tax_rates', ['id'], unique=False)
    op.create_index('ix_tax_rates_regime_active', 'tax_rates', ['regime', 'effective_to'], unique=False)

    op.create_table('revenues',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('business_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('period_start', sa.Date(), nullable=False),
        sa.Column('period_end', sa.Date(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('vat_included', sa.Boolean(), nullable=False, server_default='false'),
        *_timestamps(),
        sa.CheckConstraint('amount >= 0', name='ck_revenues_amount_non_negative'),
        sa.ForeignKeyConstraint(['business_id'], ['businesses.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_revenues_id'), 'revenues', ['id'], unique=False)
    op.create_index(op.f('ix_revenues_business_id'), 'revenues', ['business_id'], unique=False)

    op.create_table('expenses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('business_id', sa.Integer(), nullable=False),
        sa.Column('category', sa.String(length=20), nullable=False, server_default='other'),
        sa.Column('amount', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('expense_date', sa.Date(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('vat_deductible', sa.Boolean(), nullable=False, server_default='false'),
        *_timestamps(),
        sa.CheckConstraint('amount >= 0', name='ck_expenses_amount_non_negative'),
        sa.ForeignKeyConstraint(['business_id'], ['businesses.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_expenses_id'), 'expenses', ['id'], unique=False)
    op.create_index(op.f('ix_expenses_business_id'), 'expenses', ['business_id'], unique=False)
    op.create_index(op.f('ix_expenses_expense_date'), 'expenses', ['expense_date'], unique=False)

    op.create_table('payroll_entries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('business_id', sa.Integer(), nullable=False),
        sa.Column('employee_name', sa.String(length=255), nullable=False),
        sa.Column('gross_salary', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('period_month', sa.Integer(), nullable=False),
        sa.Column('period_year', sa.Integer(), nullable=False),
        sa.Column('social_contributions', sa.Numeric(precision=15, scale=2), nullable=True, server_default='0'),
        sa.Column('income_tax', sa.Numeric(precision=15, scale=2), nullable=True, server_default='0'),
        *_timestamps(),
        sa.CheckConstraint('period_month BETWEEN 1 AND 12', name='ck_payroll_entries_period_month'),
        sa.CheckConstraint('gross_salary >= 0', name='ck_payroll_entries_gross_non_negative'),
        sa.ForeignKeyConstraint(['business_id'], ['businesses.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_payroll_entries_id'), 'payroll_entries', ['id'], unique=False)
    op.create_index(op.f('ix_payroll_entries_business_id'), 'payroll_entries', ['business_id'], unique=False)
    op.create_index(op.f('ix_payroll_entries_period_year'), 'payroll_entries', ['period_year'], unique=False)

    op.create_table('tax_calculations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('business_id', sa.Integer(), nullable=False),
        sa.Column('period_start', sa.Date(), nullable=False),
        sa.Column('period_end', sa.Date(), nullable=False),
        sa.Column('total_revenue', sa.Numeric(precision=15, scale=2), nullable=False, server_default='0'),
        sa.Column('total_expenses', sa.Numeric(precision=15, scale=2), nullable=False, server_default='0'),
        sa.Column('taxable_income', sa.Numeric(precision=15, scale=2), nullable=False, server_default='0'),
        sa.Column('income_tax', sa.Numeric(precision=15, scale=2), nullable=False, server_default='0'),
        sa.Column('vat_payable', sa.Numeric(precision=15, scale=2), nullable=False, server_default='0'),
        sa.Column('social_contributions', sa.Numeric(precision=15, scale=2), nullable=False, server_default='0'),
        sa.Column('total_tax_liability', sa.Numeric(precision=15, scale=2), nullable=False, server_default='0'),
        sa.Column('status', sa.String(length=10), nullable=False, server_default='draft'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['business_id'], ['businesses.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_tax_calculations_id'), 'tax_calculations', ['id'], unique=False)
    op.create_index(op.f('ix_tax_calculations_business_id'), 'tax_calculations', ['business_id'], unique=False)


def downgrade():
    op.drop_index(op.f('ix_tax_calculations_business_id'), table_name='tax_calculations')
    op.drop_index(op.f('ix_tax_calculations_id'), table_name='tax_calculations')
    op.drop_table('tax_calculations')
    op.drop_index(op.f('ix_payroll_entries_period_year'), table_name='payroll_entries')
    op.drop_index(op.f('ix_payroll_entries_business_id'), table_name='payroll_entries')
    op.drop_index(op.f('ix_payroll_entries_id'), table_name='payroll_entries')
    op.drop_table('payroll_entries')
    op.drop_index(op.f('ix_expenses_expense_date'), table_name='expenses')
    op.drop_index(op.f('ix_expenses_business_id'), table_name='expenses')
    op.drop_index(op.f('ix_expenses_id'), table_name='expenses')
    op.drop_table('expenses')
    op.drop_index(op.f('ix_revenues_business_id'), table_name='revenues')
    op.drop_index(op.f('ix_revenues_id'), table_name='revenues')
    op.drop_table('revenues')
    op.drop_index('ix_tax_rates_regime_active', table_name='tax_rates')
    op.drop_index(op.f('ix_tax_rates_id'), table_name='tax_rates')
    op.drop_table('tax_rates')
    op.drop_index(op.f('ix_businesses_owner_id'), table_name='businesses')
    op.drop_index(op.f('ix_businesses_id'), table_name='businesses')
    op.drop_table('businesses')
