"""
Tax domain models.

Models for:
- Business profiles and their tax regime
- Tax rate table per regime (superseded, never deleted)
- Revenue, expense and payroll records feeding the calculation
- Stored tax calculations (draft / final)
"""
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from bytax.db.base_class import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaxRegime(str, Enum):
    """Belarus tax frameworks supported for LLCs"""
    SIMPLIFIED = "simplified"   # Simplified taxation system (USN)
    GENERAL = "general"         # General taxation system (OSN)


class RateType(str, Enum):
    INCOME_TAX = "income_tax"
    VAT = "vat"
    SOCIAL = "social"           # FSZN contributions on payroll
    PAYROLL = "payroll"


class BusinessStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class CalculationStatus(str, Enum):
    DRAFT = "draft"
    FINAL = "final"


class ExpenseCategory(str, Enum):
    RENT = "rent"
    UTILITIES = "utilities"
    SUPPLIES = "supplies"
    MARKETING = "marketing"
    SALARIES = "salaries"
    OTHER = "other"


class Business(Base):
    """LLC profile. Owned by a user; the tax engine only reads it."""
    __tablename__ = "businesses"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(String(64), nullable=True, index=True)
    name = Column(String(255), nullable=False)
    registration_date = Column(Date, nullable=True)
    tax_regime = Column(String(20), nullable=False, default=TaxRegime.SIMPLIFIED.value)
    vat_applicable = Column(Boolean, nullable=False, default=False)
    employee_count = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default=BusinessStatus.ACTIVE.value)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    revenues = relationship("Revenue", back_populates="business", cascade="all, delete-orphan")
    expenses = relationship("Expense", back_populates="business", cascade="all, delete-orphan")
    payroll_entries = relationship("PayrollEntry", back_populates="business", cascade="all, delete-orphan")
    tax_calculations = relationship("TaxCalculation", back_populates="business")


class TaxRate(Base):
    """
    Tax rate for one (regime, rate_type).

    rate_value is a percentage (0-100). A row with effective_to NULL is the
    currently active one; administrators supersede a rate by closing it and
    inserting a new row.
    """
    __tablename__ = "tax_rates"
    __table_args__ = (
        Index("ix_tax_rates_regime_active", "regime", "effective_to"),
        CheckConstraint("rate_value >= 0 AND rate_value <= 100", name="ck_tax_rates_rate_value_percent"),
    )

    id = Column(Integer, primary_key=True, index=True)
    regime = Column(String(20), nullable=False)
    rate_type = Column(String(20), nullable=False)
    rate_value = Column(Numeric(5, 2), nullable=False)
    effective_from = Column(Date, nullable=False)
    effective_to = Column(Date, nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class Revenue(Base):
    """Income booked for an explicit sub-period."""
    __tablename__ = "revenues"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    amount = Column(Numeric(15, 2), nullable=False)
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)
    description = Column(Text, nullable=True)
    vat_included = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    business = relationship("Business", back_populates="revenues")


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    category = Column(String(20), nullable=False, default=ExpenseCategory.OTHER.value)
    amount = Column(Numeric(15, 2), nullable=False)
    expense_date = Column(Date, nullable=False, index=True)
    description = Column(Text, nullable=True)
    vat_deductible = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    business = relationship("Business", back_populates="expenses")


class PayrollEntry(Base):
    """One employee's pay for one calendar month."""
    __tablename__ = "payroll_entries"
    __table_args__ = (
        CheckConstraint("period_month BETWEEN 1 AND 12", name="ck_payroll_entries_period_month"),
    )

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    employee_name = Column(String(255), nullable=False)
    gross_salary = Column(Numeric(15, 2), nullable=False)
    period_month = Column(Integer, nullable=False)  # 1-12
    period_year = Column(Integer, nullable=False, index=True)
    # Withholdings as entered on the payroll screen; reported, never recomputed
    social_contributions = Column(Numeric(15, 2), nullable=True, default=0)
    income_tax = Column(Numeric(15, 2), nullable=True, default=0)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    business = relationship("Business", back_populates="payroll_entries")


class TaxCalculation(Base):
    """
    Persisted tax liability for a business and period.

    Rows are only ever inserted; the single allowed mutation is the status
    transition draft -> final.
    """
    __tablename__ = "tax_calculations"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)
    total_revenue = Column(Numeric(15, 2), nullable=False, default=0)
    total_expenses = Column(Numeric(15, 2), nullable=False, default=0)
    taxable_income = Column(Numeric(15, 2), nullable=False, default=0)
    income_tax = Column(Numeric(15, 2), nullable=False, default=0)
    vat_payable = Column(Numeric(15, 2), nullable=False, default=0)
    social_contributions = Column(Numeric(15, 2), nullable=False, default=0)
    total_tax_liability = Column(Numeric(15, 2), nullable=False, default=0)
    status = Column(String(10), nullable=False, default=CalculationStatus.DRAFT.value)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    business = relationship("Business", back_populates="tax_calculations")
