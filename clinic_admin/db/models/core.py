"""ORM models for clinics, staff, customers and the dental service catalog."""
from __future__ import annotations

import json
import uuid

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base, relationship

from clinic_admin.utils.dates import iso, utcnow

Base = declarative_base()


def new_id() -> str:
    return str(uuid.uuid4())


class TimestampMixin:
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def _timestamps(self) -> dict:
        return {"created_at": iso(self.created_at), "updated_at": iso(self.updated_at)}


class Clinic(TimestampMixin, Base):
    """A clinic branch. Customer codes derive their prefix from clinic_code."""

    __tablename__ = "clinics"

    id = Column(String(36), primary_key=True, default=new_id)
    clinic_code = Column(String(32), nullable=False, unique=True)
    name = Column(String(200), nullable=False, unique=True)
    short_name = Column(String(20), nullable=False, unique=True)
    address = Column(String(500), nullable=False)
    phone = Column(String(20), nullable=False)
    email = Column(String(255), nullable=False)
    color_code = Column(String(7), nullable=False)
    company_bank_name = Column(String(200), nullable=False)
    company_bank_account_no = Column(String(50), nullable=False)
    company_bank_account_name = Column(String(200), nullable=False)
    personal_bank_name = Column(String(200), nullable=False)
    personal_bank_account_no = Column(String(50), nullable=False)
    personal_bank_account_name = Column(String(200), nullable=False)
    archived_at = Column(DateTime, nullable=True)

    def as_dict(self) -> dict:
        data = {
            "id": self.id,
            "clinic_code": self.clinic_code,
            "name": self.name,
            "short_name": self.short_name,
            "address": self.address,
            "phone": self.phone,
            "email": self.email,
            "color_code": self.color_code,
            "company_bank_name": self.company_bank_name,
            "company_bank_account_no": self.company_bank_account_no,
            "company_bank_account_name": self.company_bank_account_name,
            "personal_bank_name": self.personal_bank_name,
            "personal_bank_account_no": self.personal_bank_account_no,
            "personal_bank_account_name": self.personal_bank_account_name,
            "archived_at": iso(self.archived_at),
        }
        data.update(self._timestamps())
        return data

    def __repr__(self) -> str:  # pragma: no cover
        return "<Clinic id={0} code={1}>".format(self.id, self.clinic_code)


class Employee(TimestampMixin, Base):
    """Clinic staff member; also the login identity of the admin panel."""

    __tablename__ = "employees"

    id = Column(String(36), primary_key=True, default=new_id)
    full_name = Column(String(200), nullable=False, index=True)
    email = Column(String(255), nullable=False, unique=True)
    phone = Column(String(20), nullable=False, unique=True)
    employee_code = Column(String(50), nullable=True, unique=True)
    role = Column(String(20), nullable=False, default="employee")
    status = Column(String(20), nullable=False, default="PENDING", index=True)
    clinic_id = Column(String(36), ForeignKey("clinics.id"), nullable=True, index=True)
    department = Column(String(120), nullable=True)
    job_title = Column(String(120), nullable=True)
    position = Column(String(120), nullable=True)
    dob = Column(Date, nullable=True)
    gender = Column(String(20), nullable=True)
    national_id = Column(String(12), nullable=True, unique=True)
    tax_id = Column(String(20), nullable=True, unique=True)
    insurance_number = Column(String(20), nullable=True, unique=True)
    bank_name = Column(String(200), nullable=True)
    bank_account_no = Column(String(50), nullable=True)
    current_address = Column(String(500), nullable=True)
    password_hash = Column(String(255), nullable=True)
    created_by_id = Column(String(36), nullable=True)
    updated_by_id = Column(String(36), nullable=True)

    def as_dict(self) -> dict:
        data = {
            "id": self.id,
            "full_name": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "employee_code": self.employee_code,
            "role": self.role,
            "status": self.status,
            "clinic_id": self.clinic_id,
            "department": self.department,
            "job_title": self.job_title,
            "position": self.position,
            "dob": iso(self.dob),
            "gender": self.gender,
            "national_id": self.national_id,
            "tax_id": self.tax_id,
            "insurance_number": self.insurance_number,
            "bank_name": self.bank_name,
            "bank_account_no": self.bank_account_no,
            "current_address": self.current_address,
            "has_password": bool(self.password_hash),
            "created_by_id": self.created_by_id,
            "updated_by_id": self.updated_by_id,
        }
        data.update(self._timestamps())
        return data

    def __repr__(self) -> str:  # pragma: no cover
        return "<Employee id={0} email={1} status={2}>".format(self.id, self.email, self.status)


class Customer(TimestampMixin, Base):
    """Patient or lead. Only CUSTOMER rows carry a customer_code."""

    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, default=new_id)
    customer_code = Column(String(32), nullable=True, unique=True)
    full_name = Column(String(200), nullable=False, index=True)
    type = Column(String(20), nullable=False, default="CUSTOMER", index=True)
    gender = Column(String(20), nullable=True)
    dob = Column(Date, nullable=True)
    phone = Column(String(20), nullable=True, unique=True)
    email = Column(String(255), nullable=True, unique=True)
    address = Column(String(500), nullable=True)
    city = Column(String(120), nullable=True)
    district = Column(String(120), nullable=True)
    primary_contact_role = Column(String(50), nullable=True)
    primary_contact_id = Column(String(36), ForeignKey("customers.id"), nullable=True)
    clinic_id = Column(String(36), ForeignKey("clinics.id"), nullable=True, index=True)
    first_visit_date = Column(DateTime, nullable=True, index=True)
    service_of_interest = Column(String(50), nullable=True)
    source = Column(String(50), nullable=True)
    source_notes = Column(Text, nullable=True)
    occupation = Column(String(120), nullable=True)
    created_by_id = Column(String(36), nullable=True)
    updated_by_id = Column(String(36), nullable=True)

    clinic = relationship(Clinic, lazy="joined")

    __table_args__ = (Index("ix_customers_clinic_type", "clinic_id", "type"),)

    def as_dict(self) -> dict:
        data = {
            "id": self.id,
            "customer_code": self.customer_code,
            "full_name": self.full_name,
            "type": self.type,
            "gender": self.gender,
            "dob": iso(self.dob),
            "phone": self.phone,
            "email": self.email,
            "address": self.address,
            "city": self.city,
            "district": self.district,
            "primary_contact_role": self.primary_contact_role,
            "primary_contact_id": self.primary_contact_id,
            "clinic_id": self.clinic_id,
            "clinic": (
                {"id": self.clinic.id, "clinic_code": self.clinic.clinic_code, "name": self.clinic.name}
                if self.clinic is not None
                else None
            ),
            "first_visit_date": iso(self.first_visit_date),
            "service_of_interest": self.service_of_interest,
            "source": self.source,
            "source_notes": self.source_notes,
            "occupation": self.occupation,
            "created_by_id": self.created_by_id,
            "updated_by_id": self.updated_by_id,
        }
        data.update(self._timestamps())
        return data

    def __repr__(self) -> str:  # pragma: no cover
        return "<Customer id={0} code={1}>".format(self.id, self.customer_code)


class DentalService(TimestampMixin, Base):
    """Treatment catalog entry. `tags` is stored as a JSON array string."""

    __tablename__ = "dental_services"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(200), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    service_group = Column(String(120), nullable=True)
    department = Column(String(120), nullable=True)
    tags_json = Column("tags", Text, nullable=True)
    unit = Column(String(50), nullable=False)
    price = Column(Integer, nullable=False, default=0)
    min_price = Column(Integer, nullable=True)
    official_warranty = Column(String(100), nullable=True)
    clinic_warranty = Column(String(100), nullable=True)
    origin = Column(String(200), nullable=True)
    avg_treatment_minutes = Column(Integer, nullable=True)
    avg_treatment_sessions = Column(Integer, nullable=True)
    requires_follow_up = Column(Boolean, nullable=False, default=False)
    payment_account_type = Column(String(20), nullable=False, default="COMPANY")
    archived_at = Column(DateTime, nullable=True)
    created_by_id = Column(String(36), nullable=True)
    updated_by_id = Column(String(36), nullable=True)

    @property
    def tags(self) -> list:
        if not self.tags_json:
            return []
        try:
            return list(json.loads(self.tags_json))
        except ValueError:
            return []

    @tags.setter
    def tags(self, values) -> None:
        self.tags_json = json.dumps(list(values or []))

    def as_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "service_group": self.service_group,
            "department": self.department,
            "tags": self.tags,
            "unit": self.unit,
            "price": self.price,
            "min_price": self.min_price,
            "official_warranty": self.official_warranty,
            "clinic_warranty": self.clinic_warranty,
            "origin": self.origin,
            "avg_treatment_minutes": self.avg_treatment_minutes,
            "avg_treatment_sessions": self.avg_treatment_sessions,
            "requires_follow_up": bool(self.requires_follow_up),
            "payment_account_type": self.payment_account_type,
            "archived_at": iso(self.archived_at),
            "created_by_id": self.created_by_id,
            "updated_by_id": self.updated_by_id,
        }
        data.update(self._timestamps())
        return data

    def __repr__(self) -> str:  # pragma: no cover
        return "<DentalService id={0} name={1}>".format(self.id, self.name)


__all__ = ["Base", "new_id", "Clinic", "Employee", "Customer", "DentalService"]
