"""ORM models for dental lab ("labo") suppliers, items, price list and orders."""
from __future__ import annotations

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from clinic_admin.db.models.core import Base, Customer, Employee, TimestampMixin, new_id
from clinic_admin.utils.dates import iso


class Supplier(TimestampMixin, Base):
    __tablename__ = "suppliers"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(200), nullable=False, unique=True)
    short_name = Column(String(50), nullable=True)
    supplier_group = Column(String(120), nullable=True)
    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    address = Column(String(500), nullable=True)
    tax_code = Column(String(20), nullable=True)
    note = Column(Text, nullable=True)
    archived_at = Column(DateTime, nullable=True)
    created_by_id = Column(String(36), nullable=True)
    updated_by_id = Column(String(36), nullable=True)

    @property
    def display_name(self) -> str:
        return self.short_name or self.name

    def as_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "short_name": self.short_name,
            "supplier_group": self.supplier_group,
            "phone": self.phone,
            "email": self.email,
            "address": self.address,
            "tax_code": self.tax_code,
            "note": self.note,
            "archived_at": iso(self.archived_at),
        }
        data.update(self._timestamps())
        return data

    def __repr__(self) -> str:  # pragma: no cover
        return "<Supplier id={0} name={1}>".format(self.id, self.name)


class LaboItem(TimestampMixin, Base):
    __tablename__ = "labo_items"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(200), nullable=False, unique=True)
    description = Column(String(500), nullable=True)
    service_group = Column(String(120), nullable=True)
    unit = Column(String(50), nullable=True)
    archived_at = Column(DateTime, nullable=True)
    created_by_id = Column(String(36), nullable=True)
    updated_by_id = Column(String(36), nullable=True)

    def as_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "service_group": self.service_group,
            "unit": self.unit,
            "archived_at": iso(self.archived_at),
        }
        data.update(self._timestamps())
        return data

    def __repr__(self) -> str:  # pragma: no cover
        return "<LaboItem id={0} name={1}>".format(self.id, self.name)


class LaboService(TimestampMixin, Base):
    """Supplier price-list entry: one price per (supplier, labo item)."""

    __tablename__ = "labo_services"

    id = Column(String(36), primary_key=True, default=new_id)
    supplier_id = Column(String(36), ForeignKey("suppliers.id"), nullable=False, index=True)
    labo_item_id = Column(String(36), ForeignKey("labo_items.id"), nullable=False, index=True)
    price = Column(Integer, nullable=False)
    warranty = Column(String(100), nullable=True)
    created_by_id = Column(String(36), nullable=True)
    updated_by_id = Column(String(36), nullable=True)

    supplier = relationship(Supplier, lazy="joined")
    labo_item = relationship(LaboItem, lazy="joined")

    __table_args__ = (
        UniqueConstraint("supplier_id", "labo_item_id", name="uq_labo_service_supplier_item"),
    )

    def as_dict(self) -> dict:
        data = {
            "id": self.id,
            "supplier_id": self.supplier_id,
            "labo_item_id": self.labo_item_id,
            "price": self.price,
            "warranty": self.warranty,
            "supplier": (
                {"id": self.supplier.id, "name": self.supplier.name, "short_name": self.supplier.short_name}
                if self.supplier is not None
                else None
            ),
            "labo_item": (
                {
                    "id": self.labo_item.id,
                    "name": self.labo_item.name,
                    "service_group": self.labo_item.service_group,
                    "unit": self.labo_item.unit,
                }
                if self.labo_item is not None
                else None
            ),
        }
        data.update(self._timestamps())
        return data


class LaboOrder(TimestampMixin, Base):
    """Lab work order. Pricing is a snapshot of the price list at creation."""

    __tablename__ = "labo_orders"

    id = Column(String(36), primary_key=True, default=new_id)
    customer_id = Column(String(36), ForeignKey("customers.id"), nullable=False, index=True)
    doctor_id = Column(String(36), ForeignKey("employees.id"), nullable=False, index=True)
    clinic_id = Column(String(36), ForeignKey("clinics.id"), nullable=False, index=True)
    treatment_date = Column(Date, nullable=False)
    order_type = Column(String(30), nullable=False)
    supplier_id = Column(String(36), ForeignKey("suppliers.id"), nullable=False, index=True)
    labo_item_id = Column(String(36), ForeignKey("labo_items.id"), nullable=False, index=True)
    labo_service_id = Column(String(36), ForeignKey("labo_services.id"), nullable=True, index=True)
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Integer, nullable=False)
    total_cost = Column(Integer, nullable=False)
    warranty = Column(String(100), nullable=True)
    sent_by_id = Column(String(36), ForeignKey("employees.id"), nullable=False)
    sent_date = Column(DateTime, nullable=False, index=True)
    expected_fit_date = Column(Date, nullable=True)
    detail_requirement = Column(Text, nullable=True)
    return_date = Column(DateTime, nullable=True, index=True)
    received_by_id = Column(String(36), ForeignKey("employees.id"), nullable=True)
    created_by_id = Column(String(36), nullable=True)
    updated_by_id = Column(String(36), nullable=True)

    customer = relationship(Customer, lazy="joined")
    doctor = relationship(Employee, foreign_keys=[doctor_id], lazy="joined")
    sent_by = relationship(Employee, foreign_keys=[sent_by_id], lazy="joined")
    received_by = relationship(Employee, foreign_keys=[received_by_id], lazy="joined")
    supplier = relationship(Supplier, lazy="joined")
    labo_item = relationship(LaboItem, lazy="joined")
    labo_service = relationship(LaboService, lazy="joined")

    __table_args__ = (Index("ix_labo_orders_clinic_return", "clinic_id", "return_date"),)

    def as_dict(self) -> dict:
        def _person(emp):
            return {"id": emp.id, "full_name": emp.full_name} if emp is not None else None

        data = {
            "id": self.id,
            "customer_id": self.customer_id,
            "customer": (
                {
                    "id": self.customer.id,
                    "full_name": self.customer.full_name,
                    "customer_code": self.customer.customer_code,
                }
                if self.customer is not None
                else None
            ),
            "doctor_id": self.doctor_id,
            "doctor": _person(self.doctor),
            "clinic_id": self.clinic_id,
            "treatment_date": iso(self.treatment_date),
            "order_type": self.order_type,
            "supplier_id": self.supplier_id,
            "supplier": (
                {"id": self.supplier.id, "name": self.supplier.name, "short_name": self.supplier.short_name}
                if self.supplier is not None
                else None
            ),
            "labo_item_id": self.labo_item_id,
            "labo_item": (
                {"id": self.labo_item.id, "name": self.labo_item.name}
                if self.labo_item is not None
                else None
            ),
            "labo_service_id": self.labo_service_id,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "total_cost": self.total_cost,
            "warranty": self.warranty,
            "sent_by_id": self.sent_by_id,
            "sent_by": _person(self.sent_by),
            "sent_date": iso(self.sent_date),
            "expected_fit_date": iso(self.expected_fit_date),
            "detail_requirement": self.detail_requirement,
            "return_date": iso(self.return_date),
            "received_by_id": self.received_by_id,
            "received_by": _person(self.received_by),
            "created_by_id": self.created_by_id,
            "updated_by_id": self.updated_by_id,
        }
        data.update(self._timestamps())
        return data

    def __repr__(self) -> str:  # pragma: no cover
        return "<LaboOrder id={0} customer={1} total={2}>".format(
            self.id, self.customer_id, self.total_cost
        )


__all__ = ["Supplier", "LaboItem", "LaboService", "LaboOrder"]
