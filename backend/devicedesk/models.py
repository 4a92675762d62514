"""SQLAlchemy models for the remote table store."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String, Text, func

from .database import Base


class Organization(Base):
    __tablename__ = "organizations"

    id = Column(String(36), primary_key=True)
    name = Column(String(200), nullable=False)
    address = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Organization id={self.id} name={self.name!r}>"


class Customer(Base):
    __tablename__ = "customers"

    id = Column(String(36), primary_key=True)
    full_name = Column(String(200), nullable=False)
    organization_id = Column(
        String(36), ForeignKey("organizations.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    phone = Column(String(32), nullable=False, default="")
    address = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)


class RepairTicket(Base):
    __tablename__ = "tickets"

    id = Column(String(36), primary_key=True)
    customer_id = Column(String(36), ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False, index=True)
    device_type = Column(String(32), nullable=False)
    serial_number = Column(String(64), nullable=True, index=True)
    device_condition = Column(Text, nullable=False, default="")
    receive_date = Column(Date, nullable=False)
    status = Column(String(32), nullable=False, default="Received")
    return_date = Column(Date, nullable=True)
    return_note = Column(Text, nullable=True)
    shipping_method = Column(String(64), nullable=True)
    tracking_number = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<RepairTicket id={self.id} status={self.status}>"


class WarrantyTicket(Base):
    __tablename__ = "warranties"

    id = Column(String(36), primary_key=True)
    organization_id = Column(
        String(36), ForeignKey("organizations.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    device_type = Column(String(32), nullable=False)
    serial_number = Column(String(64), nullable=True)
    description = Column(Text, nullable=False, default="")
    sent_date = Column(Date, nullable=False)
    status = Column(String(32), nullable=False, default="Sent")
    return_date = Column(Date, nullable=True)
    cost = Column(Numeric(12, 2), nullable=True)
    note = Column(Text, nullable=True)
    shipping_method = Column(String(64), nullable=True)
    tracking_number = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
