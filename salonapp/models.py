import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_public_id():
    """Generate a unique public ID for secure public access"""
    return str(uuid.uuid4())


class User(Base):
    """Salon operator profile. Owns every other record."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    auth_uid = Column(String(255), unique=True, index=True, nullable=False)
    # Opaque identifier embedded in the public booking link
    public_id = Column(
        String(36), unique=True, nullable=False, index=True, default=generate_public_id
    )
    email = Column(String(255), unique=True, index=True, nullable=False)
    display_name = Column(String(255), nullable=True)
    salon_name = Column(String(255), nullable=True)
    whatsapp = Column(String(50), nullable=True)
    address = Column(String(500), nullable=True)
    logo_url = Column(String(500), nullable=True)
    is_admin = Column(Boolean, default=False, nullable=False)

    # Subscription: trial, active, past_due, cancelled
    subscription_status = Column(String(50), default="trial", nullable=False)
    trial_ends_at = Column(DateTime, nullable=True)
    last_payment_date = Column(DateTime, nullable=True)

    # Business settings: hours, rules, onlineBooking, notifications
    settings = Column(JSON, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    clients = relationship("Client", back_populates="user")
    professionals = relationship("Professional", back_populates="user")
    services = relationship("Service", back_populates="user")


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True, index=True)
    email = Column(String(255), nullable=True)
    address = Column(String(500), nullable=True)
    birth_date = Column(Date, nullable=True)
    notes = Column(String(1000), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="clients")
    appointments = relationship("Appointment", back_populates="client")


class Professional(Base):
    __tablename__ = "professionals"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    specialties = Column(JSON, default=list, nullable=True)  # e.g. ["Corte", "Coloração"]
    commission_rate = Column(Numeric(5, 2), nullable=True)  # percentage 0-100
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="professionals")
    appointments = relationship("Appointment", back_populates="professional")


class Service(Base):
    """A service offered by the salon (haircut, manicure...)"""

    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    duration = Column(Integer, nullable=False, default=30)  # minutes
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="services")
    appointments = relationship("Appointment", back_populates="service")


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False)
    professional_id = Column(Integer, ForeignKey("professionals.id"), nullable=False)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)
    # Start instant; the end is implied by the service duration
    date = Column(DateTime, nullable=False, index=True)
    # Status workflow: pending → confirmed → completed, or → cancelled
    status = Column(String(20), default="pending", nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    client = relationship("Client", back_populates="appointments")
    professional = relationship("Professional", back_populates="appointments")
    service = relationship("Service", back_populates="appointments")
    transactions = relationship("FinancialTransaction", back_populates="appointment")


class FinancialTransaction(Base):
    __tablename__ = "financial_transactions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id"), nullable=True, index=True)
    # Set on the remainder ("fiado") record created by a partial payment
    parent_transaction_id = Column(
        Integer, ForeignKey("financial_transactions.id"), nullable=True, index=True
    )
    description = Column(String(500), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    type = Column(String(20), nullable=False)  # income, expense
    status = Column(String(20), default="pending", nullable=False)  # pending, paid, cancelled
    # Accounting date: appointment day for income, due/paid day for expenses
    date = Column(Date, nullable=False, index=True)
    category = Column(String(50), nullable=True)
    paid_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    appointment = relationship("Appointment", back_populates="transactions")


class NotificationLog(Base):
    """Track WhatsApp messages composed for clients"""

    __tablename__ = "notification_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    appointment_id = Column(Integer, ForeignKey("appointments.id"), nullable=True)

    to_phone = Column(String(50), nullable=False)
    message_type = Column(String(50), nullable=False)  # confirmation, cancellation, reminder
    message_body = Column(Text, nullable=False)
    link = Column(Text, nullable=True)
    status = Column(String(50), nullable=False)  # composed, failed
    error_message = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
