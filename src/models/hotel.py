"""Hotel resource tables.

Column names match the JSON field names the frontend sends, so the wire
format and the table layout stay one and the same.
"""

from typing import Optional

from sqlalchemy import Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseRecordModel


class User(BaseRecordModel):
    """Back-office account."""

    __tablename__ = "users"

    username: Mapped[Optional[str]] = mapped_column(String)
    password: Mapped[Optional[str]] = mapped_column(String)
    name: Mapped[Optional[str]] = mapped_column(String)
    role: Mapped[Optional[str]] = mapped_column(String)

    def __repr__(self) -> str:
        return f"<User(id='{self.id}', username='{self.username}')>"


class Room(BaseRecordModel):
    """Bookable room; ``amenities`` is a comma-separated list."""

    __tablename__ = "rooms"

    name: Mapped[Optional[str]] = mapped_column(String)
    price: Mapped[Optional[int]] = mapped_column(Integer)
    status: Mapped[Optional[str]] = mapped_column(String)
    image: Mapped[Optional[str]] = mapped_column(Text)
    amenities: Mapped[Optional[str]] = mapped_column(Text)

    def __repr__(self) -> str:
        return f"<Room(id='{self.id}', status='{self.status}')>"


class Booking(BaseRecordModel):
    """Guest booking. ``slip`` may hold a base64 payment slip image."""

    __tablename__ = "bookings"

    room_id: Mapped[Optional[str]] = mapped_column("roomId", String)
    room_name: Mapped[Optional[str]] = mapped_column("roomName", String)
    checkin: Mapped[Optional[str]] = mapped_column(String)
    checkout: Mapped[Optional[str]] = mapped_column(String)
    guest: Mapped[Optional[str]] = mapped_column(String)
    phone: Mapped[Optional[str]] = mapped_column(String)
    total: Mapped[Optional[float]] = mapped_column(Float)
    status: Mapped[Optional[str]] = mapped_column(String)
    slip: Mapped[Optional[str]] = mapped_column(Text)
    created: Mapped[Optional[str]] = mapped_column(String)

    def __repr__(self) -> str:
        return f"<Booking(id='{self.id}', status='{self.status}')>"


class Payment(BaseRecordModel):
    __tablename__ = "payments"

    booking_id: Mapped[Optional[str]] = mapped_column("bookingId", String)
    amount: Mapped[Optional[float]] = mapped_column(Float)
    date: Mapped[Optional[str]] = mapped_column(String)
    method: Mapped[Optional[str]] = mapped_column(String)


class Notification(BaseRecordModel):
    """Staff notification; ``read`` is a 0/1 flag."""

    __tablename__ = "notifications"

    msg: Mapped[Optional[str]] = mapped_column(Text)
    date: Mapped[Optional[str]] = mapped_column(String)
    read: Mapped[Optional[int]] = mapped_column(Integer)


__all__ = ["User", "Room", "Booking", "Payment", "Notification"]
