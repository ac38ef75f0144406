from typing import Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from hotel_booking.models.room_types import RoomType
from hotel_booking.models.rooms import Room
from hotel_booking.schemas.reservations import RoomSnapshot


def get_room_with_type(
    conn: Connection, room_id: int, for_update: bool = False
) -> Optional[RoomSnapshot]:
    """
    Fetch a room joined with its room type.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        room_id (int): Room ID to look up.
        for_update (bool): Lock the room row until the transaction ends.
            Writers take this lock so that availability check and write are
            serialized per room across processes.

    Returns:
        Optional[RoomSnapshot]: Room with capacity and nightly price, or None if not found.
    """
    stmt = (
        select(
            Room.id.label("room_id"),
            Room.hotel_id,
            Room.room_type_id,
            RoomType.capacity,
            RoomType.base_price,
        )
        .join(RoomType, RoomType.id == Room.room_type_id)
        .where(Room.id == room_id)
    )
    if for_update:
        stmt = stmt.with_for_update(of=Room)

    row = conn.execute(stmt).mappings().fetchone()
    return RoomSnapshot(**row) if row else None
