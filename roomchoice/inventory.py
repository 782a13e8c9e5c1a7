from decimal import Decimal, InvalidOperation

from flask import current_app

from roomchoice import db
from roomchoice.database import atomic
from roomchoice.errors import Conflict, NotFound, ValidationError, require_fields
from roomchoice.models import ROOM_STATUSES, Booking, Room, RoomLayout

ROOM_FIELDS = ('room_number', 'room_type', 'price', 'status', 'description')
LAYOUT_FIELDS = ('position_x', 'position_y', 'width', 'height')


class RoomPatch:
    """Fields present in an update request, split into room and layout parts.

    Absent keys are not represented at all, so applying a patch leaves
    every other column as it was.
    """

    def __init__(self, room=None, layout=None):
        self.room = room or {}
        self.layout = layout or {}

    @classmethod
    def from_json(cls, data):
        room = {name: data[name] for name in ROOM_FIELDS if name in data}
        layout = {name: data[name] for name in LAYOUT_FIELDS if name in data}

        if 'price' in room:
            room['price'] = _parse_price(room['price'])
        if 'status' in room and room['status'] not in ROOM_STATUSES:
            raise ValidationError('Invalid status value')
        if 'room_number' in room and not room['room_number']:
            raise ValidationError('room_number cannot be empty')
        for name, value in layout.items():
            layout[name] = _parse_cell(name, value)

        return cls(room, layout)

    def __bool__(self):
        return bool(self.room or self.layout)


def _parse_price(value):
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError('price must be a number')
    if not price.is_finite():
        raise ValidationError('price must be a number')
    if price < 0:
        raise ValidationError('price cannot be negative')
    return price


def _parse_cell(name, value):
    grid_size = current_app.config['ROOM_GRID_SIZE']
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f'{name} must be an integer')
    try:
        cell = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f'{name} must be an integer')

    if name in ('width', 'height'):
        if not 1 <= cell <= grid_size:
            raise ValidationError(f'{name} must be between 1 and {grid_size}')
    elif not 0 <= cell < grid_size:
        raise ValidationError(f'{name} must be between 0 and {grid_size - 1}')
    return cell


def _get_room(room_id):
    room = db.session.get(Room, room_id)
    if not room:
        raise NotFound('Room not found')
    return room


def _ensure_unique_number(room_number, room_id=None):
    existing = Room.query.filter_by(room_number=room_number).first()
    if existing and existing.id != room_id:
        raise Conflict(f'Room {room_number} already exists')


def list_rooms():
    return Room.query.order_by(Room.room_number).all()


def create_room(data):
    require_fields(data, 'room_number', 'price')
    _ensure_unique_number(data['room_number'])

    # Layout is only placed when both coordinates are given
    layout = None
    if data.get('position_x') is not None and data.get('position_y') is not None:
        layout = RoomLayout(
            position_x=_parse_cell('position_x', data['position_x']),
            position_y=_parse_cell('position_y', data['position_y'])
        )

    with atomic() as session:
        room = Room(
            room_number=data['room_number'],
            room_type=data.get('room_type'),
            price=_parse_price(data['price']),
            status='available',
            description=data.get('description'),
            layout=layout
        )
        session.add(room)

    current_app.logger.info('Created room %s (%s)', room.id, room.room_number)
    return room


def update_room(room_id, patch):
    with atomic():
        room = _get_room(room_id)

        if 'room_number' in patch.room:
            _ensure_unique_number(patch.room['room_number'], room.id)
        for name, value in patch.room.items():
            setattr(room, name, value)

        if patch.layout:
            if room.layout is None:
                room.layout = RoomLayout(position_x=0, position_y=0)
            for name, value in patch.layout.items():
                setattr(room.layout, name, value)

    current_app.logger.info('Updated room %s: %s', room_id, sorted({**patch.room, **patch.layout}))
    return room


def delete_room(room_id):
    with atomic() as session:
        room = _get_room(room_id)
        if Booking.query.filter_by(room_id=room.id).first():
            raise Conflict('Room has bookings and cannot be deleted')
        session.delete(room)

    current_app.logger.info('Deleted room %s', room_id)
