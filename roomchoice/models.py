# roomchoice/models.py
from roomchoice import db

ROOM_STATUSES = ('available', 'pending', 'booked')
BOOKING_STATUSES = ('pending', 'confirmed', 'cancelled')
SURVEY_STATUSES = ('pending', 'completed', 'cancelled')


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(50), unique=True, nullable=False)
    email = db.Column(db.String(100), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)  # bcrypt
    role = db.Column(db.Enum('user', 'admin', name='user_roles'), nullable=False, default='user')
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    @property
    def is_admin(self):
        return self.role == 'admin'

    def to_dict(self):
        return {
            'user_id': self.id,
            'username': self.username,
            'email': self.email,
            'role': self.role
        }


class Room(db.Model):
    __tablename__ = 'rooms'

    id = db.Column(db.Integer, primary_key=True)
    room_number = db.Column(db.String(10), unique=True, nullable=False)
    room_type = db.Column(db.String(50))
    price = db.Column(db.Numeric(10, 2), nullable=False)
    status = db.Column(db.Enum(*ROOM_STATUSES, name='room_status'), nullable=False, default='available')
    description = db.Column(db.Text)
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    layout = db.relationship('RoomLayout', back_populates='room', uselist=False, cascade='all, delete-orphan')
    surveys = db.relationship('Survey', back_populates='room', cascade='all, delete-orphan')
    bookings = db.relationship('Booking', back_populates='room')

    def to_dict(self):
        return {
            'id': self.id,
            'room_number': self.room_number,
            'room_type': self.room_type,
            'price': str(self.price),
            'status': self.status,
            'description': self.description,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'layout': self.layout.to_dict() if self.layout else None
        }


class RoomLayout(db.Model):
    __tablename__ = 'room_layouts'

    id = db.Column(db.Integer, primary_key=True)
    room_id = db.Column(db.Integer, db.ForeignKey('rooms.id'), unique=True, nullable=False)
    position_x = db.Column(db.Integer, nullable=False, default=0)
    position_y = db.Column(db.Integer, nullable=False, default=0)
    width = db.Column(db.Integer, nullable=False, default=1)
    height = db.Column(db.Integer, nullable=False, default=1)

    room = db.relationship('Room', back_populates='layout')

    def to_dict(self):
        return {
            'position_x': self.position_x,
            'position_y': self.position_y,
            'width': self.width,
            'height': self.height
        }


class Booking(db.Model):
    __tablename__ = 'bookings'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    room_id = db.Column(db.Integer, db.ForeignKey('rooms.id'), nullable=False)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    status = db.Column(db.Enum(*BOOKING_STATUSES, name='booking_status'), nullable=False, default='pending')
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    user = db.relationship('User', backref=db.backref('bookings', lazy=True))
    room = db.relationship('Room', back_populates='bookings')

    def to_dict(self):
        return {
            'booking_id': self.id,
            'user_id': self.user_id,
            'room_id': self.room_id,
            'room_number': self.room.room_number,
            'room_type': self.room.room_type,
            'price': str(self.room.price),
            'start_date': self.start_date.strftime('%Y-%m-%d'),
            'end_date': self.end_date.strftime('%Y-%m-%d'),
            'status': self.status,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }


class Survey(db.Model):
    __tablename__ = 'surveys'

    id = db.Column(db.Integer, primary_key=True)
    room_id = db.Column(db.Integer, db.ForeignKey('rooms.id'), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    schedule_time = db.Column(db.DateTime, nullable=False)
    status = db.Column(db.Enum(*SURVEY_STATUSES, name='survey_status'), nullable=False, default='pending')
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    user = db.relationship('User', backref=db.backref('surveys', lazy=True))
    room = db.relationship('Room', back_populates='surveys')

    def to_dict(self):
        return {
            'survey_id': self.id,
            'user_id': self.user_id,
            'room_id': self.room_id,
            'room_number': self.room.room_number,
            'room_type': self.room.room_type,
            'schedule_time': self.schedule_time.isoformat(),
            'status': self.status,
            'notes': self.notes
        }
