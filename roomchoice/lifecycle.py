"""Booking and survey lifecycles.

A booking holds its room out of ``available`` for as long as it exists:
creating one moves the room to ``pending`` and cancelling it moves the room
back. Both halves of each transition commit together or not at all.

Surveys are scheduling records only and never change room status.
"""
import datetime

from flask import current_app
from sqlalchemy.orm import contains_eager

from roomchoice import db
from roomchoice.database import atomic
from roomchoice.errors import Conflict, NotFound, ValidationError
from roomchoice.models import SURVEY_STATUSES, Booking, Room, Survey

# Largest value a signed 64-bit integer primary key can hold
MAX_ID = 2 ** 63 - 1


def parse_id(value, field):
    if isinstance(value, str) and value.isascii() and value.isdigit():
        value = int(value)
    # bool is an int subclass; JSON true must not mean room 1
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError(f'{field} must be an integer')
    if not 1 <= value <= MAX_ID:
        raise ValidationError(f'{field} is out of range')
    return value


def parse_date(value, field):
    try:
        if not isinstance(value, str) or len(value) != 10:
            raise ValueError(value)
        return datetime.date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f'{field} must be a date in YYYY-MM-DD format')


def parse_datetime(value, field):
    """Parse an ISO 8601 timestamp into naive UTC.

    Values without an offset are taken as already being UTC.
    """
    try:
        if not isinstance(value, str):
            raise ValueError(value)
        if value.endswith('Z'):
            value = value[:-1] + '+00:00'
        parsed = datetime.datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError(f'{field} must be an ISO 8601 date and time')

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    return parsed


### BOOKINGS ###

def create_booking(user, room_id, start_date, end_date):
    if start_date >= end_date:
        raise ValidationError('end_date must be after start_date')

    with atomic() as session:
        if db.session.get(Room, room_id) is None:
            raise NotFound('Room not found')

        # Compare-and-swap: only a room still 'available' may be claimed
        claimed = Room.query.filter_by(id=room_id, status='available').update(
            {'status': 'pending'}, synchronize_session='fetch'
        )
        if claimed == 0:
            current_app.logger.warning('User %s tried to book unavailable room %s', user.id, room_id)
            raise Conflict('Room is not available')

        booking = Booking(
            user_id=user.id,
            room_id=room_id,
            start_date=start_date,
            end_date=end_date,
            status='pending'
        )
        session.add(booking)

    current_app.logger.info('Booking %s created by user %s for room %s', booking.id, user.id, room_id)
    return booking


def list_bookings(user):
    return (
        Booking.query.filter_by(user_id=user.id)
        .join(Booking.room)
        .options(contains_eager(Booking.room))
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .all()
    )


def cancel_booking(user, booking_id):
    with atomic() as session:
        booking = Booking.query.filter_by(id=booking_id, user_id=user.id).first()
        if not booking:
            raise NotFound('Booking not found')
        room_id = booking.room_id

        Room.query.filter_by(id=room_id).update(
            {'status': 'available'}, synchronize_session='fetch'
        )
        session.delete(booking)

    current_app.logger.info('Booking %s cancelled by user %s, room %s available', booking_id, user.id, room_id)


### SURVEYS ###

def create_survey(user, room_id, schedule_time, notes=None):
    with atomic() as session:
        if db.session.get(Room, room_id) is None:
            raise NotFound('Room not found')

        survey = Survey(
            room_id=room_id,
            user_id=user.id,
            schedule_time=schedule_time,
            status='pending',
            notes=notes
        )
        session.add(survey)

    current_app.logger.info('Survey %s scheduled by user %s for room %s', survey.id, user.id, room_id)
    return survey


def list_surveys(user):
    query = Survey.query.join(Survey.room).options(contains_eager(Survey.room))
    if not user.is_admin:
        query = query.filter(Survey.user_id == user.id)
    return query.order_by(Survey.schedule_time.desc(), Survey.id.desc()).all()


def cancel_survey(user, survey_id):
    with atomic() as session:
        survey = Survey.query.filter_by(id=survey_id, user_id=user.id).first()
        if not survey:
            raise NotFound('Survey not found')
        session.delete(survey)

    current_app.logger.info('Survey %s cancelled by user %s', survey_id, user.id)


def update_survey_status(survey_id, status):
    if status not in SURVEY_STATUSES:
        raise ValidationError('Invalid status value')

    with atomic():
        survey = db.session.get(Survey, survey_id)
        if not survey:
            raise NotFound('Survey not found')
        survey.status = status

    current_app.logger.info('Survey %s marked %s', survey_id, status)
    return survey
