from flask import Blueprint, jsonify, request
from flask_jwt_extended import current_user, jwt_required
from werkzeug.routing import IntegerConverter

from roomchoice import inventory, lifecycle
from roomchoice.auth import admin_required, authenticate, issue_token, register_user
from roomchoice.errors import ValidationError, require_fields
from roomchoice.lifecycle import MAX_ID

api = Blueprint('api', __name__)


class IdConverter(IntegerConverter):
    """Positive integer path segment that fits a 64-bit primary key column."""

    def __init__(self, map):
        super().__init__(map, min=1, max=MAX_ID)


def get_json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


### RUTAS DE AUTENTICACION ###

@api.route('/auth/register', methods=['POST'])
def register():
    user = register_user(get_json_body())
    return jsonify({'token': issue_token(user), 'user': user.to_dict()}), 201

@api.route('/auth/login', methods=['POST'])
def login():
    data = get_json_body()
    require_fields(data, 'email', 'password')

    user = authenticate(data['email'], data['password'])
    return jsonify({'token': issue_token(user), 'user': user.to_dict()}), 200

@api.route('/auth/verify', methods=['GET'])
@jwt_required()
def verify():
    return jsonify(current_user.to_dict()), 200


### RUTAS DE HABITACIONES ###

@api.route('/rooms', methods=['GET'])
def get_rooms():
    return jsonify([room.to_dict() for room in inventory.list_rooms()]), 200

@api.route('/rooms', methods=['POST'])
@admin_required
def create_room():
    room = inventory.create_room(get_json_body())
    return jsonify({'message': 'Room created successfully', 'roomId': room.id}), 201

@api.route('/rooms/<id:room_id>', methods=['PUT'])
@admin_required
def update_room(room_id):
    patch = inventory.RoomPatch.from_json(get_json_body())
    inventory.update_room(room_id, patch)
    return jsonify({'message': 'Room updated successfully'}), 200

@api.route('/rooms/<id:room_id>', methods=['DELETE'])
@admin_required
def delete_room(room_id):
    inventory.delete_room(room_id)
    return jsonify({'message': 'Room deleted successfully'}), 200


### RUTAS DE RESERVAS ###

@api.route('/bookings', methods=['GET'])
@jwt_required()
def get_bookings():
    bookings = lifecycle.list_bookings(current_user)
    return jsonify([booking.to_dict() for booking in bookings]), 200

@api.route('/bookings', methods=['POST'])
@jwt_required()
def create_booking():
    data = get_json_body()
    require_fields(data, 'room_id', 'start_date', 'end_date')

    booking = lifecycle.create_booking(
        current_user,
        lifecycle.parse_id(data['room_id'], 'room_id'),
        lifecycle.parse_date(data['start_date'], 'start_date'),
        lifecycle.parse_date(data['end_date'], 'end_date')
    )
    return jsonify(booking.to_dict()), 201

@api.route('/bookings/<id:booking_id>', methods=['DELETE'])
@jwt_required()
def cancel_booking(booking_id):
    lifecycle.cancel_booking(current_user, booking_id)
    return jsonify({'message': 'Booking cancelled successfully'}), 200


### RUTAS DE INSPECCIONES ###

@api.route('/surveys', methods=['GET'])
@jwt_required()
def get_surveys():
    surveys = lifecycle.list_surveys(current_user)
    return jsonify([survey.to_dict() for survey in surveys]), 200

@api.route('/surveys', methods=['POST'])
@jwt_required()
def create_survey():
    data = get_json_body()
    require_fields(data, 'room_id', 'schedule_time')

    survey = lifecycle.create_survey(
        current_user,
        lifecycle.parse_id(data['room_id'], 'room_id'),
        lifecycle.parse_datetime(data['schedule_time'], 'schedule_time'),
        data.get('notes')
    )
    return jsonify(survey.to_dict()), 201

@api.route('/surveys/<id:survey_id>', methods=['DELETE'])
@jwt_required()
def cancel_survey(survey_id):
    lifecycle.cancel_survey(current_user, survey_id)
    return jsonify({'message': 'Survey cancelled successfully'}), 200

@api.route('/surveys/<id:survey_id>/status', methods=['PATCH'])
@admin_required
def update_survey_status(survey_id):
    data = get_json_body()
    require_fields(data, 'status')

    survey = lifecycle.update_survey_status(survey_id, data['status'])
    return jsonify(survey.to_dict()), 200
