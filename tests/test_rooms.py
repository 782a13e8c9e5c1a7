import datetime

from roomchoice import db
from roomchoice.models import Booking
from tests.base import ApiTestCase


class RoomInventoryTests(ApiTestCase):
    def test_new_room_is_available_without_layout(self):
        self.create_room('A101', price=100)

        room = self.rooms_by_number()['A101']
        self.assertEqual(room['status'], 'available')
        self.assertEqual(float(room['price']), 100)
        self.assertIsNone(room['layout'])

    def test_position_round_trips_through_room_list(self):
        self.create_room('A102', room_type='double', position_x=3, position_y=5)

        layout = self.rooms_by_number()['A102']['layout']
        self.assertEqual(layout['position_x'], 3)
        self.assertEqual(layout['position_y'], 5)
        self.assertEqual((layout['width'], layout['height']), (1, 1))

    def test_rooms_listed_by_room_number_without_auth(self):
        for number in ('C3', 'A1', 'B2'):
            self.create_room(number)

        response = self.client.get('/api/rooms')

        self.assertEqual([room['room_number'] for room in response.get_json()], ['A1', 'B2', 'C3'])

    def test_create_requires_number_and_price(self):
        response = self.client.post('/api/rooms', json={'room_type': 'single'}, headers=self.headers(self.admin_token))

        self.assertEqual(response.status_code, 400)
        self.assertIn('room_number', response.get_json()['message'])

    def test_duplicate_room_number_is_rejected(self):
        self.create_room('A101')

        response = self.client.post(
            '/api/rooms', json={'room_number': 'A101', 'price': 80}, headers=self.headers(self.admin_token)
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(len(self.rooms_by_number()), 1)


class RoomUpdateTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.room_id = self.create_room('A101', price=100, room_type='single', description='Quiet')

    def put(self, payload, room_id=None):
        return self.client.put(
            f'/api/rooms/{room_id or self.room_id}', json=payload, headers=self.headers(self.admin_token)
        )

    def test_update_only_touches_given_fields(self):
        response = self.put({'price': 0})

        self.assertEqual(response.status_code, 200)
        room = self.rooms_by_number()['A101']
        self.assertEqual(float(room['price']), 0)
        self.assertEqual(room['room_type'], 'single')
        self.assertEqual(room['description'], 'Quiet')
        self.assertEqual(room['status'], 'available')
        self.assertIsNone(room['layout'])

    def test_layout_is_created_on_first_position(self):
        self.put({'position_x': 7})

        layout = self.rooms_by_number()['A101']['layout']
        self.assertEqual((layout['position_x'], layout['position_y']), (7, 0))

    def test_existing_layout_is_updated_in_place(self):
        self.put({'position_x': 2, 'position_y': 4})
        self.put({'position_y': 9, 'width': 3})

        layout = self.rooms_by_number()['A101']['layout']
        self.assertEqual(layout, {'position_x': 2, 'position_y': 9, 'width': 3, 'height': 1})

    def test_status_must_be_known(self):
        response = self.put({'status': 'occupied'})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.room_status(self.room_id), 'available')

    def test_admin_can_set_status(self):
        self.put({'status': 'booked'})

        self.assertEqual(self.room_status(self.room_id), 'booked')

    def test_position_outside_grid_is_rejected(self):
        response = self.put({'position_x': 20, 'price': 500})

        self.assertEqual(response.status_code, 400)
        room = self.rooms_by_number()['A101']
        self.assertIsNone(room['layout'])
        self.assertEqual(float(room['price']), 100)

    def test_renaming_onto_existing_number_rolls_back(self):
        self.create_room('A102')

        response = self.put({'room_number': 'A102', 'price': 300})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(float(self.rooms_by_number()['A101']['price']), 100)

    def test_boolean_or_fractional_position_is_rejected(self):
        for value in (True, 2.5):
            response = self.put({'position_x': value})

            self.assertEqual(response.status_code, 400)
        self.assertIsNone(self.rooms_by_number()['A101']['layout'])

    def test_oversized_path_id_is_not_found(self):
        response = self.put({'price': 10}, room_id=10 ** 20)

        self.assertEqual(response.status_code, 404)

    def test_update_missing_room(self):
        response = self.put({'price': 10}, room_id=999)

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json(), {'message': 'Room not found'})


class RoomDeleteTests(ApiTestCase):
    def test_delete_room_with_layout(self):
        room_id = self.create_room('A101', position_x=1, position_y=1)

        response = self.client.delete(f'/api/rooms/{room_id}', headers=self.headers(self.admin_token))

        self.assertEqual(response.status_code, 200)
        self.assertNotIn('A101', self.rooms_by_number())

    def test_delete_missing_room(self):
        response = self.client.delete('/api/rooms/999', headers=self.headers(self.admin_token))

        self.assertEqual(response.status_code, 404)

    def test_room_with_bookings_is_kept(self):
        room_id = self.create_room('A101')
        db.session.add(Booking(
            user_id=self.alice.id,
            room_id=room_id,
            start_date=datetime.date(2024, 6, 1),
            end_date=datetime.date(2024, 6, 3),
        ))
        db.session.commit()

        response = self.client.delete(f'/api/rooms/{room_id}', headers=self.headers(self.admin_token))

        self.assertEqual(response.status_code, 400)
        self.assertIn('A101', self.rooms_by_number())


class CrossOriginTests(ApiTestCase):
    def test_client_origin_is_allowed(self):
        response = self.client.get('/api/rooms', headers={'Origin': 'http://localhost:3000'})

        self.assertEqual(response.headers.get('Access-Control-Allow-Origin'), 'http://localhost:3000')

    def test_preflight_allows_authorization_header(self):
        response = self.client.options('/api/bookings', headers={
            'Origin': 'http://localhost:5173',
            'Access-Control-Request-Method': 'POST',
            'Access-Control-Request-Headers': 'Authorization, Content-Type',
        })

        self.assertEqual(response.headers.get('Access-Control-Allow-Origin'), 'http://localhost:5173')
        self.assertIn('authorization', response.headers.get('Access-Control-Allow-Headers', '').lower())

    def test_unknown_origin_gets_no_cors_header(self):
        response = self.client.get('/api/rooms', headers={'Origin': 'http://evil.example'})

        self.assertIsNone(response.headers.get('Access-Control-Allow-Origin'))
