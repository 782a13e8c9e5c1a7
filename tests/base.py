import unittest

from roomchoice import create_app, db
from roomchoice.auth import hash_password
from roomchoice.models import Room, User


class ApiTestCase(unittest.TestCase):
    def setUp(self):
        self.app = create_app('roomchoice.config.TestConfig')
        self.ctx = self.app.app_context()
        self.ctx.push()
        self.client = self.app.test_client()

        self.admin = self.create_user('admin', 'admin@example.com', role='admin')
        self.alice = self.create_user('alice', 'alice@example.com')
        self.bob = self.create_user('bob', 'bob@example.com')

        self.admin_token = self.login('admin@example.com')
        self.alice_token = self.login('alice@example.com')
        self.bob_token = self.login('bob@example.com')

    def tearDown(self):
        db.session.remove()
        db.drop_all()
        self.ctx.pop()

    def create_user(self, username, email, password='pass1234', role='user'):
        user = User(username=username, email=email, password_hash=hash_password(password), role=role)
        db.session.add(user)
        db.session.commit()
        return user

    def login(self, email, password='pass1234'):
        response = self.client.post('/api/auth/login', json={'email': email, 'password': password})
        self.assertEqual(response.status_code, 200, response.get_json())
        return response.get_json()['token']

    def headers(self, token):
        return {'Authorization': f'Bearer {token}'}

    def create_room(self, room_number, price=100, **extra):
        payload = {'room_number': room_number, 'price': price, **extra}
        response = self.client.post('/api/rooms', json=payload, headers=self.headers(self.admin_token))
        self.assertEqual(response.status_code, 201, response.get_json())
        return response.get_json()['roomId']

    def room_status(self, room_id):
        db.session.expire_all()
        return db.session.get(Room, room_id).status

    def rooms_by_number(self):
        response = self.client.get('/api/rooms')
        self.assertEqual(response.status_code, 200)
        return {room['room_number']: room for room in response.get_json()}
