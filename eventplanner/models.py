from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

from eventplanner.database import db

EVENT_TYPES = ('Wedding', 'Birthday', 'Corporate', 'Others')


class Event(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    address = db.Column(db.String(255), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    event_type = db.Column(db.String(20), nullable=False, default='Others')
    # List of {"materialName", "quantity", "cost"} rows
    material = db.Column(db.JSON, nullable=False, default=list)
    username = db.Column(db.String(80), nullable=False, index=True)

    def to_dict(self):
        """Wire shape of the row, as handed to the schema layer."""
        return {
            'id': self.id,
            'name': self.name,
            'address': self.address,
            'date': self.date.isoformat() if self.date else None,
            'eventType': self.event_type,
            'material': self.material if self.material is not None else [],
            'username': self.username,
        }

    def __repr__(self):
        return f'<Event {self.name} on {self.date}>'


class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256))

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def __repr__(self):
        return f'<User {self.username}>'
