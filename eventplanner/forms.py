from flask_wtf import FlaskForm
from wtforms import (DateField, FieldList, FloatField, Form, FormField, IntegerField,
                     PasswordField, SelectField, StringField, SubmitField)
from wtforms.validators import DataRequired, Email, InputRequired, Length, NumberRange

from eventplanner.materials import event_total
from eventplanner.models import EVENT_TYPES


def strip(value):
    return value.strip() if isinstance(value, str) else value


class MaterialForm(Form):
    material_name = StringField('Name', filters=[strip], validators=[
        DataRequired(message='Name must be at least 2 characters'),
        Length(min=2, max=255, message='Name must be at least 2 characters')])
    quantity = IntegerField('Quantity', default=1, validators=[
        InputRequired(message='Quantity must be a number'),
        NumberRange(min=1, message='Quantity must be at least 1')])
    cost = FloatField('Cost', default=0, validators=[
        InputRequired(message='Cost must be a number'),
        NumberRange(min=0, message='Cost must be at least 0')])


class EventForm(FlaskForm):
    name = StringField('Name', filters=[strip], validators=[
        DataRequired(message='Name must be at least 2 characters'),
        Length(min=2, max=255, message='Name must be at least 2 characters')])
    address = StringField('Address', filters=[strip], validators=[
        DataRequired(message='Address must be at least 10 characters'),
        Length(min=10, max=255, message='Address must be at least 10 characters')])
    date = DateField('Date', validators=[DataRequired(message='Please pick a date.')])
    event_type = SelectField(
        'Event Type',
        choices=[('', 'Select an event type')] + [(t, t) for t in EVENT_TYPES],
        validators=[DataRequired(message='Please select an event type.')])
    material = FieldList(FormField(MaterialForm), min_entries=0)

    add_material = SubmitField('Add Material')
    remove_material = SubmitField('Remove Material')
    submit = SubmitField('Submit')

    @classmethod
    def from_record(cls, record, **kwargs):
        """Prefill the form from a decoded EventRecord."""
        data = {
            'name': record.name,
            'address': record.address,
            'date': record.date,
            'event_type': record.event_type,
            'material': [
                {'material_name': m.material_name, 'quantity': m.quantity, 'cost': m.cost}
                for m in record.material
            ],
        }
        return cls(data=data, **kwargs)

    def edit_rows(self):
        """Handle the add/remove material buttons.

        Returns True when one of them was pressed and the form should simply
        be shown again.
        """
        if self.add_material.data:
            self.material.append_entry()
            return True
        if self.remove_material.data:
            if self.material.entries:
                self.material.pop_entry()
            return True
        return False

    def material_rows(self):
        return [
            {
                'materialName': entry.material_name.data,
                'quantity': entry.quantity.data,
                'cost': entry.cost.data,
            }
            for entry in self.material.entries
        ]

    @property
    def total(self):
        return event_total(self.material_rows())

    def to_event(self):
        return {
            'name': self.name.data,
            'address': self.address.data,
            'date': self.date.data,
            'eventType': self.event_type.data,
            'material': self.material_rows(),
        }


class LoginForm(FlaskForm):
    email = StringField('Email', validators=[DataRequired(), Email()])
    password = PasswordField('Password', validators=[DataRequired()])
    submit = SubmitField('Login')


class RegisterForm(FlaskForm):
    username = StringField('Username', validators=[DataRequired(), Length(min=2, max=80)])
    email = StringField('Email', validators=[DataRequired(), Email()])
    password = PasswordField('Password', validators=[DataRequired(), Length(min=6)])
    submit = SubmitField('Register')
