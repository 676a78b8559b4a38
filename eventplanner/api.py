import json
import logging
from datetime import date

from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required
from pydantic import ValidationError

from eventplanner.errors import DecodeError, RemoteError
from eventplanner.materials import daily_summary, to_calendar_date
from eventplanner.schemas import EventPayload, decode_event, decode_events

logger = logging.getLogger(__name__)

api_bp = Blueprint('api', __name__, url_prefix='/api')


def _store():
    return current_app.extensions['eventplanner']['store']


def _owner():
    return current_app.extensions['eventplanner']['sessions'].get_current_user().username


def _parse_date(raw):
    try:
        return date.fromisoformat(raw) if raw else None
    except ValueError:
        return None


def _fetch(owner, **filters):
    rows = _store().query(owner, **filters)
    try:
        return decode_events(rows)
    except DecodeError as e:
        logger.warning('Discarding %d events for %s: %s', len(rows), owner, e)
        return []


@api_bp.route('/events', methods=['GET'])
@login_required
def get_events():
    raw_date = request.args.get('date')
    exact_date = _parse_date(raw_date)
    if raw_date and exact_date is None:
        return jsonify({"message": f"Invalid date: {raw_date}"}), 400
    try:
        events = _fetch(
            _owner(),
            name_prefix=request.args.get('q') or None,
            exact_date=exact_date,
            min_date=None if request.args.get('show_past') == '1' else date.today(),
        )
    except RemoteError as e:
        return jsonify({"message": f"Error fetching events: {e}"}), 502
    return jsonify([e.to_wire() for e in events]), 200


@api_bp.route('/events', methods=['POST'])
@login_required
def save_event():
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({"message": "Expected a JSON body"}), 400
    try:
        payload = EventPayload.model_validate(data)
    except ValidationError as e:
        return jsonify({
            "message": "Invalid event",
            "errors": json.loads(e.json(include_url=False)),
        }), 400

    event = {
        'name': payload.name,
        'address': payload.address,
        'date': to_calendar_date(payload.date),
        'eventType': payload.event_type,
        'material': [m.to_wire() for m in payload.material],
    }
    try:
        row = _store().insert(_owner(), event)
        record = decode_event(row)
    except RemoteError as e:
        return jsonify({"message": f"Error saving event: {e}"}), 502
    except DecodeError as e:
        return jsonify({"message": f"Saved event could not be read back: {e}"}), 502
    return jsonify(record.to_wire()), 201


@api_bp.route('/summary', methods=['GET'])
@login_required
def get_summary():
    day = _parse_date(request.args.get('date'))
    if day is None:
        return jsonify({"message": "A date (YYYY-MM-DD) is required"}), 400
    try:
        events = _fetch(_owner(), exact_date=day)
    except RemoteError as e:
        return jsonify({"message": f"Error fetching materials: {e}"}), 502
    materials, total = daily_summary([e.materials for e in events])
    return jsonify({"date": day.isoformat(), "materials": materials, "total": total}), 200
