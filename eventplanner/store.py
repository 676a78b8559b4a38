import logging
import threading

from blinker import Namespace
from sqlalchemy.exc import SQLAlchemyError

from eventplanner.database import db
from eventplanner.errors import DecodeError, RemoteError
from eventplanner.materials import to_calendar_date
from eventplanner.models import Event
from eventplanner.schemas import decode_events

logger = logging.getLogger(__name__)

_signals = Namespace()

#: Sent after every committed insert, update or delete.
events_changed = _signals.signal('events-changed')

# Wire key -> column for the mutable fields
_FIELDS = {
    'name': 'name',
    'address': 'address',
    'date': 'date',
    'eventType': 'event_type',
    'material': 'material',
}


def _escape_like(value):
    return value.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


class EventStore:
    """Owner-scoped access to the event table.

    Reads return wire dicts (see ``Event.to_dict``); callers decode them with
    ``eventplanner.schemas.decode_events`` before trusting them.
    """

    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    def query(self, owner_username, name_prefix=None, exact_date=None, min_date=None):
        stmt = db.select(Event).where(Event.username == owner_username)
        if name_prefix:
            stmt = stmt.where(Event.name.ilike(_escape_like(name_prefix) + '%', escape='\\'))
        if exact_date is not None:
            stmt = stmt.where(Event.date == exact_date)
        if min_date is not None:
            stmt = stmt.where(Event.date >= min_date)
        stmt = stmt.order_by(Event.date, Event.id)
        try:
            rows = self.session.execute(stmt).scalars().all()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error('Event query for %s failed: %s', owner_username, e)
            raise RemoteError('Could not load events') from e
        return [row.to_dict() for row in rows]

    def get(self, event_id, owner_username):
        try:
            row = self._owned(event_id, owner_username)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error('Loading event %s failed: %s', event_id, e)
            raise RemoteError('Could not load event') from e
        return row.to_dict() if row is not None else None

    def insert(self, owner_username, event):
        row = Event(username=owner_username)
        self._assign(row, event)
        try:
            self.session.add(row)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error('Adding event %r failed: %s', event.get('name'), e)
            raise RemoteError('Error adding event') from e
        logger.info('Added event %s for %s', row.id, owner_username)
        self._notify('insert', row.id)
        return row.to_dict()

    def update(self, event_id, owner_username, changes):
        try:
            row = self._owned(event_id, owner_username)
            if row is None:
                return False
            self._assign(row, changes)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error('Updating event %s failed: %s', event_id, e)
            raise RemoteError('Error updating event') from e
        logger.info('Updated event %s', event_id)
        self._notify('update', event_id)
        return True

    def delete(self, event_id, owner_username):
        try:
            row = self._owned(event_id, owner_username)
            if row is None:
                return False
            self.session.delete(row)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error('Deleting event %s failed: %s', event_id, e)
            raise RemoteError('Error deleting event') from e
        logger.info('Deleted event %s', event_id)
        self._notify('delete', event_id)
        return True

    def subscribe_to_changes(self, callback):
        """Call ``callback(sender, **extra)`` after every committed change.

        Returns a function that removes the subscription.
        """
        events_changed.connect(callback, weak=False)

        def unsubscribe():
            events_changed.disconnect(callback)
        return unsubscribe

    def _owned(self, event_id, owner_username):
        row = self.session.get(Event, event_id)
        if row is None or row.username != owner_username:
            return None
        return row

    def _assign(self, row, data):
        for key, column in _FIELDS.items():
            if key not in data:
                continue
            value = data[key]
            if key == 'date':
                value = to_calendar_date(value)
            elif key == 'material':
                value = [dict(item) for item in value or []]
            setattr(row, column, value)

    def _notify(self, action, event_id):
        events_changed.send(self, action=action, event_id=event_id)


class LiveQuery:
    """The latest decoded result of one store query, kept fresh.

    Every change notification re-runs the query. A completed refresh replaces
    the held events wholesale, so whichever refresh finishes last wins.

    This is the change-feed consumer for long-lived clients (a worker or a
    push connection) that hold a query open. Page views answer one request
    each and simply query the store.
    """

    def __init__(self, store, owner_username, **filters):
        self.store = store
        self.owner_username = owner_username
        self.filters = filters
        self.error = None
        self._events = []
        self._lock = threading.Lock()
        self._unsubscribe = None

    @property
    def events(self):
        with self._lock:
            return list(self._events)

    def start(self):
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe_to_changes(self._on_change)
        return self.refresh()

    def stop(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def refresh(self):
        try:
            rows = self.store.query(self.owner_username, **self.filters)
        except RemoteError as e:
            # keep what we had
            self.error = e
            return self.events
        try:
            events = decode_events(rows)
        except DecodeError as e:
            logger.warning('Discarding %d events for %s: %s', len(rows), self.owner_username, e)
            self.error = e
            events = []
        else:
            self.error = None
        self._replace(events)
        return events

    def _replace(self, events):
        with self._lock:
            self._events = list(events)

    def _on_change(self, sender, **extra):
        logger.debug('Change received: %s', extra)
        self.refresh()
