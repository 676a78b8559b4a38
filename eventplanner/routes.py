import logging
from datetime import date
from io import BytesIO

from flask import (Blueprint, abort, current_app, flash, redirect, render_template, request,
                   send_file, url_for)
from flask_login import login_required

from eventplanner.errors import DecodeError, RemoteError
from eventplanner.forms import EventForm, LoginForm, RegisterForm
from eventplanner.materials import daily_summary
from eventplanner.reports import build_summary_pdf
from eventplanner.schemas import decode_event, decode_events

logger = logging.getLogger(__name__)

main = Blueprint('main', __name__)


def _store():
    return current_app.extensions['eventplanner']['store']


def _sessions():
    return current_app.extensions['eventplanner']['sessions']


def _owner():
    return _sessions().get_current_user().username


def parse_date(raw):
    if not raw:
        return None
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        return None


def load_events(owner, **filters):
    """Query and decode, falling back to an empty list on any failure."""
    try:
        rows = _store().query(owner, **filters)
    except RemoteError as e:
        flash(str(e), 'danger')
        return []
    try:
        return decode_events(rows)
    except DecodeError as e:
        logger.warning('Discarding %d events for %s: %s', len(rows), owner, e)
        flash('Some events could not be read, so none are shown.', 'warning')
        return []


def load_event(event_id):
    try:
        row = _store().get(event_id, _owner())
        record = decode_event(row)
    except RemoteError as e:
        flash(str(e), 'danger')
        return None
    except DecodeError as e:
        logger.warning('Discarding event %s: %s', event_id, e)
        flash('This event could not be read.', 'warning')
        return None
    if record is None:
        abort(404)
    return record


# --- Routes ---
@main.route('/')
@login_required
def index():
    q = request.args.get('q', '').strip()
    date_raw = request.args.get('date', '').strip()
    show_past = request.args.get('show_past') == '1'

    exact_date = parse_date(date_raw)
    if date_raw and exact_date is None:
        flash('Invalid date', 'danger')

    events = load_events(
        _owner(),
        name_prefix=q or None,
        exact_date=exact_date,
        min_date=None if show_past else date.today(),
    )
    return render_template('index.html', events=events, q=q, date=exact_date,
                           show_past=show_past)


@main.route('/event/<int:event_id>')
@login_required
def event_detail(event_id):
    e = load_event(event_id)
    if e is None:
        return redirect(url_for('main.index'))
    return render_template('event.html', event=e)


@main.route('/event/<int:event_id>/delete', methods=['POST'])
@login_required
def delete_event(event_id):
    try:
        deleted = _store().delete(event_id, _owner())
    except RemoteError as e:
        flash(f'Error deleting event: {e}', 'danger')
        return redirect(url_for('main.event_detail', event_id=event_id))
    if not deleted:
        abort(404)
    flash('Successfully deleted event', 'success')
    return redirect(url_for('main.index'))


@main.route('/create', methods=['GET', 'POST'])
@login_required
def create_event():
    form = EventForm()
    if request.method == 'GET':
        form.material.append_entry()
    elif not form.edit_rows() and form.validate_on_submit():
        try:
            _store().insert(_owner(), form.to_event())
        except RemoteError as e:
            flash(str(e), 'danger')
        else:
            flash(f'Successfully added event: {form.name.data} has been saved', 'success')
            return redirect(url_for('main.index'))
    return render_template('event_form.html', form=form, title='Event Details',
                           action=url_for('main.create_event'))


@main.route('/edit/<int:event_id>', methods=['GET', 'POST'])
@login_required
def edit_event(event_id):
    e = load_event(event_id)
    if e is None:
        return redirect(url_for('main.index'))

    if request.method == 'GET':
        form = EventForm.from_record(e)
    else:
        form = EventForm()
        if not form.edit_rows() and form.validate_on_submit():
            try:
                updated = _store().update(event_id, _owner(), form.to_event())
            except RemoteError:
                flash('Update Failed: something went wrong when updating the event.', 'danger')
            else:
                if not updated:
                    abort(404)
                flash(f'Event Updated: {form.name.data} has been saved', 'success')
                return redirect(url_for('main.event_detail', event_id=event_id))

    return render_template('event_form.html', form=form, title=f'Edit {e.name}',
                           action=url_for('main.edit_event', event_id=event_id), event=e)


@main.route('/summary')
@login_required
def summary():
    day = parse_date(request.args.get('date', ''))
    materials, total = [], 0
    if day is not None:
        events = load_events(_owner(), exact_date=day)
        materials, total = daily_summary([e.materials for e in events])
    return render_template('summary.html', date=day, materials=materials, total=total)


@main.route('/summary.pdf')
@login_required
def summary_pdf():
    day = parse_date(request.args.get('date', ''))
    if day is None:
        flash('Pick a date first.', 'warning')
        return redirect(url_for('main.summary'))
    owner = _owner()
    events = load_events(owner, exact_date=day)
    materials, total = daily_summary([e.materials for e in events])
    pdf = build_summary_pdf(day, materials, total,
                            currency=current_app.config.get('CURRENCY_CODE', 'PHP'),
                            username=owner)
    return send_file(
        BytesIO(pdf),
        as_attachment=True,
        download_name=f'materials_{day.isoformat()}.pdf',
        mimetype='application/pdf',
    )


# --- Authentication Routes ---
@main.route('/user/register', methods=['GET', 'POST'])
def register_user():
    if _sessions().get_current_user() is not None:
        return redirect(url_for('main.index'))

    form = RegisterForm()
    if form.validate_on_submit():
        try:
            _sessions().register(form.username.data, form.email.data, form.password.data)
        except RemoteError as e:
            flash(f'Error registering account: {e}', 'danger')
            return render_template('register.html', form=form)
        flash(f'Successfully registered account: {form.email.data} has been registered.', 'success')
        return redirect(url_for('main.login'))

    return render_template('register.html', form=form)


@main.route('/login', methods=['GET', 'POST'])
def login():
    if _sessions().get_current_user() is not None:
        return redirect(url_for('main.index'))

    form = LoginForm()
    if form.validate_on_submit():
        try:
            user = _sessions().sign_in(form.email.data, form.password.data)
        except RemoteError as e:
            flash(f'Login Failed: {e}', 'danger')
            return render_template('login.html', form=form)
        if user is None:
            flash('Login Failed: invalid email or password.', 'danger')
            return render_template('login.html', form=form)
        flash('Successfully Logged In', 'success')
        next_url = request.args.get('next')
        if not next_url or not next_url.startswith('/') or next_url.startswith('//'):
            next_url = url_for('main.index')
        return redirect(next_url)

    return render_template('login.html', form=form)


@main.route('/logout')
@login_required
def logout():
    _sessions().sign_out()
    flash('You have been logged out.', 'info')
    return redirect(url_for('main.login'))
