import logging

from flask_login import current_user, login_user, logout_user
from sqlalchemy.exc import SQLAlchemyError

from eventplanner.database import db
from eventplanner.errors import RemoteError
from eventplanner.models import User

logger = logging.getLogger(__name__)


class SessionProvider:
    """Everything the views may do with the signed-in user."""

    def get_current_user(self):
        if current_user.is_authenticated:
            return current_user._get_current_object()
        return None

    def sign_in(self, email, password, remember=False):
        try:
            user = db.session.execute(
                db.select(User).where(User.email == email.strip().lower())
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error('Sign-in lookup for %s failed: %s', email, e)
            raise RemoteError('Could not sign in right now') from e
        if user is None or not user.check_password(password):
            logger.info('Failed sign-in for %s', email)
            return None
        login_user(user, remember=remember)
        logger.info('Signed in %s', user.username)
        return user

    def register(self, username, email, password):
        username = username.strip()
        email = email.strip().lower()
        taken = db.session.execute(
            db.select(User).where((User.username == username) | (User.email == email))
        ).scalars().first()
        if taken is not None:
            field = 'Username' if taken.username == username else 'Email'
            raise RemoteError(f'{field} already taken.')

        user = User(username=username, email=email)
        user.set_password(password)
        try:
            db.session.add(user)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error('Registering %s failed: %s', username, e)
            raise RemoteError('Error registering account') from e
        logger.info('Registered %s', username)
        return user

    def sign_out(self):
        if not current_user.is_authenticated:
            return False
        username = current_user.username
        logout_user()
        logger.info('Signed out %s', username)
        return True


def load_user(user_id):
    try:
        return db.session.get(User, int(user_id))
    except (TypeError, ValueError):
        return None
