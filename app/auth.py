import logging

from flask import Blueprint, render_template, redirect, url_for, flash, request, session
from flask_login import login_user, logout_user, login_required, current_user

from app.services import user_service
from .forms import LoginForm, RegistrationForm

logger = logging.getLogger(__name__)

auth = Blueprint('auth', __name__)


def _safe_next_page() -> str:
    """Only follow relative redirects back into the app."""
    next_page = request.args.get('next')
    if not next_page or not next_page.startswith('/') or next_page.startswith('//'):
        next_page = url_for('main.index')
    return next_page


@auth.route('/login', methods=['GET', 'POST'])
def login():
    logger.debug("Login route accessed")

    if current_user.is_authenticated:
        return redirect(url_for('main.index'))

    form = LoginForm()
    if form.validate_on_submit():
        user = user_service.authenticate(form.username.data, form.password.data)
        if user:
            # Permanent sessions let Flask-Login's remember cookie work
            session.permanent = bool(form.remember_me.data)
            login_user(user, remember=form.remember_me.data)
            logger.info("User logged in: %s", user.username)
            flash(f'Welcome back, {user.username}!', 'success')
            return redirect(_safe_next_page())

        flash('Invalid username/email or password', 'error')

    return render_template('auth/login.html', title='Sign In', form=form)


@auth.route('/logout')
@login_required
def logout():
    username = current_user.username

    # Clear all user session data first
    session.clear()
    logout_user()

    flash(f'Goodbye, {username}!', 'info')
    return redirect(url_for('main.index'))


@auth.route('/register', methods=['GET', 'POST'])
def register():
    if current_user.is_authenticated:
        return redirect(url_for('main.index'))

    form = RegistrationForm()
    if form.validate_on_submit():
        user = user_service.create_user(
            username=form.username.data,
            email=form.email.data,
            password=form.password.data,
        )
        login_user(user)
        logger.info("Registered user %s", user.username)
        flash(f'Welcome to Grammable, {user.username}!', 'success')
        return redirect(url_for('main.index'))

    return render_template('auth/register.html', title='Sign Up', form=form)
