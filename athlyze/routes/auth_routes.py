import logging
import sqlite3

from flask import render_template, request, redirect, url_for, session, flash
from werkzeug.security import generate_password_hash, check_password_hash

from athlyze.utils.helpers import login_required, guest_only
from athlyze.utils.validators import validate_registration, validate_login

logger = logging.getLogger(__name__)

SERVER_ERROR = 'Internal server error'


def _open_session(user):
    session.clear()
    session.permanent = True
    session['user_id'] = user['user_id']
    session['name'] = user['name']
    session['email'] = user['email']
    session['plan'] = user['plan']


def register_auth_routes(app, db, advisor):
    @app.route('/')
    def index():
        if 'user_id' in session:
            return redirect(url_for('dashboard'))
        return render_template('index.html')

    @app.route('/register', methods=['GET', 'POST'])
    @guest_only
    def register():
        if request.method == 'GET':
            return render_template('auth/register.html', errors=[], old_input={})

        data, errors = validate_registration(request.form)
        old_input = {'name': data['name'], 'email': data['email'], 'plan': data['plan']}

        if errors:
            return render_template('auth/register.html', errors=errors, old_input=old_input)

        try:
            if db.email_exists(data['email']):
                return render_template('auth/register.html',
                                       errors=['This email is already registered'],
                                       old_input=old_input)

            user = db.create_user(data['name'], data['email'],
                                  generate_password_hash(data['password']), data['plan'])
            if user is None:
                return render_template('auth/register.html',
                                       errors=['This email is already registered'],
                                       old_input=old_input)

            advisor.welcome(user['user_id'], user['name'])
            _open_session(user)
        except sqlite3.Error:
            logger.exception('Error during registration')
            return render_template('auth/register.html', errors=[SERVER_ERROR], old_input=old_input)

        logger.info('Registered user %s', user['user_id'])
        return redirect(url_for('dashboard'))

    @app.route('/login', methods=['GET', 'POST'])
    @guest_only
    def login():
        if request.method == 'GET':
            return render_template('auth/login.html', errors=[], old_input={})

        data, errors = validate_login(request.form)
        old_input = {'email': data['email']}

        if errors:
            return render_template('auth/login.html', errors=errors, old_input=old_input)

        try:
            user = db.get_active_user_by_email(data['email'])
        except sqlite3.Error:
            logger.exception('Error during login')
            return render_template('auth/login.html', errors=[SERVER_ERROR], old_input=old_input)

        if not user or not check_password_hash(user['password_hash'], data['password']):
            logger.info('Failed login for %s', data['email'])
            return render_template('auth/login.html',
                                   errors=['Invalid email or password'],
                                   old_input=old_input)

        _open_session(user)
        flash(f"Welcome back, {user['name']}!", 'success')
        return redirect(url_for('dashboard'))

    @app.route('/logout', methods=['POST'])
    @login_required
    def logout():
        session.clear()
        flash('You have been logged out', 'info')
        return redirect(url_for('index'))
