from flask import session, redirect, url_for, flash
from functools import wraps

ACTIVITY_LABELS = {
    'exercise': 'Exercise',
    'nutrition': 'Nutrition',
    'measurements': 'Measurements',
    'general': 'General',
}

MEASUREMENT_LABELS = {
    'duration': 'Duration (min)',
    'distance': 'Distance (km)',
    'intensity': 'Intensity',
    'weight': 'Weight (kg)',
    'height': 'Height (cm)',
    'body_fat': 'Body fat (%)',
    'muscle': 'Muscle mass (kg)',
    'protein': 'Protein (g)',
    'carbs': 'Carbohydrates (g)',
    'fat': 'Fat (g)',
}


def login_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'user_id' not in session:
            flash('Please login to access this page', 'warning')
            return redirect(url_for('login'))
        return f(*args, **kwargs)
    return decorated_function


def guest_only(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'user_id' in session:
            return redirect(url_for('dashboard'))
        return f(*args, **kwargs)
    return decorated_function


def current_user():
    if 'user_id' not in session:
        return None
    return {
        'user_id': session['user_id'],
        'name': session.get('name'),
        'email': session.get('email'),
        'plan': session.get('plan'),
    }


def clean_number(value):
    """Remove .0 from numbers that are whole numbers"""
    if value is None:
        return ''
    try:
        num = float(value)
        if num == int(num):
            return int(num)
        return round(num, 1)
    except (ValueError, TypeError, OverflowError):
        return value


def activity_label(value):
    return ACTIVITY_LABELS.get(value, str(value).capitalize())


def format_measurements(measurements):
    if not measurements:
        return ''
    parts = []
    for key, value in measurements.items():
        label = MEASUREMENT_LABELS.get(key, key.replace('_', ' ').capitalize())
        parts.append(f'{label}: {clean_number(value)}')
    return ', '.join(parts)
