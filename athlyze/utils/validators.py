import re
from datetime import datetime

from athlyze.models.database import ACTIVITY_TYPES

EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
DATE_RE = re.compile(r'^[0-9]{4}-[0-9]{2}-[0-9]{2}$')

MEASUREMENT_FIELDS = {
    'exercise': ('duration', 'distance', 'intensity'),
    'measurements': ('weight', 'height', 'body_fat', 'muscle'),
    'nutrition': ('protein', 'carbs', 'fat'),
}

MAX_CALORIES = 5000


def normalize_email(value):
    return (value or '').strip().lower()


def is_valid_email(value):
    return bool(EMAIL_RE.match(value or ''))


def parse_iso_date(value):
    """Strict YYYY-MM-DD only; basic and week-date ISO forms are rejected."""
    value = (value or '').strip()
    if not DATE_RE.match(value):
        return None
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        return None


def validate_registration(form):
    """Return (data, errors) for a registration form."""
    data = {
        'name': (form.get('name') or '').strip(),
        'email': normalize_email(form.get('email')),
        'plan': (form.get('plan') or '').strip() or 'starter',
    }
    password = form.get('password') or ''
    errors = []

    if len(data['name']) < 2:
        errors.append('Name must be at least 2 characters long')
    if not is_valid_email(data['email']):
        errors.append('Enter a valid email address')
    if len(password) < 6:
        errors.append('Password must be at least 6 characters long')
    if form.get('confirm_password') != password:
        errors.append('Passwords do not match')

    data['password'] = password
    return data, errors


def validate_login(form):
    data = {'email': normalize_email(form.get('email'))}
    password = form.get('password') or ''
    errors = []

    if not is_valid_email(data['email']):
        errors.append('Enter a valid email address')
    if not password:
        errors.append('Password is required')

    data['password'] = password
    return data, errors


def collect_measurements(activity_type, form):
    """Only fields belonging to the activity type and submitted non-empty are kept."""
    measurements = {}
    for field in MEASUREMENT_FIELDS.get(activity_type, ()):
        value = (form.get(field) or '').strip()
        if value:
            measurements[field] = value
    return measurements


def validate_activity(form):
    activity_type = (form.get('activity_type') or '').strip()
    data = {
        'activity_type': activity_type,
        'description': (form.get('description') or '').strip(),
        'activity_date': (form.get('activity_date') or '').strip(),
        'calories': None,
        'measurements': collect_measurements(activity_type, form),
    }
    errors = []

    if activity_type not in ACTIVITY_TYPES:
        errors.append('Invalid activity type')
    if len(data['description']) < 3:
        errors.append('Description must be at least 3 characters long')

    parsed = parse_iso_date(data['activity_date'])
    if parsed is None:
        errors.append('Invalid date')
    else:
        data['activity_date'] = parsed.isoformat()

    raw_calories = (form.get('calories') or '').strip()
    if raw_calories:
        try:
            calories = int(raw_calories)
        except ValueError:
            calories = None
        if calories is None or not 0 <= calories <= MAX_CALORIES:
            errors.append(f'Calories must be a number between 0 and {MAX_CALORIES}')
        else:
            data['calories'] = calories

    return data, errors
