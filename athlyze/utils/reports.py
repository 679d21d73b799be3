import numpy as np
import pandas as pd

from athlyze.models.database import ACTIVITY_TYPES

COLUMNS = ['activity_id', 'activity_type', 'description', 'activity_date', 'calories', 'measurements']


def _to_python(value):
    if value is None:
        return None
    if isinstance(value, (np.integer,)):
        return int(value)
    if isinstance(value, (np.floating, float)):
        return None if np.isnan(value) else float(value)
    return value


def _records(df):
    return [{key: _to_python(value) for key, value in row.items()} for row in df.to_dict('records')]


def activity_frame(activities):
    df = pd.DataFrame(activities, columns=COLUMNS)
    df['calories'] = pd.to_numeric(df['calories'], errors='coerce')
    return df


def _calories_of(df, activity_type):
    return df['calories'].where(df['activity_type'] == activity_type, 0).fillna(0)


def period_stats(df):
    exercise_calories = df.loc[df['activity_type'] == 'exercise', 'calories'].dropna()
    counts = df['activity_type'].value_counts()
    return {
        'total': int(len(df)),
        'exercise': int(counts.get('exercise', 0)),
        'nutrition': int(counts.get('nutrition', 0)),
        'measurements': int(counts.get('measurements', 0)),
        'avg_exercise_calories': round(float(exercise_calories.mean()), 1) if not exercise_calories.empty else None,
        'calories_burned': int(_calories_of(df, 'exercise').sum()),
        'calories_consumed': int(_calories_of(df, 'nutrition').sum()),
    }


def daily_breakdown(df):
    """Per-date counts by type plus calories burned/consumed, oldest date first."""
    if df.empty:
        return []
    work = df.assign(
        calories_burned=_calories_of(df, 'exercise'),
        calories_consumed=_calories_of(df, 'nutrition'),
    )
    for activity_type in ACTIVITY_TYPES:
        work[f'is_{activity_type}'] = (work['activity_type'] == activity_type).astype(int)

    daily = work.groupby('activity_date').agg(
        total=('activity_type', 'size'),
        exercise=('is_exercise', 'sum'),
        nutrition=('is_nutrition', 'sum'),
        measurements=('is_measurements', 'sum'),
        calories_burned=('calories_burned', 'sum'),
        calories_consumed=('calories_consumed', 'sum'),
    ).reset_index().sort_values('activity_date')

    for col in ('calories_burned', 'calories_consumed'):
        daily[col] = daily[col].astype(int)
    return _records(daily)


def type_distribution(df):
    if df.empty:
        return []
    counts = df['activity_type'].value_counts()
    distribution = pd.DataFrame({
        'activity_type': counts.index,
        'count': counts.values,
        'percentage': np.round(counts.values * 100.0 / counts.sum(), 1),
    })
    return _records(distribution)


def weight_series(df):
    """Measurement entries whose weight parses as a number, oldest first."""
    rows = df[df['activity_type'] == 'measurements']
    if rows.empty:
        return []
    weights = pd.to_numeric(
        rows['measurements'].apply(lambda m: m.get('weight') if isinstance(m, dict) else None),
        errors='coerce'
    )
    series = pd.DataFrame({'activity_date': rows['activity_date'], 'weight': weights}).dropna()
    return _records(series.sort_values('activity_date', kind='stable'))


def top_exercises(df, limit=5):
    exercises = df[df['activity_type'] == 'exercise']
    if exercises.empty:
        return []
    top = exercises.groupby('description', sort=False).agg(
        frequency=('activity_type', 'size'),
        avg_calories=('calories', 'mean'),
    ).reset_index().sort_values('frequency', ascending=False, kind='stable')
    top['avg_calories'] = top['avg_calories'].round(1)
    return _records(top.head(limit))


def exercise_sessions(df):
    """Exercise rows newest first; session_rank 1 is the latest session of that exercise."""
    exercises = df[df['activity_type'] == 'exercise']
    if exercises.empty:
        return []
    exercises = exercises.sort_values('activity_date', ascending=False, kind='stable').copy()
    exercises['session_rank'] = exercises.groupby('description').cumcount() + 1
    return _records(exercises[['description', 'activity_date', 'calories', 'measurements', 'session_rank']])


def exercise_stats(df):
    exercises = df[df['activity_type'] == 'exercise']
    if exercises.empty:
        return []
    stats = exercises.groupby('description', sort=False).agg(
        total_sessions=('activity_type', 'size'),
        avg_calories=('calories', 'mean'),
        max_calories=('calories', 'max'),
        first_date=('activity_date', 'min'),
        last_date=('activity_date', 'max'),
    ).reset_index().sort_values('total_sessions', ascending=False, kind='stable')
    stats['avg_calories'] = stats['avg_calories'].round(1)
    return _records(stats)


def nutrition_entries(df):
    meals = df[df['activity_type'] == 'nutrition']
    meals = meals.sort_values('activity_date', ascending=False, kind='stable')
    return _records(meals[['activity_date', 'description', 'calories', 'measurements']])


def daily_nutrition(df):
    meals = df[df['activity_type'] == 'nutrition']
    if meals.empty:
        return []
    daily = meals.groupby('activity_date').agg(
        meals_logged=('activity_type', 'size'),
        total_calories=('calories', 'sum'),
        avg_calories=('calories', 'mean'),
    ).reset_index().sort_values('activity_date', ascending=False)
    daily['total_calories'] = daily['total_calories'].astype(int)
    daily['avg_calories'] = daily['avg_calories'].round(1)
    return _records(daily)


def summary(activities):
    df = activity_frame(activities)
    return {
        'stats': period_stats(df),
        'daily': daily_breakdown(df),
        'distribution': type_distribution(df),
        'weight': weight_series(df),
        'top_exercises': top_exercises(df),
    }
