import logging
from datetime import date

import pandas as pd

logger = logging.getLogger(__name__)

WEEKLY_WINDOW_DAYS = 7
ANALYSIS_WINDOW_DAYS = 14

HIGH_CALORIE_MEAL = 500
HIGH_DAILY_CALORIES = 2500
LOW_DAILY_CALORIES = 1200

WELCOME = ('Welcome to Athlyze, {name}! Start by logging your first activity '
           'to get personalized advice.')
NO_HISTORY = ('Start logging some activities to receive personalized advice based on '
              'your exercise and eating patterns.')

# per-activity advice
FIRST_EXERCISE = ('Great! You logged your first workout of the week. Try to stay consistent '
                  'by exercising at least 3 times a week.')
CONSISTENT_EXERCISE = ('Fantastic! You are keeping a consistent exercise routine. Remember to '
                       'include rest days for muscle recovery.')
VARY_EXERCISE = ('Good job with your workout. Try adding more variety to your routine with '
                 'both cardio and strength exercises.')
HIGH_CALORIE_MEAL_TEXT = ('You logged a high-calorie meal. Consider balancing it with lighter '
                          'options in your next meals.')
GOOD_MEAL_LOGGING = ('You are keeping a good record of your meals. Make sure each meal includes '
                     'a variety of nutrients.')
KEEP_LOGGING_MEALS = 'Keep logging your meals consistently to get better personalized nutrition advice.'
MEASUREMENTS_LOGGED = ('Great job logging your measurements. Tracking them regularly will help '
                       'you monitor your progress over time.')

# two-week analysis
NO_EXERCISE = ('You have not logged any exercise in the last 2 weeks. Time to get moving! '
               'Start with a 20-30 minute walk every day.')
FEW_EXERCISES = ('You have only exercised a few times in the last 2 weeks. Aim for at least '
                 '3 sessions a week for better results.')
SAME_EXERCISE = ('Excellent consistency with your training. For better results, try varying '
                 'your routine with different kinds of exercise.')
VARIED_EXERCISE = ('Fantastic! Your exercise routine is varied and consistent. Remember to '
                   'include rest days for recovery.')
NO_MEALS = ('You have not logged any meals recently. Tracking what you eat will help you spot '
            'patterns and improve your nutrition.')
HIGH_INTAKE = ('Your average calorie intake is high. Consider adding more vegetables and lean '
               'protein, and cutting back on processed food.')
LOW_INTAKE = ('Your calorie intake looks low. Make sure you eat enough to keep your energy and '
              'health up, and talk to a nutritionist if in doubt.')
BALANCED_INTAKE = ('Good job logging your meals. Keep a balance between protein, carbohydrates '
                   'and healthy fats.')
NO_MEASUREMENTS = ('Logging your body measurements regularly will track your progress better '
                   'than weight alone.')
TRACKING_MEASUREMENTS = ('Excellent! You are tracking your measurements. Body changes take time, '
                         'so stay consistent and patient.')
GREAT_COMMITMENT = ('Incredible commitment! You have logged lots of activities. Keep it up and '
                    'you will see amazing results.')
ON_TRACK = ('You are on the right track with your activity log. Consistency is the key to '
            'reaching your health goals.')


def _frame(activities):
    df = pd.DataFrame(activities, columns=['activity_type', 'description', 'activity_date', 'calories'])
    df['calories'] = pd.to_numeric(df['calories'], errors='coerce')
    df['description'] = df['description'].fillna('').astype(str)
    return df


class FitnessAdvisor:
    """Rule-based advice from a user's recent activity history."""

    def __init__(self, db):
        self.db = db

    def advise_activity(self, activity_type, calories, recent_activities):
        """Advice for an activity that was just logged.

        ``recent_activities`` is the weekly window and already contains the
        new activity. Returns a suggestion dict or None.
        """
        df = _frame(recent_activities)
        counts = df['activity_type'].value_counts()

        if activity_type == 'exercise':
            exercise_count = int(counts.get('exercise', 0))
            if exercise_count == 1:
                text = FIRST_EXERCISE
            elif exercise_count >= 3:
                text = CONSISTENT_EXERCISE
            else:
                text = VARY_EXERCISE
            return {'text': text, 'type': 'exercise'}

        if activity_type == 'nutrition':
            meal_count = int(counts.get('nutrition', 0))
            if calories and calories > HIGH_CALORIE_MEAL:
                text = HIGH_CALORIE_MEAL_TEXT
            elif meal_count >= 3:
                text = GOOD_MEAL_LOGGING
            else:
                text = KEEP_LOGGING_MEALS
            return {'text': text, 'type': 'nutrition'}

        if activity_type == 'measurements':
            return {'text': MEASUREMENTS_LOGGED, 'type': 'measurements'}

        return None

    def analyze(self, activities):
        """Advice list for a two-week history, in exercise/nutrition/measurements/general order."""
        df = _frame(activities)
        suggestions = []

        exercises = df[df['activity_type'] == 'exercise']
        meals = df[df['activity_type'] == 'nutrition']
        measurements = df[df['activity_type'] == 'measurements']

        if exercises.empty:
            suggestions.append({'text': NO_EXERCISE, 'type': 'exercise'})
        elif len(exercises) < 3:
            suggestions.append({'text': FEW_EXERCISES, 'type': 'exercise'})
        elif exercises['description'].str.lower().nunique() == 1:
            suggestions.append({'text': SAME_EXERCISE, 'type': 'exercise'})
        else:
            suggestions.append({'text': VARIED_EXERCISE, 'type': 'exercise'})

        if meals.empty:
            suggestions.append({'text': NO_MEALS, 'type': 'nutrition'})
        else:
            avg_daily_calories = meals['calories'].fillna(0).sum() / ANALYSIS_WINDOW_DAYS
            if avg_daily_calories > HIGH_DAILY_CALORIES:
                suggestions.append({'text': HIGH_INTAKE, 'type': 'nutrition'})
            elif 0 < avg_daily_calories < LOW_DAILY_CALORIES:
                suggestions.append({'text': LOW_INTAKE, 'type': 'nutrition'})
            elif avg_daily_calories > 0:
                suggestions.append({'text': BALANCED_INTAKE, 'type': 'nutrition'})

        if measurements.empty:
            suggestions.append({'text': NO_MEASUREMENTS, 'type': 'measurements'})
        else:
            suggestions.append({'text': TRACKING_MEASUREMENTS, 'type': 'measurements'})

        if len(df) >= 20:
            suggestions.append({'text': GREAT_COMMITMENT, 'type': 'general'})
        elif len(df) >= 10:
            suggestions.append({'text': ON_TRACK, 'type': 'general'})

        return suggestions

    def welcome(self, user_id, name):
        return self.db.add_suggestion(user_id, WELCOME.format(name=name), 'general')

    def record_activity_advice(self, user_id, activity_type, calories, today=None):
        """Store advice for a freshly logged activity. Never raises."""
        try:
            recent = self.db.get_recent_activities(user_id, WEEKLY_WINDOW_DAYS, today or date.today())
            suggestion = self.advise_activity(activity_type, calories, recent)
            if suggestion:
                self.db.add_suggestion(user_id, suggestion['text'], suggestion['type'])
            return suggestion
        except Exception:
            logger.exception('Error generating suggestion for user %s', user_id)
            return None

    def generate(self, user_id, today=None):
        """Analyze the last two weeks and store the resulting suggestions."""
        activities = self.db.get_recent_activities(user_id, ANALYSIS_WINDOW_DAYS, today or date.today())

        if not activities:
            suggestions = [{'text': NO_HISTORY, 'type': 'general'}]
        else:
            suggestions = self.analyze(activities)

        for suggestion in suggestions:
            self.db.add_suggestion(user_id, suggestion['text'], suggestion['type'])

        logger.info('Generated %d suggestions for user %s', len(suggestions), user_id)
        return suggestions
