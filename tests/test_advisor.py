from datetime import date

import pytest

from athlyze.utils import advisor as texts
from athlyze.utils.advisor import FitnessAdvisor
from conftest import days_ago


def act(activity_type, description='Running', calories=None, activity_date='2024-01-01'):
    return {'activity_type': activity_type, 'description': description,
            'activity_date': activity_date, 'calories': calories}


@pytest.fixture
def advisor():
    return FitnessAdvisor(db=None)


class TestAdviseActivity:
    def test_first_exercise_of_week(self, advisor):
        result = advisor.advise_activity('exercise', None, [act('exercise')])
        assert result == {'text': texts.FIRST_EXERCISE, 'type': 'exercise'}

    def test_two_exercises_suggests_variety(self, advisor):
        result = advisor.advise_activity('exercise', None, [act('exercise')] * 2)
        assert result['text'] == texts.VARY_EXERCISE

    def test_three_exercises_is_consistent(self, advisor):
        recent = [act('exercise')] * 3 + [act('nutrition')]
        assert advisor.advise_activity('exercise', 200, recent)['text'] == texts.CONSISTENT_EXERCISE

    def test_high_calorie_meal_wins_over_count(self, advisor):
        recent = [act('nutrition')] * 4
        result = advisor.advise_activity('nutrition', 501, recent)
        assert result == {'text': texts.HIGH_CALORIE_MEAL_TEXT, 'type': 'nutrition'}

    def test_meal_of_exactly_500_is_not_high(self, advisor):
        result = advisor.advise_activity('nutrition', 500, [act('nutrition')])
        assert result['text'] == texts.KEEP_LOGGING_MEALS

    def test_three_meals_good_logging(self, advisor):
        result = advisor.advise_activity('nutrition', None, [act('nutrition')] * 3)
        assert result['text'] == texts.GOOD_MEAL_LOGGING

    def test_measurements_always_same_advice(self, advisor):
        result = advisor.advise_activity('measurements', None, [])
        assert result == {'text': texts.MEASUREMENTS_LOGGED, 'type': 'measurements'}

    def test_unknown_type(self, advisor):
        assert advisor.advise_activity('yoga', None, []) is None


class TestAnalyze:
    def test_only_meals(self, advisor):
        # 14 * 2000 kcal -> 2000/day
        meals = [act('nutrition', 'Lunch', 2000) for _ in range(14)]
        result = advisor.analyze(meals)
        assert [s['type'] for s in result] == ['exercise', 'nutrition', 'measurements', 'general']
        assert result[0]['text'] == texts.NO_EXERCISE
        assert result[1]['text'] == texts.BALANCED_INTAKE
        assert result[2]['text'] == texts.NO_MEASUREMENTS
        assert result[3]['text'] == texts.ON_TRACK

    def test_few_exercises(self, advisor):
        result = advisor.analyze([act('exercise'), act('exercise')])
        assert result[0]['text'] == texts.FEW_EXERCISES

    def test_same_exercise_case_insensitive(self, advisor):
        result = advisor.analyze([act('exercise', 'Running'), act('exercise', 'running'), act('exercise', 'RUNNING')])
        assert result[0]['text'] == texts.SAME_EXERCISE

    def test_varied_exercise(self, advisor):
        result = advisor.analyze([act('exercise', 'Running'), act('exercise', 'Swimming'), act('exercise', 'Running')])
        assert result[0]['text'] == texts.VARIED_EXERCISE

    def test_high_intake(self, advisor):
        result = advisor.analyze([act('nutrition', 'Feast', 36000)])
        assert {'text': texts.HIGH_INTAKE, 'type': 'nutrition'} in result

    def test_low_intake(self, advisor):
        result = advisor.analyze([act('nutrition', 'Snack', 700)])
        assert {'text': texts.LOW_INTAKE, 'type': 'nutrition'} in result

    def test_meals_without_calories_emit_no_nutrition_advice(self, advisor):
        result = advisor.analyze([act('nutrition', 'Salad', None)])
        assert [s['type'] for s in result] == ['exercise', 'measurements']

    def test_tracking_measurements(self, advisor):
        result = advisor.analyze([act('measurements', 'Weigh-in')])
        assert {'text': texts.TRACKING_MEASUREMENTS, 'type': 'measurements'} in result

    def test_general_thresholds(self, advisor):
        nine = advisor.analyze([act('measurements')] * 9)
        assert all(s['type'] != 'general' for s in nine)
        twenty = advisor.analyze([act('measurements')] * 20)
        assert twenty[-1] == {'text': texts.GREAT_COMMITMENT, 'type': 'general'}


class TestWithDatabase:
    @pytest.fixture
    def user(self, db):
        return db.create_user('Ana', 'ana@example.com', 'hash')

    def test_generate_without_history(self, db, user):
        result = FitnessAdvisor(db).generate(user['user_id'])
        assert result == [{'text': texts.NO_HISTORY, 'type': 'general'}]
        assert db.count_suggestions(user['user_id']) == 1

    def test_generate_ignores_activities_older_than_two_weeks(self, db, user):
        uid = user['user_id']
        db.add_activity(uid, 'exercise', 'Running', days_ago(15))
        db.add_activity(uid, 'measurements', 'Weigh-in', days_ago(14), measurements={'weight': '80'})

        result = FitnessAdvisor(db).generate(uid)

        assert result[0]['text'] == texts.NO_EXERCISE
        assert {'text': texts.TRACKING_MEASUREMENTS, 'type': 'measurements'} in result
        assert db.count_suggestions(uid) == len(result)

    def test_record_activity_advice_uses_weekly_window(self, db, user):
        uid = user['user_id']
        db.add_activity(uid, 'exercise', 'Running', days_ago(8))
        db.add_activity(uid, 'exercise', 'Running', days_ago(0))

        result = FitnessAdvisor(db).record_activity_advice(uid, 'exercise', None, today=date.today())

        assert result['text'] == texts.FIRST_EXERCISE
        stored = db.list_suggestions(uid)
        assert stored[0]['text'] == texts.FIRST_EXERCISE

    def test_record_activity_advice_never_raises(self):
        class BrokenDatabase:
            def get_recent_activities(self, *args, **kwargs):
                raise RuntimeError('database is gone')

        assert FitnessAdvisor(BrokenDatabase()).record_activity_advice(1, 'exercise', None) is None

    def test_welcome(self, db, user):
        FitnessAdvisor(db).welcome(user['user_id'], 'Ana')
        stored = db.list_suggestions(user['user_id'])
        assert stored[0]['suggestion_type'] == 'general'
        assert 'Welcome to Athlyze, Ana!' in stored[0]['text']
