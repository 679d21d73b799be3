from flask import render_template, request, session

from athlyze.utils import reports
from athlyze.utils.helpers import login_required
from athlyze.utils.query_builder import parse_period, period_start, REPORT_PERIODS


def register_report_routes(app, db):
    def load_period(activity_type=None):
        period = parse_period(request.args.get('period'))
        rows = db.get_activities_since(session['user_id'], period_start(period), activity_type)
        return period, reports.activity_frame(rows)

    @app.route('/reports')
    @login_required
    def reports_index():
        period, df = load_period()
        return render_template('reports/index.html',
                               stats=reports.period_stats(df),
                               daily_data=reports.daily_breakdown(df),
                               type_distribution=reports.type_distribution(df),
                               weight_data=reports.weight_series(df),
                               top_exercises=reports.top_exercises(df),
                               period=period,
                               periods=REPORT_PERIODS)

    @app.route('/reports/exercises')
    @login_required
    def exercise_report():
        period, df = load_period('exercise')
        return render_template('reports/exercises.html',
                               exercise_data=reports.exercise_sessions(df),
                               exercise_stats=reports.exercise_stats(df),
                               period=period,
                               periods=REPORT_PERIODS)

    @app.route('/reports/nutrition')
    @login_required
    def nutrition_report():
        period, df = load_period('nutrition')
        return render_template('reports/nutrition.html',
                               nutrition_data=reports.nutrition_entries(df),
                               daily_nutrition=reports.daily_nutrition(df),
                               period=period,
                               periods=REPORT_PERIODS)
