from flask import session, jsonify, request

from athlyze.utils import reports
from athlyze.utils.helpers import login_required
from athlyze.utils.query_builder import parse_period, period_start


def register_api_routes(app, db):
    @app.route('/api/dashboard/chart')
    @login_required
    def dashboard_chart():
        """Daily activity counts and calories for the last week"""
        return jsonify(db.get_daily_chart(session['user_id'], days=7))

    @app.route('/api/reports/summary')
    @login_required
    def report_summary():
        period = parse_period(request.args.get('period'))
        rows = db.get_activities_since(session['user_id'], period_start(period))
        payload = reports.summary(rows)
        payload['period'] = period
        return jsonify(payload)
