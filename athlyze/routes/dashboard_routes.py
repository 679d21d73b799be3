from flask import render_template, session

from athlyze.utils.helpers import login_required


def register_dashboard_routes(app, db):
    @app.route('/dashboard')
    @login_required
    def dashboard():
        user_id = session['user_id']

        stats = db.get_activity_stats(user_id)
        recent_activities = db.get_latest_activities(user_id, limit=5)
        suggestions = db.get_unread_suggestions(user_id, limit=3)
        chart_data = db.get_daily_chart(user_id, days=7)

        return render_template('dashboard.html',
                               stats=stats,
                               recent_activities=recent_activities,
                               suggestions=suggestions,
                               chart_data=chart_data)
