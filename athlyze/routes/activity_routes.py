import logging
import sqlite3
from datetime import date

from flask import render_template, request, redirect, url_for, session, flash, abort, current_app

from athlyze.utils.helpers import login_required
from athlyze.utils.query_builder import parse_page, page_window, total_pages
from athlyze.utils.validators import validate_activity

logger = logging.getLogger(__name__)


def register_activity_routes(app, db, advisor):
    @app.route('/activities')
    @login_required
    def activities():
        user_id = session['user_id']
        page_size = current_app.config['PAGE_SIZE']
        page = parse_page(request.args.get('page'))
        filters = {
            'type': request.args.get('type', ''),
            'date_from': request.args.get('date_from', ''),
            'date_to': request.args.get('date_to', ''),
        }

        total = db.count_activities(user_id, filters)
        limit, offset = page_window(page, page_size)
        activities_list = db.list_activities(user_id, filters, limit, offset)

        return render_template('activities/index.html',
                               activities=activities_list,
                               current_page=page,
                               total_pages=total_pages(total, page_size),
                               total_activities=total,
                               filters=filters)

    @app.route('/activities/new')
    @login_required
    def new_activity():
        return render_template('activities/new.html', errors=[],
                               old_input={'activity_date': date.today().isoformat()})

    @app.route('/activities', methods=['POST'])
    @login_required
    def create_activity():
        user_id = session['user_id']
        data, errors = validate_activity(request.form)
        old_input = request.form.to_dict()

        if errors:
            return render_template('activities/new.html', errors=errors, old_input=old_input)

        try:
            activity_id = db.add_activity(user_id, data['activity_type'], data['description'],
                                          data['activity_date'], data['calories'], data['measurements'])
        except sqlite3.Error:
            logger.exception('Error creating activity for user %s', user_id)
            return render_template('activities/new.html', errors=['Internal server error'],
                                   old_input=old_input)

        logger.info('User %s logged %s activity %s', user_id, data['activity_type'], activity_id)
        advisor.record_activity_advice(user_id, data['activity_type'], data['calories'])

        flash('Activity logged successfully', 'success')
        return redirect(url_for('activities'))

    @app.route('/activities/<int:activity_id>')
    @login_required
    def activity_detail(activity_id):
        activity = db.get_activity(activity_id, session['user_id'])
        if not activity:
            abort(404)
        return render_template('activities/detail.html', activity=activity)

    @app.route('/activities/<int:activity_id>/delete', methods=['POST'])
    @login_required
    def delete_activity(activity_id):
        user_id = session['user_id']
        try:
            deleted = db.delete_activity(activity_id, user_id)
        except sqlite3.Error:
            logger.exception('Error deleting activity %s', activity_id)
            flash('Error deleting the activity', 'error')
            return redirect(url_for('activities'))

        if not deleted:
            abort(404)

        flash('Activity deleted successfully', 'success')
        return redirect(url_for('activities'))
