import logging
import sqlite3

from flask import render_template, request, redirect, url_for, session, flash, jsonify, current_app

from athlyze.models.database import SUGGESTION_TYPES
from athlyze.utils.helpers import login_required
from athlyze.utils.query_builder import parse_page, page_window, total_pages

logger = logging.getLogger(__name__)


def register_suggestion_routes(app, db, advisor):
    @app.route('/suggestions')
    @login_required
    def suggestions():
        user_id = session['user_id']
        page_size = current_app.config['PAGE_SIZE']
        page = parse_page(request.args.get('page'))
        suggestion_type = request.args.get('type', '')
        filters = {'type': suggestion_type if suggestion_type in SUGGESTION_TYPES else ''}

        total = db.count_suggestions(user_id, filters)
        limit, offset = page_window(page, page_size)
        suggestions_list = db.list_suggestions(user_id, filters, limit, offset)

        # whatever is shown counts as read
        db.mark_suggestions_read(user_id, [s['suggestion_id'] for s in suggestions_list])
        for suggestion in suggestions_list:
            suggestion['is_read'] = 1

        return render_template('suggestions/index.html',
                               suggestions=suggestions_list,
                               stats=db.get_suggestion_stats(user_id),
                               current_page=page,
                               total_pages=total_pages(total, page_size),
                               total_suggestions=total,
                               filters=filters)

    @app.route('/suggestions/generate', methods=['POST'])
    @login_required
    def generate_suggestions():
        user_id = session['user_id']
        try:
            advisor.generate(user_id)
        except Exception:
            logger.exception('Error generating suggestions for user %s', user_id)
            flash('Error generating new advice', 'error')
            return redirect(url_for('suggestions'))

        flash('New advice generated successfully', 'success')
        return redirect(url_for('suggestions'))

    @app.route('/suggestions/<int:suggestion_id>/unread', methods=['POST'])
    @login_required
    def mark_suggestion_unread(suggestion_id):
        try:
            db.mark_suggestion_unread(suggestion_id, session['user_id'])
        except sqlite3.Error:
            logger.exception('Error marking suggestion %s as unread', suggestion_id)
            return jsonify({'error': 'Internal server error'}), 500
        return jsonify({'success': True})

    @app.route('/suggestions/<int:suggestion_id>/delete', methods=['POST'])
    @login_required
    def delete_suggestion(suggestion_id):
        try:
            deleted = db.delete_suggestion(suggestion_id, session['user_id'])
        except sqlite3.Error:
            logger.exception('Error deleting suggestion %s', suggestion_id)
            return jsonify({'error': 'Internal server error'}), 500

        if not deleted:
            return jsonify({'error': 'Suggestion not found'}), 404
        return jsonify({'success': True})
