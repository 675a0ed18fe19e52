"""Scheduled job endpoints (Cloud Scheduler HTTP targets)"""
import logging
from flask import Blueprint, jsonify, current_app
from middleware.auth import require_trigger_key

logger = logging.getLogger(__name__)

jobs_bp = Blueprint('jobs', __name__, url_prefix='/jobs')


@jobs_bp.route('/record-history', methods=['POST'])
@require_trigger_key
def record_history(caller):
    """
    Snapshot every device's current status into its history

    Schedule: every 2 minutes
    """
    try:
        logger.info(f"History recording triggered by {caller}")
        summary = current_app.config['HISTORY_SERVICE'].record_snapshots()
        return jsonify({'status': 'ok', **summary}), 200
    except Exception as e:
        logger.exception(f"Error in historical data recording: {str(e)}")
        return jsonify({'status': 'error', 'message': str(e)}), 200


@jobs_bp.route('/cleanup-history', methods=['POST'])
@require_trigger_key
def cleanup_history(caller):
    """
    Delete history older than the retention window

    Schedule: every day 00:00
    """
    try:
        logger.info(f"History cleanup triggered by {caller}")
        summary = current_app.config['HISTORY_SERVICE'].cleanup_history()
        return jsonify({'status': 'ok', **summary}), 200
    except Exception as e:
        logger.exception(f"Error in historical data cleanup: {str(e)}")
        return jsonify({'status': 'error', 'message': str(e)}), 200
