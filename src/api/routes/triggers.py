"""Realtime Database trigger endpoints"""
import logging
from flask import Blueprint, request, jsonify, current_app
from middleware.auth import require_trigger_key

# Configure logging
logger = logging.getLogger(__name__)
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

triggers_bp = Blueprint('triggers', __name__, url_prefix='/triggers')


def _acknowledge(success: bool, message: str, **extra):
    """
    Build the trigger response.

    Always 200: a failed mirror is logged, never retried by the delivery system.
    """
    body = {'status': 'ok' if success else 'error', 'message': message}
    body.update(extra)
    return jsonify(body), 200


@triggers_bp.route('/status-written', methods=['POST'])
@require_trigger_key
def status_written(caller):
    """
    Mirror a write to /devices/{deviceId}/status

    Request body:
    {
        "params": {"deviceId": "plugA"},
        "before": {...} | null,
        "after": {"temperature": 41.5, "timestamp": 1760084970005, "emergencyStatus": false} | null
    }
    """
    try:
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            logger.warning(f"Status trigger from {caller}: invalid body, ignoring")
            return _acknowledge(True, 'Invalid body, ignored')

        device_id = (payload.get('params') or {}).get('deviceId')
        if not device_id:
            logger.warning(f"Status trigger from {caller}: missing params.deviceId, ignoring")
            return _acknowledge(True, 'Missing deviceId, ignored')

        success, message = current_app.config['MIRROR_SERVICE'].mirror_status(
            device_id,
            payload.get('before'),
            payload.get('after')
        )
        return _acknowledge(success, message, device_id=device_id)

    except Exception as e:
        logger.exception(f"Unexpected error in status trigger: {str(e)}")
        return _acknowledge(False, f'Internal error: {str(e)}')


@triggers_bp.route('/event-created', methods=['POST'])
@require_trigger_key
def event_created(caller):
    """
    Mirror a new /events/{eventId} entry

    Request body:
    {
        "params": {"eventId": "plugA_1760084970005"},
        "data": {"type": "power_on", "timestamp": 1760084970005}
    }
    """
    try:
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            logger.warning(f"Event trigger from {caller}: invalid body, ignoring")
            return _acknowledge(True, 'Invalid body, ignored')

        event_id = (payload.get('params') or {}).get('eventId')
        if not event_id:
            logger.warning(f"Event trigger from {caller}: missing params.eventId, ignoring")
            return _acknowledge(True, 'Missing eventId, ignored')

        success, message = current_app.config['MIRROR_SERVICE'].mirror_event(
            str(event_id),
            payload.get('data')
        )
        return _acknowledge(success, message, event_id=event_id)

    except Exception as e:
        logger.exception(f"Unexpected error in event trigger: {str(e)}")
        return _acknowledge(False, f'Internal error: {str(e)}')
