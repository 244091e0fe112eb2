"""Socket.IO handlers for the actuator (the client that builds room geometry).

Events:
    - advance_layout: Switch to the next layout; no payload.
    - request_layout: Ask for the current active layout; no payload.
    - select_layout: Jump to a layout; payload { index }

Emits:
    - layout_changed: Broadcast to all clients with the new active layout.
    - layout_state: Active layout, sent to the requester only.
    - error: { message, field, code } for rejected payloads.
"""

from flask_socketio import emit

from roomgrid import socketio
from roomgrid.logging_utils import get_logger
from roomgrid.routes.layout_api import active_layout_dict, advance_active, get_state

from .validation import ADVANCE_LAYOUT, REQUEST_LAYOUT, SELECT_LAYOUT, validate

_log = get_logger("actuator")


def _reject(event, result):
    emit('error', {'message': f"Invalid {event}: {result['error']}", 'field': result['field'], 'code': result['code']})


@socketio.on('advance_layout')
def handle_advance_layout(data=None):
    ok, result = validate(data, ADVANCE_LAYOUT)
    if not ok:
        _reject('advance_layout', result)
        return
    layout = advance_active()
    emit('layout_changed', layout, broadcast=True)
    _log.info(event="ws_advance_layout", index=layout['index'])


@socketio.on('request_layout')
def handle_request_layout(data=None):
    ok, result = validate(data, REQUEST_LAYOUT)
    if not ok:
        _reject('request_layout', result)
        return
    emit('layout_state', active_layout_dict())


@socketio.on('select_layout')
def handle_select_layout(data=None):
    ok, result = validate(data, SELECT_LAYOUT)
    if not ok:
        _reject('select_layout', result)
        return
    state = get_state()
    with state.lock:
        if result['index'] >= len(state.layout_set):
            emit('error', {'message': 'Invalid select_layout: index out of range', 'field': 'index', 'code': 'max'})
            return
        layout = state.layout_set.select(result['index']).to_dict()
    emit('layout_changed', layout, broadcast=True)
    _log.info(event="ws_select_layout", index=layout['index'])
