"""Lightweight websocket payload validation utilities.

Schema mini-language (Python dict):
{
  'field_name': ('type', required: bool, extras: dict)
}
Supported types: 'str', 'int', 'bool'
Extras: min / max (int), min_len / max_len (str)

If invalid: (False, {'field': 'index', 'error': 'below minimum', 'code': 'min'})
If valid:   (True, normalized_data)
"""
from __future__ import annotations
from typing import Any, Dict, Tuple

PRIMITIVES = {
    'str': str,
    'int': int,
    'bool': bool,
}


def _fail(field: str, message: str, code: str) -> Tuple[bool, Dict[str, Any]]:
    return False, {'field': field, 'error': message, 'code': code}


def validate(payload: Any, schema: Dict[str, tuple]) -> Tuple[bool, Dict[str, Any]]:
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        return _fail('__root__', 'payload must be an object', 'type')
    out = {}
    for name, spec in schema.items():
        type_name, required = spec[0], spec[1]
        extras = spec[2] if len(spec) > 2 else {}
        if type_name not in PRIMITIVES:
            return _fail('__schema__', f'unsupported type {type_name}', 'schema')
        if name not in payload:
            if required:
                return _fail(name, 'missing required field', 'required')
            continue
        value = payload[name]
        # bool is an int subclass; keep them apart
        if type_name == 'int' and isinstance(value, bool):
            return _fail(name, 'expected int', 'type')
        if not isinstance(value, PRIMITIVES[type_name]):
            return _fail(name, f'expected {type_name}', 'type')
        if type_name == 'int':
            if 'min' in extras and value < extras['min']:
                return _fail(name, 'below minimum', 'min')
            if 'max' in extras and value > extras['max']:
                return _fail(name, 'above maximum', 'max')
        elif type_name == 'str':
            s = value.strip()
            if len(s) < extras.get('min_len', 1):
                return _fail(name, 'too short', 'min_len')
            if 'max_len' in extras and len(s) > extras['max_len']:
                return _fail(name, 'too long', 'max_len')
            value = s
        out[name] = value
    return True, out


# Predefined schemas used by handlers
ADVANCE_LAYOUT: Dict[str, tuple] = {}
REQUEST_LAYOUT: Dict[str, tuple] = {}
SELECT_LAYOUT = {
    'index': ('int', True, {'min': 0})
}
