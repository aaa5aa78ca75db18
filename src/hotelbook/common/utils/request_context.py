import base64
import json
from typing import Optional


def get_user_id(event: dict) -> Optional[str]:
    try:
        return event["requestContext"]["authorizer"]["user_id"] or None
    except (KeyError, TypeError):
        return None


def get_path_param(event: dict, name: str) -> Optional[str]:
    return (event.get("pathParameters") or {}).get(name)


def get_header(event: dict, name: str) -> Optional[str]:
    headers = event.get("headers") or {}
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def parse_json_body(event: dict) -> dict:
    body = event.get("body")
    if not body:
        return {}
    if event.get("isBase64Encoded"):
        body = base64.b64decode(body).decode("utf-8")
    parsed = json.loads(body)
    if not isinstance(parsed, dict):
        raise ValueError("Request body must be a JSON object")
    return parsed
