"""
Helpers shared by the JSON views
"""

import json

from .exceptions import ValidationError


def parse_request_data(request):
    """
    Request payload as a dict

    JSON bodies (Content-Type: application/json) are decoded; anything
    else falls back to the form-encoded POST data.

    Raises:
        ValidationError: malformed JSON, or a JSON body that is not an object
    """
    if request.content_type == 'application/json':
        if not request.body:
            return {}
        try:
            data = json.loads(request.body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise ValidationError('Invalid JSON format')
        if not isinstance(data, dict):
            raise ValidationError('Expected a JSON object')
        return data

    return request.POST.dict()


def get_actor(request):
    return request.user.as_actor()
