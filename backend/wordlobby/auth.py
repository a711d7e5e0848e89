from flask import current_app
from flask_login import UserMixin
from wordlobby.errors import Unauthenticated


class Caller(UserMixin):
    """Opaque authenticated principal. Only the id is known to the server."""

    def __init__(self, caller_id: str):
        self.id = caller_id

    def __repr__(self):
        return f"<Caller {self.id}>"


def load_caller_from_request(request):
    header = current_app.config.get('CALLER_ID_HEADER', 'X-Caller-Id')
    caller_id = (request.headers.get(header) or '').strip()
    if not caller_id:
        return None
    return Caller(caller_id)


def reject_anonymous_caller():
    raise Unauthenticated('Missing caller identity in request.')
