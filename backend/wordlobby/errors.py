"""Typed failures shared by the lobby services and the HTTP layer.

Every failure a caller can observe is a ``LobbyError`` subclass. The kind
string is stable and transport-independent; the status code is only the
HTTP rendering of it.
"""

from flask import jsonify


class LobbyError(Exception):
    kind = 'internal'
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self):
        return {'error': self.message, 'kind': self.kind}


class InvalidArgument(LobbyError):
    kind = 'invalid-argument'
    status_code = 400


class Unauthenticated(LobbyError):
    kind = 'unauthenticated'
    status_code = 401


class PermissionDenied(LobbyError):
    kind = 'permission-denied'
    status_code = 403


class NotFound(LobbyError):
    kind = 'not-found'
    status_code = 404


class FailedPrecondition(LobbyError):
    kind = 'failed-precondition'
    status_code = 409


class ResourceExhausted(LobbyError):
    kind = 'resource-exhausted'
    status_code = 429


class Internal(LobbyError):
    kind = 'internal'
    status_code = 500


def register_error_handlers(app) -> None:
    @app.errorhandler(LobbyError)
    def handle_lobby_error(exc: LobbyError):
        if exc.status_code >= 500:
            app.logger.error(f"[lobby-error] kind={exc.kind} message={exc.message}")
        else:
            app.logger.info(f"[lobby-error] kind={exc.kind} message={exc.message}")
        return jsonify(exc.to_dict()), exc.status_code
