from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from wordlobby.errors import InvalidArgument
from wordlobby.services.lobbies import machine


lobbies = Blueprint('lobbies', __name__)


def _json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidArgument('Request body must be a JSON object.')
    return data


@lobbies.route('/create', methods=['POST'])
@login_required
def create_lobby():
    """Open a new lobby with the caller as host and first player."""
    data = _json_body()
    result = machine.create_lobby(current_user.id, data.get('player'))
    return jsonify(result), 201


@lobbies.route('/join', methods=['POST'])
@login_required
def join_lobby():
    data = _json_body()
    result = machine.join_lobby(current_user.id, data.get('player'), data.get('lobbyCode'))
    return jsonify(result)


@lobbies.route('/start', methods=['POST'])
@login_required
def start_game():
    """Host-only: shuffle the play order and open word submission."""
    lobby = machine.start_game(current_user.id)
    return jsonify(lobby.to_dict())


@lobbies.route('/submit', methods=['POST'])
@login_required
def submit_word():
    data = _json_body()
    lobby = machine.submit_word(current_user.id, data.get('word'))
    return jsonify(lobby.to_dict())


@lobbies.route('/<string:lobby_id>/state', methods=['GET'])
@login_required
def get_lobby_state(lobby_id):
    return jsonify(machine.get_lobby_state(lobby_id))


@lobbies.route('/me/private', methods=['GET'])
@login_required
def get_private_state():
    """The caller's own secret target words."""
    return jsonify(machine.get_private_state(current_user.id))
