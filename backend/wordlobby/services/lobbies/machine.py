"""Lobby lifecycle: create, join, start and word submission.

Each transition is a validate/mutate pair handed to ``update_lobby``. The
validators return errors instead of raising so the transaction can abort
cleanly; the mutators assume validation passed and cannot fail.
"""

import time

from flask import current_app

from wordlobby import store
from wordlobby.errors import FailedPrecondition, NotFound, PermissionDenied
from wordlobby.services.lobbies.codes import allocate_lobby_code, resolve_lobby_code
from wordlobby.services.lobbies.index import find_lobby_for_player, set_player_lobby
from wordlobby.services.lobbies.records import (
    STATUS_FINISHED,
    STATUS_LOBBY,
    STATUS_SUBMISSION,
    Lobby,
    Player,
    PrivateState,
    Turn,
    check_lobby_code,
    check_word,
    parse_player,
)
from wordlobby.services.lobbies.shuffle import shuffle_players
from wordlobby.services.lobbies.transactions import LOBBIES, lobby_path, update_lobby


def _now_ms() -> int:
    return int(time.time() * 1000)


def add_player(lobby_id: str, player: Player, identity: str) -> Lobby:
    """Seat ``identity`` in an open lobby and point the player index at it.

    The index is only written once the seat is committed, as a separate
    document write; a crash in between leaves the player seated but not
    indexed. A player who is already seated keeps their existing entry.
    """
    def validate(lobby: Lobby):
        if lobby.internal.status != STATUS_LOBBY:
            return FailedPrecondition(f'Lobby with id {lobby_id} is no longer open to join.')
        return None

    def mutate(lobby: Lobby):
        if identity in lobby.public.players:
            return
        seated = Player(
            display_name=player.display_name,
            color_number=player.color_number,
            emoji_number=player.emoji_number,
            score=0,
        )
        lobby.public.players[identity] = seated

    lobby = update_lobby(lobby_id, validate, mutate)
    set_player_lobby(identity, lobby_id)
    current_app.logger.info(f"[lobby-join] lobby={lobby_id} player={identity} players={len(lobby.public.players)}")
    return lobby


def create_lobby(identity: str, player_payload) -> dict:
    player = parse_player(player_payload)
    now = _now_ms()
    lobby_id = store.push_document(LOBBIES, {
        'internal': {
            'status': STATUS_LOBBY,
            'created': now,
            'hostId': identity,
        }
    })
    lobby_code = allocate_lobby_code(lobby_id, now)
    add_player(lobby_id, player, identity)
    current_app.logger.info(f"[lobby-create] lobby={lobby_id} code={lobby_code} host={identity}")
    return {'lobbyId': lobby_id, 'lobbyCode': lobby_code}


def join_lobby(identity: str, player_payload, lobby_code) -> dict:
    player = parse_player(player_payload)
    lobby_code = check_lobby_code(lobby_code)
    lobby_id = resolve_lobby_code(lobby_code)
    add_player(lobby_id, player, identity)
    return {'lobbyId': lobby_id}


def start_game(identity: str) -> Lobby:
    lobby_id = find_lobby_for_player(identity)
    start_word = current_app.config.get('START_WORD', 'password')
    target_words = list(current_app.config.get('TARGET_WORDS', []))

    def validate(lobby: Lobby):
        if lobby.internal.host_id != identity:
            return PermissionDenied(f'You are not the host of the lobby with id {lobby_id}.')
        if lobby.internal.status != STATUS_LOBBY:
            return FailedPrecondition(f'Lobby with id {lobby_id} already started.')
        if not lobby.public.players:
            return FailedPrecondition(f'Lobby with id {lobby_id} has no players.')
        return None

    def mutate(lobby: Lobby):
        player_ids = list(lobby.public.players.keys())
        lobby.public.player_order = shuffle_players(player_ids)
        lobby.public.start_word = start_word
        lobby.public.turns = [Turn(player=lobby.public.player_order[0])]
        lobby.private = {uid: PrivateState(target_words=list(target_words)) for uid in player_ids}
        lobby.internal.status = STATUS_SUBMISSION

    lobby = update_lobby(lobby_id, validate, mutate)
    current_app.logger.info(f"[lobby-start] lobby={lobby_id} order={lobby.public.player_order}")
    return lobby


def submit_word(identity: str, word) -> Lobby:
    """Record ``word`` for the caller's pending turn and hand the turn on.

    After every player in the play order has submitted SUBMISSION_ROUNDS
    times the lobby moves to FINISHED.
    """
    word = check_word(word)
    lobby_id = find_lobby_for_player(identity)
    rounds = max(1, int(current_app.config.get('SUBMISSION_ROUNDS', 1)))

    def validate(lobby: Lobby):
        if lobby.internal.status != STATUS_SUBMISSION:
            return FailedPrecondition(f'Lobby with id {lobby_id} not awaiting word submission.')
        if identity not in lobby.public.players:
            return PermissionDenied(f'You are not a player in the lobby with id {lobby_id}.')
        turn = lobby.current_turn
        if turn is None or not turn.pending or turn.player != identity:
            return FailedPrecondition(f'It is not your turn in the lobby with id {lobby_id}.')
        return None

    def mutate(lobby: Lobby):
        order = lobby.public.player_order
        turns = lobby.public.turns
        turns[-1].submitted_word = word
        if len(turns) >= len(order) * rounds:
            lobby.internal.status = STATUS_FINISHED
        else:
            turns.append(Turn(player=order[len(turns) % len(order)]))

    lobby = update_lobby(lobby_id, validate, mutate)
    current_app.logger.info(
        f"[lobby-submit] lobby={lobby_id} player={identity} turns={len(lobby.public.turns)} status={lobby.internal.status}"
    )
    return lobby


def get_lobby_state(lobby_id: str) -> dict:
    value = store.get_document(lobby_path(lobby_id))
    if value is None:
        raise NotFound(f'Lobby with id {lobby_id} not found.')
    return Lobby.from_dict(lobby_id, value).public_view()


def get_private_state(identity: str) -> dict:
    lobby_id = find_lobby_for_player(identity)
    value = store.get_document(lobby_path(lobby_id))
    if value is None:
        raise NotFound(f'Lobby with id {lobby_id} not found.')
    lobby = Lobby.from_dict(lobby_id, value)
    private = lobby.private.get(identity)
    if private is None:
        raise FailedPrecondition(f'Lobby with id {lobby_id} has not started yet.')
    return {'lobbyId': lobby_id, 'targetWords': list(private.target_words)}
