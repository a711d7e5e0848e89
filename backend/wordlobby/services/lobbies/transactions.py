from typing import Callable, Optional

from flask import current_app

from wordlobby import store
from wordlobby.errors import LobbyError, NotFound
from wordlobby.services.lobbies.records import Lobby

LOBBIES = 'lobbies'

ValidateFn = Callable[[Lobby], Optional[LobbyError]]
MutateFn = Callable[[Lobby], None]


def lobby_path(lobby_id: str) -> str:
    return f"{LOBBIES}/{lobby_id}"


def update_lobby(lobby_id: str, validate: ValidateFn, mutate: MutateFn) -> Lobby:
    """Atomically check ``validate`` and apply ``mutate`` to one lobby.

    ``validate`` returns an error to refuse the change or None to allow it;
    ``mutate`` edits the lobby in place. Both run inside the store
    transaction, so they see the latest committed lobby every time the store
    retries, and must only touch the lobby they are given.

    Raises the error from ``validate``, or NotFound if the lobby is missing.
    """
    transaction_error = None

    def apply(value):
        nonlocal transaction_error
        # A missing lobby commits as a no-op so it can be told apart from a
        # transaction that never settled.
        if value is None:
            transaction_error = NotFound(f'Lobby with id {lobby_id} not found.')
            return None
        lobby = Lobby.from_dict(lobby_id, value)
        transaction_error = validate(lobby)
        if transaction_error:
            return store.ABORT
        mutate(lobby)
        return lobby.to_dict()

    result = store.run_transaction(lobby_path(lobby_id), apply)
    if not result.committed or not result.exists:
        raise transaction_error or NotFound(f'Lobby with id {lobby_id} not found.')
    current_app.logger.debug(f"[lobby-commit] lobby={lobby_id}")
    return Lobby.from_dict(lobby_id, result.value)
