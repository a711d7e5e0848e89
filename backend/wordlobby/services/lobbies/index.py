from wordlobby import store
from wordlobby.errors import Internal

PLAYER_LOBBY_MAPPING = 'playerLobbyMapping'


def set_player_lobby(identity: str, lobby_id: str) -> None:
    store.set_document(f"{PLAYER_LOBBY_MAPPING}/{identity}", lobby_id)


def find_lobby_for_player(identity: str) -> str:
    """Current lobby of ``identity``. Missing entries are a server-side inconsistency."""
    lobby_id = store.get_document(f"{PLAYER_LOBBY_MAPPING}/{identity}")
    if not lobby_id:
        raise Internal(f'Could not find current lobby for user {identity}.')
    return lobby_id
