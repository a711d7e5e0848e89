import random
import string

from flask import current_app

from wordlobby import store
from wordlobby.errors import Internal, NotFound, ResourceExhausted

LOBBY_CODE_MAP_PATH = 'lobbyCodeMap'
LOBBY_CODE_LENGTH = 4


def generate_lobby_code() -> str:
    """Random code of uppercase letters. Uniqueness is the registry's job."""
    return ''.join(random.choice(string.ascii_uppercase) for _ in range(LOBBY_CODE_LENGTH))


def allocate_lobby_code(lobby_id: str, timestamp: int) -> str:
    """Claim a free code for ``lobby_id`` in the shared code map.

    A code is free when it has never been handed out or when its mapping is
    at least LOBBY_CODE_EXPIRY_MS old at ``timestamp``.
    """
    expiry_ms = int(current_app.config.get('LOBBY_CODE_EXPIRY_MS', 3600000))
    max_attempts = int(current_app.config.get('LOBBY_CODE_MAX_ATTEMPTS', 1000))
    failure = None

    def claim(code_map):
        nonlocal failure
        failure = None
        if not code_map:
            code_map = {}

        free_code = None
        for _ in range(max_attempts):
            candidate = generate_lobby_code()
            existing = code_map.get(candidate)
            if existing is None or timestamp - existing['created'] >= expiry_ms:
                free_code = candidate
                break
        if free_code is None:
            failure = ResourceExhausted(f'Could not find a free lobby code in {max_attempts} attempts.')
            return store.ABORT

        code_map[free_code] = {'lobbyId': lobby_id, 'created': timestamp}
        code_map['mostRecent'] = free_code
        return code_map

    result = store.run_transaction(LOBBY_CODE_MAP_PATH, claim)
    if not result.committed:
        raise failure or Internal('Lobby code map kept changing; giving up on allocation.')
    code = result.value['mostRecent']
    current_app.logger.info(f"[code-alloc] lobby={lobby_id} code={code}")
    return code


def resolve_lobby_code(code: str) -> str:
    """Return the lobby id mapped to ``code`` (any letter case)."""
    code_map = store.get_document(LOBBY_CODE_MAP_PATH) or {}
    mapping = code_map.get(code.upper())
    if not isinstance(mapping, dict):
        raise NotFound(f'Mapping for lobby code {code} not found.')
    return mapping['lobbyId']
