"""Typed views of the lobby document and the request payloads that feed it.

Stored documents use camelCase keys; the records convert at the boundary so
service code never indexes raw dicts.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from wordlobby.errors import Internal, InvalidArgument

STATUS_LOBBY = 'LOBBY'
STATUS_SUBMISSION = 'SUBMISSION'
STATUS_FINISHED = 'FINISHED'

_WORD_RE = re.compile(r'[a-zA-Z]+')
_LOBBY_CODE_RE = re.compile(r'[a-zA-Z]{4}')


@dataclass
class Player:
    display_name: str
    color_number: int
    emoji_number: int
    score: int = 0

    @classmethod
    def from_dict(cls, data) -> 'Player':
        return cls(
            display_name=data['displayName'],
            color_number=data['colorNumber'],
            emoji_number=data['emojiNumber'],
            score=data.get('score', 0),
        )

    def to_dict(self):
        return {
            'displayName': self.display_name,
            'colorNumber': self.color_number,
            'emojiNumber': self.emoji_number,
            'score': self.score,
        }


@dataclass
class Turn:
    player: str
    submitted_word: Optional[str] = None

    @property
    def pending(self) -> bool:
        return self.submitted_word is None

    @classmethod
    def from_dict(cls, data) -> 'Turn':
        return cls(player=data['player'], submitted_word=data.get('submittedWord'))

    def to_dict(self):
        return {'player': self.player, 'submittedWord': self.submitted_word}


@dataclass
class PrivateState:
    target_words: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data) -> 'PrivateState':
        return cls(target_words=list(data.get('targetWords', [])))

    def to_dict(self):
        return {'targetWords': list(self.target_words)}


@dataclass
class LobbyInternal:
    status: str
    created: int
    host_id: str

    @classmethod
    def from_dict(cls, data) -> 'LobbyInternal':
        return cls(status=data['status'], created=data['created'], host_id=data['hostId'])

    def to_dict(self):
        return {'status': self.status, 'created': self.created, 'hostId': self.host_id}


@dataclass
class LobbyPublic:
    players: Dict[str, Player] = field(default_factory=dict)
    player_order: Optional[List[str]] = None
    start_word: Optional[str] = None
    turns: Optional[List[Turn]] = None

    @classmethod
    def from_dict(cls, data) -> 'LobbyPublic':
        turns = data.get('turns')
        return cls(
            players={uid: Player.from_dict(p) for uid, p in (data.get('players') or {}).items()},
            player_order=list(data['playerOrder']) if data.get('playerOrder') is not None else None,
            start_word=data.get('startWord'),
            turns=[Turn.from_dict(t) for t in turns] if turns is not None else None,
        )

    def to_dict(self):
        out = {'players': {uid: p.to_dict() for uid, p in self.players.items()}}
        if self.player_order is not None:
            out['playerOrder'] = list(self.player_order)
        if self.start_word is not None:
            out['startWord'] = self.start_word
        if self.turns is not None:
            out['turns'] = [t.to_dict() for t in self.turns]
        return out


@dataclass
class Lobby:
    lobby_id: str
    internal: LobbyInternal
    public: LobbyPublic = field(default_factory=LobbyPublic)
    private: Dict[str, PrivateState] = field(default_factory=dict)

    @property
    def current_turn(self) -> Optional[Turn]:
        if not self.public.turns:
            return None
        return self.public.turns[-1]

    @classmethod
    def from_dict(cls, lobby_id: str, data) -> 'Lobby':
        try:
            return cls(
                lobby_id=lobby_id,
                internal=LobbyInternal.from_dict(data['internal']),
                public=LobbyPublic.from_dict(data.get('public') or {}),
                private={uid: PrivateState.from_dict(p) for uid, p in (data.get('private') or {}).items()},
            )
        except (KeyError, TypeError, AttributeError) as exc:
            raise Internal(f"Lobby with id {lobby_id} is malformed: {exc!r}") from exc

    def to_dict(self):
        out = {'internal': self.internal.to_dict(), 'public': self.public.to_dict()}
        if self.private:
            out['private'] = {uid: p.to_dict() for uid, p in self.private.items()}
        return out

    def public_view(self):
        return {
            'lobbyId': self.lobby_id,
            'status': self.internal.status,
            'hostId': self.internal.host_id,
            'public': self.public.to_dict(),
        }


# ---- Request payload parsing ----

def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parse_player(player) -> Player:
    """Build a Player from a request payload, ignoring any client-supplied score."""
    if not isinstance(player, dict):
        raise InvalidArgument('Missing player object.')
    display_name = player.get('displayName')
    if not isinstance(display_name, str) or not display_name.strip():
        raise InvalidArgument('Missing player.displayName.')
    if not _is_int(player.get('colorNumber')):
        raise InvalidArgument('Missing player.colorNumber.')
    if not _is_int(player.get('emojiNumber')):
        raise InvalidArgument('Missing player.emojiNumber.')
    return Player(
        display_name=display_name,
        color_number=player['colorNumber'],
        emoji_number=player['emojiNumber'],
    )


def check_word(word) -> str:
    if not word or not isinstance(word, str):
        raise InvalidArgument('Missing word in submitWord request.')
    if not _WORD_RE.fullmatch(word):
        raise InvalidArgument('Submitted word contains disallowed characters.')
    return word


def check_lobby_code(code) -> str:
    if not isinstance(code, str) or not _LOBBY_CODE_RE.fullmatch(code):
        raise InvalidArgument('Missing or invalid lobby code.')
    return code
