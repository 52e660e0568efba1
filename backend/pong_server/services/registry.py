import threading
from typing import Dict, List, Optional

from pong_server.models import Room


class SessionRegistry:
    """Live rooms keyed by id, plus the player id -> room id index.

    A player belongs to at most one live room. Rooms are looked up by key
    on every access; nothing outside holds on to the index itself.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._rooms: Dict[str, Room] = {}
        self._player_rooms: Dict[str, str] = {}
        # Members as registered, in case a room loses a player before removal
        self._members: Dict[str, List[str]] = {}

    def __len__(self):
        with self._lock:
            return len(self._rooms)

    def __contains__(self, player_id):
        with self._lock:
            return player_id in self._player_rooms

    def add(self, room: Room) -> None:
        with self._lock:
            taken = [pid for pid in room.player_ids if pid in self._player_rooms]
            if taken:
                raise ValueError(f"players already in a room: {taken}")
            self._rooms[room.id] = room
            self._members[room.id] = room.player_ids
            for pid in room.player_ids:
                self._player_rooms[pid] = room.id

    def get(self, room_id: str) -> Optional[Room]:
        with self._lock:
            return self._rooms.get(room_id)

    def room_for(self, player_id: str) -> Optional[Room]:
        with self._lock:
            room_id = self._player_rooms.get(player_id)
            return self._rooms.get(room_id) if room_id else None

    def rooms(self) -> List[Room]:
        with self._lock:
            return list(self._rooms.values())

    def remove(self, room_id: str) -> Optional[Room]:
        """Drop a room and its players' entries. Safe to call twice."""
        with self._lock:
            room = self._rooms.pop(room_id, None)
            if room is None:
                return None
            for pid in self._members.pop(room_id, []):
                if self._player_rooms.get(pid) == room_id:
                    del self._player_rooms[pid]
            return room
