from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from threading import RLock

from .errors import NotRegisteredError, ValidationError
from .notifier import Notifier

logger = logging.getLogger(__name__)


@dataclass
class Invite:
    from_user_id: str
    from_username: str
    room_code: str

    def to_dict(self) -> dict:
        return {"fromUserId": self.from_user_id, "fromUsername": self.from_username, "roomId": self.room_code}


@dataclass
class User:
    user_id: str
    username: str
    online: bool = True
    friends: set[str] = field(default_factory=set)
    pending_invites: list[Invite] = field(default_factory=list)


class UserDirectory:
    """Profiles, friend links and pending invites, kept for the process lifetime."""

    def __init__(self, notifier: Notifier):
        self._notifier = notifier
        self._lock = RLock()
        self._users: dict[str, User] = {}

    def get(self, user_id: str | None) -> User | None:
        with self._lock:
            return self._users.get(user_id) if user_id else None

    def require(self, user_id: str | None) -> User:
        user = self.get(user_id)
        if user is None:
            raise NotRegisteredError()
        return user

    def _friend_dict(self, friend_id: str) -> dict:
        f = self._users.get(friend_id)
        return {"userId": friend_id, "username": f.username if f else None, "online": bool(f and f.online)}

    def profile(self, user: User) -> dict:
        with self._lock:
            return {
                "userId": user.user_id,
                "username": user.username,
                "friends": [self._friend_dict(fid) for fid in sorted(user.friends)],
                "pendingInvites": [i.to_dict() for i in user.pending_invites],
            }

    def register(self, user_id: str | None = None, username: str | None = None) -> User:
        username = (username or "").strip()
        with self._lock:
            user = self._users.get(user_id) if user_id else None
            if user is None:
                new_id = user_id or str(uuid.uuid4())
                user = User(user_id=new_id, username=username or f"Guest_{new_id[:4]}")
                self._users[new_id] = user
            elif username and username != user.username:
                user.username = username
            user.online = True
            friends = sorted(user.friends)

        logger.info("[user-register] user=%s name=%s", user.user_id, user.username)
        for fid in friends:
            friend = self.get(fid)
            if friend and friend.online:
                self._notifier.friend_online(fid, user.user_id)
        return user

    def rename(self, user_id: str, username: str) -> User:
        name = (username or "").strip()
        if not name:
            raise ValidationError("Invalid username")
        with self._lock:
            user = self.require(user_id)
            user.username = name
        self._notifier.user_updated(user.user_id, {"username": name})
        return user

    def add_friend(self, user_id: str, friend_id: str) -> dict:
        with self._lock:
            user = self.require(user_id)
            friend = self._users.get(friend_id)
            if friend is None:
                raise ValidationError("User not found")
            if friend.user_id == user.user_id:
                raise ValidationError("You cannot add yourself")
            user.friends.add(friend.user_id)
            friend.friends.add(user.user_id)
            notify = friend.online

        if notify:
            self._notifier.friend_added(friend.user_id, {"userId": user.user_id, "username": user.username})
        return self._friend_dict(friend.user_id)

    def invite(self, user_id: str, friend_id: str, room_code: str) -> Invite:
        with self._lock:
            user = self.require(user_id)
            friend = self._users.get(friend_id)
            if friend is None:
                raise ValidationError("User not found")
            invite = Invite(from_user_id=user.user_id, from_username=user.username, room_code=room_code)
            friend.pending_invites.append(invite)
            notify = friend.online

        if notify:
            self._notifier.game_invite(friend.user_id, invite.to_dict())
        return invite

    def decline_invite(self, user_id: str, room_code: str) -> list[dict]:
        with self._lock:
            user = self.require(user_id)
            user.pending_invites = [i for i in user.pending_invites if i.room_code != room_code]
            pending = [i.to_dict() for i in user.pending_invites]
        self._notifier.user_updated(user.user_id, {"pendingInvites": pending})
        return pending

    def drop_invites_for_room(self, room_code: str, user_id: str | None = None) -> None:
        """Remove invites to ``room_code``, for one user or for everyone."""
        changed: list[tuple[str, list[dict]]] = []
        with self._lock:
            users = [self._users[user_id]] if user_id in self._users else []
            if user_id is None:
                users = list(self._users.values())
            for u in users:
                kept = [i for i in u.pending_invites if i.room_code != room_code]
                if len(kept) != len(u.pending_invites):
                    u.pending_invites = kept
                    if u.online:
                        changed.append((u.user_id, [i.to_dict() for i in kept]))

        for uid, pending in changed:
            self._notifier.user_updated(uid, {"pendingInvites": pending})

    def mark_offline(self, user_id: str) -> None:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return
            user.online = False
            friends = sorted(user.friends)

        for fid in friends:
            friend = self.get(fid)
            if friend and friend.online:
                self._notifier.friend_offline(fid, user_id)
