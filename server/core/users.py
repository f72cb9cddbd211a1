# server/core/users.py

from dataclasses import dataclass
from passlib.context import CryptContext


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

DEFAULT_ROLES = ("USER", "ADMIN")

# (username, plaintext password) pairs hashed once at import.
DEFAULT_USERS = [
    ("Lia", "pass"),
    ("Leo", "pass"),
]


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


@dataclass(frozen=True)
class StoredUser:
    username: str
    hashed_password: str
    roles: tuple[str, ...] = DEFAULT_ROLES


class UserStore:
    """
    Read-only identity store built once at process start.
    Only password hashes are kept; usernames are case-sensitive.
    """

    def __init__(self, users: list[tuple[str, str]], roles: tuple[str, ...] = DEFAULT_ROLES):
        self._users = {}
        for username, password in users:
            if username in self._users:
                raise ValueError(f"Duplicate username: {username}")
            self._users[username] = StoredUser(username, get_password_hash(password), roles)

    def get(self, username: str) -> StoredUser | None:
        return self._users.get(username)

    def authenticate(self, username: str, password: str) -> StoredUser | None:
        user = self.get(username)
        if not user or not verify_password(password, user.hashed_password):
            return None
        return user

    def __contains__(self, username: str) -> bool:
        return username in self._users

    def __len__(self) -> int:
        return len(self._users)


user_store = UserStore(DEFAULT_USERS)
