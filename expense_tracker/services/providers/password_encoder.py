import bcrypt

from expense_tracker.services.providers.protocols.password_encoder import IPasswordEncoder
from expense_tracker.settings.app import AppSettings


class BcryptPasswordEncoder(IPasswordEncoder):
    # bcrypt silently ignores everything past 72 bytes
    max_password_bytes = 72

    def __init__(self, settings: AppSettings) -> None:
        self.rounds = settings.bcrypt_rounds

    def _encode(self, password: str) -> bytes:
        return password.encode("utf-8")[: self.max_password_bytes]

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(self._encode(password), salt).decode("utf-8")

    def verify(self, password: str, hashed_password: str) -> bool:
        try:
            return bcrypt.checkpw(self._encode(password), hashed_password.encode("utf-8"))
        except ValueError:
            # malformed hash stored for the user
            return False

    def needs_rehash(self, hashed_password: str) -> bool:
        # "$2b$<rounds>$<salt+hash>"
        try:
            rounds = int(hashed_password.split("$")[2])
        except (IndexError, ValueError):
            return True
        return rounds != self.rounds
