from typing import Protocol


class IPasswordEncoder(Protocol):
    def hash_password(self, password: str) -> str: ...

    def verify(self, password: str, hashed_password: str) -> bool: ...

    def needs_rehash(self, hashed_password: str) -> bool:
        """Whether the hash was made with other parameters than the current ones."""
        ...
