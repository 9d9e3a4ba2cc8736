"""
Persistence contracts consumed by the user manager.

Concrete query implementations live in the persistence layer; anything
exposing these coroutines can be injected, including test doubles.
Stores signal missing rows or constraint violations by raising, and those
errors reach callers unchanged.
"""

from typing import Any, Iterable, Protocol, Union

from esign.models.user import SigningPageData, User, UserCreate, UserVersion
from esign.models.version import Version


class UserStore(Protocol):
    """Queries over signers."""

    async def add(self, user: UserCreate) -> User: ...

    async def get_by_email(self, email: str) -> User: ...

    async def get_by_doc_id(self, doc_id: int) -> Any: ...

    async def archive(self, user_version_id: int) -> None: ...


class UserVersionStore(Protocol):
    """Queries over user/version links and their signing state."""

    async def get_by_id(self, user_version_id: int) -> UserVersion: ...

    async def get_signing_page_data(
        self, token: str
    ) -> Union[SigningPageData, dict, None]: ...

    async def get_signing_tokens(self) -> Iterable[str]: ...

    async def add_signing_token(
        self, user_id: int, version_id: int, token: str
    ) -> None: ...

    async def get_user_version_id_by_token(self, token: str) -> int: ...

    async def sign_doc(self, token: str, signature: str) -> None: ...

    async def get_signing_user_data(self, user_version_id: int) -> Any: ...

    async def get_signing_user_image(self, user_version_id: int) -> Any: ...

    async def get_signed_doc(self, user_version_id: int) -> Any: ...


class VersionStore(Protocol):
    """Queries over document versions."""

    async def get_latest(self, document_id: Union[int, str]) -> Version: ...

    async def get_by_id(self, version_id: int) -> Version: ...
