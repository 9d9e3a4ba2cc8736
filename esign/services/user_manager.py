import functools
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, TypeAdapter

from esign.core.config import settings
from esign.core.exceptions import (
    NotFoundError,
    TokenSpaceExhaustedError,
    ValidationError,
)
from esign.core.logging import get_service_logger
from esign.models.user import SigningPageData, User, UserCreate
from esign.models.version import Version
from esign.services.stores import UserStore, UserVersionStore, VersionStore
from esign.utils.tokens import generate_random_token
from esign.utils.validators import require, require_text, validate_email, validate_id

logger = get_service_logger("user_manager")

_datetime_adapter = TypeAdapter(datetime)

TokenGenerator = Callable[[int, bool], Optional[str]]


def _log_validation_failures(func):
    """Log rejected input at warning level and re-raise."""

    @functools.wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            return await func(self, *args, **kwargs)
        except ValidationError as e:
            self.logger.warning(
                "Validation failed",
                operation=e.operation,
                field=e.field,
                error=e.message,
            )
            raise

    return wrapper


def _record_id(record: Any) -> Any:
    """Read the identifier of a store row (mapping or model)."""
    if isinstance(record, Mapping):
        return record["id"]
    return record.id


def _format_doc_date(value: Union[datetime, date, str], fmt: str) -> str:
    """Render a document date for display (DD/MM/YYYY by default)."""
    if isinstance(value, str):
        value = _datetime_adapter.validate_python(value)
    return value.strftime(fmt)


class UserManager:
    """
    Validation and orchestration for signers and their signing tokens.

    Every operation validates its input before touching a store. Store
    errors are propagated unchanged.
    """

    def __init__(
        self,
        user_store: UserStore,
        user_version_store: UserVersionStore,
        version_store: VersionStore,
        token_generator: TokenGenerator = generate_random_token,
        token_length: Optional[int] = None,
        max_token_attempts: Optional[int] = None,
        doc_date_format: Optional[str] = None,
    ):
        self.user_store = user_store
        self.user_version_store = user_version_store
        self.version_store = version_store
        self.token_generator = token_generator
        self.token_length = (
            token_length if token_length is not None else settings.SIGNING_TOKEN_LENGTH
        )
        self.max_token_attempts = (
            max_token_attempts
            if max_token_attempts is not None
            else settings.SIGNING_TOKEN_MAX_ATTEMPTS
        )
        self.doc_date_format = (
            doc_date_format if doc_date_format is not None else settings.DOC_DATE_FORMAT
        )
        self.logger = logger

    @_log_validation_failures
    async def add(self, user: Union[Mapping, BaseModel, None]) -> User:
        """
        Add a new user.

        Args:
            user: Mapping or model with first_name, last_name and email

        Returns:
            The persisted user as returned by the user store

        Raises:
            ValidationError: If the user or any required field is missing or invalid
        """
        operation = "UserManager.add"

        require(user, "user", operation)
        if isinstance(user, BaseModel):
            user = user.model_dump()
        if not isinstance(user, Mapping):
            raise ValidationError(
                f"[{operation}] The user must be a mapping",
                operation=operation,
                field="user",
            )

        first_name = require_text(user.get("first_name"), "first name", operation)
        last_name = require_text(user.get("last_name"), "last name", operation)
        email = validate_email(user.get("email"), operation)

        created = await self.user_store.add(
            UserCreate(first_name=first_name, last_name=last_name, email=email)
        )

        self.logger.info("User created", email=email)
        return created

    @_log_validation_failures
    async def get_by_id(self, user_version_id: Any) -> Any:
        """
        Get a user-version record by its ID.

        The lookup goes to the user-version store, so the result carries
        signing state rather than a bare user.
        """
        user_version_id = validate_id(user_version_id, "ID", "UserManager.get_by_id")
        return await self.user_version_store.get_by_id(user_version_id)

    @_log_validation_failures
    async def get_by_email(self, email: Any) -> User:
        """Get a user by email address."""
        email = validate_email(email, "UserManager.get_by_email")
        return await self.user_store.get_by_email(email)

    @_log_validation_failures
    async def get_by_doc_id(self, doc_id: Any) -> Any:
        """Get the users attached to a document."""
        doc_id = validate_id(doc_id, "document ID", "UserManager.get_by_doc_id")
        return await self.user_store.get_by_doc_id(doc_id)

    @_log_validation_failures
    async def get_signing_page_data(self, token: Any) -> SigningPageData:
        """
        Get the data shown on the signing page for a token.

        Returns:
            Signing page data with doc_date rendered as a display string

        Raises:
            ValidationError: If the token is missing or matches nothing
        """
        operation = "UserManager.get_signing_page_data"
        require(token, "token", operation)

        data = await self.user_version_store.get_signing_page_data(token)
        require(
            data,
            "token",
            operation,
            message="No data found for the given token",
        )

        page_data = SigningPageData.from_store(data)
        page_data.doc_date = _format_doc_date(page_data.doc_date, self.doc_date_format)
        return page_data

    @_log_validation_failures
    async def archive(self, user_version_id: Any) -> None:
        """Archive a signer by user-version ID."""
        user_version_id = validate_id(
            user_version_id, "user version ID", "UserManager.archive"
        )

        result = await self.user_store.archive(user_version_id)
        self.logger.info("User archived", user_version_id=user_version_id)
        return result

    @_log_validation_failures
    async def generate_signing_token(self, email: Any, document_id: Any) -> str:
        """
        Issue a signing token for a user on the latest version of a document.

        Args:
            email: Email of the signer
            document_id: Document whose latest version is to be signed

        Returns:
            The new token

        Raises:
            ValidationError: If the email or document ID is missing or invalid
            TokenSpaceExhaustedError: If no unused token was found in time
            NotFoundError: If the user or document version does not exist
        """
        operation = "UserManager.generate_signing_token"
        validate_email(email, operation)
        require(document_id, "document ID", operation)

        token = await self._generate_unused_token()

        user = await self.get_by_email(email)
        if user is None:
            raise NotFoundError(
                f"User with email '{email}' not found", details={"email": email}
            )

        version = await self.version_store.get_latest(document_id)
        if version is None:
            raise NotFoundError(
                f"No version found for document {document_id}",
                details={"document_id": document_id},
            )

        user_id = _record_id(user)
        version_id = _record_id(version)
        await self.user_version_store.add_signing_token(user_id, version_id, token)

        self.logger.info(
            "Signing token issued",
            user_id=user_id,
            version_id=version_id,
            document_id=document_id,
        )
        return token

    async def _generate_unused_token(self) -> str:
        """Draw tokens until one is not already outstanding."""
        active_tokens = set(await self.user_version_store.get_signing_tokens() or ())

        for _ in range(self.max_token_attempts):
            token = self.token_generator(self.token_length, False)
            if token and token not in active_tokens:
                return token

        self.logger.error(
            "Signing token generation exhausted",
            attempts=self.max_token_attempts,
            active_tokens=len(active_tokens),
        )
        raise TokenSpaceExhaustedError(attempts=self.max_token_attempts)

    @_log_validation_failures
    async def sign(self, token: Any, signature: Any) -> Any:
        """
        Sign the document bound to a token.

        Token validity (existence, reuse, expiry) is enforced by the store.

        Returns:
            The signed document
        """
        operation = "UserManager.sign"
        require(token, "token", operation)
        require(signature, "signature", operation)

        user_version_id = await self.user_version_store.get_user_version_id_by_token(
            token
        )
        if not user_version_id:
            raise NotFoundError("No document found for the given token")

        await self.user_version_store.sign_doc(token, signature)
        self.logger.info("Document signed", user_version_id=user_version_id)

        return await self._get_signed_doc(user_version_id)

    async def _get_signed_doc(self, user_version_id: Any) -> Any:
        return await self.user_version_store.get_signed_doc(user_version_id)

    @_log_validation_failures
    async def get_version(self, version_id: Any) -> Version:
        """Get a document version by ID."""
        version_id = validate_id(version_id, "version ID", "UserManager.get_version")
        return await self.version_store.get_by_id(version_id)

    @_log_validation_failures
    async def get_signing_user_data(self, user_version_id: Any) -> Any:
        """Get signer details for a user-version."""
        user_version_id = validate_id(
            user_version_id, "user version ID", "UserManager.get_signing_user_data"
        )
        return await self.user_version_store.get_signing_user_data(user_version_id)

    @_log_validation_failures
    async def get_signing_user_image(self, user_version_id: Any) -> Any:
        user_version_id = validate_id(
            user_version_id, "user version ID", "UserManager.get_signing_user_image"
        )
        return await self.user_version_store.get_signing_user_image(user_version_id)
