"""Registration and login."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import User
from repositories.user_repository import UserRepository
from schemas.user import LoginResponse, UserCreate, UserLogin, UserResponse
from services.base import BaseService
from services.exceptions import AuthenticationError, ConflictError
from utils.logger import auth_logger as logger
from utils.security import create_access_token, hash_password, verify_password

DEFAULT_ROLE = "user"


class AuthService(BaseService[User]):
    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self.repo = UserRepository(session)

    async def register(self, data: UserCreate) -> UserResponse:
        """
        Create a regular user.

        Raises:
            ConflictError: username or email already taken
        """
        if await self.repo.exists_with(data.username, data.email):
            raise ConflictError("User with this username or email already exists")

        try:
            user = await self.repo.create(
                username=data.username,
                email=data.email,
                password=hash_password(data.password),
                role=DEFAULT_ROLE,
            )
            await self.commit()
        except IntegrityError as exc:
            # Lost a race with a concurrent registration
            await self.rollback()
            raise ConflictError("User with this username or email already exists") from exc

        logger.info("User registered", user_id=user.id, username=user.username)
        return UserResponse.model_validate(user)

    async def login(self, data: UserLogin) -> LoginResponse:
        """
        Check credentials and issue an access token.

        Raises:
            AuthenticationError: unknown user or wrong password
        """
        user = await self.repo.get_by_username(data.username)
        if user is None or not verify_password(data.password, user.password):
            logger.warning("Login failed", username=data.username)
            raise AuthenticationError("Invalid username or password")

        token = create_access_token(user.id, user.username, user.role)
        logger.info("User logged in", user_id=user.id)
        return LoginResponse(user=UserResponse.model_validate(user), token=token)
