"""
Прикладной слой контекста пользователей и настроек.

Содержит сервисы входа, регистрации и смены пароля, а также сервис
настроек приложения. Ошибки валидации возвращаются как ``Err``,
а не выбрасываются наружу.
"""

from typing import Optional

from pydantic import BaseModel, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..logging_config import StdLogger
from ..shared_kernel import (
    BusinessRuleValidationException,
    EntityId,
    Err,
    ILogger,
    Ok,
    Outcome,
    Result,
    ValidationError,
)
from ..storage import AppStore, StorageKeys
from . import interfaces as ports
from .domain import AppConfig, PasswordPolicy, StoredUser, User
from .infrastructure import default_config

INVALID_CREDENTIALS = "Credenciales incorrectas."
REQUIRED_FIELDS = "Todos los campos son obligatorios."
USERNAME_TAKEN = "El nombre de usuario ya existe."

# DTO для входящих данных


class RegisterRequest(BaseModel):
    """Запрос на регистрацию пользователя."""

    name: str
    username: str
    password: str

    @field_validator("name", "username", "password")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError(REQUIRED_FIELDS)
        return v


class UpdateConfigRequest(BaseModel):
    """Запрос на изменение настроек приложения."""

    app_name: str
    app_logo: str

    @field_validator("app_name")
    @classmethod
    def app_name_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("El nombre de la aplicación es obligatorio.")
        return v.strip()

    @field_validator("app_logo")
    @classmethod
    def app_logo_default(cls, v: str) -> str:
        return v.strip() or "fa-church"


# Сервисы приложения


class AuthApplicationService:
    """Сервис приложения для входа, регистрации и смены пароля."""

    def __init__(
        self,
        store: AppStore,
        users: ports.IUserRepository,
        session: ports.ISessionRepository,
        logger: Optional[ILogger] = None,
    ):
        """Инициализирует сервис."""
        self._store = store
        self._users = users
        self._session = session
        self._logger = logger or StdLogger("identity")

    async def login(self, username: str, password: str) -> Result[User]:
        """Проверяет учетные данные и открывает сессию."""
        async with self._store.unit_of_work(StorageKeys.USERS, StorageKeys.CURRENT_USER):
            user = await self._users.find_by_username(username)
            if user is None or not user.check_password(password):
                self._logger.info("Неудачная попытка входа", username=username)
                return Err(ValidationError(INVALID_CREDENTIALS))

            public_user = user.to_public()
            await self._session.set(public_user)

        self._logger.info("Пользователь вошел в систему", user_id=public_user.id)
        return Ok(public_user)

    async def register(self, name: str, username: str, password: str) -> Result[User]:
        """Регистрирует нового пользователя и сразу открывает сессию."""
        try:
            request = RegisterRequest(name=name, username=username, password=password)
        except PydanticValidationError as e:
            return Err(ValidationError.from_pydantic(e))

        async with self._store.unit_of_work(StorageKeys.USERS, StorageKeys.CURRENT_USER):
            if await self._users.find_by_username(request.username) is not None:
                return Err(ValidationError(USERNAME_TAKEN, field="username"))

            user = StoredUser.register(
                name=request.name,
                username=request.username,
                password=request.password,
            )
            await self._users.add(user)

            public_user = user.to_public()
            await self._session.set(public_user)

        self._logger.info("Зарегистрирован пользователь", user_id=public_user.id)
        return Ok(public_user)

    async def logout(self) -> None:
        """Закрывает текущую сессию."""
        async with self._store.unit_of_work(StorageKeys.CURRENT_USER):
            await self._session.clear()

    async def current_user(self) -> Optional[User]:
        """Возвращает пользователя текущей сессии."""
        async with self._store.unit_of_work(StorageKeys.CURRENT_USER):
            return await self._session.get()

    async def change_password(
        self,
        user_id: EntityId,
        new_password: str,
        confirm_password: Optional[str] = None,
    ) -> Result[Outcome]:
        """Меняет пароль пользователя."""
        try:
            PasswordPolicy.validate(new_password, confirm_password)
        except BusinessRuleValidationException as e:
            return Err(e.to_error())

        async with self._store.unit_of_work(StorageKeys.USERS):
            user = await self._users.get_by_id(user_id)
            if user is None:
                self._logger.debug("Смена пароля: пользователь не найден", user_id=user_id)
                return Ok(Outcome.NOT_FOUND)

            await self._users.update(user.model_copy(update={"password": new_password}))

        self._logger.info("Пароль изменен", user_id=user_id)
        return Ok(Outcome.APPLIED)


class ConfigApplicationService:
    """Сервис приложения для настроек оформления."""

    def __init__(
        self,
        store: AppStore,
        config: ports.IConfigRepository,
        logger: Optional[ILogger] = None,
    ):
        """Инициализирует сервис."""
        self._store = store
        self._config = config
        self._logger = logger or StdLogger("identity")

    async def get_config(self) -> AppConfig:
        """Возвращает настройки; при их отсутствии - значения по умолчанию."""
        async with self._store.unit_of_work(StorageKeys.CONFIG):
            config = await self._config.get()
        return config or default_config()

    async def set_config(self, app_name: str, app_logo: str) -> Result[AppConfig]:
        """Полностью заменяет настройки приложения."""
        try:
            request = UpdateConfigRequest(app_name=app_name, app_logo=app_logo)
        except PydanticValidationError as e:
            return Err(ValidationError.from_pydantic(e))

        config = AppConfig(app_name=request.app_name, app_logo=request.app_logo)
        async with self._store.unit_of_work(StorageKeys.CONFIG):
            await self._config.set(config)

        self._logger.info("Настройки приложения обновлены", app_name=config.app_name)
        return Ok(config)
