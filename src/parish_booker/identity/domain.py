"""
Доменная модель контекста пользователей и настроек.
"""

from typing import Optional

from pydantic import Field, field_validator

from ..shared_kernel import (
    BusinessRuleValidationException,
    EntityId,
    Record,
    UserRole,
    generate_id,
)

MIN_PASSWORD_LENGTH = 4


class User(Record):
    """Пользователь системы (без пароля)."""

    id: EntityId
    username: str
    role: UserRole
    name: str

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class StoredUser(User):
    """Пользователь в том виде, в котором он хранится: вместе с паролем."""

    password: str

    @classmethod
    def register(cls, name: str, username: str, password: str) -> "StoredUser":
        """Создает нового пользователя с ролью USER."""
        return cls(
            id=generate_id("u"),
            username=username,
            password=password,
            name=name,
            role=UserRole.USER,
        )

    def matches_username(self, username: str) -> bool:
        """Имена пользователей сравниваются без учета регистра."""
        return self.username.lower() == username.lower()

    def check_password(self, password: str) -> bool:
        return self.password == password

    def to_public(self) -> User:
        """Возвращает пользователя без пароля."""
        return User(id=self.id, username=self.username, role=self.role, name=self.name)


class AppConfig(Record):
    """Настройки оформления приложения."""

    app_name: str = Field(..., min_length=1)
    # URL картинки (начинается с http) или CSS-класс иконки, например 'fa-church'
    app_logo: str = "fa-church"

    @field_validator("app_name")
    @classmethod
    def app_name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("El nombre de la aplicación es obligatorio.")
        return v

    @property
    def logo_is_url(self) -> bool:
        return self.app_logo.startswith("http")


class PasswordPolicy:
    """Правила для пароля."""

    @staticmethod
    def validate(password: str, confirm_password: Optional[str] = None) -> None:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise BusinessRuleValidationException(
                f"La contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres.",
                field="password",
            )

        if confirm_password is not None and password != confirm_password:
            raise BusinessRuleValidationException(
                "Las contraseñas no coinciden.", field="confirm_password"
            )
