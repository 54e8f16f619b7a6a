"""
Тесты контекста пользователей и настроек.
"""

import pytest
from parish_booker.identity.application import (
    INVALID_CREDENTIALS,
    REQUIRED_FIELDS,
    USERNAME_TAKEN,
)
from parish_booker.identity.domain import AppConfig, PasswordPolicy, StoredUser, User
from parish_booker.shared_kernel import (
    BusinessRuleValidationException,
    Outcome,
    UserRole,
)
from parish_booker.storage import StorageKeys


class TestUserDomain:
    """Тесты доменной модели пользователя."""

    def test_register_creates_regular_user(self):
        user = StoredUser.register(name="Ana", username="ana", password="1234")

        assert user.role == UserRole.USER
        assert user.id.startswith("u-")
        assert not user.is_admin

    def test_username_match_ignores_case(self):
        user = StoredUser(id="u9", username="Maria", password="x", role="USER", name="María")

        assert user.matches_username("maria")
        assert user.matches_username("MARIA")
        assert not user.matches_username("mario")

    def test_public_user_has_no_password(self):
        user = StoredUser(id="u9", username="maria", password="secret", role="USER", name="María")

        public = user.to_public()

        assert type(public) is User
        assert "password" not in public.to_storage()

    def test_password_policy(self):
        PasswordPolicy.validate("1234", "1234")

        with pytest.raises(BusinessRuleValidationException) as exc_info:
            PasswordPolicy.validate("123")
        assert exc_info.value.message == "La contraseña debe tener al menos 4 caracteres."

        with pytest.raises(BusinessRuleValidationException) as exc_info:
            PasswordPolicy.validate("12345", "54321")
        assert exc_info.value.message == "Las contraseñas no coinciden."

    def test_logo_kind(self):
        assert AppConfig(app_name="X", app_logo="https://img/logo.png").logo_is_url
        assert not AppConfig(app_name="X", app_logo="fa-church").logo_is_url


class TestAuthApplicationService:
    """Тесты сервиса входа и регистрации."""

    async def test_login_success_opens_session(self, app):
        """Успешный вход сохраняет пользователя без пароля в сессии."""
        # Действие
        result = await app.auth.login("admin", "password")

        # Проверка
        assert result.is_ok
        assert result.value.id == "u1"
        assert result.value.role == UserRole.ADMIN
        current = await app.auth.current_user()
        assert current == result.value
        raw = await app.store.kv.get(StorageKeys.CURRENT_USER)
        assert "password" not in raw

    async def test_login_username_is_case_insensitive(self, app):
        result = await app.auth.login("ADMIN", "password")

        assert result.is_ok
        assert result.value.username == "admin"

    async def test_login_wrong_password(self, app):
        # Действие
        result = await app.auth.login("admin", "wrong")

        # Проверка
        assert not result.is_ok
        assert result.error.message == INVALID_CREDENTIALS
        assert await app.auth.current_user() is None

    async def test_login_unknown_user(self, app):
        result = await app.auth.login("nobody", "password")

        assert result.error.message == INVALID_CREDENTIALS

    async def test_register_success_logs_in(self, app):
        """Регистрация создает пользователя с ролью USER и открывает сессию."""
        # Действие
        result = await app.auth.register("Ana López", "ana", "1234")

        # Проверка
        assert result.is_ok
        assert result.value.role == UserRole.USER
        assert await app.auth.current_user() == result.value

        await app.auth.logout()
        assert (await app.auth.login("ana", "1234")).is_ok

    async def test_register_duplicate_username(self, app):
        """Имя пользователя уникально без учета регистра."""
        # Действие
        result = await app.auth.register("Otro", "Admin", "1234")

        # Проверка
        assert not result.is_ok
        assert result.error.message == USERNAME_TAKEN
        assert result.error.field == "username"
        assert await app.auth.current_user() is None

    @pytest.mark.parametrize(
        "name,username,password",
        [("", "ana", "1234"), ("Ana", "  ", "1234"), ("Ana", "ana", "")],
    )
    async def test_register_requires_all_fields(self, app, name, username, password):
        result = await app.auth.register(name, username, password)

        assert not result.is_ok
        assert result.error.message == REQUIRED_FIELDS

    async def test_logout(self, app, user):
        await app.auth.logout()

        assert await app.auth.current_user() is None

    async def test_change_password(self, app):
        """После смены пароля вход возможен только с новым паролем."""
        # Действие
        result = await app.auth.change_password("u2", "nueva", "nueva")

        # Проверка
        assert result.value == Outcome.APPLIED
        assert not (await app.auth.login("user", "password")).is_ok
        assert (await app.auth.login("user", "nueva")).is_ok

    async def test_change_password_too_short(self, app):
        result = await app.auth.change_password("u2", "abc")

        assert not result.is_ok
        assert result.error.field == "password"
        assert (await app.auth.login("user", "password")).is_ok

    async def test_change_password_mismatch(self, app):
        result = await app.auth.change_password("u2", "abcd", "abce")

        assert result.error.message == "Las contraseñas no coinciden."

    async def test_change_password_unknown_user(self, app):
        result = await app.auth.change_password("u-missing", "abcd")

        assert result.is_ok
        assert result.value == Outcome.NOT_FOUND


class TestConfigApplicationService:
    """Тесты сервиса настроек."""

    async def test_seeded_config(self, app):
        config = await app.config.get_config()

        assert config.app_name == "Parish Booker"
        assert config.app_logo == "fa-church"

    async def test_set_config(self, app):
        # Действие
        result = await app.config.set_config("San José", "https://example.org/logo.png")

        # Проверка
        assert result.is_ok
        config = await app.config.get_config()
        assert config.app_name == "San José"
        assert config.logo_is_url

    async def test_set_config_requires_name(self, app):
        result = await app.config.set_config("   ", "fa-church")

        assert not result.is_ok
        assert result.error.message == "El nombre de la aplicación es obligatorio."
        assert (await app.config.get_config()).app_name == "Parish Booker"

    async def test_blank_logo_falls_back_to_icon(self, app):
        result = await app.config.set_config("Parroquia", "")

        assert result.value.app_logo == "fa-church"

    async def test_missing_config_returns_default(self, app):
        await app.store.delete(StorageKeys.CONFIG)

        config = await app.config.get_config()

        assert config.app_name == "Parish Booker"
