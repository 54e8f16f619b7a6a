"""
Ключи хранилища и начальные данные.
"""

from typing import Any, Dict


class StorageKeys:
    """Ключи коллекций в хранилище."""

    USERS = "app_users"
    ROOMS = "app_rooms"
    BOOKINGS = "app_bookings"
    CURRENT_USER = "app_current_user"
    CONFIG = "app_config"
    NOTIFICATIONS = "app_notifications"


# Начальные данные в том виде, в котором они лежат в хранилище.
# Сессия при первом запуске отсутствует, поэтому ключа CURRENT_USER здесь нет.
SEED_ROOMS = [
    {
        "id": "room-1",
        "name": "Salón Parroquial Principal",
        "capacity": 50,
        "features": ["Proyector", "Aire Acondicionado", "Pizarrón", "Sillas"],
        "imageUrl": "https://picsum.photos/400/300?random=1",
    }
]

SEED_USERS = [
    {
        "id": "u1",
        "username": "admin",
        "password": "password",
        "role": "ADMIN",
        "name": "Administrador Principal",
    },
    {
        "id": "u2",
        "username": "user",
        "password": "password",
        "role": "USER",
        "name": "Juan Pérez",
    },
]

SEED_CONFIG = {
    "appName": "Parish Booker",
    "appLogo": "fa-church",
}

DEFAULT_SEED: Dict[str, Any] = {
    StorageKeys.ROOMS: SEED_ROOMS,
    StorageKeys.BOOKINGS: [],
    StorageKeys.USERS: SEED_USERS,
    StorageKeys.CONFIG: SEED_CONFIG,
    StorageKeys.NOTIFICATIONS: [],
}
