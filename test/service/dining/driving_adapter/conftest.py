from collections.abc import Callable, Generator
from pathlib import Path
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient
import pytest

from src.platform.database.orm_db_setting import Database
from src.service.dining.domain.enum.staff_role import StaffRole
from src.service.dining.driving_adapter.http_controller.auth.jwt_auth import JwtAuth
from test.constants import RESTAURANT_ID
from test.test_main import create_test_app


@pytest.fixture
def client(
    tmp_path: Path,
    dashboard_cache: AsyncMock,
    change_notifier: AsyncMock,
    guest_notifier: AsyncMock,
) -> Generator[TestClient, None, None]:
    # Engine is created inside the app's event loop, not the test's
    database = Database(url=f'sqlite+aiosqlite:///{tmp_path / "dining_http.db"}')
    dashboard_cache.get.return_value = None
    app = create_test_app(
        database=database,
        dashboard_cache=dashboard_cache,
        change_notifier=change_notifier,
        guest_notifier=guest_notifier,
    )
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(settings) -> Callable[..., dict[str, str]]:
    jwt_auth = JwtAuth(settings=settings)

    def _headers(
        role: StaffRole = StaffRole.ADMIN, restaurant_id: int = RESTAURANT_ID
    ) -> dict[str, str]:
        token = jwt_auth.create_jwt_token(restaurant_id=restaurant_id, role=role)
        return {'Authorization': f'Bearer {token}'}

    return _headers


@pytest.fixture
def admin(auth_headers) -> dict[str, str]:
    return auth_headers()
