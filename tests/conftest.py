# ==============================================================================
# Shared Test Fixtures
# ==============================================================================
"""
Pytest fixtures shared across all test modules.

Provides:
- FakeModuleSource / FakeIdentitySource that record every fetch
- RaisingModuleSource / RaisingIdentitySource that fail every fetch
- A Teacher-Edition activity export with one window-shade teacher tip
- Cleared settings cache per test
"""

from typing import Optional

import pytest

from builders import activity_export, te_embeddable, window_shade_data
from tereport.base import IdentitySource, ModuleSource
from tereport.exceptions import IdentityFetchError, ModuleFetchError
from tereport.utils.config import get_settings


class FakeModuleSource(ModuleSource):
    """In-memory exports keyed by external id ("activity: 100")."""

    def __init__(
        self,
        exports: Optional[dict[str, Optional[dict]]] = None,
        failures: Optional[dict[str, int]] = None,
    ):
        self.exports = exports or {}
        self.failures = failures or {}
        self.calls: list[str] = []

    async def fetch_module(self, module_type: str, module_id: str) -> Optional[dict]:
        key = f"{module_type}: {module_id}"
        self.calls.append(key)
        if key in self.failures:
            raise ModuleFetchError(
                f"Service error for {key}",
                url=f"https://authoring.test/{module_type}/{module_id}/export.json",
                status_code=self.failures[key],
            )
        return self.exports.get(key)

    async def __aenter__(self) -> "FakeModuleSource":
        return self

    async def __aexit__(self, *exc_info) -> None:
        pass


class FakeIdentitySource(IdentitySource):
    """In-memory names; unknown ids fail like a 404 from the portal."""

    def __init__(self, names: Optional[dict[str, str]] = None):
        self.names = names or {}
        self.calls: list[str] = []

    async def fetch_name(self, teacher_id: str) -> str:
        self.calls.append(teacher_id)
        if teacher_id not in self.names:
            raise IdentityFetchError(f"No user {teacher_id}", status_code=404)
        return self.names[teacher_id]


class RaisingModuleSource(ModuleSource):
    """Every fetch raises the given exception (timeouts, unmapped errors)."""

    def __init__(self, error: BaseException):
        self.error = error
        self.calls: list[str] = []

    async def fetch_module(self, module_type: str, module_id: str) -> Optional[dict]:
        self.calls.append(f"{module_type}: {module_id}")
        raise self.error


class RaisingIdentitySource(IdentitySource):
    """Every lookup raises the given exception."""

    def __init__(self, error: BaseException):
        self.error = error
        self.calls: list[str] = []

    async def fetch_name(self, teacher_id: str) -> str:
        self.calls.append(teacher_id)
        raise self.error


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are lru_cached; start every test from the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def te_activity() -> dict:
    """Activity 100: one window-shade teacher tip (ref 729)."""
    return activity_export(
        "Seasons",
        te_embeddable("729-Embeddable::EmbeddablePlugin", window_shade_data("teacherTip")),
    )


@pytest.fixture()
def module_source(te_activity) -> FakeModuleSource:
    """Serves the Teacher-Edition activity as "activity: 100"."""
    return FakeModuleSource({"activity: 100": te_activity})


@pytest.fixture()
def identity_source() -> FakeIdentitySource:
    """Knows one teacher, "28@x"."""
    return FakeIdentitySource({"28@x": "Ada Lovelace"})
