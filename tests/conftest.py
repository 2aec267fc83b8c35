"""Общие фикстуры: регистрация примитивов отрисовки до первого рендера."""

import pytest

from src.charts.registry import register_default_capabilities


@pytest.fixture(scope="session", autouse=True)
def chart_capabilities() -> None:
    register_default_capabilities()
