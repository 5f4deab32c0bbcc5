"""Tests for container wiring."""

import asyncio

from nutriscan.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.daily_aggregator is not None
    assert container.daily_aggregator.eager_recompute_on_delete is False
    assert container.user_service.default_timezone == "UTC"
    asyncio.run(container.close_resources())
