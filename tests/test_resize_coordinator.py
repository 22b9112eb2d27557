# -*- coding: utf-8 -*-
"""Tests for ResizeCoordinator."""

import asyncio

import pytest

from src.utils.resize_coordinator import ResizeCoordinator, classify_screen

pytest_plugins = ("pytest_asyncio",)

DELAY = 0.01


@pytest.mark.parametrize(
    "width,expected",
    [
        (320, "mobile"),
        (767, "mobile"),
        (768, "tablet"),
        (1023, "tablet"),
        (1024, "desktop"),
        (1919, "desktop"),
        (1920, "tv"),
        (3840, "tv"),
        (None, "desktop"),
    ],
)
def test_classify_screen(width, expected):
    """Test width thresholds."""
    assert classify_screen(width) == expected


def test_listening_is_reference_counted():
    """Test listening follows the number of subscribers."""
    coordinator = ResizeCoordinator(delay=DELAY)
    assert coordinator.is_listening is False

    unsubscribe_a = coordinator.add_callback(lambda: None)
    unsubscribe_b = coordinator.add_callback(lambda: None)
    assert coordinator.is_listening is True

    unsubscribe_a()
    assert coordinator.is_listening is True
    unsubscribe_b()
    assert coordinator.is_listening is False

    # Unsubscribing twice is harmless
    unsubscribe_b()
    assert coordinator.is_listening is False


def test_notify_without_subscribers_only_records_size():
    """Test notifications without subscribers schedule nothing."""
    coordinator = ResizeCoordinator(delay=DELAY)
    coordinator.notify_resize(800, 600)

    assert coordinator.width == 800
    assert coordinator.height == 600
    assert coordinator.screen_size == "tablet"


def test_notify_without_event_loop_only_records_size():
    """Test subscribers without an event loop do not make notify_resize fail."""
    coordinator = ResizeCoordinator(delay=DELAY)
    calls = []
    coordinator.add_callback(lambda: calls.append(1))

    coordinator.notify_resize(1920, 1080)

    assert coordinator.screen_size == "tv"
    assert coordinator.height == 1080
    assert calls == []


@pytest.mark.asyncio
async def test_notify_resize_is_debounced():
    """Test a burst of resizes triggers each callback once."""
    coordinator = ResizeCoordinator(delay=DELAY)
    seen = []
    coordinator.add_callback(lambda: seen.append(coordinator.screen_size))

    for width in (500, 900, 1300, 2000):
        coordinator.notify_resize(width, 1080)
    await asyncio.sleep(DELAY * 5)

    assert seen == ["tv"]


@pytest.mark.asyncio
async def test_failing_callback_is_isolated():
    """Test one failing callback does not stop the others."""
    coordinator = ResizeCoordinator(delay=DELAY)
    calls = []

    def failing():
        raise RuntimeError("broken callback")

    coordinator.add_callback(failing)
    coordinator.add_callback(lambda: calls.append("ok"))

    coordinator.notify_resize(1024, 768)
    await asyncio.sleep(DELAY * 5)

    assert calls == ["ok"]


@pytest.mark.asyncio
async def test_destroy_cancels_pending_notification():
    """Test destroy drops subscribers and the pending timer."""
    coordinator = ResizeCoordinator(delay=DELAY)
    calls = []
    coordinator.add_callback(lambda: calls.append(1))

    coordinator.notify_resize(1024, 768)
    coordinator.destroy()
    await asyncio.sleep(DELAY * 5)

    assert calls == []
    assert coordinator.is_listening is False


@pytest.mark.asyncio
async def test_last_unsubscribe_cancels_pending_notification():
    """Test removing the last subscriber stops a pending notification."""
    coordinator = ResizeCoordinator(delay=DELAY)
    calls = []
    unsubscribe = coordinator.add_callback(lambda: calls.append(1))

    coordinator.notify_resize(1024, 768)
    unsubscribe()
    await asyncio.sleep(DELAY * 5)

    assert calls == []
