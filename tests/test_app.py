"""Tests for the interactive host's event handling (dummy video driver)."""

import pygame
import pytest

from stickerfield.app import FlowfieldApp
from stickerfield.config import FieldConfig
from stickerfield.core.lifecycle import RunState


@pytest.fixture
def app():
    return FlowfieldApp(FieldConfig(width=320, height=240), seed=4)


def _key(key):
    return pygame.event.Event(pygame.KEYDOWN, key=key)


def test_quit_events(app):
    assert app.handle_event(pygame.event.Event(pygame.QUIT)) is False
    assert app.handle_event(_key(pygame.K_ESCAPE)) is False
    assert app.handle_event(_key(pygame.K_q)) is False


def test_a_toggles_pause(app):
    assert app.handle_event(_key(pygame.K_a)) is True
    assert app.controller.state is RunState.PAUSED
    app.handle_event(_key(pygame.K_a))
    assert app.controller.state is RunState.RUNNING


def test_r_resets(app):
    for _ in range(5):
        app.controller.tick()
    app.handle_event(_key(pygame.K_r))
    assert app.renderer.field.time == 0.0
    assert app.controller.force_frame


def test_minimize_and_hide(app):
    app.handle_event(pygame.event.Event(pygame.WINDOWMINIMIZED))
    assert not app.controller.visible
    app.handle_event(pygame.event.Event(pygame.WINDOWRESTORED))
    assert app.controller.visible

    app.handle_event(pygame.event.Event(pygame.WINDOWHIDDEN))
    assert not app.controller.in_view
    app.handle_event(pygame.event.Event(pygame.WINDOWSHOWN))
    assert app.controller.in_view


def test_resize_event(app):
    app.handle_event(pygame.event.Event(pygame.WINDOWSIZECHANGED, x=1000, y=1000))
    assert app.renderer.size == (1000, 1000)
    assert len(app.renderer.field.particles) == 80


def test_pointer_tracking(app):
    assert not app.current_pointer(10_000).active
    app.handle_event(pygame.event.Event(pygame.MOUSEMOTION, pos=(100, 50), rel=(0, 0), buttons=(0, 0, 0)))
    pointer = app.current_pointer(10_000)
    assert pointer.active and (pointer.x, pointer.y) == (100, 50)
    app.handle_event(pygame.event.Event(pygame.WINDOWLEAVE))
    assert not app.current_pointer(10_000).active


def test_touch_wins_over_mouse(app):
    app.handle_event(pygame.event.Event(pygame.MOUSEMOTION, pos=(100, 50), rel=(0, 0), buttons=(0, 0, 0)))
    app.handle_event(pygame.event.Event(pygame.FINGERDOWN, x=0.5, y=0.5, dx=0.0, dy=0.0, touch_id=0, finger_id=0, pressure=1.0))
    pointer = app.current_pointer(10_000)
    assert (pointer.x, pointer.y) == (160, 120)
    app.handle_event(pygame.event.Event(pygame.FINGERUP, x=0.5, y=0.5, dx=0.0, dy=0.0, touch_id=0, finger_id=0, pressure=0.0))
    assert (app.current_pointer(10_000).x, app.current_pointer(10_000).y) == (100, 50)
