"""Pytest configuration and shared fixtures."""

import os

# Headless pygame for every test
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame
import pytest

from stickerfield.config import FieldConfig
from stickerfield.core.lifecycle import LifecycleController
from stickerfield.core.particles import ParticleField


@pytest.fixture(scope="session", autouse=True)
def pygame_session():
    pygame.init()
    yield
    pygame.quit()


@pytest.fixture
def config() -> FieldConfig:
    """The 800x600 canvas used throughout the tests."""
    return FieldConfig(width=800, height=600, show_legend=False)


@pytest.fixture
def field(config) -> ParticleField:
    return ParticleField(config, seed=42)


@pytest.fixture
def controller(field) -> LifecycleController:
    return LifecycleController(field)
