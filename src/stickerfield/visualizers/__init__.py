"""Sprite providers and the pygame renderer."""

from stickerfield.visualizers.flowfield import FlowfieldRenderer
from stickerfield.visualizers.sprites import ImageSprite, ShapeSprite, Sprite, fit_size, load_sprites

__all__ = ["FlowfieldRenderer", "ImageSprite", "ShapeSprite", "Sprite", "fit_size", "load_sprites"]
