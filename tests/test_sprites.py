"""Tests for sticker sprites and the image/shape fallback."""

import numpy as np
import pygame
import pytest
from PIL import Image

from stickerfield.config import FieldConfig
from stickerfield.visualizers.sprites import (
    SHAPE_KINDS,
    ImageSprite,
    ShapeSprite,
    fit_size,
    load_sprites,
    make_stickers,
)


@pytest.fixture
def png_path(tmp_path):
    """A 60x30 opaque red PNG."""
    path = tmp_path / "wide.png"
    Image.new("RGBA", (60, 30), (255, 0, 0, 255)).save(path)
    return path


class TestFitSize:
    def test_landscape(self):
        assert fit_size(200, 100, 80) == (80, 40)

    def test_portrait(self):
        assert fit_size(100, 200, 80) == (40, 80)

    def test_square(self):
        assert fit_size(50, 50, 80) == (80, 80)

    def test_missing_dimensions(self):
        assert fit_size(0, 0, 80) == (80, 80)


class TestShapeSprite:
    @pytest.mark.parametrize("kind", SHAPE_KINDS)
    def test_renders_with_alpha(self, kind):
        sprite = ShapeSprite(kind, (255, 212, 0), outline_px=5, size=80)
        surface = sprite.source()
        assert surface.get_size() == (sprite.width, sprite.height)
        alpha = pygame.surfarray.array_alpha(surface)
        # Transparent corner, opaque centre
        assert alpha[0, 0] == 0
        assert alpha[sprite.width // 2, sprite.height // 2] == 255

    def test_pill_is_wide(self):
        sprite = ShapeSprite("pill", (0, 0, 0), size=80)
        assert (sprite.width, sprite.height) == (80, 40)

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            ShapeSprite("hexapus", (0, 0, 0))

    def test_scaled_fits_box(self):
        sprite = ShapeSprite("pill", (10, 20, 30), size=80)
        assert sprite.scaled(40).get_size() == (40, 20)
        assert sprite.scaled(40) is sprite.scaled(40)

    def test_draw_centered(self):
        target = pygame.Surface((100, 100))
        target.fill((0, 0, 0))
        ShapeSprite("ellipse", (255, 212, 0), size=80).draw(target, (50, 50), 0.7, 40)
        arr = pygame.surfarray.array3d(target)
        np.testing.assert_allclose(arr[50, 50], (255, 212, 0), atol=3)
        assert tuple(arr[2, 2]) == (0, 0, 0)


class TestImageSprite:
    def test_load(self, png_path):
        sprite = ImageSprite.load(png_path)
        assert (sprite.width, sprite.height) == (60, 30)
        assert sprite.scaled(80).get_size() == (80, 40)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ImageSprite.load(tmp_path / "nope.png")

    def test_draw_untinted(self, png_path):
        target = pygame.Surface((100, 100))
        target.fill((255, 255, 255))
        ImageSprite.load(png_path).draw(target, (50, 50), 0.0, 80)
        arr = pygame.surfarray.array3d(target)
        np.testing.assert_allclose(arr[50, 50], (255, 0, 0), atol=3)
        # 80x40 box: rows outside stay white
        assert tuple(arr[50, 5]) == (255, 255, 255)


class TestLoadSprites:
    def test_generated_when_no_paths(self):
        sprites = load_sprites(FieldConfig())
        assert len(sprites) == 4 * len(SHAPE_KINDS)
        assert all(isinstance(s, ShapeSprite) for s in sprites)

    def test_images_disabled(self, png_path):
        cfg = FieldConfig(sticker_paths=[str(png_path)], use_sticker_images=False)
        assert all(isinstance(s, ShapeSprite) for s in load_sprites(cfg))

    def test_skips_missing(self, png_path, tmp_path):
        cfg = FieldConfig(sticker_paths=[str(tmp_path / "gone.png"), str(png_path)])
        sprites = load_sprites(cfg)
        assert len(sprites) == 1
        assert isinstance(sprites[0], ImageSprite)

    def test_all_missing_falls_back(self, tmp_path):
        cfg = FieldConfig(sticker_paths=[str(tmp_path / "gone.png")])
        sprites = load_sprites(cfg)
        assert all(isinstance(s, ShapeSprite) for s in sprites)

    def test_corrupt_image_falls_back(self, tmp_path):
        bad = tmp_path / "bad.png"
        bad.write_bytes(b"not an image")
        sprites = load_sprites(FieldConfig(sticker_paths=[str(bad)]))
        assert all(isinstance(s, ShapeSprite) for s in sprites)


def test_make_stickers_uses_palette():
    stickers = make_stickers(["#ff0000", "#00ff00"], 3, 40)
    assert len(stickers) == 2 * len(SHAPE_KINDS)
    assert {s.color for s in stickers} == {(255, 0, 0), (0, 255, 0)}
