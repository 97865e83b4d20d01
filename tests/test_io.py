"""Tests for loading and saving pictures."""

import tempfile
from pathlib import Path
import numpy as np
import pytest
from omegaconf import OmegaConf
from PIL import Image

from picture_engine.core.data_models import Color, Grid
from picture_engine.core.exceptions import LoadError, SaveError
from picture_engine.integration.io import (
    PictureIO, load_picture, save_picture, write_picture, picture_from_image,
    picture_to_image
)


def make_picture(width: int = 5, height: int = 3) -> Grid:
    rng = np.random.default_rng(21)
    return Grid.from_array(rng.integers(0, 256, size=(height, width, 3)))


class TestImageConversion:
    """Test conversion between Pillow images and Grids."""

    def test_picture_from_rgb_image(self):
        image = Image.new("RGB", (4, 2), (10, 20, 30))
        image.putpixel((3, 1), (1, 2, 3))

        picture = picture_from_image(image)

        assert picture.size == (4, 2)
        assert picture.get(0, 0) == Color(10, 20, 30)
        assert picture.get(3, 1) == Color(1, 2, 3)

    def test_alpha_channel_dropped(self):
        image = Image.new("RGBA", (2, 2), (100, 150, 200, 0))
        picture = picture_from_image(image)
        assert picture.get(1, 1) == Color(100, 150, 200)

    def test_grayscale_image_expanded(self):
        image = Image.new("L", (2, 2), 77)
        assert picture_from_image(image).get(0, 1) == Color(77, 77, 77)

    def test_picture_to_image(self):
        picture = make_picture()
        image = picture_to_image(picture)

        assert image.mode == "RGB"
        assert image.size == (5, 3)
        assert image.getpixel((4, 2)) == picture.get(4, 2).to_tuple()

    def test_out_of_range_channels_rejected(self):
        picture = Grid.blank(2, 2, Color(300, 0, 0))
        with pytest.raises(SaveError):
            picture_to_image(picture)


class TestPictureIO:
    """Test reading and writing files."""

    def test_round_trip_png(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "picture.png"
            picture = make_picture()

            assert save_picture(picture, path) is True
            assert path.exists()
            assert load_picture(path) == picture

    def test_creates_parent_directories(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "nested" / "dir" / "out.png"
            write_picture(make_picture(), path)
            assert path.exists()

    def test_no_parent_directories_when_disabled(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "missing" / "out.png"
            picture_io = PictureIO(create_dirs=False)

            assert picture_io.save(make_picture(), path) is False
            with pytest.raises(SaveError):
                picture_io.write(make_picture(), path)

    def test_default_format_without_extension(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "picture"
            write_picture(make_picture(), path)

            with Image.open(path) as image:
                assert image.format == "PNG"

    def test_unknown_extension(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "picture.notaformat"
            assert save_picture(make_picture(), path) is False

    def test_load_missing_file(self):
        with pytest.raises(LoadError, match="not found"):
            load_picture("does/not/exist.png")

    def test_load_non_image(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "notes.png"
            path.write_text("this is not an image")

            with pytest.raises(LoadError):
                load_picture(path)

    def test_load_all(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            paths = []
            for index in range(3):
                path = Path(temp_dir) / f"picture{index}.png"
                write_picture(Grid.blank(2, 2, Color(index, index, index)), path)
                paths.append(path)

            pictures = PictureIO().load_all(paths)
            assert [p.get(0, 0) for p in pictures] == [Color(i, i, i) for i in range(3)]

    def test_from_config(self):
        config = OmegaConf.create({'io': {'default_format': 'BMP', 'create_dirs': False}})
        picture_io = PictureIO.from_config(config)

        assert picture_io.default_format == 'BMP'
        assert picture_io.create_dirs is False

    def test_from_config_defaults(self):
        picture_io = PictureIO.from_config(None)
        assert picture_io.default_format == 'PNG'
        assert picture_io.create_dirs is True
