"""Tests for CLI interface."""

import pytest
import tempfile
import shutil
from pathlib import Path
from unittest.mock import patch
from omegaconf import OmegaConf

from picture_engine.cli.main import main_cli, create_parser
from picture_engine.cli import commands
from picture_engine.cli.utils import format_duration, log_level_from_flags, log_level_from_name
from picture_engine.core.data_models import BLACK, WHITE, Color, Grid
from picture_engine.integration.io import load_picture, write_picture
from picture_engine.process.primitives import blend, blur, flip, grayscale, invert, mosaic, rotate


class TestCLIParser:
    """Test CLI argument parsing."""

    def test_create_parser(self):
        parser = create_parser()
        assert parser.prog == 'picture-engine'

    def test_single_picture_commands(self):
        parser = create_parser()
        for command in ['invert', 'grayscale', 'blur']:
            args = parser.parse_args([command, 'in.png', 'out.png'])
            assert args.command == command
            assert args.input == 'in.png'
            assert args.output == 'out.png'

    def test_rotate_parsing(self):
        args = create_parser().parse_args(['rotate', '90', 'in.png', 'out.png'])
        assert args.command == 'rotate'
        assert args.angle == '90'

    def test_flip_parsing(self):
        args = create_parser().parse_args(['flip', 'V', 'in.png', 'out.png'])
        assert args.direction == 'V'

    def test_blend_parsing(self):
        args = create_parser().parse_args(['blend', 'a.png', 'b.png', 'out.png'])
        assert args.pictures == ['a.png', 'b.png', 'out.png']

    def test_mosaic_parsing(self):
        args = create_parser().parse_args(['mosaic', '10', 'a.png', 'b.png', 'out.png'])
        assert args.tile_size == '10'
        assert args.pictures == ['a.png', 'b.png', 'out.png']

    def test_config_command_parsing(self):
        parser = create_parser()
        assert parser.parse_args(['config', 'show']).config_action == 'show'
        assert parser.parse_args(['config', 'validate']).config_action == 'validate'
        args = parser.parse_args(['config', 'save', 'out.yaml'])
        assert args.config_action == 'save'
        assert args.path == 'out.yaml'

    def test_global_options(self):
        parser = create_parser()

        args = parser.parse_args(['-vv', 'blur', 'in.png', 'out.png'])
        assert args.verbose == 2

        args = parser.parse_args(['--quiet', 'blur', 'in.png', 'out.png'])
        assert args.quiet is True

        args = parser.parse_args([
            '-c', 'engine.max_execution_time=2.0',
            '-c', 'io.create_dirs=false',
            'blur', 'in.png', 'out.png'
        ])
        assert args.config == ['engine.max_execution_time=2.0', 'io.create_dirs=false']


class TestCLIUtils:
    """Test CLI utility functions."""

    def test_format_duration(self):
        assert format_duration(0.0005) == "500.0µs"
        assert format_duration(0.5) == "500.0ms"
        assert format_duration(5.0) == "5.00s"
        assert format_duration(125.0) == "2m 5.0s"

    def test_log_level_from_flags(self):
        assert log_level_from_flags(0, False) is None
        assert log_level_from_flags(1, False) == 20
        assert log_level_from_flags(2, False) == 10
        assert log_level_from_flags(2, True) == 40

    def test_log_level_from_name(self):
        assert log_level_from_name("debug") == 10
        assert log_level_from_name("nonsense") == 30


class TestCLICommands:
    """End-to-end runs of the CLI against files on disk."""

    @pytest.fixture
    def temp_dir(self):
        temp_dir = tempfile.mkdtemp()
        yield Path(temp_dir)
        shutil.rmtree(temp_dir)

    @pytest.fixture
    def source(self, temp_dir):
        """An asymmetric 8x6 picture saved to disk."""
        picture = Grid(8, 6)
        for pixel in picture:
            picture.set(pixel.x, pixel.y, Color(pixel.x * 30, pixel.y * 40, (pixel.x * pixel.y) % 256))
        path = temp_dir / "source.png"
        write_picture(picture, path)
        return path, picture

    @pytest.mark.parametrize("argv,transform", [
        (['invert'], invert),
        (['grayscale'], grayscale),
        (['blur'], blur),
        (['rotate', '90'], lambda p: rotate(p, 90)),
        (['rotate', '270'], lambda p: rotate(p, 270)),
        (['flip', 'H'], lambda p: flip(p, 'H')),
        (['flip', 'V'], lambda p: flip(p, 'V')),
    ])
    def test_single_picture_transformations(self, temp_dir, source, argv, transform):
        path, picture = source
        output = temp_dir / "out.png"

        exit_code = main_cli(argv + [str(path), str(output)])

        assert exit_code == 0
        assert load_picture(output) == transform(picture)

    def test_invert_black_64(self, temp_dir):
        black = temp_dir / "black64x64.png"
        output = temp_dir / "out.png"
        write_picture(Grid.blank(64, 64, BLACK), black)

        assert main_cli(['invert', str(black), str(output)]) == 0
        assert load_picture(output) == Grid.blank(64, 64, WHITE)

    def test_blend(self, temp_dir, source):
        path, picture = source
        other = temp_dir / "white.png"
        write_picture(Grid.blank(8, 6, WHITE), other)
        output = temp_dir / "blend.png"

        assert main_cli(['blend', str(path), str(other), str(output)]) == 0
        assert load_picture(output) == blend([picture, Grid.blank(8, 6, WHITE)])

    def test_blend_largest_policy_mismatch_fails(self, temp_dir, source, capsys):
        path, _ = source
        small = temp_dir / "small.png"
        write_picture(Grid.blank(4, 4, WHITE), small)
        output = temp_dir / "blend.png"

        exit_code = main_cli([
            '-c', 'engine.blend.extent_policy=largest',
            'blend', str(path), str(small), str(output)
        ])

        assert exit_code == 1
        assert commands.TRANSFORM_ERROR in capsys.readouterr().out
        assert not output.exists()

    def test_mosaic_tile_larger_than_pictures(self, temp_dir, source, capsys):
        path, _ = source
        output = temp_dir / "mosaic.png"

        exit_code = main_cli(['mosaic', '50', str(path), str(path), str(output)])

        assert exit_code == 1
        assert commands.TRANSFORM_ERROR in capsys.readouterr().out
        assert not output.exists()

    def test_mosaic(self, temp_dir):
        paths = []
        pictures = []
        for index, color in enumerate([BLACK, WHITE, Color(0, 255, 0)]):
            picture = Grid.blank(64, 64, color)
            path = temp_dir / f"in{index}.png"
            write_picture(picture, path)
            paths.append(str(path))
            pictures.append(picture)
        blue = Grid.blank(64, 32, Color(0, 0, 255))
        write_picture(blue, temp_dir / "blue.png")
        paths.append(str(temp_dir / "blue.png"))
        pictures.append(blue)
        output = temp_dir / "mosaic.png"

        assert main_cli(['mosaic', '10'] + paths + [str(output)]) == 0
        result = load_picture(output)
        assert result.size == (60, 30)
        assert result == mosaic(10, pictures)

    def test_invalid_argument(self, temp_dir, source, capsys):
        path, _ = source
        output = temp_dir / "out.png"

        assert main_cli(['rotate', '45', str(path), str(output)]) == 1
        assert commands.INCORRECT_ARG in capsys.readouterr().out
        assert not output.exists()

    def test_invalid_flip_direction(self, temp_dir, source, capsys):
        path, _ = source
        assert main_cli(['flip', 'X', str(path), str(temp_dir / "out.png")]) == 1
        assert commands.INCORRECT_ARG in capsys.readouterr().out

    def test_not_enough_pictures(self, temp_dir, capsys):
        assert main_cli(['blend', str(temp_dir / "out.png")]) == 1
        assert commands.NOT_ENOUGH_ARGS in capsys.readouterr().out

    def test_missing_input(self, temp_dir, capsys):
        exit_code = main_cli(['invert', str(temp_dir / "missing.png"), str(temp_dir / "out.png")])
        assert exit_code == 1
        assert commands.LOAD_ERROR in capsys.readouterr().out

    def test_save_failure(self, temp_dir, source, capsys):
        path, _ = source
        exit_code = main_cli(['invert', str(path), str(temp_dir / "out.unknownext")])
        assert exit_code == 1
        assert commands.SAVE_ERROR in capsys.readouterr().out

    def test_no_command(self):
        assert main_cli([]) == 1

    def test_usage_error_exits(self):
        with pytest.raises(SystemExit) as exc_info:
            main_cli(['rotate', '90'])
        assert exc_info.value.code == 2

    def test_routes_to_transform_command(self):
        with patch('picture_engine.cli.commands.transform_command', return_value=0) as mock_command:
            assert main_cli(['blur', 'in.png', 'out.png']) == 0
            mock_command.assert_called_once()

    def test_unexpected_error_returns_one(self):
        with patch('picture_engine.cli.commands.transform_command', side_effect=RuntimeError("boom")):
            assert main_cli(['blur', 'in.png', 'out.png']) == 1

    def test_config_show(self, capsys):
        assert main_cli(['config', 'show']) == 0
        out = capsys.readouterr().out
        assert "Current Configuration:" in out
        assert "extent_policy" in out

    def test_config_validate(self, capsys):
        assert main_cli(['config', 'validate']) == 0
        assert "Configuration is valid" in capsys.readouterr().out

    def test_config_validate_failure(self, capsys):
        exit_code = main_cli(['-c', 'logging.level=LOUD', 'config', 'validate'])
        assert exit_code == 1
        assert "validation failed" in capsys.readouterr().out

    def test_config_save(self, temp_dir, capsys):
        path = temp_dir / "conf" / "config.yaml"

        exit_code = main_cli([
            '-c', 'engine.blend.extent_policy=largest', 'config', 'save', str(path)
        ])

        assert exit_code == 0
        assert "Configuration saved" in capsys.readouterr().out
        saved = OmegaConf.load(path)
        assert saved.engine.blend.extent_policy == "largest"
        assert saved.io.default_format == "PNG"

    def test_config_save_rejects_invalid(self, temp_dir, capsys):
        path = temp_dir / "config.yaml"

        exit_code = main_cli(['-c', 'io.create_dirs=maybe', 'config', 'save', str(path)])

        assert exit_code == 1
        assert "validation failed" in capsys.readouterr().out
        assert not path.exists()
