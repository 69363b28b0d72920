"""
Tests for envdoc.cli module.

Tests argument handling, the full pipeline, and exit codes.
"""

import pytest

from envdoc import __version__
from envdoc.cli import build_config, create_parser, main, run_pipeline
from envdoc.config import EnvdocConfig
from envdoc.errors import ConfigError
from envdoc.extractors import UnsupportedTypePolicy


CONFIG_SOURCE = '''package config

// Config is read from the environment.
type Config struct {
	// Listen port
	Port int `envconfig:"PORT" default:"8080"`
	// Database connection string
	DatabaseURL string `envconfig:"DATABASE_URL" required:"true"`
	Hosts []string `envconfig:"HOSTS"`
}
'''

EXPECTED_MARKDOWN = """## Config

Config is read from the environment.

| Name         | Type   | Required | Default | Comment                    |
|:-------------|:-------|:---------|:--------|:---------------------------|
| PORT         | int    | false    | "8080"  | Listen port                |
| DATABASE_URL | string | true     |         | Database connection string |

"""


@pytest.fixture
def package_dir(tmp_path):
    """A directory holding one Go package."""
    (tmp_path / "config.go").write_text(CONFIG_SOURCE)
    return tmp_path


class TestCreateParser:
    """Tests for argument parsing."""

    def test_defaults(self):
        """Test that unset flags do not override the configuration file."""
        args = create_parser().parse_args(["."])

        assert args.path == "."
        assert args.recursive is None
        assert args.tag is None
        assert args.unsupported_types is None
        assert args.output is None
        assert args.force is False

    def test_version(self, capsys):
        """Test --version."""
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["--version"])

        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_invalid_policy(self):
        """Test that unknown policies are rejected by argparse."""
        with pytest.raises(SystemExit):
            create_parser().parse_args([".", "--unsupported-types", "ignore"])


class TestBuildConfig:
    """Tests for build_config."""

    def test_flags_override(self):
        """Test that flags are applied on top of the defaults."""
        args = create_parser().parse_args(
            [".", "-r", "--tag", "env", "--unsupported-types", "error", "--title", "Env"]
        )
        config = build_config(args)

        assert config.load.recursive is True
        assert config.extract.key_tag == "env"
        assert config.extract.unsupported_types is UnsupportedTypePolicy.ERROR
        assert config.render.title == "Env"

    def test_flags_override_file(self, tmp_path):
        """Test that flags win over the configuration file."""
        config_path = tmp_path / "envdoc.toml"
        config_path.write_text('[extract]\nkey_tag = "env"\n\n[load]\nrecursive = true\n')
        args = create_parser().parse_args([".", "--config", str(config_path), "--tag", "cfg"])

        config = build_config(args)

        assert config.extract.key_tag == "cfg"
        assert config.load.recursive is True

    def test_empty_tag(self):
        """Test that an empty --tag is rejected."""
        args = create_parser().parse_args([".", "--tag", ""])

        with pytest.raises(ConfigError):
            build_config(args)

    def test_build_tags(self):
        """Test that --tags is split on commas."""
        args = create_parser().parse_args([".", "--tags", "integration,,e2e"])

        assert build_config(args).load.tags == ["integration", "e2e"]


class TestRunPipeline:
    """Tests for run_pipeline."""

    def test_stdout(self, package_dir, capsys):
        """Test writing markdown to standard output."""
        exit_code = run_pipeline(package_dir, EnvdocConfig())

        captured = capsys.readouterr()
        assert exit_code == 0
        assert captured.out == EXPECTED_MARKDOWN
        assert "[envdoc] Loading packages..." in captured.err
        assert "HOSTS on Config has unsupported type []string, skipped" in captured.err

    def test_quiet(self, package_dir, capsys):
        """Test that quiet mode silences progress and warnings."""
        exit_code = run_pipeline(package_dir, EnvdocConfig(), quiet=True)

        captured = capsys.readouterr()
        assert exit_code == 0
        assert captured.err == ""

    def test_verbose(self, package_dir, capsys):
        """Test that verbose mode lists packages and types."""
        run_pipeline(package_dir, EnvdocConfig(), verbose=True)

        err = capsys.readouterr().err
        assert "config (" in err
        assert "Config: 2 keys" in err

    def test_verbose_build_constraints(self, package_dir, capsys):
        """Test that verbose mode names files left out by build constraints."""
        (package_dir / "gen.go").write_text("//go:build ignore\n\npackage main\n")

        exit_code = run_pipeline(package_dir, EnvdocConfig(), verbose=True)

        captured = capsys.readouterr()
        assert exit_code == 0
        assert captured.out == EXPECTED_MARKDOWN
        assert "Found 2 Go files in 1 directories" in captured.err
        assert "Excluded by build constraints: gen.go" in captured.err

    def test_output_file(self, package_dir, tmp_path, capsys):
        """Test writing to a file, creating parent directories."""
        output = tmp_path / "docs" / "config.md"

        exit_code = run_pipeline(package_dir, EnvdocConfig(), output_path=output)

        assert exit_code == 0
        assert output.read_text(encoding="utf-8") == EXPECTED_MARKDOWN
        assert capsys.readouterr().out == ""

    def test_existing_output_without_force(self, package_dir, tmp_path, capsys):
        """Test that an existing file is not overwritten."""
        output = tmp_path / "config.md"
        output.write_text("keep me")

        exit_code = run_pipeline(package_dir, EnvdocConfig(), output_path=output)

        assert exit_code == 1
        assert output.read_text() == "keep me"
        assert "File already exists" in capsys.readouterr().err

    def test_existing_output_with_force(self, package_dir, tmp_path):
        """Test that --force overwrites the file."""
        output = tmp_path / "config.md"
        output.write_text("old")

        exit_code = run_pipeline(package_dir, EnvdocConfig(), output_path=output, force=True)

        assert exit_code == 0
        assert output.read_text(encoding="utf-8") == EXPECTED_MARKDOWN

    def test_missing_package(self, tmp_path, capsys):
        """Test that a load failure exits with 1."""
        exit_code = run_pipeline(tmp_path / "missing", EnvdocConfig())

        assert exit_code == 1
        assert "Error during package loading" in capsys.readouterr().err

    def test_syntax_error(self, tmp_path, capsys):
        """Test that a syntax error exits with 1 and writes nothing."""
        (tmp_path / "broken.go").write_text("package config\n\ntype Config struct {\n")

        exit_code = run_pipeline(tmp_path, EnvdocConfig())

        captured = capsys.readouterr()
        assert exit_code == 1
        assert captured.out == ""
        assert "syntax error" in captured.err

    def test_unsupported_type_error_policy(self, package_dir, capsys):
        """Test that the error policy fails extraction."""
        config = EnvdocConfig()
        config.extract.unsupported_types = UnsupportedTypePolicy.ERROR

        exit_code = run_pipeline(package_dir, config)

        captured = capsys.readouterr()
        assert exit_code == 1
        assert captured.out == ""
        assert "Error during extraction" in captured.err

    def test_no_config_types(self, tmp_path, capsys):
        """Test a package without tagged structs."""
        (tmp_path / "main.go").write_text("package main\n\ntype Plain struct {\n\tName string\n}\n")

        exit_code = run_pipeline(tmp_path, EnvdocConfig())

        assert exit_code == 0
        assert capsys.readouterr().out == ""


class TestMain:
    """Tests for the main entry point."""

    def test_main(self, package_dir, capsys):
        """Test a complete run from argv."""
        exit_code = main([str(package_dir), "-q"])

        assert exit_code == 0
        assert capsys.readouterr().out == EXPECTED_MARKDOWN

    def test_main_stringify(self, package_dir, capsys):
        """Test that the stringify policy keeps the slice field."""
        exit_code = main([str(package_dir), "-q", "--unsupported-types", "stringify"])

        assert exit_code == 0
        assert "| HOSTS        | []string |" in capsys.readouterr().out

    def test_main_bad_config(self, package_dir, tmp_path, capsys):
        """Test that an invalid configuration file exits with 1."""
        config_path = tmp_path / "envdoc.toml"
        config_path.write_text("[unknown]\n")

        exit_code = main([str(package_dir), "--config", str(config_path)])

        assert exit_code == 1
        assert "Error in configuration" in capsys.readouterr().err

    def test_main_recursive(self, tmp_path, capsys):
        """Test documenting packages in sub-directories."""
        (tmp_path / "main.go").write_text("package main\n")
        sub = tmp_path / "internal" / "config"
        sub.mkdir(parents=True)
        (sub / "config.go").write_text(CONFIG_SOURCE)

        assert main([str(tmp_path), "-q"]) == 0
        assert capsys.readouterr().out == ""

        assert main([str(tmp_path), "-q", "-r"]) == 0
        assert capsys.readouterr().out == EXPECTED_MARKDOWN

    def test_output_path_is_relative_to_cwd(self, package_dir, tmp_path, monkeypatch):
        """Test -o with a relative path."""
        monkeypatch.chdir(tmp_path)

        assert main([str(package_dir), "-q", "-o", "out.md"]) == 0
        assert (tmp_path / "out.md").exists()

    def test_main_verbose_reports_skipped_dirs(self, tmp_path, capsys):
        """Test that -v lists the directories skipped while walking."""
        (tmp_path / "vendor").mkdir()
        (tmp_path / "vendor" / "v.go").write_text("package v\n")
        (tmp_path / "c.go").write_text(CONFIG_SOURCE)

        exit_code = main([str(tmp_path), "-r", "-v"])

        err = capsys.readouterr().err
        assert exit_code == 0
        assert "Found 1 Go files in 1 directories" in err
        assert "Skipped vendor: Default ignore: vendor" in err
