"""Tests for recipe_runner.cli (main, parse_common)."""

import shutil
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

requires_sh = pytest.mark.skipif(shutil.which("sh") is None, reason="needs a POSIX sh")


class TestParseLeadingFlags:
    def test_stops_at_first_positional(self) -> None:
        from recipe_runner.cli.parse_common import parse_leading_flags

        flags, rest = parse_leading_flags(
            ["--file", "R", "-n", "run", "--file", "x", "-n"],
            ("file", "--file", None, None),
            switches=[("dry_run", ("-n", "--dry-run"))],
        )
        assert flags == {"file": "R", "dry_run": True}
        assert rest == ["run", "--file", "x", "-n"]

    def test_inline_value_and_double_dash(self) -> None:
        from recipe_runner.cli.parse_common import parse_leading_flags

        flags, rest = parse_leading_flags(
            ["--config=c.yaml", "--", "-weird-recipe", "a"],
            ("config", "--config", None, Path),
        )
        assert flags == {"config": Path("c.yaml")}
        assert rest == ["-weird-recipe", "a"]

    def test_callable_default(self) -> None:
        from recipe_runner.cli.parse_common import parse_leading_flags

        flags, rest = parse_leading_flags([], ("root", "--root", Path.cwd, None))
        assert flags["root"] == Path.cwd()
        assert rest == []

    @pytest.mark.parametrize("argv", [["--bogus"], ["--file"]])
    def test_errors(self, argv: list[str]) -> None:
        from recipe_runner.cli.parse_common import parse_leading_flags

        with pytest.raises(ValueError):
            parse_leading_flags(argv, ("file", "--file", None, None))


class TestRun:
    def test_usage_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        from recipe_runner.cli.main import run

        assert run(["--nope"]) == 2
        err = capsys.readouterr().err
        assert "unknown option --nope" in err
        assert "Usage: runner" in err

    def test_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        from recipe_runner.cli.main import run

        assert run(["--help"]) == 0
        assert "Usage: runner" in capsys.readouterr().err

    def test_missing_recipe_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        from recipe_runner.cli.main import run

        assert run(["--file", str(tmp_path / "Runfile"), "build"], cwd=tmp_path) == 200
        assert "Recipe file not found" in capsys.readouterr().err

    def test_list(self, write_recipes, tmp_path: Path, capsys) -> None:
        from recipe_runner.cli.main import run

        write_recipes("# Compile\nbuild:\n    make\n")
        assert run(["--list"], cwd=tmp_path) == 0
        assert "build # Compile" in capsys.readouterr().out

    @pytest.mark.parametrize(
        ("text", "argv", "code"),
        [
            ("build:\n    make\n\nbuild:\n    make\n", ["build"], 202),
            ("build *a b:\n    make\n", ["build"], 201),
            ("build:\n    make\n", ["deploy"], 203),
            ("copy src:\n    cp {{src}} .\n", ["copy"], 204),
            ("copy src:\n    cp {{src}} .\n", ["copy", "a", "b"], 205),
        ],
    )
    def test_reserved_exit_codes(
        self,
        write_recipes,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
        text: str,
        argv: list[str],
        code: int,
    ) -> None:
        from recipe_runner.cli.main import run

        write_recipes(text)
        with patch("recipe_runner.invoke.process._spawn") as m_spawn:
            assert run(argv, cwd=tmp_path) == code
        assert not m_spawn.called
        assert capsys.readouterr().err.startswith("error: ")

    def test_args_forwarded_verbatim(self, write_recipes, tmp_path: Path) -> None:
        from recipe_runner.cli.main import run

        write_recipes('run *args="":\n    cross run -- {{args}}\n')
        child = MagicMock(wait=MagicMock(return_value=0))
        with patch("recipe_runner.invoke.process._spawn", return_value=child) as m_spawn:
            assert run(["-q", "run", "--release", "-v"], cwd=tmp_path) == 0
        assert m_spawn.call_args.args[0][-1] == "cross run -- --release -v"

    def test_settings_file_shell(self, write_recipes, tmp_path: Path) -> None:
        from recipe_runner.cli.main import run

        write_recipes("build:\n    make\n")
        (tmp_path / ".runner.yaml").write_text("shell: [bash, -c]\necho: false\n")
        child = MagicMock(wait=MagicMock(return_value=0))
        with patch("recipe_runner.invoke.process._spawn", return_value=child) as m_spawn:
            assert run(["build"], cwd=tmp_path) == 0
        assert m_spawn.call_args.args[0] == ["bash", "-c", "make"]

    def test_bad_settings_file(self, write_recipes, tmp_path: Path) -> None:
        from recipe_runner.cli.main import run

        write_recipes("build:\n    make\n")
        (tmp_path / ".runner.yaml").write_text("echo: maybe\n")
        assert run(["build"], cwd=tmp_path) == 2

    def test_recipe_file_not_utf8(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        from recipe_runner.cli.main import run

        (tmp_path / "Runfile").write_bytes(b"build:\n    echo caf\xe9\n")
        with patch("recipe_runner.invoke.process._spawn") as m_spawn:
            assert run(["build"], cwd=tmp_path) == 201
        m_spawn.assert_not_called()
        assert "not valid UTF-8" in capsys.readouterr().err


@requires_sh
class TestRunRealProcesses:
    def test_child_status_propagates(self, write_recipes, tmp_path: Path, capsys) -> None:
        from recipe_runner.cli.main import run

        write_recipes("fail code='3':\n    exit {{code}}\n    touch after\n")
        assert run(["-q", "fail"], cwd=tmp_path) == 3
        assert not (tmp_path / "after").exists()
        assert "failed on line 1 with exit code 3" in capsys.readouterr().err

    def test_echoes_lines_by_default(self, write_recipes, tmp_path: Path, capsys) -> None:
        from recipe_runner.cli.main import run

        write_recipes("ok:\n    true\n")
        assert run(["ok"], cwd=tmp_path) == 0
        assert capsys.readouterr().err == "true\n"

    def test_main_exits_with_status(self, write_recipes, tmp_path: Path, monkeypatch) -> None:
        from recipe_runner.cli.main import main

        write_recipes("fail:\n    exit 7\n")
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("sys.argv", ["runner", "-q", "fail"])
        with pytest.raises(SystemExit) as exc:
            main()
        assert exc.value.code == 7
