import os
import shlex

from inline_snapshot import snapshot
import pytest
from pytest import CaptureFixture

from .constants import CREPO_NAME
from .githelper import GitHelper
from .main import Settings, main
from .test_utils import make_remote, quick_repo_config, write_config
from .typed_path import AbsDir, AbsFile, RelDir, RelFile
from .types import Commit


def run_main(args: str) -> int | str | None:
    with pytest.raises(SystemExit) as e:
        main.main(shlex.split(args), prog_name=CREPO_NAME)
    return e.value.code


@pytest.fixture
def commits(typed_tmp_path: AbsDir, in_tmp_path: AbsDir) -> dict[str, Commit]:
    remote_path = typed_tmp_path / RelDir("remote")
    commits = make_remote(remote_path)
    write_config(
        typed_tmp_path / RelFile("crepo.yaml"),
        [
            quick_repo_config("first", remote_path, "main").representation,
            quick_repo_config("second", remote_path, "v1.0").representation,
        ],
    )
    return commits


@pytest.fixture
def initialized(commits: dict[str, Commit]) -> dict[str, Commit]:
    assert run_main("-q init") == 0
    return commits


def test_validate(commits: dict[str, Commit], capsys: CaptureFixture) -> None:
    assert run_main("validate") == 0
    out, err = capsys.readouterr()
    assert out == ""
    assert err == snapshot("Config file is valid\n")


def test_validate_invalid(in_tmp_path: AbsDir, capsys: CaptureFixture) -> None:
    write_config(
        in_tmp_path / RelFile("crepo.yaml"),
        [{"directory": "a", "remote": "r", "refspec": "main"}, {"directory": "b", "remote": "r"}],
    )
    assert run_main("validate") == 1
    _out, err = capsys.readouterr()
    assert err == snapshot("ValidationError: Refspec missing for repo.\n")


@pytest.mark.parametrize(
    "args", ["validate -c other.yaml", "-c other.yaml validate", "--config other.yaml validate"]
)
def test_validate_other_config(args: str, in_tmp_path: AbsDir, capsys: CaptureFixture) -> None:
    write_config(in_tmp_path / RelFile("other.yaml"), [])
    assert run_main(args) == 0
    _out, err = capsys.readouterr()
    assert err == snapshot("Config file is valid\n")


@pytest.mark.parametrize("command", ["validate", "init", "check", "foreach -- ls"])
def test_missing_config(command: str, in_tmp_path: AbsDir, capsys: CaptureFixture) -> None:
    assert run_main(f"-c missing.yaml {command}") == 1
    _out, err = capsys.readouterr()
    assert err == snapshot(
        """\
Parsing 'missing.yaml' [failed]
ConfigLoadError: Unable to read config file 'missing.yaml': No such file or directory.
"""
    )


def test_malformed_config(in_tmp_path: AbsDir, capsys: CaptureFixture) -> None:
    with open("crepo.yaml", "w") as f:
        f.write("directory: a\n")
    assert run_main("init") == 1
    _out, err = capsys.readouterr()
    assert err == snapshot(
        """\
Parsing 'crepo.yaml' [failed]
ConfigParseError: An unexpected error occurred during parsing @ crepo.yaml:1:1: expected sequence of repos, got mapping.
"""
    )


def test_init(commits: dict[str, Commit], capsys: CaptureFixture) -> None:
    assert run_main("init") == 0
    _out, err = capsys.readouterr()
    assert err == snapshot("Syncing all repos ...\nSyncing all repos [done]\n")
    assert GitHelper.commit(RelDir("first")) == commits["main"]
    assert GitHelper.commit(RelDir("second")) == commits["v1.0"]
    assert GitHelper.is_detached(RelDir("second"))


@pytest.mark.parametrize("args", ["-v init", "init -v", "init --verbose"])
@pytest.mark.slow
def test_init_verbose(args: str, commits: dict[str, Commit], capsys: CaptureFixture) -> None:
    assert run_main(args) == 0
    _out, err = capsys.readouterr()
    assert "Cloning " in err
    assert "into 'first'" in err
    assert "into 'second'" in err


def test_init_quiet(commits: dict[str, Commit], capsys: CaptureFixture) -> None:
    assert run_main("init -q") == 0
    _out, err = capsys.readouterr()
    assert err == ""


def test_init_twice(initialized: dict[str, Commit], capsys: CaptureFixture) -> None:
    capsys.readouterr()
    assert run_main("init") == 1
    _out, err = capsys.readouterr()
    assert err == snapshot(
        """\
Syncing all repos ...
Syncing all repos [failed]
SyncError: Unable to sync 'first': fatal: destination path 'first' already exists and is not an empty directory.
"""
    )


def test_check_clean(initialized: dict[str, Commit], capsys: CaptureFixture) -> None:
    capsys.readouterr()
    assert run_main("check") == 0
    _out, err = capsys.readouterr()
    assert err == snapshot("All repos are clean\n")


def test_check_dirty(initialized: dict[str, Commit], capsys: CaptureFixture) -> None:
    with open(os.path.join("second", "extra.txt"), "w") as f:
        f.write("extra")
    capsys.readouterr()
    assert run_main("check") == 1
    _out, err = capsys.readouterr()
    assert err == snapshot("DirtyRepoError: 'second' is dirty.\n")


def test_check_before_init(commits: dict[str, Commit], capsys: CaptureFixture) -> None:
    assert run_main("check") == 1
    _out, err = capsys.readouterr()
    assert err == snapshot("DirtyError: Unable to check 'first': no such directory.\n")


@pytest.mark.parametrize("args", ["foreach -- echo hi", "foreach echo hi"])
def test_foreach(args: str, initialized: dict[str, Commit], capfd: CaptureFixture) -> None:
    capfd.readouterr()
    assert run_main(args) == 0
    out, err = capfd.readouterr()
    assert out == "hi\nhi\n"
    assert err == ""


def test_foreach_keeps_command_options(
    initialized: dict[str, Commit], capfd: CaptureFixture
) -> None:
    capfd.readouterr()
    assert run_main("foreach git rev-parse --abbrev-ref HEAD") == 0
    out, _err = capfd.readouterr()
    assert out == "main\nHEAD\n"


def test_foreach_failure(initialized: dict[str, Commit], capfd: CaptureFixture) -> None:
    capfd.readouterr()
    assert run_main("foreach -- 'echo $(basename $PWD); exit 4'") == 1
    out, err = capfd.readouterr()
    assert out == "first\n"
    assert err == snapshot("CommandError: Error running command in 'first': exit status 4\n")


@pytest.mark.parametrize("args", ["foreach", "foreach --", "-c missing.yaml foreach"])
def test_foreach_missing_command(args: str, in_tmp_path: AbsDir, capsys: CaptureFixture) -> None:
    assert run_main(args) == 1
    _out, err = capsys.readouterr()
    assert err == snapshot("MissingCommandError: Please provide a shell command to execute.\n")


def test_settings_override() -> None:
    settings = Settings(RelFile("crepo.yaml"), verbose=1)
    assert settings.override(None, 1, 2) == Settings(RelFile("crepo.yaml"), verbose=2, quiet=2)
    assert settings.override("/etc/repos.yaml", 0, 0).config_file == AbsFile("/etc/repos.yaml")
