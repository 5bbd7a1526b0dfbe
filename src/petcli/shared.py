import inspect
import textwrap
import shutil
import sys
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from petcli.petcli_env import PetcliEnvironment

# while > 0 a full-screen session owns the terminal: nothing goes to the console
_quiet_depth = 0


@contextmanager
def quiet_console():
    global _quiet_depth
    _quiet_depth += 1
    try:
        yield
    finally:
        _quiet_depth -= 1


def _get_runtime_home() -> Path:
    return PetcliEnvironment().home


def _resolve_log_file_path(file_path: str | Path) -> Path:
    path = Path(file_path)
    if path.is_absolute():
        return path
    return _get_runtime_home() / path


def _default_log_relative_path(kind: str) -> Path:
    """Return logs/log_<YYMMDD>.md style paths under the runtime home."""
    suffix = datetime.now().strftime("%y%m%d")
    return Path("logs") / f"{kind}_{suffix}.md"


def _caller_name(frame) -> str:
    func_name = frame.f_code.co_name

    # Detect instance/class/static context
    if "self" in frame.f_locals:  # instance method
        cls_name = frame.f_locals["self"].__class__.__name__
        return f"{cls_name}.{func_name}"
    if "cls" in frame.f_locals:  # classmethod
        cls_name = frame.f_locals["cls"].__name__
        return f"{cls_name}.{func_name}"
    return func_name


def _write_entry(
    kind: str,
    caller_name: str,
    msg: str,
    file_path: str | Path | None,
    print_output: bool,
):
    lines = [
        f"- {datetime.now().strftime('%H:%M:%S')} {kind}_msg ({caller_name}):  ",
    ]
    lines.extend(
        [
            f"\n{x}"
            for x in textwrap.wrap(
                msg.strip(),
                width=max(shutil.get_terminal_size()[0] - 6, 20),
                initial_indent="   ",
                subsequent_indent="   ",
            )
        ]
    )
    lines.append("\n\n")

    # Best-effort file logging; fall back to stderr when the file is unwritable.
    if file_path is None:
        file_path = _default_log_relative_path(kind)
    log_path = _resolve_log_file_path(file_path)

    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        with open(log_path, "a", encoding="utf-8") as f:
            f.writelines(lines)
    except OSError:
        if not _quiet_depth:
            print("".join(lines), file=sys.stderr)

    if print_output and not _quiet_depth:
        print("".join(lines))


def log_msg(
    msg: str,
    file_path: str | Path | None = None,
    print_output: bool = False,
):
    """
    Log a message and save it directly to a file.

    Args:
        msg (str): The message to log.
        file_path (str | Path | None, optional): Overrides the default path when
            provided. Defaults to ``None`` which writes to ``logs/log_<YYMMDD>.md``.
        print_output (bool, optional): If True, also print to console.
    """
    caller = _caller_name(inspect.stack()[1].frame)
    _write_entry("log", caller, msg, file_path, print_output)


def bug_msg(
    msg: str,
    file_path: str | Path | None = None,
    print_output: bool = False,
):
    """
    Companion to log_msg for failures that end a session.

    Args:
        msg (str): The message to log.
        file_path (str | Path | None, optional): Overrides the default path when
            provided. Defaults to ``None`` which writes to ``logs/bug_<YYMMDD>.md``.
        print_output (bool, optional): If True, also print to console.
    """
    caller = _caller_name(inspect.stack()[1].frame)
    _write_entry("bug", caller, msg, file_path, print_output)
