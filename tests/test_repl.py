"""
Interactive loop tests driven through the plain stream frontend.
"""

import asyncio
import io

import pytest

from cmdtree import DefinitionError, Resolved, ReplState, command, program
from cmdtree.commands import Command
from cmdtree.db import HistoryStore
from cmdtree.interface import BaseCLI, Dispatcher, Repl, StreamCLI

from conftest import build_error_tree


def _frontend(*lines: str) -> StreamCLI:
    return StreamCLI(io.StringIO("".join(f"{line}\n" for line in lines)), output=io.StringIO())


@pytest.mark.asyncio
async def test_loop_prints_values_and_reasons_then_ends_on_eof(app, out, err) -> None:
    repl = await app.repl(_frontend("ok sync", "ok async", "nok sync", "nok async", "validation sync"))

    assert repl.state is ReplState.TERMINATED
    assert out.getvalue().splitlines() == ["ok/sync", "ok/async"]
    errors = err.getvalue()
    assert "nok/sync" in errors and "nok/async" in errors
    assert "required" in errors
    assert "Traceback" not in errors


@pytest.mark.asyncio
async def test_history_records_every_line_in_order(tmp_path, out, err) -> None:
    path = tmp_path / "history"
    app = build_error_tree(
        program(prog="app", history_file=str(path), exit=False, stdout=out, stderr=err))

    await app.repl(_frontend("ok sync", "nok sync", "", "   ", "no_handler", "bogus"))

    assert path.read_text(encoding="utf-8").splitlines() == [
        "ok sync", "nok sync", "no_handler", "bogus"]


@pytest.mark.asyncio
async def test_history_is_bounded_across_sessions(tmp_path, out, err) -> None:
    path = tmp_path / "history"
    path.write_text("old 1\nold 2\n", encoding="utf-8")
    app = build_error_tree(program(
        prog="app", history_file=str(path), history_size=3, exit=False, stdout=out, stderr=err))

    repl = await app.repl(_frontend("ok sync", "ok async"))

    assert repl.history.entries == ["old 2", "ok sync", "ok async"]
    assert path.read_text(encoding="utf-8").splitlines() == ["old 2", "ok sync", "ok async"]


@pytest.mark.asyncio
async def test_disabled_history_file_keeps_session_history_in_memory(tmp_path, app) -> None:
    repl = await app.repl(_frontend("ok sync"))

    assert repl.history.path is None
    assert repl.history.entries == ["ok sync"]
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_exit_command_runs_custom_action_once(out, err) -> None:
    exits = []
    app = build_error_tree(program(
        prog="app", history_file=None, exit=lambda: exits.append("bye"), stdout=out, stderr=err))

    repl = await app.repl(_frontend("ok sync", "exit", "ok async"))

    assert exits == ["bye"]
    assert repl.terminated
    assert "ok/async" not in out.getvalue()
    assert repl.history.entries == ["ok sync", "exit"]


@pytest.mark.asyncio
async def test_end_of_input_runs_exit_action(out, err) -> None:
    exits = []
    app = build_error_tree(program(
        prog="app", history_file=None, exit=lambda: exits.append("eof"), stdout=out, stderr=err))

    await app.repl(_frontend("ok sync"))

    assert exits == ["eof"]


@pytest.mark.asyncio
async def test_default_exit_policy_terminates_the_process(out, err) -> None:
    app = build_error_tree(program(prog="app", history_file=None, stdout=out, stderr=err))

    with pytest.raises(SystemExit):
        await app.repl(_frontend("exit"))

    assert app.is_repl()
    assert app._repl_instance.terminated


@pytest.mark.asyncio
async def test_without_exit_policy_exit_is_an_unknown_command(app, err) -> None:
    repl = await app.repl(_frontend("exit", "ok sync"))

    assert "exit" not in app.root.children
    assert "Unknown command: exit." in err.getvalue()
    assert repl.history.entries == ["exit", "ok sync"]


@pytest.mark.asyncio
async def test_user_defined_exit_command_is_kept(out, err) -> None:
    app = program(prog="app", history_file=None, exit=lambda: None, stdout=out, stderr=err)
    app.add(command("exit").action(lambda: "custom exit"))

    await app.repl(_frontend("exit"))

    assert out.getvalue().strip() == "custom exit"


@pytest.mark.asyncio
async def test_keyboard_interrupt_terminates_the_loop() -> None:
    class Interrupting(BaseCLI):
        async def get_line(self, prompt: str) -> str:
            raise KeyboardInterrupt

    exits = []
    repl = Repl(Dispatcher(Command(name="app")), Interrupting(), exit_action=lambda: exits.append(1))

    await repl.start()

    assert repl.terminated
    assert exits == [1]


@pytest.mark.asyncio
async def test_start_after_termination_is_a_noop() -> None:
    frontend = _frontend("ignored")
    repl = Repl(Dispatcher(Command(name="app")), frontend)
    repl.close()

    await repl.start()

    assert repl.state is ReplState.TERMINATED
    assert frontend._stream.read() == "ignored\n"


@pytest.mark.asyncio
async def test_close_is_idempotent() -> None:
    exits = []
    repl = Repl(Dispatcher(Command(name="app")), _frontend(), exit_action=lambda: exits.append(1))

    repl.close()
    repl.close()

    assert exits == [1]


@pytest.mark.asyncio
async def test_states_seen_by_a_handler_and_after_the_loop() -> None:
    seen = []
    root = Command(name="app")
    repl_holder = {}
    root.add(command("probe").action(lambda: seen.append(repl_holder["repl"].state)))
    repl = Repl(Dispatcher(root), _frontend("probe"), stdout=io.StringIO())
    repl_holder["repl"] = repl

    assert repl.state is ReplState.IDLE
    await repl.start()

    assert seen == [ReplState.DISPATCHING]
    assert repl.state is ReplState.TERMINATED


@pytest.mark.asyncio
async def test_dispatches_never_overlap() -> None:
    events = []

    async def slow(label):
        events.append(f"start {label}")
        await asyncio.sleep(0.01)
        events.append(f"end {label}")

    root = Command(name="app")
    root.add(command("slow").argument("label").action(slow))
    repl = Repl(Dispatcher(root), _frontend("slow a", "slow b"))

    await repl.start()

    assert events == ["start a", "end a", "start b", "end b"]


@pytest.mark.asyncio
async def test_run_observer_sees_interactive_lines(app) -> None:
    seen = []
    app.on("run", seen.append)

    await app.repl(_frontend("ok sync", "validation sync"))

    assert seen == ["ok sync", "validation sync"]


@pytest.mark.asyncio
async def test_broken_history_file_does_not_stop_the_loop(tmp_path, out, err) -> None:
    # the history "file" is a directory: every write fails
    app = build_error_tree(program(
        prog="app", history_file=str(tmp_path), exit=False, stdout=out, stderr=err))

    repl = await app.repl(_frontend("ok sync", "ok async"))

    assert out.getvalue().splitlines() == ["ok/sync", "ok/async"]
    assert isinstance(repl.history.last_error, OSError)


@pytest.mark.asyncio
async def test_stream_frontend_writes_prompt(app) -> None:
    prompt_out = io.StringIO()
    app.prompt("app> ")

    await app.repl(StreamCLI(io.StringIO("ok sync\n"), output=prompt_out))

    assert prompt_out.getvalue() == "app> app> "


@pytest.mark.asyncio
async def test_repl_with_explicit_history_store(tmp_path) -> None:
    store = HistoryStore(tmp_path / "h", size=10)
    root = Command(name="app")
    root.add(command("ping").action(lambda: "pong"))
    out = io.StringIO()

    repl = Repl(Dispatcher(root), _frontend("ping"), history=store, stdout=out)
    await repl.start()

    assert out.getvalue() == "pong\n"
    assert store.entries == ["ping"]
    assert await repl.dispatcher.dispatch("ping") == Resolved("pong")


@pytest.mark.asyncio
async def test_refused_declaration_never_reaches_the_loop(app, out) -> None:
    with pytest.raises(DefinitionError):
        app.add(command("deploy").option("help", type=bool).action(lambda help: help))

    await app.repl(_frontend("deploy", "ok sync"))

    assert out.getvalue() == "ok/sync\n"
