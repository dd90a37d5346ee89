"""
Shared fixtures for the cmdtree test suite.
"""

import io
import os
import logging

import pytest

from cmdtree import command, program


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep config files, CMDTREE_* variables and the real home directory out of tests."""
    for key in list(os.environ):
        if key.startswith("CMDTREE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.chdir(tmp_path)

    from cmdtree.ui import reset_color_cache
    reset_color_cache()
    yield
    reset_color_cache()


@pytest.fixture(autouse=True)
def reset_cmdtree_logger():
    """Undo Program.configure_logging() so handlers never outlive a test's streams."""
    yield
    logger = logging.getLogger("cmdtree")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def build_error_tree(app):
    """ok/nok/validation namespaces plus a handler-less command."""

    async def async_ok():
        return "ok/async"

    def sync_nok():
        raise RuntimeError("nok/sync")

    async def async_nok():
        raise RuntimeError("nok/async")

    async def async_validation(required):
        return f"async got {required}"

    app.add(
        command("ok", "Print message from handler")
        .add(command("sync").action(lambda: "ok/sync"))
        .add(command("async").action(async_ok))
    ).add(
        command("nok", "Throw various errors")
        .add(command("sync").action(sync_nok))
        .add(command("async").action(async_nok))
    ).add(
        command("validation", "Validation errors")
        .add(command("sync").argument("required").action(lambda required: f"sync got {required}"))
        .add(command("async").argument("required").action(async_validation))
    ).add(
        command("no_handler", "Missing handler")
    )
    return app


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def err():
    return io.StringIO()


@pytest.fixture
def app(out, err):
    """Program with the error tree, no history file and a no-op exit policy."""
    return build_error_tree(
        program(prog="app", history_file=None, exit=False, stdout=out, stderr=err)
    )
