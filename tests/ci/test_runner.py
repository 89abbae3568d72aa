"""
Unit tests for the CI runner integration.
"""

import io
import logging
import os

import pytest

from dnscontrolkit.ci.runner import (
    Runner,
    WorkflowCommandFormatter,
    escape_data,
    is_github_actions,
)


def _record(level, message):
    return logging.LogRecord("test", level, __file__, 1, message, None, None)


class TestWorkflowCommandFormatter:
    """Test log record rendering as workflow commands."""

    def test_levels(self):
        formatter = WorkflowCommandFormatter("%(message)s")

        assert formatter.format(_record(logging.ERROR, "boom")) == "::error::boom"
        assert formatter.format(_record(logging.WARNING, "hmm")) == "::warning::hmm"
        assert formatter.format(_record(logging.INFO, "hello")) == "hello"
        assert formatter.format(_record(logging.DEBUG, "detail")) == "::debug::detail"

    def test_multiline_is_escaped(self):
        formatter = WorkflowCommandFormatter("%(message)s")

        result = formatter.format(_record(logging.ERROR, "line1\nline2"))

        assert result == "::error::line1%0Aline2"

    def test_escape_data(self):
        assert escape_data("100%\r\n") == "100%25%0D%0A"


class TestIsGithubActions:
    def test_detection(self):
        assert is_github_actions({"GITHUB_ACTIONS": "true"})
        assert not is_github_actions({"GITHUB_ACTIONS": "false"})
        assert not is_github_actions({})


class TestRunnerPath:
    """Test PATH registration."""

    def test_add_path_prepends(self, runner, runner_env, tmp_path):
        original = runner_env["PATH"]

        runner.add_path(tmp_path / "bin")

        assert runner.environ["PATH"] == f"{tmp_path / 'bin'}{os.pathsep}{original}"

    def test_add_path_writes_github_path(self, runner, runner_env, tmp_path):
        runner.add_path(tmp_path / "bin")

        with open(runner_env["GITHUB_PATH"], encoding="utf-8") as f:
            assert f.read() == f"{tmp_path / 'bin'}\n"

    def test_add_path_without_command_file(self, tmp_path):
        runner = Runner(environ={})

        runner.add_path(tmp_path / "bin")

        assert runner.environ["PATH"] == str(tmp_path / "bin")


class TestRunnerOutputs:
    """Test step outputs."""

    def test_set_output(self, runner, runner_env):
        runner.set_output("dnscontrol-bin", "/opt/dnscontrol")

        assert runner.outputs == {"dnscontrol-bin": "/opt/dnscontrol"}
        with open(runner_env["GITHUB_OUTPUT"], encoding="utf-8") as f:
            assert f.read() == "dnscontrol-bin=/opt/dnscontrol\n"

    def test_multiline_output_uses_delimiter(self, runner, runner_env):
        runner.set_output("notes", "a\nb")

        with open(runner_env["GITHUB_OUTPUT"], encoding="utf-8") as f:
            lines = f.read().splitlines()

        assert lines[0].startswith("notes<<ghadelimiter_")
        delimiter = lines[0].split("<<", 1)[1]
        assert lines[1:] == ["a", "b", delimiter]

    def test_output_without_command_file(self):
        runner = Runner(environ={})

        runner.set_output("dnscontrol-bin", "/opt/dnscontrol")

        assert runner.outputs["dnscontrol-bin"] == "/opt/dnscontrol"


class TestRunnerGroup:
    """Test log grouping."""

    def test_group_on_github_actions(self, runner_env):
        runner_env["GITHUB_ACTIONS"] = "true"
        stream = io.StringIO()
        runner = Runner(environ=runner_env, stream=stream)

        with runner.group("💾 Install DNSControl"):
            stream.write("inside\n")

        assert stream.getvalue().splitlines() == [
            "::group::💾 Install DNSControl",
            "inside",
            "::endgroup::",
        ]

    def test_group_closed_on_error(self, runner_env):
        runner_env["GITHUB_ACTIONS"] = "true"
        stream = io.StringIO()
        runner = Runner(environ=runner_env, stream=stream)

        with pytest.raises(RuntimeError):
            with runner.group("title"):
                raise RuntimeError("boom")

        assert stream.getvalue().endswith("::endgroup::\n")

    def test_group_outside_github_actions(self, runner, caplog):
        with caplog.at_level(logging.INFO):
            with runner.group("🧪 Installation check"):
                pass

        assert "🧪 Installation check" in caplog.text
        assert runner.stream.getvalue() == ""

    def test_fail_logs_error(self, runner, caplog):
        with caplog.at_level(logging.ERROR):
            runner.fail("Unsupported OS (freebsd)")

        assert caplog.records[-1].levelno == logging.ERROR
        assert caplog.records[-1].getMessage() == "Unsupported OS (freebsd)"
