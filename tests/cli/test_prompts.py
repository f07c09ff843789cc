"""Tests for interactive resolution of missing arguments (questionary patched)."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import pytest

from winsvc_installer.cli.arguments import InstallerArguments, Operation
from winsvc_installer.cli.prompts import (
    confirm_elevation,
    prompt_for_operation,
    prompt_for_value,
    resolve_missing_arguments,
    select_name,
)
from winsvc_installer.exit_codes import ExitCode


@pytest.fixture
def mock_questionary() -> Iterator[MagicMock]:
    with patch("winsvc_installer.cli.prompts.questionary") as mock_q:
        yield mock_q


def _answers(mock_q: MagicMock, *texts: str | None) -> None:
    mock_q.text.return_value.ask.side_effect = list(texts)


class TestPromptForValue:
    def test_existing_value_is_kept(self, mock_questionary: MagicMock) -> None:
        assert prompt_for_value("MySvc", "ServiceName") == "MySvc"
        mock_questionary.text.assert_not_called()

    def test_prompts_when_empty(self, mock_questionary: MagicMock) -> None:
        _answers(mock_questionary, "  typed  ")
        assert prompt_for_value("", "ServiceName") == "typed"
        mock_questionary.text.assert_called_once_with(
            "Enter a value for 'ServiceName':", default=""
        )

    def test_recommendation_is_prefilled(self, mock_questionary: MagicMock) -> None:
        _answers(mock_questionary, "My Service")
        assert prompt_for_value("", "ServiceName", "My Service") == "My Service"
        assert mock_questionary.text.call_args.kwargs["default"] == "My Service"

    def test_whitespace_value_counts_as_missing(self, mock_questionary: MagicMock) -> None:
        _answers(mock_questionary, "entered")
        assert prompt_for_value("   ", "Description") == "entered"

    def test_quotes_are_stripped(self, mock_questionary: MagicMock) -> None:
        _answers(mock_questionary, '"C:\\svc\\app.exe"')
        assert prompt_for_value("", "FilePath") == r"C:\svc\app.exe"

    @pytest.mark.parametrize("answer", ["", "   ", None])
    def test_blank_or_cancelled_answer(
        self, mock_questionary: MagicMock, answer: str | None, caplog: pytest.LogCaptureFixture
    ) -> None:
        _answers(mock_questionary, answer)
        with caplog.at_level(logging.WARNING):
            assert prompt_for_value("", "DisplayName") is None
        assert "Invalid value for 'DisplayName'." in caplog.text


class TestPromptForOperation:
    def test_returns_selection(self, mock_questionary: MagicMock) -> None:
        mock_questionary.select.return_value.ask.return_value = Operation.UNINSTALL
        assert prompt_for_operation() is Operation.UNINSTALL

    def test_cancelled(self, mock_questionary: MagicMock) -> None:
        mock_questionary.select.return_value.ask.return_value = None
        assert prompt_for_operation() is None


class TestSelectName:
    def test_no_suggestions_uses_stem(self, mock_questionary: MagicMock) -> None:
        assert select_name("app", []) == "app"
        mock_questionary.select.assert_not_called()

    def test_stem_first_and_duplicates_removed(self, mock_questionary: MagicMock) -> None:
        mock_questionary.select.return_value.ask.return_value = "Worker"
        assert select_name("app", ["Worker", "app", "Worker"]) == "Worker"
        kwargs = mock_questionary.select.call_args.kwargs
        assert kwargs["choices"] == ["app", "Worker"]
        assert kwargs["default"] == "app"

    def test_cancelled_falls_back_to_stem(self, mock_questionary: MagicMock) -> None:
        mock_questionary.select.return_value.ask.return_value = None
        assert select_name("app", ["Worker"]) == "app"


class TestConfirmElevation:
    @pytest.mark.parametrize(("answer", "expected"), [(True, True), (False, False), (None, False)])
    def test_only_true_confirms(
        self, mock_questionary: MagicMock, answer: bool | None, expected: bool
    ) -> None:
        mock_questionary.confirm.return_value.ask.return_value = answer
        assert confirm_elevation() is expected
        assert mock_questionary.confirm.call_args.kwargs["default"] is False


class TestResolveMissingArguments:
    def test_complete_install_does_not_prompt(self, mock_questionary: MagicMock) -> None:
        args = InstallerArguments(
            service_name="s", display_name="d", file_path="f", description="x",
            operation=Operation.INSTALL,
        )  # fmt: skip
        assert resolve_missing_arguments(args) == ExitCode.SUCCESS
        mock_questionary.text.assert_not_called()
        mock_questionary.select.assert_not_called()

    def test_install_prompts_in_order_with_recommendations(
        self, mock_questionary: MagicMock
    ) -> None:
        _answers(mock_questionary, r"C:\svc\worker.exe", "worker", "worker", "Background worker")
        args = InstallerArguments(operation=Operation.INSTALL)
        assert resolve_missing_arguments(args) == ExitCode.SUCCESS
        prompts = [c.args[0] for c in mock_questionary.text.call_args_list]
        assert prompts == [
            "Enter a value for 'FilePath':",
            "Enter a value for 'DisplayName':",
            "Enter a value for 'ServiceName':",
            "Enter a value for 'Description':",
        ]
        defaults = [c.kwargs["default"] for c in mock_questionary.text.call_args_list]
        assert defaults == ["", "worker", "worker", ""]
        assert args.file_path == r"C:\svc\worker.exe"
        assert args.description == "Background worker"

    def test_service_name_recommends_display_name(self, mock_questionary: MagicMock) -> None:
        _answers(mock_questionary, "MySvc", "d")
        args = InstallerArguments(
            display_name="My Service", file_path="app.exe", operation=Operation.INSTALL
        )
        assert resolve_missing_arguments(args) == ExitCode.SUCCESS
        assert mock_questionary.text.call_args_list[0].kwargs["default"] == "My Service"
        assert args.service_name == "MySvc"

    def test_suggestions_offered_for_display_name(self, mock_questionary: MagicMock) -> None:
        mock_questionary.select.return_value.ask.return_value = "Worker"
        _answers(mock_questionary, "Worker", "Worker", "desc")
        args = InstallerArguments(file_path=r"C:\svc\app.exe", operation=Operation.INSTALL)
        assert resolve_missing_arguments(args, ["Worker"]) == ExitCode.SUCCESS
        assert mock_questionary.select.call_args.kwargs["choices"] == ["app", "Worker"]
        assert mock_questionary.text.call_args_list[0].kwargs["default"] == "Worker"

    @pytest.mark.parametrize(
        ("answers", "expected"),
        [
            ([""], ExitCode.MISSING_FILE_PATH),
            (["app.exe", ""], ExitCode.MISSING_DISPLAY_NAME),
            (["app.exe", "d", ""], ExitCode.MISSING_SERVICE_NAME),
            (["app.exe", "d", "s", ""], ExitCode.MISSING_DESCRIPTION),
        ],
    )
    def test_install_missing_field_codes(
        self, mock_questionary: MagicMock, answers: list[str], expected: ExitCode
    ) -> None:
        _answers(mock_questionary, *answers)
        args = InstallerArguments(operation=Operation.INSTALL)
        assert resolve_missing_arguments(args) == expected

    def test_uninstall_only_needs_service_name(self, mock_questionary: MagicMock) -> None:
        _answers(mock_questionary, "MySvc")
        args = InstallerArguments(operation=Operation.UNINSTALL)
        assert resolve_missing_arguments(args) == ExitCode.SUCCESS
        assert args.service_name == "MySvc"
        assert mock_questionary.text.call_count == 1

    def test_uninstall_missing_service_name(self, mock_questionary: MagicMock) -> None:
        _answers(mock_questionary, "")
        args = InstallerArguments(operation=Operation.UNINSTALL)
        assert resolve_missing_arguments(args) == ExitCode.MISSING_UNINSTALL_SERVICE_NAME

    def test_operation_prompted_when_absent(self, mock_questionary: MagicMock) -> None:
        mock_questionary.select.return_value.ask.return_value = Operation.UNINSTALL
        _answers(mock_questionary, "MySvc")
        args = InstallerArguments()
        assert resolve_missing_arguments(args) == ExitCode.SUCCESS
        assert args.operation is Operation.UNINSTALL

    def test_no_operation_selected(self, mock_questionary: MagicMock) -> None:
        mock_questionary.select.return_value.ask.return_value = None
        assert resolve_missing_arguments(InstallerArguments()) == ExitCode.MISSING_OPERATION
