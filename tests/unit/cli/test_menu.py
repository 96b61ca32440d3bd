"""Unit tests for cli/menu.py: MenuController with scripted input."""

import io
from unittest.mock import MagicMock

from rich.console import Console

from doclib_console.cli.menu import MenuController
from doclib_console.graph.columns import ColumnKind
from doclib_console.service.results import OperationResult

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_controller(inputs: list[str]) -> tuple[MenuController, MagicMock, io.StringIO]:
    """Return (controller, mock_service, captured_output)."""
    output = io.StringIO()
    console = Console(file=output, width=120, color_system=None)
    service = MagicMock()
    service.configure_mock(
        **{
            f"{method}.return_value": OperationResult.success([f"{method} ok"])
            for method in (
                "display_access_token",
                "list_users",
                "show_root_site",
                "list_lists",
                "list_drives",
                "list_files",
                "list_columns",
                "list_content_types",
                "list_items",
                "create_column",
                "create_content_type",
                "create_document_set",
                "update_document_set_field",
                "rename_document",
            )
        }
    )
    scripted = iter(inputs)

    def _input(prompt: str) -> str:
        output.write(prompt)
        try:
            return next(scripted)
        except StopIteration:
            raise EOFError from None

    return MenuController(service, console=console, input_func=_input), service, output


# ---------------------------------------------------------------------------
# Navigation tests
# ---------------------------------------------------------------------------


class TestNavigation:
    def test_exit_from_main_menu(self) -> None:
        controller, _, output = _make_controller(["0"])
        controller.run()
        assert "=== MAIN MENU ===" in output.getvalue()
        assert "Goodbye..." in output.getvalue()

    def test_invalid_and_non_numeric_choices(self) -> None:
        controller, _, output = _make_controller(["7", "abc", "0"])
        controller.run()
        assert output.getvalue().count("Invalid choice!") == 2

    def test_end_of_input_exits_cleanly(self) -> None:
        controller, _, output = _make_controller(["1"])
        controller.run()
        assert "Goodbye..." in output.getvalue()

    def test_general_menu_dispatch(self) -> None:
        controller, service, output = _make_controller(
            ["1", "1", "2", "3", "4", "5", "9", "0", "0"]
        )
        controller.run()
        service.display_access_token.assert_called_once_with()
        service.list_users.assert_called_once_with()
        service.show_root_site.assert_called_once_with()
        service.list_lists.assert_called_once_with()
        service.list_drives.assert_called_once_with()
        assert "list_drives ok" in output.getvalue()
        assert "Invalid option!" in output.getvalue()


# ---------------------------------------------------------------------------
# Document library menu tests
# ---------------------------------------------------------------------------


class TestLibraryMenu:
    def test_listing_operations(self) -> None:
        controller, service, _ = _make_controller(["2", "1", "2", "4", "6", "0", "0"])
        controller.run()
        service.list_files.assert_called_once_with()
        service.list_columns.assert_called_once_with()
        service.list_content_types.assert_called_once_with()
        service.list_items.assert_called_once_with()

    def test_create_content_type_prompts(self) -> None:
        controller, service, _ = _make_controller(
            ["2", "5", "Contract", "Signed contracts", "Legal", "0", "0"]
        )
        controller.run()
        service.create_content_type.assert_called_once_with("Contract", "Signed contracts", "Legal")

    def test_required_values_are_reprompted(self) -> None:
        controller, service, output = _make_controller(
            ["2", "9", "", "   ", "Draft.docx", "Final.docx", "0", "0"]
        )
        controller.run()
        service.rename_document.assert_called_once_with("Draft.docx", "Final.docx")
        assert output.getvalue().count("Enter the current name of the document: ") == 3

    def test_document_set_operations(self) -> None:
        controller, service, _ = _make_controller(
            ["2", "7", "Set A", "common", "8", "Set A", "Department", "HR", "0", "0"]
        )
        controller.run()
        service.create_document_set.assert_called_once_with("Set A", "common")
        service.update_document_set_field.assert_called_once_with("Set A", "Department", "HR")

    def test_create_choice_column(self) -> None:
        controller, service, _ = _make_controller(
            ["2", "3", "1", "Status", "Open, Closed", "0", "0", "0"]
        )
        controller.run()
        service.create_column.assert_called_once_with(ColumnKind.CHOICE, "Status", "Open, Closed")

    def test_create_hyperlink_column(self) -> None:
        controller, service, _ = _make_controller(["2", "3", "8", "Link", "0", "0", "0"])
        controller.run()
        service.create_column.assert_called_once_with(ColumnKind.HYPERLINK, "Link", None)


# ---------------------------------------------------------------------------
# Rendering tests
# ---------------------------------------------------------------------------


class TestRender:
    def test_renders_lines_and_messages(self) -> None:
        controller, _, output = _make_controller([])
        controller.render(OperationResult.success(["ID: [not markup]"]))
        controller.render(OperationResult.not_found("No lists found."))
        controller.render(OperationResult.error("Error getting lists: boom"))
        text = output.getvalue()
        assert "ID: [not markup]" in text
        assert "No lists found." in text
        assert "Error getting lists: boom" in text

    def test_long_token_is_not_broken_across_lines(self) -> None:
        output = io.StringIO()
        console = Console(file=output, width=80, color_system=None)
        controller = MenuController(MagicMock(), console=console, input_func=input)
        token = "eyJ" + "A" * 200

        controller.render(OperationResult.success([f"App-only token: {token}"]))

        assert f"App-only token: {token}\n" in output.getvalue()

    def test_long_error_message_is_not_broken_across_lines(self) -> None:
        output = io.StringIO()
        console = Console(file=output, width=40, color_system=None)
        controller = MenuController(MagicMock(), console=console, input_func=input)
        url = "https://contoso.sharepoint.com/sites/SPtraining/Shared%20Documents/Set%20A"

        controller.render(OperationResult.error(f"Error renaming document: {url}"))

        assert url in output.getvalue()
