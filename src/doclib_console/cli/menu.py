"""Interactive nested menus for the document library console."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from rich.console import Console

from doclib_console.graph.columns import ColumnKind
from doclib_console.service.results import OperationResult, ResultStatus

if TYPE_CHECKING:
    from doclib_console.service.facade import DocumentLibraryService

logger = logging.getLogger(__name__)

PROMPT = "\nSelect an option: "

MAIN_MENU = (
    "MAIN MENU",
    ["Exit", "View Site General Info", "Perform Operations in Documents Library"],
)
GENERAL_MENU = (
    "SHAREPOINT GENERAL MENU",
    [
        "Back",
        "Display Access Token",
        "List Users",
        "List Root Site Info",
        "List All SharePoint Lists",
        "List All Drive Libraries",
    ],
)
LIBRARY_MENU = (
    "DOCUMENT LIBRARY MENU",
    [
        "Back",
        "List Files",
        "List Columns",
        "Create Columns",
        "List Content Types",
        "Create Content Type",
        "List Documents Info",
        "Create DocumentSet",
        "Update DocumentSet Field",
        "Rename Document",
    ],
)
COLUMN_MENU = (
    "CREATE COLUMN",
    [
        "Back",
        "Choice",
        "Number",
        "Currency",
        "DateTime",
        "Lookup",
        "Boolean",
        "Person/Group",
        "Hyperlink",
    ],
)

# Create-column menu choice -> (kind, name prompt)
COLUMN_CHOICES: dict[int, tuple[ColumnKind, str]] = {
    1: (ColumnKind.CHOICE, "Enter the name of the new Choice column: "),
    2: (ColumnKind.NUMBER, "Enter the name of the new Number column: "),
    3: (ColumnKind.CURRENCY, "Enter the name of the new Currency column: "),
    4: (ColumnKind.DATE_TIME, "Enter the name of the new Date and Time column: "),
    5: (ColumnKind.LOOKUP, "Enter the name of the new LookUp column: "),
    6: (ColumnKind.BOOLEAN, "Enter the name of the new Boolean column: "),
    7: (ColumnKind.PERSON_OR_GROUP, "Enter the name of the new Person or Group column: "),
    8: (ColumnKind.HYPERLINK, "Enter the name of the new Hyperlink column: "),
}


class MenuController:
    """Reads menu choices and parameters, calls the service and renders results."""

    def __init__(
        self,
        service: DocumentLibraryService,
        console: Console | None = None,
        input_func: Callable[[str], str] | None = None,
    ) -> None:
        """Initialise the controller.

        Args:
            service: Service facade that performs the operations.
            console: Rich console used for all output.
            input_func: Line reader taking a prompt; defaults to ``console.input``.
        """
        self._service = service
        self._console = console or Console()
        self._input = input_func or self._console.input

    def run(self) -> None:
        """Run the main menu until the user exits or input ends."""
        try:
            self._main_menu()
        except (EOFError, KeyboardInterrupt):
            logger.info("[run] input closed; exiting")
            self._console.print("\nGoodbye...")

    def _main_menu(self) -> None:
        choice = -1
        while choice != 0:
            choice = self._ask(MAIN_MENU)
            if choice == 0:
                self._console.print("Goodbye...")
            elif choice == 1:
                self._general_menu()
            elif choice == 2:
                self._library_menu()
            else:
                self._console.print("Invalid choice!")

    def _general_menu(self) -> None:
        actions: dict[int, Callable[[], OperationResult]] = {
            1: self._service.display_access_token,
            2: self._service.list_users,
            3: self._service.show_root_site,
            4: self._service.list_lists,
            5: self._service.list_drives,
        }
        choice = -1
        while choice != 0:
            choice = self._ask(GENERAL_MENU)
            if choice == 0:
                break
            action = actions.get(choice)
            if action is None:
                self._console.print("Invalid option!")
                continue
            self.render(action())

    def _library_menu(self) -> None:
        choice = -1
        while choice != 0:
            choice = self._ask(LIBRARY_MENU)
            if choice == 0:
                break
            if choice == 1:
                self.render(self._service.list_files())
            elif choice == 2:
                self.render(self._service.list_columns())
            elif choice == 3:
                self._column_menu()
            elif choice == 4:
                self.render(self._service.list_content_types())
            elif choice == 5:
                name = self.read_required("Enter the name of the Content Type: ")
                description = self.read_required("Enter a description for the Content Type: ")
                group = self.read_required("Enter the name of the Content Type Category: ")
                self.render(self._service.create_content_type(name, description, group))
            elif choice == 6:
                self.render(self._service.list_items())
            elif choice == 7:
                name = self.read_required("Enter the name of the new DocumentSet: ")
                value = self.read_required("Enter its default value on the common field: ")
                self.render(self._service.create_document_set(name, value))
            elif choice == 8:
                set_name = self.read_required("Enter the Document Set name: ")
                field_name = self.read_required("Enter field name: ")
                new_value = self.read_required("Enter new value: ")
                result = self._service.update_document_set_field(set_name, field_name, new_value)
                self.render(result)
            elif choice == 9:
                old_name = self.read_required("Enter the current name of the document: ")
                new_name = self.read_required("Enter the new name of the document: ")
                self.render(self._service.rename_document(old_name, new_name))
            else:
                self._console.print("Invalid option")

    def _column_menu(self) -> None:
        choice = -1
        while choice != 0:
            choice = self._ask(COLUMN_MENU)
            if choice == 0:
                break
            entry = COLUMN_CHOICES.get(choice)
            if entry is None:
                self._console.print("Invalid option!")
                continue
            kind, prompt = entry
            name = self.read_required(prompt)
            choices = None
            if kind is ColumnKind.CHOICE:
                choices = self.read_required(
                    "Enter all possible choices separating them with a comma: "
                )
            self.render(self._service.create_column(kind, name, choices))

    def _ask(self, menu: tuple[str, list[str]]) -> int:
        title, options = menu
        self._console.print(f"\n=== {title} ===", markup=False)
        for number, label in enumerate(options):
            self._console.print(f"{number}. {label}", markup=False)
        return self.read_choice()

    def read_choice(self) -> int:
        """Read a menu number; anything that is not an integer reads as -1."""
        raw = self._input(PROMPT)
        try:
            return int(raw.strip())
        except ValueError:
            return -1

    def read_required(self, prompt: str) -> str:
        """Prompt until the user enters a non-blank value."""
        while True:
            value = self._input(prompt)
            if value.strip():
                return value

    def render(self, result: OperationResult) -> None:
        """Print an operation result to the console.

        Lines are soft-wrapped so long values such as tokens and URLs stay
        on one logical line and can be copied intact.
        """
        for line in result.lines:
            self._console.print(line, markup=False, highlight=False, soft_wrap=True)
        if not result.message:
            return
        style = None
        if not result.ok:
            style = "red" if result.status is ResultStatus.ERROR else "yellow"
        self._console.print(
            result.message, style=style, markup=False, highlight=False, soft_wrap=True
        )
