"""
Interactive prompts.

The setup service never prompts directly; it is handed an
`OrganizationRequestSupplier` built here, which only runs when a new org is
actually needed.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import ValidationError
from rich.console import Console
from rich.prompt import Confirm, Prompt

from okta_setup.core.errors import PromptError
from okta_setup.domain.models import OrganizationRequest

T = TypeVar("T")


@dataclass(frozen=True)
class PromptOption(Generic[T]):
    """A choice shown to the user and the value it stands for."""

    display_name: str
    value: T

    @classmethod
    def of(cls, display_name: str, value: T) -> PromptOption[T]:
        return cls(display_name=display_name, value=value)


class Prompter:
    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def prompt(self, message: str, default: str | None = None, required: bool = True) -> str:
        """Ask for free text; an empty answer to a required prompt is an error."""
        answer = (Prompt.ask(message, default=default, console=self.console) or "").strip()
        if required and not answer:
            raise PromptError(f"A value is required for '{message}'")
        return answer

    def prompt_yes_no(self, message: str, default: bool = True) -> bool:
        return Confirm.ask(message, default=default, console=self.console)

    def prompt_options(
        self,
        message: str,
        options: Sequence[PromptOption[T]],
        default: PromptOption[T] | None = None,
    ) -> T:
        """Show a numbered list and return the value of the chosen option."""
        if not options:
            raise PromptError(f"No options to choose from for '{message}'")

        self.console.print(message)
        for index, option in enumerate(options, start=1):
            self.console.print(f"> {index}: {option.display_name}")

        choices = [str(i) for i in range(1, len(options) + 1)]
        default_choice = str(options.index(default) + 1) if default in options else None
        answer = Prompt.ask(
            "Enter your choice", choices=choices, default=default_choice, console=self.console
        )
        return options[int(answer) - 1].value

    def organization_request(self) -> OrganizationRequest:
        """Collect registration details, re-asking until they validate."""
        while True:
            first_name = self.prompt("First name")
            last_name = self.prompt("Last name")
            email = self.prompt("Email address")
            organization = self.prompt("Company", default="", required=False)
            try:
                return OrganizationRequest(
                    first_name=first_name,
                    last_name=last_name,
                    email=email,
                    organization=organization,
                )
            except ValidationError as exc:
                for error in exc.errors():
                    self.console.print(f"[red]{error['msg']}[/red]")


def organization_request_supplier(
    prompter: Prompter | None = None,
    *,
    first_name: str | None = None,
    last_name: str | None = None,
    email: str | None = None,
    organization: str | None = None,
    interactive: bool = True,
) -> Callable[[], OrganizationRequest]:
    """
    Build a lazy supplier for the registration request.

    Values given up front are used as they are. In interactive mode a missing
    value triggers the prompts, followed by a confirmation; declining raises
    PromptError. In batch mode a missing value raises PromptError when the
    supplier is called.
    """

    def supplier() -> OrganizationRequest:
        if first_name and last_name and email:
            return OrganizationRequest(
                first_name=first_name,
                last_name=last_name,
                email=email,
                organization=organization or "",
            )
        if not interactive:
            raise PromptError(
                "First name, last name and email are required to register a new Okta org",
                details={"hint": "pass --first-name, --last-name and --email"},
            )
        active = prompter or Prompter()
        request = active.organization_request()
        if not active.prompt_yes_no(f"Register a new Okta org for {request.email}?"):
            raise PromptError("Okta org registration cancelled")
        return request

    return supplier
