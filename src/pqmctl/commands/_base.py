"""Click base classes for pqmctl commands.

Every subcommand carries usage examples (shown by ``--examples``, so
``--help`` stays short) and a help section. The 24 contract commands keep
the contract's camelCase names, which sort poorly, so the root help lists
them by section in registration order instead of alphabetically.
"""

from __future__ import annotations

from typing import Any

import click

DEFAULT_SECTION = "Commands"


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    """Attach an eager ``--examples`` flag to *cmd*."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class PqmCommand(click.Command):
    """A contract subcommand: ``examples`` for ``--examples``, ``section`` for help."""

    def __init__(
        self,
        *args: Any,
        examples: str | None = None,
        section: str = DEFAULT_SECTION,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        self.section = section
        if examples:
            _add_examples_option(self, examples)


class PqmGroup(click.Group):
    """Root group: sectioned command listing plus its own ``--examples``."""

    command_class = PqmCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)

    def format_commands(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        visible = [(name, cmd) for name, cmd in self.commands.items() if not cmd.hidden]
        if not visible:
            return
        limit = formatter.width - 6 - max(len(name) for name, _ in visible)
        sections: dict[str, list[tuple[str, str]]] = {}
        for name, cmd in visible:
            section = getattr(cmd, "section", DEFAULT_SECTION)
            sections.setdefault(section, []).append((name, cmd.get_short_help_str(limit)))
        for section, rows in sections.items():
            with formatter.section(section):
                formatter.write_dl(rows)

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        super().format_epilog(ctx, formatter)
        formatter.write_paragraph()
        formatter.write_text(f"Run '{ctx.command_path} COMMAND --examples' for usage examples.")
