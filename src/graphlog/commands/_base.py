"""Click base classes carrying per-command usage examples.

``--help`` stays short and ends with a pointer to ``--examples``, which
prints the command's example invocations and exits before the store is
opened. On a group, ``--examples`` also walks every subcommand so
``graphlog query --examples`` shows csp, cycle and topo-sort together.
"""

from __future__ import annotations

import textwrap
from typing import Any

import click


def _normalise(examples: str) -> str:
    """Indent example lines uniformly by two spaces."""
    return textwrap.indent(textwrap.dedent(examples).strip("\n"), "  ")


def _show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    command = ctx.command
    click.echo(f"Examples for '{ctx.command_path}':\n")
    own = getattr(command, "examples", None)
    if own:
        click.echo(own)
    if isinstance(command, click.Group):
        for name in command.list_commands(ctx):
            sub = command.get_command(ctx, name)
            sub_examples = getattr(sub, "examples", None)
            if sub_examples and sub_examples != own:
                click.echo(f"\n{ctx.command_path} {name}:")
                click.echo(sub_examples)
    ctx.exit(0)


class _ExamplesMixin:
    """Stores normalised examples and adds the eager ``--examples`` flag."""

    examples: str | None
    params: list[click.Parameter]

    def _init_examples(self, examples: str | None) -> None:
        self.examples = _normalise(examples) if examples else None
        if self.examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=_show_examples,
                    help="Show usage examples and exit.",
                )
            )

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        super().format_epilog(ctx, formatter)  # type: ignore[misc]
        if self.examples:
            formatter.write_paragraph()
            formatter.write_text(f"Run '{ctx.command_path} --examples' for usage examples.")


class GraphlogCommand(_ExamplesMixin, click.Command):
    """Command that accepts ``examples=``."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class GraphlogGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands default to :class:`GraphlogCommand`."""

    command_class = GraphlogCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)
