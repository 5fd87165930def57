"""splitaudit CLI - main entry point and command registration hub."""
# ruff: noqa: E402 - Intentional lazy loading: commands imported after cli group definition

import click

from splitaudit import __version__


@click.group()
@click.version_option(version=__version__, prog_name="splitaudit")
@click.help_option("-h", "--help")
def cli():
    """splitaudit - per-dependency npm vulnerability audit

    \b
    QUICK START:
      splitaudit audit                  # Audit the project in the current directory
      splitaudit audit --summary        # Also show a severity table

    \b
    For detailed options: splitaudit <command> --help"""
    pass


from splitaudit.commands.audit import audit

cli.add_command(audit)


def main():
    """Main entry point for console script."""
    cli()


if __name__ == "__main__":
    main()
