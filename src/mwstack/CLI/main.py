"""
Command Line Interface for MWStack.
"""
import click
from ..UTILS.logger import setup_logging
from ..MODELS.phase import Phase
from ..MODELS.errors import StackError
from ..MANAGERS.project_layout import ProjectLayout
from ..MANAGERS.lifecycle_orchestrator import LifecycleOrchestrator

PHASE_FLAGS = [Phase.SCAFFOLD, Phase.RESET, Phase.UPDATE, Phase.START, Phase.REBOOT, Phase.HELP]

def phase_options(func):
    """
    Adds one boolean flag per lifecycle phase.
    """
    for phase in reversed(PHASE_FLAGS):
        func = click.option(phase.flag, phase.value, is_flag=True, help=phase.description)(func)
    return func

def select_phase(flags: dict) -> Phase:
    """
    Maps the given phase flags to exactly one phase; none selects help.

    :param flags: Flag values keyed by phase value.
    :return: The selected phase.
    :raises click.UsageError: If more than one phase was given.
    """
    selected = [Phase(name) for name, on in flags.items() if on]
    if len(selected) > 1:
        raise click.UsageError(
            f"Only one phase may be selected, got: {' '.join(p.flag for p in selected)}"
        )
    return selected[0] if selected else Phase.HELP

def confirm(question: str) -> bool:
    return click.confirm(question, default=False)

@click.command(context_settings={"help_option_names": []})
@phase_options
@click.option('--project-dir', default='.', type=click.Path(file_okay=False), help='Project root directory')
@click.option('--env-file', default=None, type=click.Path(dir_okay=False), help='Environment file (default: <project-dir>/.env)')
@click.option('--yes', '-y', is_flag=True, help='Do not ask before destructive actions')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, project_dir, env_file, yes, verbose, **flags):
    """
    MWStack - MediaWiki Docker stack lifecycle manager.

    Scaffolds, starts, reboots, resets and updates the stack from a single .env file.
    """
    setup_logging(verbose)
    phase = select_phase(flags)

    orchestrator = LifecycleOrchestrator(
        ProjectLayout(project_dir),
        env_file=env_file,
        confirm=confirm,
        assume_yes=yes,
    )
    try:
        orchestrator.run(phase)
    except StackError as e:
        click.secho(f"Error: {e}", fg='red', err=True)
        ctx.exit(e.exit_code)
    except OSError as e:
        click.secho(f"Error: {e}", fg='red', err=True)
        ctx.exit(1)

def main():
    """
    Main entry point for the CLI.
    """
    cli(prog_name="mwstack")

if __name__ == '__main__':
    main()
