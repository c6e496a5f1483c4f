"""Command-line entry point for fitting tabulated cross-sections."""

import logging
from pathlib import Path

import typer

from xsecfit.analysis.fitting_service import XsecFitService
from xsecfit.analysis.report import format_report
from xsecfit.errors import ConfigurationError, XsecFitError
from xsecfit.io.config_yaml import load_fit_config
from xsecfit.io.registry import get_grid_entry
from xsecfit.io.results_yaml import default_results_path, save_fit_results_yaml
from xsecfit.visualization.plot import default_plot_path, plot_fit_overview

app = typer.Typer(help="Piecewise exponential fits of EWK cross-sections")
logger = logging.getLogger(__name__)


def _configure_logging(debug: bool) -> None:
    # Configure basic logging so info-level messages are visible by default.
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=logging.DEBUG if debug else logging.INFO,
            format="%(levelname)s: %(message)s",
        )
    # Suppress verbose matplotlib output
    logging.getLogger("matplotlib").setLevel(logging.WARNING)


@app.command()
def fit(
    grid: str | None = typer.Argument(
        None, help="Grid name (default C1N2), e.g. C1N2, C1C1, N1N2, SlepSlep."
    ),
    composition: str | None = typer.Argument(
        None, help="Composition (default wino), e.g. wino, hino, left, right."
    ),
    input_dir: Path | None = typer.Option(
        None,
        "-i",
        "--input-dir",
        file_okay=False,
        dir_okay=True,
        help="Directory with xsec_<grid>_<composition>.txt tables (default Inputs).",
    ),
    output_dir: Path | None = typer.Option(
        None,
        "-o",
        "--output-dir",
        file_okay=False,
        dir_okay=True,
        help="Directory for the results YAML and the plot (default: current).",
    ),
    do_print: bool | None = typer.Option(
        None, "--print/--no-print", help="Print the actual vs. fitted table."
    ),
    save_output: bool | None = typer.Option(
        None, "--save/--no-save", help="Write the fitted functions and samples to YAML."
    ),
    save_plot: bool | None = typer.Option(
        None, "--plot/--no-plot", help="Save the diagnostic figure."
    ),
    method: str | None = typer.Option(
        None, "--method", "-m", help="Fit method: 'least_squares' or 'loglinear'."
    ),
    n_workers: int | None = typer.Option(
        None, "--workers", "-w", min=1, help="Threads for the window fits."
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="YAML file with default values for any of these options.",
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
) -> None:
    """Fit the cross-sections of GRID/COMPOSITION and report the fit quality."""
    _configure_logging(debug)

    try:
        config = load_fit_config(
            config_file,
            overrides={
                "grid": grid,
                "composition": composition,
                "input_dir": input_dir,
                "output_dir": output_dir,
                "do_print": do_print,
                "save_output": save_output,
                "save_plot": save_plot,
                "method": method,
                "n_workers": n_workers,
            },
        )
        get_grid_entry(config.grid, config.composition)
    except ConfigurationError as exc:
        typer.secho(str(exc), err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1)
    logger.debug("Resolved configuration: %s", config.to_dict())

    service = XsecFitService(
        input_dir=config.input_dir,
        method=config.method,
        n_workers=config.n_workers,
        envelope_step=config.envelope_step,
    )
    try:
        run = service.run(config.grid, config.composition)
    except XsecFitError as exc:
        typer.secho(
            f"Fit of {config.grid} {config.composition} failed: {exc}",
            err=True,
            fg=typer.colors.RED,
        )
        raise typer.Exit(code=1)

    if config.do_print:
        typer.echo(format_report(run.report, run.grid, run.composition))

    if config.save_plot:
        plot_fit_overview(
            run, default_plot_path(config.output_dir, run.grid, run.composition)
        )

    if not config.save_output:
        return

    typer.echo("Writing output ...")
    results_path = save_fit_results_yaml(
        default_results_path(config.output_dir, run.grid, run.composition),
        run.fits,
        run.samples,
        grid=run.grid,
        composition=run.composition,
    )
    typer.echo(f"Saved {len(run.fits)} fits to {results_path}")


if __name__ == "__main__":
    app()
