import json

import click

from geohashkit import config
from geohashkit import geocover
from geohashkit.compaction import compact_cells
from geohashkit.coverage import polygon_to_cells
from geohashkit.errors import GeohashKitError
from geohashkit.geojson import cells_to_geojson
from geohashkit.models import CoverageOptions
from geohashkit.spatial.hull import cells_to_convex_hull, cells_to_hull_polygon


@click.group(epilog="For detailed help on each command, run: geohashkit COMMAND --help")
def cli():
    """The geohashkit utility covers polygons with multi-precision geohash
    cells, compacts cell sets, and rebuilds editable polygons from them."""
    pass

@cli.command()
@click.option('-c', '--config', help='Path to configuration file to create or replace')
def init(config):
    """Populates a configuration file based on user input."""
    click.echo(geocover.banner())
    config = geocover.init_config(config)
    click.echo(f'Initialized the geohashkit configuration file {config}')

@cli.command()
@click.option('-c', '--config', 'config_filename', help='Path to configuration file to display', required=True)
def info(config_filename):
    """Summarizes the contents of a configuration file."""
    click.echo(geocover.banner())
    configuration = config.configuration(config.config_parser_factory(config_filename), {})
    configuration.show()

@cli.command()
@click.option('-c', '--config', 'config_filename', help='Path to configuration file', required=True)
@click.option('-m', '--max-cells', type=int, help='Override the configured cell budget.')
@click.option('-g', '--write-geojson', is_flag=True, help='Also write the cells as GeoJSON.')
def process(config_filename, max_cells, write_geojson):
    """Covers the configured polygon and writes the cell list."""
    click.echo(geocover.banner())
    overrides = {
        'max_cells': max_cells,
        'write_geojson': write_geojson or None,
    }
    configuration = config.configuration(config.config_parser_factory(config_filename), overrides)
    valid, errors = config.validate(configuration)
    if not valid:
        raise click.ClickException(' '.join(errors))
    geocover.init_logging()
    try:
        geocover.process(configuration)
    except GeohashKitError as e:
        raise click.ClickException(f'Unable to cover polygon: {e}')
    click.echo(f'Processed polygon using the configuration file {config_filename}')

@cli.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--min-precision', type=int, default=CoverageOptions.min_precision, show_default=True)
@click.option('--max-precision', type=int, default=CoverageOptions.max_precision, show_default=True)
@click.option('--max-cells', type=int, default=CoverageOptions.max_cells, show_default=True)
@click.option('--merge-threshold', type=float, default=CoverageOptions.merge_threshold, show_default=True)
@click.option('--geojson', 'as_geojson', is_flag=True, help='Print a GeoJSON FeatureCollection instead of a cell list.')
def cover(input_file, min_precision, max_precision, max_cells, merge_threshold, as_geojson):
    """Prints the cells covering the polygon in INPUT_FILE (GeoJSON)."""
    options = CoverageOptions(min_precision, max_precision, max_cells, merge_threshold)
    try:
        cells = polygon_to_cells(geocover.read_polygon(input_file), options)
    except GeohashKitError as e:
        raise click.ClickException(str(e))
    click.echo(json.dumps(cells_to_geojson(cells) if as_geojson else cells))

@cli.command()
@click.argument('cells', nargs=-1)
@click.option('--lossy', is_flag=True, help='Also merge groups with 30 or 31 of 32 siblings.')
def compact(cells, lossy):
    """Removes redundant CELLS and merges complete sibling groups."""
    try:
        click.echo(json.dumps(compact_cells(cells, lossy=lossy)))
    except GeohashKitError as e:
        raise click.ClickException(str(e))

@cli.command()
@click.argument('cells', nargs=-1)
@click.option('--geojson', 'as_geojson', is_flag=True, help='Print the hull as a GeoJSON Polygon.')
def hull(cells, as_geojson):
    """Prints the convex hull of CELLS as (lon, lat) vertices."""
    try:
        if as_geojson:
            polygon = cells_to_hull_polygon(cells)
            click.echo(json.dumps(polygon.__geo_interface__ if polygon is not None else None))
        else:
            click.echo(json.dumps([list(p) for p in cells_to_convex_hull(cells)]))
    except GeohashKitError as e:
        raise click.ClickException(str(e))


if __name__ == "__main__":
    cli()
