import configparser
import json
import logging
import os.path
import sys

from funcy import decorator
from pyfiglet import Figlet
from rich.prompt import Confirm, Prompt

from geohashkit import config
from geohashkit import constants
from geohashkit.coverage import polygon_to_cells
from geohashkit.geojson import cells_to_geojson


CONSOLE_FORMAT = "%(message)s"
LOGFILE_FORMAT = "%(asctime)s|%(levelname)s|%(name)s|%(message)s"

def init_logging(logfile=constants.LOGFILE_NAME):
    """
    Sends package log messages to the console (INFO and up) and to a log
    file (everything).
    """
    logger = logging.getLogger(constants.LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if logfile:
        logfile_handler = logging.FileHandler(logfile, "w")
        logfile_handler.setLevel(logging.DEBUG)
        logfile_handler.setFormatter(logging.Formatter(LOGFILE_FORMAT))
        logger.addHandler(logfile_handler)

    return logger

@decorator
def log(call):
    logging.getLogger(constants.LOGGER_NAME).debug(call._func.__name__)
    return call()

def banner():
    """
    Displays the name of this utility using incredible ASCII-art.
    """
    f = Figlet(font='slant')
    return f.renderText('geohashkit')

def init_config(configuration_file):
    """
    Prompts the user for configuration values and then creates a valid configuration file.
    """
    print("""This utility will create a coverage configuration file by prompting """
          """you for values for each of the configuration parameters.""")
    print()
    if not configuration_file:
        configuration_file = Prompt.ask("configuration file name", default="example.ini")
    else:
        print(f'Creating configuration file {configuration_file}')
        print()

    if os.path.exists(configuration_file):
        print(f'WARNING: The {configuration_file} already exists.')
        overwrite = Confirm.ask("Overwrite?")
        if not overwrite:
            print('Not overwriting existing file. Exiting.')
            sys.exit(1)

    cfg_parser = configparser.ConfigParser()

    print()
    print(f'{constants.SOURCE_SECTION_NAME} Parameters')
    print('--------------------------------------------------')
    cfg_parser.add_section(constants.SOURCE_SECTION_NAME)
    cfg_parser.set(constants.SOURCE_SECTION_NAME, "input_file", Prompt.ask("Polygon GeoJSON file", default="polygon.geojson"))

    print()
    print(f'{constants.COVERAGE_SECTION_NAME} Parameters')
    print('--------------------------------------------------')
    cfg_parser.add_section(constants.COVERAGE_SECTION_NAME)
    cfg_parser.set(constants.COVERAGE_SECTION_NAME, "min_precision", Prompt.ask("Minimum precision (1-9)", default=str(constants.DEFAULT_MIN_PRECISION)))
    cfg_parser.set(constants.COVERAGE_SECTION_NAME, "max_precision", Prompt.ask("Maximum precision (1-9)", default=str(constants.DEFAULT_MAX_PRECISION)))
    cfg_parser.set(constants.COVERAGE_SECTION_NAME, "max_cells", Prompt.ask("Maximum number of cells", default=str(constants.DEFAULT_MAX_CELLS)))
    cfg_parser.set(constants.COVERAGE_SECTION_NAME, "merge_threshold", Prompt.ask("Merge threshold (0.0-1.0)", default=str(constants.DEFAULT_MERGE_THRESHOLD)))

    print()
    print(f'{constants.DESTINATION_SECTION_NAME} Parameters')
    print('--------------------------------------------------')
    cfg_parser.add_section(constants.DESTINATION_SECTION_NAME)
    cfg_parser.set(constants.DESTINATION_SECTION_NAME, "output_file", Prompt.ask("Cell list output file", default=constants.DEFAULT_OUTPUT_FILE))
    cfg_parser.set(constants.DESTINATION_SECTION_NAME, "write_geojson", Prompt.ask("Write cells as GeoJSON? (True/False)", default=str(constants.DEFAULT_WRITE_GEOJSON)))
    cfg_parser.set(constants.DESTINATION_SECTION_NAME, "geojson_file", Prompt.ask("GeoJSON output file", default=constants.DEFAULT_GEOJSON_FILE))

    print()
    print(f'Saving new configuration: {configuration_file}')
    with open(configuration_file, "tw") as file:
        cfg_parser.write(file)

    return configuration_file

@log
def read_polygon(input_file):
    """
    Reads a GeoJSON geometry, Feature, or bare coordinate ring from a file.
    """
    with open(input_file) as f:
        return json.load(f)

@log
def write_cells(output_file, cells):
    with open(output_file, "tw") as f:
        json.dump(cells, f, indent=2)

@log
def write_geojson(geojson_file, cells):
    with open(geojson_file, "tw") as f:
        json.dump(cells_to_geojson(cells), f)

def process(configuration: config.Config) -> list[str]:
    """
    Covers the configured polygon and writes the resulting cells.
    """
    logger = logging.getLogger(constants.LOGGER_NAME)
    logger.info(f'Covering polygon from {configuration.input_file}')

    polygon = read_polygon(configuration.input_file)
    cells = polygon_to_cells(polygon, configuration.coverage_options())

    write_cells(configuration.output_file, cells)
    logger.info(f'Wrote {len(cells)} cells to {configuration.output_file}')

    if configuration.write_geojson:
        write_geojson(configuration.geojson_file, cells)
        logger.info(f'Wrote GeoJSON to {configuration.geojson_file}')

    return cells
