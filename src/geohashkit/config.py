import configparser
import dataclasses
import os.path

from geohashkit import constants
from geohashkit.errors import InputError
from geohashkit.models import CoverageOptions


@dataclasses.dataclass
class Config:
    input_file: str
    min_precision: int
    max_precision: int
    max_cells: int
    merge_threshold: float
    output_file: str
    write_geojson: bool
    geojson_file: str

    def show(self):
        print()
        print('Using configuration:')
        for k, v in self.__dict__.items():
            print(f'  + {k}: {v}')

    def coverage_options(self) -> CoverageOptions:
        return CoverageOptions(
            min_precision=self.min_precision,
            max_precision=self.max_precision,
            max_cells=self.max_cells,
            merge_threshold=self.merge_threshold,
        )


def config_parser_factory(configuration_file):
    """
    Returns a ConfigParser by reading the specified file.
    """
    if configuration_file is None or not os.path.exists(configuration_file):
        raise ValueError(f'Unable to find configuration file {configuration_file}')
    cfg_parser = configparser.ConfigParser(interpolation=configparser.ExtendedInterpolation())
    cfg_parser.read(configuration_file)
    return cfg_parser


def _get_configuration_value(section, name, value_type, config_parser, overrides):
    """
    Returns a value from the provided config parser; any value for the key that
    is provided in the 'overrides' dictionary will take precedence.
    """
    if overrides.get(name) is not None:
        return overrides.get(name)
    if value_type is bool:
        return config_parser.getboolean(section, name)
    elif value_type is int:
        return config_parser.getint(section, name)
    elif value_type is float:
        return config_parser.getfloat(section, name)
    else:
        return config_parser.get(section, name)


def configuration(config_parser, overrides):
    """
    Returns a Config object that is populated from the provided config parser,
    with values overriden with anything provided in 'overrides'.
    """
    config_parser['DEFAULT'] = {
        'min_precision': constants.DEFAULT_MIN_PRECISION,
        'max_precision': constants.DEFAULT_MAX_PRECISION,
        'max_cells': constants.DEFAULT_MAX_CELLS,
        'merge_threshold': constants.DEFAULT_MERGE_THRESHOLD,
        'output_file': constants.DEFAULT_OUTPUT_FILE,
        'write_geojson': constants.DEFAULT_WRITE_GEOJSON,
        'geojson_file': constants.DEFAULT_GEOJSON_FILE,
    }
    for section in (constants.SOURCE_SECTION_NAME,
                    constants.COVERAGE_SECTION_NAME,
                    constants.DESTINATION_SECTION_NAME):
        if not config_parser.has_section(section):
            config_parser.add_section(section)

    try:
        return Config(
            _get_configuration_value(constants.SOURCE_SECTION_NAME, 'input_file', str, config_parser, overrides),
            _get_configuration_value(constants.COVERAGE_SECTION_NAME, 'min_precision', int, config_parser, overrides),
            _get_configuration_value(constants.COVERAGE_SECTION_NAME, 'max_precision', int, config_parser, overrides),
            _get_configuration_value(constants.COVERAGE_SECTION_NAME, 'max_cells', int, config_parser, overrides),
            _get_configuration_value(constants.COVERAGE_SECTION_NAME, 'merge_threshold', float, config_parser, overrides),
            _get_configuration_value(constants.DESTINATION_SECTION_NAME, 'output_file', str, config_parser, overrides),
            _get_configuration_value(constants.DESTINATION_SECTION_NAME, 'write_geojson', bool, config_parser, overrides),
            _get_configuration_value(constants.DESTINATION_SECTION_NAME, 'geojson_file', str, config_parser, overrides),
        )
    except (configparser.Error, ValueError) as e:
        raise ValueError(f'Unable to read the configuration file: {e}') from e


def _options_resolve(configuration):
    try:
        configuration.coverage_options().resolved()
    except InputError:
        return False
    return True


def validate(configuration):
    """
    Validates each value in the configuration.
    """
    validations = [
        ['input_file', lambda path: os.path.exists(path), 'The input_file does not exist.'],
        ['output_file', lambda path: os.path.isdir(os.path.dirname(os.path.abspath(path))),
         'The directory for output_file does not exist.'],
    ]
    errors = [msg for name, fn, msg in validations if not fn(getattr(configuration, name))]
    if not _options_resolve(configuration):
        errors.append('The coverage options are invalid.')
    return len(errors) == 0, errors
