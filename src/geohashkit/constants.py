# Geohash alphabet and precision limits
BASE32 = '0123456789bcdefghjkmnpqrstuvwxyz'
MIN_PRECISION = 1
MAX_PRECISION = 9

# Default coverage options
DEFAULT_MIN_PRECISION = 1
DEFAULT_MAX_PRECISION = 9
DEFAULT_MAX_CELLS = 500
DEFAULT_MERGE_THRESHOLD = 1.0

# Coverage tuning
BAILOUT_MULTIPLIER = 4
SIBLING_MERGE_BASE = 24
SIBLING_MERGE_SPAN = 8
EXACT_MIN_SIBLINGS = 32
LOSSY_MIN_SIBLINGS = 30

# Largest longitude delta allowed between consecutive vertices
MAX_EDGE_LONGITUDE_SPAN = 180.0

# Default configuration values
DEFAULT_OUTPUT_FILE = 'cells.json'
DEFAULT_WRITE_GEOJSON = False
DEFAULT_GEOJSON_FILE = 'cells.geojson'

# Configuration sections
SOURCE_SECTION_NAME = 'Source'
COVERAGE_SECTION_NAME = 'Coverage'
DESTINATION_SECTION_NAME = 'Destination'

# Logging
LOGGER_NAME = 'geohashkit'
LOGFILE_NAME = 'geohashkit.log'
