"""Constants used in business logic."""

SERVICE_NAME = "Token Usage Tracker"

# environment variable used to hand the configuration file path to Uvicorn workers
CONFIG_PATH_ENV_VAR = "TOKEN_USAGE_TRACKER_CONFIG_PATH"
DEFAULT_CONFIG_FILE = "token-usage-tracker.yaml"

# SQLite file used when no database is configured
DEFAULT_SQLITE_DB_PATH = "/tmp/token-usage-tracker.db"
# seconds to wait for a concurrent SQLite writer to release its lock
SQLITE_BUSY_TIMEOUT = 30

# PostgreSQL connection constants
# See: https://www.postgresql.org/docs/current/libpq-connect.html#LIBPQ-CONNECT-SSLMODE
POSTGRES_DEFAULT_SSL_MODE = "prefer"
# See: https://www.postgresql.org/docs/current/libpq-connect.html#LIBPQ-CONNECT-GSSENCMODE
POSTGRES_DEFAULT_GSS_ENCMODE = "prefer"

DATABASE_TYPE_SQLITE = "sqlite"
DATABASE_TYPE_POSTGRES = "postgres"

# Per-unit prices used when the configuration does not provide any
# Input: $0.003 per 1,000 units, output: $0.015 per 1,000 units
DEFAULT_INPUT_RATE = 0.000003
DEFAULT_OUTPUT_RATE = 0.000015

# number of decimal places of the cost values reported to clients
COST_DISPLAY_PRECISION = 6

# number of decimal places of the percentage of the limit already used
PERCENTAGE_PRECISION = 2

# upper limit of units generated by the model for one invocation
DEFAULT_MAX_TOKENS = 1024

UNABLE_TO_PROCESS_RESPONSE = "Unable to process this request"
