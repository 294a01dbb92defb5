from pathlib import Path

APPLICATION_NAME = "concerto"
APPLICATION_VERSION = "0.2"

# ############## Common settings #############
DEFAULT_LOG_FILE = ""
LOGGER_NAME = "concerto"

# ############## Server configuration settings ##############
DEFAULT_ROOT_CONFIG_FILE = Path("/etc/concerto/client.xml")
DEFAULT_USER_CONFIG_FILE = Path.home() / ".concerto" / "client.xml"

# ############## Webservice settings ##############
GENERIC_ERROR_MESSAGE = "Error executing operation"
CONTENT_DISPOSITION_REGEX = 'filename="([^"]*)"'
DOWNLOAD_CHUNK_SIZE = 64 * 1024

# ############## Output settings ##############
TABLE_MIN_WIDTH = 15
TABLE_PADDING = 3
