"""
Constants for the DataSet addEvents and uploadLogs APIs.
"""

# Response status sentinels returned in the JSON body
STATUS_SUCCESS = "success"
STATUS_BAD_PARAM = "error/client/badParam"

DEFAULT_DATASET_URL = "https://api.scalyr.com"

ENDPOINT_ADD_EVENTS = "/api/addEvents"
ENDPOINT_UPLOAD_LOGS = "/api/uploadLogs"

# A request body can be at most 6 MB. Batches are bounded by event count,
# which keeps typical payloads well below that ceiling but does not
# guarantee it.
MAX_EVENTS_PER_BATCH = 200

DEFAULT_FLUSH_INTERVAL = 3.0
DEFAULT_MAX_RETRIES = 5
DEFAULT_RETRY_DELAY = 0.5
DEFAULT_TIMEOUT = 10.0

DEFAULT_METRICS_PREFIX = "dataset_logger_"
