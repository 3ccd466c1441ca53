"""
Basic usage example for datasetlog.
"""

import os

from datasetlog import DataSetLogger, Severity


def main():
    logger = DataSetLogger(
        api_key=os.environ["DATASET_API_KEY"],
        session_info={
            "serverHost": "web-1",
            "environment": "development",
        },
        should_flatten_attributes=True,
        on_error=lambda err: print(f"Upload failed after {err.attempts} attempt(s): {err}"),
        on_success=lambda body: print(f"Upload succeeded: {body}"),
    )

    try:
        # Log some messages
        logger.log("Application starting...")
        logger.info("Configuration loaded", extra={"config_file": "config.yaml"})
        logger.log({
            "attrs": {"message": "User logged in", "user": {"id": 123, "name": "john"}},
            "sev": Severity.INFO,
        })
        logger.warning("High memory usage detected", extra={"memory_percent": 85})
        logger.error("Failed to connect to external service", extra={
            "service": "payment-api",
            "error_code": "CONNECTION_TIMEOUT",
        })

        # Simulate some work
        for i in range(15):
            logger.info(f"Processing item {i}", extra={"item_id": i})

        # Check pending events
        print(f"Pending events: {logger.pending_count()}")

        # Force flush remaining events
        logger.flush()

    finally:
        # Always close the logger
        logger.close()


if __name__ == "__main__":
    main()
