"""
Example of using DataSetLogger as a context manager.
"""

import os

from datasetlog import DataSetLogger


def main():
    # Using context manager ensures the queue is drained on exit
    with DataSetLogger(
        api_key=os.environ["DATASET_API_KEY"],
        session_info={"serverHost": "worker-1"},
        batch_size=50,
        flush_interval=2.0,
    ) as logger:
        logger.info("Application started")

        # Simulate some work
        for i in range(20):
            if i % 5 == 0:
                logger.log(f"Checkpoint {i}")
            logger.info(f"Processing item {i}", extra={"item_id": i})

        logger.info("Application finished successfully")

    # Logger is automatically closed here


if __name__ == "__main__":
    main()
