"""
Example of uploading a plain-text log file in one request.
"""

import os
import sys

from datasetlog import upload_logs


def main():
    result = upload_logs(
        api_key=os.environ["DATASET_API_KEY"],
        file_path=sys.argv[1],
        logfile=os.path.basename(sys.argv[1]),
        parser="accessLog",
        session_info={"serverHost": "batch-job"},
    )
    print(result)


if __name__ == "__main__":
    main()
