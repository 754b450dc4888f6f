"""Process exit codes for the s3lock CLI."""

SUCCESS = 0
EXECUTION_FAILURE = 1
USAGE_ERROR = 2
LOCK_HELD = 3
OWNERSHIP_MISMATCH = 4
