"""Exit codes shared by CLI commands."""

SUCCESS_EXIT_CODE = 0
SYSTEM_EXIT_CODE = 1
VALIDATION_EXIT_CODE = 2
ACQUISITION_EXIT_CODE = 3
NOT_FOUND_EXIT_CODE = 4

GENERIC_FAILURE_MESSAGE = "Failed to retrieve data"
