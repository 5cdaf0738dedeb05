"""
Exit codes for pomocycle.

A run either completes every requested cycle (SUCCESS) or aborts with one of
the error codes below.
"""

# Success
SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# Invalid arguments or configuration
ERROR_INVALID_ARGS = 2

# The state machine received an event its current phase does not accept
ERROR_STATE_TRANSITION = 3

# The run was cancelled (Ctrl-C), following the 128 + SIGINT convention
ERROR_CANCELLED = 130


def get_exit_code_name(code: int) -> str:
    """Get the name of an exit code for display purposes."""
    code_names = {
        SUCCESS: "SUCCESS",
        ERROR_GENERAL: "ERROR_GENERAL",
        ERROR_INVALID_ARGS: "ERROR_INVALID_ARGS",
        ERROR_STATE_TRANSITION: "ERROR_STATE_TRANSITION",
        ERROR_CANCELLED: "ERROR_CANCELLED",
    }
    return code_names.get(code, f"UNKNOWN({code})")


def get_exit_code_description(code: int) -> str:
    """Get a human-readable description of an exit code."""
    descriptions = {
        SUCCESS: "All requested cycles completed",
        ERROR_GENERAL: "A general error occurred",
        ERROR_INVALID_ARGS: "Invalid arguments or configuration",
        ERROR_STATE_TRANSITION: "Invalid state transition in the cycle scheduler",
        ERROR_CANCELLED: "Run cancelled before completion",
    }
    return descriptions.get(code, "Unknown error")
