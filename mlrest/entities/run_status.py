from mlrest.exceptions import MlrestException


class RunStatus:
    """Enum for status of an :py:class:`mlrest.entities.Run`.

    Members are the upper-case tokens used on the wire.
    """

    RUNNING = "RUNNING"
    SCHEDULED = "SCHEDULED"
    FINISHED = "FINISHED"
    FAILED = "FAILED"
    KILLED = "KILLED"

    _ALL_STATUSES = (RUNNING, SCHEDULED, FINISHED, FAILED, KILLED)

    @staticmethod
    def from_string(status_str):
        if status_str not in RunStatus._ALL_STATUSES:
            raise MlrestException.invalid_parameter_value(
                f"Could not get run status corresponding to string {status_str}. Valid run "
                f"status strings: {list(RunStatus._ALL_STATUSES)}"
            )
        return status_str

    @staticmethod
    def to_string(status):
        if status not in RunStatus._ALL_STATUSES:
            raise MlrestException.invalid_parameter_value(
                f"Could not get string corresponding to run status {status}. Valid run "
                f"statuses: {list(RunStatus._ALL_STATUSES)}"
            )
        return status
