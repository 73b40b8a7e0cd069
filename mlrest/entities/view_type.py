class ViewType:
    """Enum to filter requested experiment and run types."""

    ACTIVE_ONLY, DELETED_ONLY, ALL = range(1, 4)
    _VIEW_TO_STRING = {
        ACTIVE_ONLY: "ACTIVE_ONLY",
        DELETED_ONLY: "DELETED_ONLY",
        ALL: "ALL",
    }

    @staticmethod
    def to_string(view_type):
        """Wire token of ``view_type``, e.g. ``ACTIVE_ONLY``."""
        if view_type not in ViewType._VIEW_TO_STRING:
            raise Exception(
                f"Could not get valid view type corresponding to {view_type}. "
                f"Valid view types are {list(ViewType._VIEW_TO_STRING.keys())}"
            )
        return ViewType._VIEW_TO_STRING[view_type]
