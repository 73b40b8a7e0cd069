from mlrest.entities.view_type import ViewType
from mlrest.exceptions import MlrestException


class LifecycleStage:
    """Lifecycle stage of an experiment or a run. Deleting one moves it to ``deleted``."""

    ACTIVE = "active"
    DELETED = "deleted"

    _STAGES_BY_VIEW_TYPE = {
        ViewType.ACTIVE_ONLY: frozenset([ACTIVE]),
        ViewType.DELETED_ONLY: frozenset([DELETED]),
        ViewType.ALL: frozenset([ACTIVE, DELETED]),
    }

    @classmethod
    def matches_view_type(cls, view_type, lifecycle_stage):
        """Whether an entity in ``lifecycle_stage`` is listed under ``view_type``."""
        if lifecycle_stage not in cls._STAGES_BY_VIEW_TYPE[ViewType.ALL]:
            raise MlrestException(f"Invalid lifecycle stage '{lifecycle_stage}'")
        try:
            return lifecycle_stage in cls._STAGES_BY_VIEW_TYPE[view_type]
        except KeyError:
            raise MlrestException(f"Invalid view type '{view_type}'") from None
