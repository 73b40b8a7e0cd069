import pprint
from abc import abstractmethod


class _MlrestObject:
    """
    Base class of the entities. An entity exposes its fields as read-only properties,
    iterates as ``(property, value)`` pairs and compares equal to an entity of the same type
    holding the same values.
    """

    def __iter__(self):
        for prop in self._properties():
            yield prop, getattr(self, prop)

    @classmethod
    def _properties(cls):
        # Properties inherited from a base entity count too, e.g. the key of a tag
        return sorted(
            {
                name
                for klass in cls.__mro__
                for name, attr in vars(klass).items()
                if isinstance(attr, property)
            }
        )

    @classmethod
    @abstractmethod
    def from_proto(cls, proto):
        pass

    @classmethod
    def from_dictionary(cls, the_dict):
        properties = set(cls._properties())
        return cls(**{key: value for key, value in the_dict.items() if key in properties})

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    __hash__ = None

    def __repr__(self):
        return _format(self)


_printer = pprint.PrettyPrinter()


def _format(obj):
    if isinstance(obj, _MlrestObject):
        fields = ", ".join(f"{key}={_format(value)}" for key, value in obj)
        return f"<{type(obj).__name__}: {fields}>"
    return _printer.pformat(obj)
