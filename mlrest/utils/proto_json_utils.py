import json

from pydantic import ValidationError

from mlrest.exceptions import MlrestException


def message_to_json(message):
    """Converts a message to a JSON string, leaving out unset optional fields."""
    return message.model_dump_json(exclude_none=True)


def message_to_dict(message):
    return json.loads(message_to_json(message))


def parse_dict(js_dict, message_cls):
    """
    Parses a JSON dictionary into a message of type ``message_cls``.

    Raises:
        MlrestException: If the dictionary does not match the message schema.
    """
    try:
        return message_cls.model_validate(js_dict)
    except ValidationError as e:
        raise MlrestException(
            f"Failed to parse {message_cls.__qualname__} from JSON: {e}"
        ) from e
