"""
Module to validate values in a loaded config
"""

# Standard
from typing import Any, Dict, List, Optional, Union
import abc

# Third Party
from kubernetes.utils import parse_quantity

# First Party
import aconfig
import alog

# Local
from .. import constants
from ..exceptions import ValidationError
from ..utils import nested_get, parse_duration  # pylint: disable=cyclic-import

log = alog.use_channel("CONFG")


################################################################################
## Public ######################################################################
################################################################################


def get_invalid_params(
    config: aconfig.Config,
    validation_config: aconfig.Config,
) -> List[str]:
    """Get a list of any params that are invalid

    Args:
        config:  aconfig.Config
            The parsed config with any override values
        validation_config:  aconfig.Config
            The parallel config holding validation setup

    Returns:
        invalid_params:  List[str]
            A list of all string keys for parameters that fail validation
    """
    invalid_params = []
    for val_key, validator in _parse_validation_config(validation_config).items():
        if not validator.validate(nested_get(config, val_key)):
            log.warning("Found invalid config key [%s]", val_key)
            invalid_params.append(val_key)
    return invalid_params


################################################################################
## Implementation ##############################################################
################################################################################

# pylint: disable=too-few-public-methods


class _ValidatedParameter(abc.ABC):
    """This class represents a parameter with type and value validation"""

    TYPES: List[type] = []
    TYPE_KEY: Optional[str] = None

    def __init__(self, optional: bool = False):
        self.optional = optional

    def validate(self, value: Any) -> bool:
        """Run the validation for a read value"""
        if self.optional and value is None:
            return True
        if not any(isinstance(value, valid_type) for valid_type in self.TYPES):
            log.warning("Invalid type <%s>", type(value))
            return False
        valid_value = self._validate_value(value)
        if not valid_value:
            log.warning("Invalid value [%s]", value)
        return valid_value

    @abc.abstractmethod
    def _validate_value(self, value: Any) -> bool:
        """All child classes must provide value validation that is specific to
        the given type
        """


class _NumberParameter(_ValidatedParameter):
    """A parameter that must be a number type and has optional bounds"""

    TYPES = [int, float]
    TYPE_KEY = "number"

    def __init__(
        self,
        *,
        min: Optional[Union[int, float]] = None,  # pylint: disable=redefined-builtin
        max: Optional[Union[int, float]] = None,  # pylint: disable=redefined-builtin
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._min = min
        self._max = max

    def _validate_value(self, value: Union[int, float]) -> bool:
        # bool is an int subclass but never a valid number here
        if isinstance(value, bool):
            return False
        return (self._min is None or value >= self._min) and (
            self._max is None or value <= self._max
        )


class _IntParameter(_NumberParameter):
    """A number parameter that must be an int"""

    TYPES = [int]
    TYPE_KEY = "int"


class _StrParameter(_ValidatedParameter):
    """A parameter that must be of type str"""

    TYPES = [str]
    TYPE_KEY = "str"

    def _validate_value(self, value: str) -> bool:
        return True


class _BoolParameter(_ValidatedParameter):
    """A parameter that must be a bool"""

    TYPES = [bool]
    TYPE_KEY = "bool"

    def _validate_value(self, value: bool) -> bool:
        return True


class _EnumParameter(_ValidatedParameter):
    """A parameter with a fixed set of valid str values"""

    TYPES = [str]
    TYPE_KEY = "enum"

    def __init__(self, *, values: List[str], **kwargs):
        super().__init__(**kwargs)
        assert (
            isinstance(values, list) and values
        ), "Must specify at least one enum value!"
        self.values = values

    def _validate_value(self, value: str) -> bool:
        return value in self.values


class _DurationParameter(_ValidatedParameter):
    """A parameter holding a duration string such as "2160h" or "1h30m" """

    TYPES = [str]
    TYPE_KEY = "duration"

    def __init__(self, *, min_seconds: Optional[float] = None, **kwargs):
        super().__init__(**kwargs)
        self._min_seconds = min_seconds

    def _validate_value(self, value: str) -> bool:
        try:
            duration = parse_duration(value)
        except ValidationError:
            return False
        return (
            self._min_seconds is None or duration.total_seconds() >= self._min_seconds
        )


class _QuantityParameter(_ValidatedParameter):
    """A parameter holding a resource quantity such as "8Gi" """

    TYPES = [str, int, float]
    TYPE_KEY = "quantity"

    def _validate_value(self, value: Union[str, int, float]) -> bool:
        try:
            parse_quantity(value)
        except ValueError:
            return False
        return True


# pylint: enable=too-few-public-methods

## Factory #####################################################################


def _create_factory_map(param_class, factory_map=None):
    """Helper to recursively create the singleton factory map"""
    factory_map = factory_map or {}
    if not param_class.__abstractmethods__:
        factory_map[param_class.TYPE_KEY] = param_class
    for subclass in param_class.__subclasses__():
        factory_map = _create_factory_map(subclass, factory_map)
    return factory_map


# Global map from type keys to parameter type classes
_factory_map = _create_factory_map(_ValidatedParameter)


def _construct_parameter(param_args: Dict[str, Any]) -> Optional[_ValidatedParameter]:
    """Construct a _ValidatedParameter from the given args parsed out of a
    validation file. If the type is unknown, None is returned.
    """
    param_args = dict(param_args)
    param_type = param_args.pop("type")
    if not (isinstance(param_type, str) and param_type in _factory_map):
        return None
    return _factory_map[param_type](**param_args)


## Parsing #####################################################################


def _parse_validation_config(
    validation_config: aconfig.Config,
    prefix_parts: Optional[List[str]] = None,
) -> Dict[str, _ValidatedParameter]:
    """Recursively parse the given validation file into a dict of nested keys
    pointing to _ValidatedParameter instances.
    """
    output_dict = {}
    prefix_parts = prefix_parts or []
    for key, val in validation_config.items():
        assert isinstance(key, str), "Only string keys allowed!"
        if not isinstance(val, dict):
            continue
        key_parts = prefix_parts + [key]
        nested_key = constants.NESTED_DICT_DELIM.join(key_parts)
        param = None
        if "type" in val:
            log.debug3("Attempting to construct parameter at [%s]: %s", nested_key, val)
            param = _construct_parameter(val)
        if param:
            output_dict[nested_key] = param
        else:
            log.debug3("Recursing into %s", nested_key)
            output_dict.update(_parse_validation_config(val, prefix_parts=key_parts))
    return output_dict
