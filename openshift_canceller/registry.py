"""
Registration of pipeline actions and on-the-fly validation of their fields.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Type
from urllib.parse import urlparse

from .action import DISPLAY_NAME, OpenShiftDeployCanceller


class ValidationKind(str, Enum):
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class FormValidation:
    """
    Outcome of validating one field.

    A warning or error is only shown to the user; it does not prevent the
    configuration from being saved.
    """
    kind: ValidationKind
    message: str = ""

    @classmethod
    def ok(cls) -> "FormValidation":
        return cls(ValidationKind.OK)

    @classmethod
    def warning(cls, message: str) -> "FormValidation":
        return cls(ValidationKind.WARNING, message)

    @classmethod
    def error(cls, message: str) -> "FormValidation":
        return cls(ValidationKind.ERROR, message)

    @property
    def is_ok(self) -> bool:
        return self.kind == ValidationKind.OK


class ParamVerify:
    """Field checks shared by the OpenShift actions."""

    @staticmethod
    def do_check_api_url(value: Optional[str]) -> FormValidation:
        if not value or not value.strip():
            return FormValidation.warning(
                "Unless you specify a value here, the current oc login context will be used"
            )
        if "$" in value:
            # resolved from the build environment at run time
            return FormValidation.ok()
        parsed = urlparse(value.strip())
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            return FormValidation.error("Please specify an http(s) URL for the cluster API")
        return FormValidation.ok()

    @staticmethod
    def do_check_dep_cfg(value: Optional[str]) -> FormValidation:
        if not value or not value.strip():
            return FormValidation.error("Please set deploymentConfig")
        return FormValidation.ok()

    @staticmethod
    def do_check_namespace(value: Optional[str]) -> FormValidation:
        if not value or not value.strip():
            return FormValidation.error("Please set namespace")
        return FormValidation.ok()


class ActionDescriptor:
    """Describes a pipeline action: its id, its label and how to check its fields."""

    name: str = ""
    display_name: str = ""
    action_class: Optional[type] = None

    def is_applicable(self, project_type: Optional[str] = None) -> bool:
        return True

    def check_field(self, field: str, value: Optional[str]) -> FormValidation:
        """Dispatch to ``do_check_<field>``; fields without a check are always ok."""
        checker = getattr(self, f"do_check_{field}", None)
        if checker is None:
            return FormValidation.ok()
        return checker(value)

    def validate(self, values: Dict[str, Optional[str]]) -> Dict[str, FormValidation]:
        return {field: self.check_field(field, value) for field, value in values.items()}

    def new_instance(self, **fields):
        """Build the action from already validated fields."""
        if self.action_class is None:
            raise ValueError(f"{self.name} has no action class")
        return self.action_class(**fields)


_REGISTRY: Dict[str, ActionDescriptor] = {}


def register_action(descriptor_cls: Type[ActionDescriptor]) -> Type[ActionDescriptor]:
    """Class decorator adding a descriptor instance to the registry."""
    if not descriptor_cls.name:
        raise ValueError(f"{descriptor_cls.__name__} has no name")
    if descriptor_cls.name in _REGISTRY:
        raise ValueError(f"Action {descriptor_cls.name!r} is already registered")
    _REGISTRY[descriptor_cls.name] = descriptor_cls()
    return descriptor_cls


def get_descriptor(name: str) -> Optional[ActionDescriptor]:
    return _REGISTRY.get(name)


def registered_actions() -> List[ActionDescriptor]:
    return list(_REGISTRY.values())


@register_action
class DeployCancellerDescriptor(ActionDescriptor):
    name = "openshift-deploy-canceller"
    display_name = DISPLAY_NAME
    action_class = OpenShiftDeployCanceller

    def do_check_api_url(self, value: Optional[str]) -> FormValidation:
        return ParamVerify.do_check_api_url(value)

    def do_check_dep_cfg(self, value: Optional[str]) -> FormValidation:
        return ParamVerify.do_check_dep_cfg(value)

    def do_check_namespace(self, value: Optional[str]) -> FormValidation:
        return ParamVerify.do_check_namespace(value)
