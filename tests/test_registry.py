"""
Test action registration and field validation.
"""

import pytest

from openshift_canceller.action import OpenShiftDeployCanceller
from openshift_canceller.registry import (
    ActionDescriptor,
    DeployCancellerDescriptor,
    ParamVerify,
    ValidationKind,
    get_descriptor,
    register_action,
    registered_actions,
)


class TestRegistry:
    def test_canceller_is_registered(self):
        descriptor = get_descriptor("openshift-deploy-canceller")

        assert isinstance(descriptor, DeployCancellerDescriptor)
        assert descriptor.display_name == "Cancel OpenShift Deployment"
        assert descriptor.is_applicable("freestyle")
        assert descriptor in registered_actions()

    def test_unknown_action(self):
        assert get_descriptor("openshift-scaler") is None

    def test_duplicate_name_is_rejected(self):
        with pytest.raises(ValueError):
            @register_action
            class Duplicate(ActionDescriptor):
                name = "openshift-deploy-canceller"

    def test_nameless_descriptor_is_rejected(self):
        with pytest.raises(ValueError):
            @register_action
            class Nameless(ActionDescriptor):
                pass

    def test_new_instance(self):
        action = get_descriptor("openshift-deploy-canceller").new_instance(namespace="ns1", verbose="true")

        assert isinstance(action, OpenShiftDeployCanceller)
        assert action.dep_cfg == "frontend"
        assert action.namespace == "ns1"


class TestFieldValidation:
    @pytest.fixture
    def descriptor(self):
        return get_descriptor("openshift-deploy-canceller")

    def test_valid_fields(self, descriptor):
        checks = descriptor.validate({
            "api_url": "https://api.example.com:6443",
            "dep_cfg": "frontend",
            "namespace": "ns1",
        })

        assert all(check.is_ok for check in checks.values())

    def test_blank_api_url_is_a_warning(self, descriptor):
        check = descriptor.check_field("api_url", "")

        assert check.kind == ValidationKind.WARNING
        assert "oc login" in check.message

    @pytest.mark.parametrize("value", ["api.example.com", "ftp://api.example.com", "https://"])
    def test_bad_api_url_is_an_error(self, descriptor, value):
        assert descriptor.check_field("api_url", value).kind == ValidationKind.ERROR

    def test_api_url_from_build_variable(self, descriptor):
        assert descriptor.check_field("api_url", "${CLUSTER_URL}").is_ok

    @pytest.mark.parametrize("field", ["dep_cfg", "namespace"])
    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_required_fields(self, descriptor, field, value):
        check = descriptor.check_field(field, value)

        assert check.kind == ValidationKind.ERROR
        assert check.message.startswith("Please set")

    def test_fields_without_a_check_pass(self, descriptor):
        assert descriptor.check_field("auth_token", "").is_ok

    def test_param_verify_is_shared(self):
        assert ParamVerify.do_check_namespace("ns1").is_ok


class TestNewInstance:
    def test_descriptor_without_action_class(self):
        class Incomplete(ActionDescriptor):
            name = "openshift-incomplete"

        with pytest.raises(ValueError, match="has no action class"):
            Incomplete().new_instance(namespace="ns1")
