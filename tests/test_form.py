"""Unit tests for the immutable form view-state (ncgen.form)."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ncgen.composer import compose
from ncgen.config import ConfigError
from ncgen.form import FormState, InstanceDraft

pytestmark = pytest.mark.unit


@pytest.fixture
def filled() -> FormState:
    return (
        FormState()
        .set_project_dir("nc")
        .set_acme_email("a@b.com")
        .set_instance_field(0, "domain", "cloud.x.com")
    )


class TestDefaults:
    def test_initial_state(self):
        state = FormState()
        assert state.project_dir == "nextcloud-caddy"
        assert state.acme_email == ""
        assert state.instances == (InstanceDraft(domain="", admin_user="admin"),)
        assert state.generated_script == ""
        assert state.copied is False

    def test_initial_state_invalid(self):
        assert FormState().is_valid is False

    def test_frozen(self):
        with pytest.raises(ValidationError):
            FormState().project_dir = "other"


class TestFieldEvents:
    def test_events_return_new_state(self):
        before = FormState()
        after = before.set_acme_email("a@b.com")
        assert before.acme_email == ""
        assert after.acme_email == "a@b.com"

    def test_set_instance_field(self, filled):
        state = filled.set_instance_field(0, "admin_user", "root")
        assert state.instances[0] == InstanceDraft(domain="cloud.x.com", admin_user="root")
        assert filled.instances[0].admin_user == "admin"

    def test_set_instance_field_bad_index(self):
        with pytest.raises(IndexError):
            FormState().set_instance_field(3, "domain", "x")

    def test_set_instance_field_bad_field(self):
        with pytest.raises(ValueError):
            FormState().set_instance_field(0, "password", "x")


class TestInstanceListEvents:
    def test_add_instance(self):
        state = FormState().add_instance()
        assert len(state.instances) == 2
        assert state.instances[1] == InstanceDraft()

    def test_remove_instance(self, filled):
        state = filled.add_instance().set_instance_field(1, "domain", "two.x.com")
        state = state.remove_instance(0)
        assert [i.domain for i in state.instances] == ["two.x.com"]

    def test_last_instance_is_kept(self, filled):
        assert filled.remove_instance(0) is filled

    def test_remove_out_of_range(self, filled):
        state = filled.add_instance()
        assert state.remove_instance(5) is state


class TestValidation:
    def test_filled_is_valid(self, filled):
        assert filled.is_valid is True

    @pytest.mark.parametrize(
        "event",
        [
            lambda s: s.set_project_dir("  "),
            lambda s: s.set_acme_email(""),
            lambda s: s.set_instance_field(0, "domain", " "),
            lambda s: s.set_instance_field(0, "admin_user", ""),
            lambda s: s.add_instance(),
        ],
    )
    def test_blank_fields_invalidate(self, filled, event):
        assert event(filled).is_valid is False

    def test_to_config(self, filled):
        config = filled.to_config()
        assert config.project_dir == "nc"
        assert config.instances[0].domain == "cloud.x.com"
        assert config.instances[0].admin_user == "admin"

    def test_to_config_invalid(self):
        with pytest.raises(ConfigError):
            FormState().to_config()


class TestOutputEvents:
    def test_generate(self, filled):
        state = filled.generate()
        assert state.generated_script == compose(filled.to_config())
        assert filled.generated_script == ""

    def test_generate_invalid_is_noop(self):
        state = FormState()
        assert state.generate() is state

    def test_copy_feedback(self, filled):
        state = filled.generate().mark_copied()
        assert state.copied is True
        assert state.reset_copied().copied is False

    def test_copy_without_script_is_noop(self, filled):
        assert filled.mark_copied() is filled

    def test_regenerate_clears_copied(self, filled):
        state = filled.generate().mark_copied().generate()
        assert state.copied is False
